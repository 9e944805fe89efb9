"""Source-agnostic price retrieval.

Architecture
------------
    DataSource → PriceAdapter → list[PriceObservation] → PriceProvider → pipeline

Key abstractions:

- ``PriceAdapter``: Transforms raw source data into ``PriceObservation`` records.
- ``PriceProvider``: Consumer-facing async interface returning a ``PriceSeries``.

Built-in implementations:

- ``YahooFinancePriceProvider``: Fetches from the Yahoo Finance chart API.
- ``YahooFinanceAdapter``: Parses Yahoo Finance chart JSON.
- ``CSVPriceProvider``: Reads ``<SYMBOL>.csv`` files from a directory.
- ``CSVPriceAdapter``: Parses CSV rows.
"""

from stock_signals.prices.csv_adapter import CSVPriceAdapter, CSVPriceProvider
from stock_signals.prices.provider import PriceAdapter, PriceProvider
from stock_signals.prices.yahoo import YahooFinanceAdapter, YahooFinancePriceProvider

__all__ = [
    # Protocols
    "PriceAdapter",
    "PriceProvider",
    # Yahoo Finance
    "YahooFinanceAdapter",
    "YahooFinancePriceProvider",
    # CSV
    "CSVPriceAdapter",
    "CSVPriceProvider",
]
