"""Price provider and adapter protocols — the source-agnostic interface layer.

Architecture
------------
    RawSource → PriceAdapter → list[PriceObservation] → PriceProvider → pipeline

- **PriceProvider** is the consumer-facing protocol. The pipeline depends
  only on this interface.

- **PriceAdapter** transforms raw data (chart JSON, CSV rows) into
  ``PriceObservation`` records. Adding a source means writing an adapter
  and, if needed, a provider around it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from stock_signals.core.models import PriceObservation, PriceSeries


@runtime_checkable
class PriceAdapter(Protocol):
    """Transforms raw data from any source into PriceObservation records.

    Parameters
    ----------
    raw_data : Any
        The raw payload from the data source. The adapter knows its shape.
    symbol : str
        The ticker symbol the data belongs to.

    Returns
    -------
    list[PriceObservation]
        Observations in the order the source delivered them.
    """

    def adapt(self, raw_data: Any, symbol: str) -> list[PriceObservation]: ...


@runtime_checkable
class PriceProvider(Protocol):
    """Consumer-facing interface for fetching closing prices.

    Providers are async context managers; the caller enters one before the
    first fetch and exits it after the last, releasing any open connections.
    """

    async def __aenter__(self) -> PriceProvider: ...

    async def __aexit__(self, *exc: object) -> None: ...

    async def get_series(
        self, symbol: str, start: datetime, end: datetime
    ) -> PriceSeries:
        """Fetch the price series for one symbol over ``[start, end]``.

        Returns
        -------
        PriceSeries
            Sorted by timestamp. Empty when the source has no data.

        Raises
        ------
        ProviderUnavailableError
            The source could not be reached.
        InvalidResponseError
            The source answered with something that is not price data.
        """
        ...
