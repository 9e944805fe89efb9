"""Per-symbol orchestration: fetch → compute → format → persist.

Symbols are processed one after another in caller order. The only
suspension point is the provider fetch; the signals run synchronously.

Error policy
------------
- A signal returning None is resolved here with a zero/empty default.
- An empty series skips the symbol: no row, no error.
- ``ProviderError`` from the fetch propagates unchanged and ends the run.
  No symbol after the failing one is fetched.
"""

from __future__ import annotations

import logging

from stock_signals.core.config import DEFAULT_WINDOW_SIZE
from stock_signals.core.models import OutputRow, PriceChange, PriceSeries, RunParams
from stock_signals.output import CsvRowSink
from stock_signals.prices.provider import PriceProvider
from stock_signals.signals import MaxPrice, MinPrice, PriceDifference, WindowedSMA

logger = logging.getLogger(__name__)


def calculate_signals(
    series: PriceSeries,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> OutputRow:
    """Run every signal over one series and assemble its summary row."""
    closes = series.closes

    period_max = MaxPrice().calculate(closes)
    period_min = MinPrice().calculate(closes)
    sma = WindowedSMA(window_size).calculate(closes)
    change = PriceDifference().calculate(closes)

    if period_max is None:
        period_max = 0.0
    if period_min is None:
        period_min = 0.0
    if sma is None:
        sma = []
    if change is None:
        change = PriceChange(0.0, 0.0)

    return OutputRow(
        period_start=series.start,
        symbol=series.symbol,
        last_price=series.last_price,
        percent_change=change.relative * 100.0,
        period_min=period_min,
        period_max=period_max,
        last_moving_average=sma[-1] if sma else 0.0,
    )


async def stream_signals(
    provider: PriceProvider,
    params: RunParams,
    sink: CsvRowSink,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> list[OutputRow]:
    """Write the header, then one row per symbol with data, then flush.

    Returns
    -------
    list[OutputRow]
        The rows written, in symbol order.
    """
    sink.write_header()
    rows: list[OutputRow] = []

    for symbol in params.symbols:
        series = await provider.get_series(symbol, params.start, params.end)
        if series.is_empty:
            logger.info(
                "No prices for %s between %s and %s, skipping",
                symbol,
                params.start,
                params.end,
            )
            continue

        row = calculate_signals(series, window_size)
        sink.write_row(row)
        rows.append(row)
        logger.info("%s: %d closes, last $%.2f", symbol, len(series), row.last_price)

    sink.flush()
    return rows
