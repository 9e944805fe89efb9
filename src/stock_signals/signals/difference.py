"""Net change between the first and last price of a series."""

from __future__ import annotations

from typing import Sequence

from stock_signals.core.models import PriceChange


class PriceDifference:
    """Absolute and relative change from the first to the last price.

    Only the endpoints matter; intermediate prices are ignored.

    - empty series: None
    - single price: ``PriceChange(0.0, 0.0)``
    - otherwise: ``absolute = last - first``, ``relative = absolute / first``

    A first price of exactly 0.0 is treated as a divisor of 1.0, so the
    relative change equals the absolute change instead of being infinite.
    """

    def calculate(self, series: Sequence[float]) -> PriceChange | None:
        if not series:
            return None

        first, last = series[0], series[-1]
        absolute = last - first
        divisor = first if first != 0.0 else 1.0
        return PriceChange(absolute=absolute, relative=absolute / divisor)
