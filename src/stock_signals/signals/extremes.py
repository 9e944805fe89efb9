"""Period high and low."""

from __future__ import annotations

from typing import Sequence


class MaxPrice:
    """Highest price in the series. None for an empty series."""

    def calculate(self, series: Sequence[float]) -> float | None:
        if not series:
            return None
        return max(series)


class MinPrice:
    """Lowest price in the series. None for an empty series."""

    def calculate(self, series: Sequence[float]) -> float | None:
        if not series:
            return None
        return min(series)
