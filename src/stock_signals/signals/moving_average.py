"""Windowed simple moving average."""

from __future__ import annotations

from typing import Sequence


class WindowedSMA:
    """Simple moving average over every contiguous window of the series.

    The result has ``len(series) - window_size + 1`` values, in series
    order. Returns:

    - None if the series is empty or ``window_size <= 1``
    - ``[]`` if the series is non-empty but shorter than the window

    Usage:
        sma = WindowedSMA(3)
        sma.calculate([2.0, 4.5, 5.3, 6.5, 4.7])
        # [3.9333333333333336, 5.433333333333334, 5.5]
    """

    def __init__(self, window_size: int) -> None:
        self._window_size = window_size

    @property
    def window_size(self) -> int:
        return self._window_size

    def calculate(self, series: Sequence[float]) -> list[float] | None:
        if not series or self._window_size <= 1:
            return None

        n = self._window_size
        return [
            _sum(series[i : i + n]) / n
            for i in range(len(series) - n + 1)
        ]


def _sum(values: Sequence[float]) -> float:
    # Uncompensated left fold from 0.0 (builtin sum() compensates on 3.12+)
    total = 0.0
    for v in values:
        total += v
    return total
