"""Signal protocol — the uniform interface over heterogeneous results."""

from __future__ import annotations

from typing import Protocol, Sequence, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class StockSignal(Protocol[T_co]):
    """A computation over a series of closing prices.

    Each implementation picks its own result type (a scalar, a
    ``PriceChange`` pair, or a list), so callers must unpack per variant.

    ``calculate`` returns None when the series is unusable for that
    computation. None is not an error; callers decide on a default.
    Implementations never mutate or keep a reference to ``series``.
    """

    def calculate(self, series: Sequence[float]) -> T_co | None: ...
