"""Pydantic data models — the system's type contracts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator

# --- Type Aliases ---

Symbol = str


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# --- Price Models ---


class PriceObservation(BaseModel):
    """A single adjusted closing price at a point in time."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    adj_close: float

    @field_validator("timestamp")
    @classmethod
    def timestamp_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @field_validator("adj_close")
    @classmethod
    def price_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"adj_close must be >= 0, got {v}")
        return v


class PriceSeries(BaseModel):
    """Closing prices for one symbol over one date range.

    Observations are kept in non-decreasing timestamp order: they are
    sorted on construction, however the series is built, so no signal ever
    reads ``closes`` out of order.
    """

    model_config = ConfigDict(frozen=True)

    symbol: Symbol
    start: datetime
    end: datetime
    observations: tuple[PriceObservation, ...] = ()

    @field_validator("observations")
    @classmethod
    def sort_by_timestamp(
        cls, v: tuple[PriceObservation, ...]
    ) -> tuple[PriceObservation, ...]:
        # sorted() is stable, so equal timestamps keep their arrival order
        return tuple(sorted(v, key=lambda o: o.timestamp))

    @classmethod
    def from_observations(
        cls,
        symbol: Symbol,
        start: datetime,
        end: datetime,
        observations: Iterable[PriceObservation],
    ) -> PriceSeries:
        return cls(
            symbol=symbol,
            start=as_utc(start),
            end=as_utc(end),
            observations=tuple(observations),
        )

    @property
    def closes(self) -> tuple[float, ...]:
        """Adjusted closes in timestamp order."""
        return tuple(o.adj_close for o in self.observations)

    @property
    def is_empty(self) -> bool:
        return not self.observations

    @property
    def last_price(self) -> float:
        """Most recent close, or 0.0 for an empty series."""
        return self.observations[-1].adj_close if self.observations else 0.0

    def __len__(self) -> int:
        return len(self.observations)


# --- Signal Result Models ---


class PriceChange(NamedTuple):
    """Change between the first and last price of a series."""

    absolute: float
    relative: float


# --- Pipeline Models ---


class OutputRow(BaseModel):
    """One summary line per symbol, written once to the output."""

    model_config = ConfigDict(frozen=True)

    period_start: datetime
    symbol: Symbol
    last_price: float
    percent_change: float
    period_min: float
    period_max: float
    last_moving_average: float


class RunParams(BaseModel):
    """Symbols and the UTC instant range for one run."""

    model_config = ConfigDict(frozen=True)

    symbols: list[Symbol]
    start: datetime
    end: datetime

    @field_validator("symbols")
    @classmethod
    def symbols_not_empty(cls, v: list[str]) -> list[str]:
        cleaned = [s.strip() for s in v if s.strip()]
        if not cleaned:
            raise ValueError("symbols must not be empty")
        return cleaned

    @field_validator("start", "end")
    @classmethod
    def instants_utc(cls, v: datetime) -> datetime:
        return as_utc(v)
