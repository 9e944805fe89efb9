"""CSV price source — reads closing prices from local files.

One file per symbol, ``<directory>/<SYMBOL>.csv``, e.g. a Yahoo Finance
history export. Lets the pipeline run offline against saved data.
"""

from __future__ import annotations

import asyncio
import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from stock_signals.core.exceptions import InvalidResponseError
from stock_signals.core.models import PriceObservation, PriceSeries, as_utc

logger = logging.getLogger(__name__)

# Common column name mappings for auto-detection
_DATE_ALIASES = {"date", "Date", "DATE", "timestamp", "Timestamp", "Datetime"}
_CLOSE_ALIASES = {"close", "Close", "CLOSE"}
_ADJ_CLOSE_ALIASES = {"adj_close", "Adj Close", "adjclose", "adjusted_close", "Adj_Close"}


def _find_column(headers: list[str], aliases: set[str]) -> str | None:
    """Find the first header that matches any alias."""
    for h in headers:
        if h in aliases:
            return h
    return None


def _parse_timestamp(value: str) -> datetime:
    """Parse an ISO date or datetime; dates mean midnight UTC."""
    return as_utc(datetime.fromisoformat(value.strip()))


class CSVPriceAdapter:
    """Transforms CSV rows into PriceObservation records.

    Prefers the adjusted close column and falls back to close. Column names
    are auto-detected unless given explicitly.

    Parameters
    ----------
    date_col : str | None
        Name of the date/timestamp column. Auto-detected if None.
    close_col : str | None
        Name of the close price column. Auto-detected if None.
    adj_close_col : str | None
        Name of the adjusted close column. Auto-detected if None.
    """

    def __init__(
        self,
        date_col: str | None = None,
        close_col: str | None = None,
        adj_close_col: str | None = None,
    ) -> None:
        self._date_col = date_col
        self._close_col = close_col
        self._adj_close_col = adj_close_col

    def adapt(self, raw_data: Any, symbol: str) -> list[PriceObservation]:
        """Parse CSV rows (list of dicts from csv.DictReader).

        Rows with an unparseable date or an empty price are skipped with a
        warning. A missing date or price column raises ValueError.
        """
        if not raw_data:
            return []

        headers = list(raw_data[0].keys())
        date_col = self._date_col or _find_column(headers, _DATE_ALIASES)
        close_col = self._close_col or _find_column(headers, _CLOSE_ALIASES)
        adj_col = self._adj_close_col or _find_column(headers, _ADJ_CLOSE_ALIASES)

        if date_col is None:
            raise ValueError(f"Cannot find date column in headers: {headers}")
        if close_col is None and adj_col is None:
            raise ValueError(f"Cannot find close column in headers: {headers}")

        observations: list[PriceObservation] = []
        for row in raw_data:
            try:
                ts = _parse_timestamp(row[date_col])
            except (ValueError, KeyError, AttributeError):
                logger.warning(
                    "Skipping %s row with unparseable date: %s", symbol, row.get(date_col)
                )
                continue

            raw_price = (row.get(adj_col) if adj_col else None) or (
                row.get(close_col) if close_col else None
            )
            if not raw_price:
                logger.warning("Skipping %s row without a price on %s", symbol, ts.date())
                continue

            observations.append(PriceObservation(timestamp=ts, adj_close=float(raw_price)))

        return observations


class CSVPriceProvider:
    """PriceProvider backed by a directory of per-symbol CSV files.

    A symbol without a file yields an empty series. Observations outside
    ``[start, end]`` are dropped.
    """

    def __init__(self, directory: str | Path, adapter: CSVPriceAdapter | None = None) -> None:
        self._directory = Path(directory)
        self._adapter = adapter or CSVPriceAdapter()

    async def __aenter__(self) -> CSVPriceProvider:
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    def _path_for(self, symbol: str) -> Path:
        return self._directory / f"{symbol}.csv"

    def _read_rows(self, path: Path) -> list[dict[str, str]]:
        with open(path, newline="", encoding="utf-8") as f:
            return list(csv.DictReader(f))

    async def get_series(
        self, symbol: str, start: datetime, end: datetime
    ) -> PriceSeries:
        start, end = as_utc(start), as_utc(end)
        path = self._path_for(symbol)
        if not path.exists():
            logger.warning("No CSV price file for %s at %s", symbol, path)
            return PriceSeries.from_observations(symbol, start, end, [])

        try:
            rows = await asyncio.to_thread(self._read_rows, path)
            observations = self._adapter.adapt(rows, symbol)
        except (OSError, UnicodeDecodeError, csv.Error, ValueError) as e:
            raise InvalidResponseError(
                f"Could not read prices for {symbol} from {path}: {e}",
                context={"symbol": symbol, "reason": "malformed_csv", "path": str(path)},
            ) from e

        in_range = [o for o in observations if start <= o.timestamp <= end]
        return PriceSeries.from_observations(symbol, start, end, in_range)
