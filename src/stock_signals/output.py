"""CSV output: header, row formatting, and the single-writer sink."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TextIO

from stock_signals.core.exceptions import OutputError
from stock_signals.core.models import OutputRow

HEADER = ["period start", "symbol", "price", "change %", "min", "max", "30d avg"]


def format_row(row: OutputRow) -> list[str]:
    """Render an OutputRow as CSV cells: dollar amounts and percent at 2dp."""
    return [
        row.period_start.isoformat(),
        row.symbol,
        f"${row.last_price:.2f}",
        f"{row.percent_change:.2f}%",
        f"${row.period_min:.2f}",
        f"${row.period_max:.2f}",
        f"${row.last_moving_average:.2f}",
    ]


class CsvRowSink:
    """Writes the header and summary rows to a text stream.

    Rows are buffered by the stream; ``flush`` is called once, at the end
    of a run.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._writer = csv.writer(stream, lineterminator="\n")
        self._rows_written = 0

    @property
    def rows_written(self) -> int:
        return self._rows_written

    def write_header(self) -> None:
        self._writer.writerow(HEADER)

    def write_row(self, row: OutputRow) -> None:
        self._writer.writerow(format_row(row))
        self._rows_written += 1

    def flush(self) -> None:
        self._stream.flush()


def open_sink(path: str | Path) -> TextIO:
    """Create (or truncate) the output file for writing, UTF-8.

    Raises
    ------
    OutputError
        If the file or its parent directory cannot be created.
    """
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        return open(p, "w", encoding="utf-8", newline="")
    except OSError as e:
        raise OutputError(
            f"Cannot open output file {p}: {e}",
            context={"path": str(p)},
        ) from e
