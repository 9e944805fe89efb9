"""Click-based CLI for stock-signals.

Thin wrapper around library modules: resolves run parameters, builds the
provider and the output sink, then delegates to the pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from stock_signals.core.exceptions import StockSignalsError
from stock_signals.core.models import as_utc

console = Console(stderr=True)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from stock_signals.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _resolve_symbols(symbols: str | None, default: list[str]) -> list[str]:
    """Split a comma-separated symbol string, trimming blanks."""
    if symbols is None:
        return list(default)
    resolved = [s.strip().upper() for s in symbols.split(",") if s.strip()]
    if not resolved:
        raise click.UsageError("--symbols must name at least one ticker")
    return resolved


def _parse_instant(value: str | None, default: datetime) -> datetime:
    """Parse an ISO-8601 instant; anything unparseable falls back to default.

    Dates without a time mean midnight; naive values are taken as UTC.
    """
    if value is None:
        return default
    try:
        return as_utc(datetime.fromisoformat(value.strip()))
    except ValueError:
        logger.debug("Could not parse %r as a date, using %s", value, default)
        return default


def _resolve_range(
    start: str | None,
    end: str | None,
    lookback_weeks: int,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Resolve the ``[start, end]`` range, swapping the bounds if reversed."""
    now = now or datetime.now(timezone.utc)
    start_dt = _parse_instant(start, now - timedelta(weeks=lookback_weeks))
    end_dt = _parse_instant(end, now)
    if start_dt > end_dt:
        return end_dt, start_dt
    return start_dt, end_dt


async def _stream_with(provider, params, sink, window_size: int):
    """Run the pipeline inside the provider's context so it is closed afterwards."""
    from stock_signals.pipeline import stream_signals

    async with provider:
        return await stream_signals(provider, params, sink, window_size)


def _create_provider(config, csv_dir: str | None):
    """Offline CSV provider if a directory is given, else Yahoo Finance."""
    if csv_dir:
        from stock_signals.prices import CSVPriceProvider

        return CSVPriceProvider(csv_dir)

    from stock_signals.prices import YahooFinancePriceProvider

    return YahooFinancePriceProvider(config.provider)


def _output_rows_table(rows) -> None:
    """Render the written rows as a Rich table."""
    table = Table(title="Price Signals")
    table.add_column("Period start")
    table.add_column("Symbol", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Change %", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Avg", justify="right")

    for r in rows:
        table.add_row(
            r.period_start.date().isoformat(),
            r.symbol,
            f"${r.last_price:.2f}",
            f"{r.percent_change:.2f}%",
            f"${r.period_min:.2f}",
            f"${r.period_max:.2f}",
            f"${r.last_moving_average:.2f}",
        )

    console.print(table)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="STOCK_SIGNALS_CONFIG",
    default=None,
    help="Path to stock-signals.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.version_option(package_name="stock-signals")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Stock Signals: price summaries per ticker, written to CSV."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--symbols",
    "-s",
    type=str,
    default=None,
    help="Comma-separated tickers. Default: from config (AAPL,MSFT,UBER,GOOG).",
)
@click.option(
    "--from",
    "-f",
    "from_",
    type=str,
    default=None,
    help="Period start, ISO-8601. Default: two weeks ago.",
)
@click.option(
    "--to",
    "-t",
    type=str,
    default=None,
    help="Period end, ISO-8601. Default: now.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output CSV path. Default: data.csv.",
)
@click.option(
    "--window",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Moving-average window size. Default: 3.",
)
@click.option(
    "--csv-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Read <SYMBOL>.csv files from this directory instead of Yahoo Finance.",
)
@click.pass_context
def run(
    ctx: click.Context,
    symbols: str | None,
    from_: str | None,
    to: str | None,
    output: str | None,
    window: int | None,
    csv_dir: str | None,
) -> None:
    """Fetch prices, compute signals, and write one row per symbol."""
    from stock_signals.core import RunParams
    from stock_signals.output import CsvRowSink, open_sink
    try:
        config = _load_config(ctx)
        pipeline_cfg = config.pipeline

        start, end = _resolve_range(from_, to, pipeline_cfg.lookback_weeks)
        params = RunParams(
            symbols=_resolve_symbols(symbols, pipeline_cfg.symbols),
            start=start,
            end=end,
        )
        window_size = window or pipeline_cfg.window_size
        output_path = output or pipeline_cfg.output_path
        provider = _create_provider(config, csv_dir)

        logger.info(
            "Running %d symbols from %s to %s into %s",
            len(params.symbols),
            params.start.isoformat(),
            params.end.isoformat(),
            output_path,
        )

        with open_sink(output_path) as stream:
            sink = CsvRowSink(stream)
            rows = _run_async(_stream_with(provider, params, sink, window_size))
    except StockSignalsError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        if ctx.obj["verbose"] and exc.context:
            console.print(f"[dim]{exc.context}[/dim]")
        raise SystemExit(1)

    if rows:
        _output_rows_table(rows)
    skipped = len(params.symbols) - len(rows)
    console.print(
        f"[green]✓[/green] Wrote {len(rows)} rows to {output_path}"
        + (f" ({skipped} symbols without data)" if skipped else "")
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
