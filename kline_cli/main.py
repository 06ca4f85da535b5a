"""CLI for downloading Bybit kline history."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from pydantic import ValidationError

from kline_cli.display import render_table
from kline_core.data.factory import build_engine, build_fetch_request, build_page_fetcher
from kline_core.data.frame import DataValidationError, bars_to_frame
from kline_core.data.intervals import INTERVAL_MS, resolve_interval
from kline_core.errors import KlineError
from kline_core.export.barter import project_series
from kline_core.utils.config import FetchConfig, load_yaml_payload
from kline_core.utils.env import load_project_env

app = typer.Typer(help="Bybit kline history downloader")
load_project_env()

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def build_config(config_path: Optional[Path], overrides: dict[str, Any]) -> FetchConfig:
    """Merge YAML file values with explicitly passed CLI options."""
    payload: dict[str, Any] = load_yaml_payload(config_path) if config_path else {}
    payload.update({key: value for key, value in overrides.items() if value is not None})
    return FetchConfig.model_validate(payload)


def _print_run_header(config: FetchConfig) -> None:
    typer.echo("Fetching Bybit Kline Data")
    typer.echo(f"Symbol: {config.symbol}")
    typer.echo(f"Interval: {config.interval}")
    typer.echo(f"Category: {config.category.value}")
    typer.echo(f"Start Date: {config.start.date().isoformat()}")
    typer.echo(f"End Date: {config.end.date().isoformat()}")
    typer.echo(f"Max Records: {config.max_records}")
    typer.echo(f"Using: {'Testnet' if config.testnet else 'Mainnet'}")
    typer.echo("")


@app.command()
def fetch(
    symbol: Optional[str] = typer.Option(None, "--symbol", "-s", help="Symbol to fetch (e.g., BTCUSDT)"),
    interval: Optional[str] = typer.Option(
        None, "--interval", "-i", help="Kline interval (1, 3, 5, 15, 30, 60, 120, 240, 360, 720, D, W, M)"
    ),
    start_date: Optional[str] = typer.Option(None, "--start-date", help="Start date in YYYY/MM/DD format"),
    end_date: Optional[str] = typer.Option(None, "--end-date", help="End date in YYYY/MM/DD format"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category (spot, linear, inverse)"),
    max_records: Optional[int] = typer.Option(
        None, "--max-records", "-m", help="Maximum number of records to fetch (pagination is automatic)"
    ),
    testnet: Optional[bool] = typer.Option(None, "--testnet/--mainnet", help="Use Bybit testnet"),
    output_format: Optional[str] = typer.Option(
        None, "--output-format", "-o", help="Output format: table (default), barter (JSON lines) or csv"
    ),
    instrument_index: Optional[int] = typer.Option(
        None, "--instrument-index", help="Instrument index for barter format (default: 0)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, help="YAML file with fetch parameters"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Fetch klines for a date range, paginating automatically.

    Example:
        bybit-kline fetch --testnet -s BTCUSDT -i 15 --start-date 2024/01/01 --end-date 2024/01/02
    """
    _configure_logging(log_level)

    try:
        fetch_config = build_config(
            config,
            {
                "symbol": symbol,
                "interval": interval,
                "start": start_date,
                "end": end_date,
                "category": category,
                "max_records": max_records,
                "testnet": testnet,
                "output_format": output_format,
                "instrument_index": instrument_index,
            },
        )
        request = build_fetch_request(fetch_config)
        logger.debug(f"Resolved fetch config: {fetch_config.model_dump()}")
    except ValidationError as exc:
        _fail(f"Invalid parameters:\n{exc}")
    except (KlineError, ValueError) as exc:
        _fail(str(exc))

    if fetch_config.output_format == "table":
        _print_run_header(fetch_config)

    client = build_page_fetcher(fetch_config)
    try:
        bars = asyncio.run(build_engine(fetch_config, client).fetch(request))
    except KlineError as exc:
        _fail(str(exc))
    finally:
        client.close()

    if fetch_config.output_format == "barter":
        interval_ms = resolve_interval(request.interval_code)
        for event in project_series(bars, interval_ms, request.category, fetch_config.instrument_index):
            typer.echo(event.to_json_line())
    elif fetch_config.output_format == "csv":
        try:
            frame = bars_to_frame(bars)
        except DataValidationError as exc:
            _fail(str(exc))
        typer.echo(frame.to_csv(), nl=False)
    else:
        typer.echo(f"\nReceived {len(bars)} kline records:\n")
        typer.echo(render_table(bars))
        typer.echo(f"\nTotal records: {len(bars)}")


@app.command()
def intervals() -> None:
    """List supported interval codes and their durations."""
    for code, duration in INTERVAL_MS.items():
        typer.echo(f"{code:<5} {duration:>13,} ms")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
