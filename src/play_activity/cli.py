"""Command-line interface for the play activity log."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .config import PlayLogSettings
from .history import PlayHistory
from .loader import LogCorruptError, LogLoadTimeout
from .normalization import parse_account_id, parse_application_id
from .paths import get_play_log_path
from .periods import ViewPeriod, period_bounds, shift_period
from .server_runner import run_dashboard

app = typer.Typer(help="Console play history from the system play log.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _load_history(log_path: Optional[Path], steady_ticks: int) -> PlayHistory:
    settings = PlayLogSettings.from_options(steady_ticks_per_second=steady_ticks)
    path = log_path or get_play_log_path()
    try:
        return PlayHistory.from_path(path, settings)
    except FileNotFoundError:
        typer.echo(f"Play log not found: {path}", err=True)
        raise typer.Exit(code=1)
    except (LogCorruptError, LogLoadTimeout) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)


def _parse_or_fail(parser, value: str, param: str) -> int:
    try:
        return parser(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint=param) from exc


@app.command()
def titles(
    log_path: Optional[Path] = typer.Option(
        None, "--log", path_type=Path, help="Location of the play event log."
    ),
    steady_ticks: int = typer.Option(
        1, "--steady-ticks", min=1, help="Steady clock ticks per second."
    ),
) -> None:
    """List every application id found in the play log."""
    from .reporting import SummaryPrinter

    SummaryPrinter(_load_history(log_path, steady_ticks)).print_titles()


@app.command()
def sessions(
    application: str = typer.Argument(..., help="Application id in hex."),
    account: str = typer.Argument(..., help="Account UID in hex."),
    log_path: Optional[Path] = typer.Option(
        None, "--log", path_type=Path, help="Location of the play event log."
    ),
    steady_ticks: int = typer.Option(
        1, "--steady-ticks", min=1, help="Steady clock ticks per second."
    ),
) -> None:
    """Print every play session of an application for one account."""
    from .reporting import SummaryPrinter

    application_id = _parse_or_fail(parse_application_id, application, "APPLICATION")
    account_id = _parse_or_fail(parse_account_id, account, "ACCOUNT")
    printer = SummaryPrinter(_load_history(log_path, steady_ticks))
    printer.print_sessions(application_id, account_id)


@app.command()
def recent(
    account: str = typer.Argument(..., help="Account UID in hex."),
    period: ViewPeriod = typer.Option(
        ViewPeriod.DAY, "--period", case_sensitive=False, help="Period to summarize."
    ),
    date: Optional[str] = typer.Option(
        None,
        "--date",
        help="Date (YYYY-MM-DD) inside the period. Defaults to today.",
    ),
    offset: int = typer.Option(
        0,
        "--offset",
        help="Whole periods to move from the date, e.g. -1 for the previous one.",
    ),
    log_path: Optional[Path] = typer.Option(
        None, "--log", path_type=Path, help="Location of the play event log."
    ),
    steady_ticks: int = typer.Option(
        1, "--steady-ticks", min=1, help="Steady clock ticks per second."
    ),
) -> None:
    """Print playtime and launches per application for a day, month or year."""
    from .reporting import SummaryPrinter

    account_id = _parse_or_fail(parse_account_id, account, "ACCOUNT")
    try:
        target = datetime.strptime(date, "%Y-%m-%d") if date else datetime.now()
    except ValueError as exc:
        raise typer.BadParameter("expected YYYY-MM-DD", param_hint="--date") from exc
    if offset:
        target = shift_period(target, period, offset)
    range_start, range_end = period_bounds(target, period)
    printer = SummaryPrinter(_load_history(log_path, steady_ticks))
    printer.print_recent(account_id, range_start, range_end)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    log_path: Optional[Path] = typer.Option(
        None, "--log", path_type=Path, help="Location of the play event log."
    ),
    steady_ticks: int = typer.Option(
        1, "--steady-ticks", min=1, help="Steady clock ticks per second."
    ),
    timeout_seconds: float = typer.Option(
        30.0,
        "--load-timeout",
        min=0.0,
        help="Seconds allowed for decoding the log (0 disables the limit).",
    ),
) -> None:
    """Serve the play history as a local JSON API."""
    settings = PlayLogSettings.from_options(
        steady_ticks_per_second=steady_ticks, timeout_seconds=timeout_seconds
    )
    run_dashboard(
        host=host,
        port=port,
        log_path=log_path or get_play_log_path(),
        settings=settings,
    )
