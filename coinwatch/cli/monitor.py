"""Monitoring commands for coinwatch CLI.

Runs the alert monitor in the foreground, performs single checks and
purges old alerts.
"""

import logging
import signal
import threading
from typing import Optional

import click
from rich.table import Table

from coinwatch.cli.common import (
    build_fetcher,
    build_notifier,
    get_data_store,
    get_settings,
    print_error,
)
from coinwatch.cli.main import console
from coinwatch.config import Settings
from coinwatch.engine import AlertMonitor
from coinwatch.formatting import format_percentage, format_price
from coinwatch.models import CycleResult, StatusSnapshot

logger = logging.getLogger(__name__)


def build_monitor(settings: Settings, dry_run: bool = False, **overrides) -> AlertMonitor:
    """Construct a monitor from settings."""
    options = {
        "check_interval_seconds": settings.check_interval_seconds,
        "initial_delay_seconds": settings.initial_delay_seconds,
        "retention_days": settings.retention_days,
        "cleanup_interval_hours": settings.cleanup_interval_hours,
    }
    options.update(overrides)
    return AlertMonitor(
        store=get_data_store(settings),
        fetcher=build_fetcher(settings),
        notifier=build_notifier(settings, dry_run),
        **options,
    )


def _result_table(result: CycleResult, monitor: AlertMonitor) -> Table:
    table = Table(title="Alert Check", show_header=True, header_style="bold cyan")
    table.add_column("Coin", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("24h", justify="right")
    table.add_column("Observed")

    for key in result.fetched_keys:
        cached = monitor.get_cached_price(key)
        if key in result.missing_keys or cached is None:
            table.add_row(key, "[red]no data[/red]", "-", "-")
            continue
        change = "-"
        if cached.pct_change_24h is not None:
            color = "green" if cached.pct_change_24h >= 0 else "red"
            change = f"[{color}]{format_percentage(cached.pct_change_24h)}[/{color}]"
        table.add_row(
            key,
            format_price(cached.value),
            change,
            cached.observed_at.strftime("%H:%M:%S"),
        )
    return table


def _print_status(status: StatusSnapshot) -> None:
    last = status.last_check_time.strftime("%Y-%m-%d %H:%M:%S") if status.last_check_time else "never"
    console.print(
        f"Checked [bold]{status.alerts_checked}[/bold] alerts, "
        f"triggered [bold yellow]{status.alerts_triggered}[/bold yellow] "
        f"(last check {last}, {status.cached_resource_count} coins cached)"
    )


@click.command("check")
@click.option("--dry-run", is_flag=True, help="Print notifications instead of sending them.")
@click.pass_context
def check(ctx: click.Context, dry_run: bool) -> None:
    """Run one alert check immediately.

    \b
    Examples:
      coinwatch check
      coinwatch check --dry-run
    """
    settings = get_settings(ctx)
    try:
        monitor = build_monitor(settings, dry_run=dry_run, cleanup_interval_hours=None)
    except Exception as e:
        print_error("Failed to set up monitor", e)
        raise SystemExit(1)

    result = monitor.force_check()
    if result is None:
        console.print("[red]Alert check did not complete (see log)[/red]")
        raise SystemExit(1)

    if result.fetched_keys:
        console.print(_result_table(result, monitor))
    _print_status(monitor.status())


@click.command("monitor")
@click.option(
    "--interval",
    type=click.FloatRange(min=1),
    default=None,
    help="Seconds between checks (default from config: 120).",
)
@click.option("--dry-run", is_flag=True, help="Print notifications instead of sending them.")
@click.option("--no-cleanup", is_flag=True, help="Do not purge old triggered alerts.")
@click.pass_context
def monitor(ctx: click.Context, interval: Optional[float], dry_run: bool, no_cleanup: bool) -> None:
    """Run the alert monitor until interrupted.

    Checks every active alert on a fixed interval and sends a
    notification when its condition is met.

    \b
    Examples:
      coinwatch monitor
      coinwatch monitor --interval 60 --dry-run
    """
    settings = get_settings(ctx)
    overrides = {"async_notifications": True}
    if interval is not None:
        overrides["check_interval_seconds"] = interval
    if no_cleanup:
        overrides["cleanup_interval_hours"] = None

    try:
        service = build_monitor(settings, dry_run=dry_run, **overrides)
    except Exception as e:
        print_error("Failed to set up monitor", e)
        raise SystemExit(1)

    stop_event = threading.Event()

    def _handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, shutting down")
        stop_event.set()

    signal.signal(signal.SIGTERM, _handle_signal)

    service.start()
    console.print("[green]Monitoring crypto alerts. Press Ctrl+C to stop.[/green]")
    try:
        while not stop_event.wait(1.0):
            pass
    except KeyboardInterrupt:
        pass
    finally:
        service.stop()
        _print_status(service.status())


@click.command("cleanup")
@click.option(
    "--days",
    type=click.IntRange(min=0),
    default=None,
    help="Remove one-time alerts triggered more than DAYS ago (default from config: 30).",
)
@click.pass_context
def cleanup(ctx: click.Context, days: Optional[int]) -> None:
    """Delete old triggered one-time alerts."""
    settings = get_settings(ctx)
    service = build_monitor(settings, dry_run=True, cleanup_interval_hours=None)
    removed = service.cleanup(days)
    console.print(f"[green]✓ Removed {removed} old triggered alerts[/green]")
