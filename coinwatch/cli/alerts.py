"""Alert management commands for coinwatch CLI.

Handles creating, listing, enabling, disabling and removing alerts,
plus the per-owner summary.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from coinwatch.cli.common import build_fetcher, get_data_store, get_settings, print_error
from coinwatch.cli.main import console
from coinwatch.engine import AlertMonitor
from coinwatch.formatting import describe_condition, format_price
from coinwatch.models import CONDITION_TYPES, Subscription
from coinwatch.notifiers import ConsoleNotifier

# Short names accepted on the command line
CONDITION_ALIASES = {
    "above": "price_above",
    "below": "price_below",
    "up": "percentage_change_up",
    "down": "percentage_change_down",
}


def parse_condition_type(value: str) -> str:
    """Resolve a condition name or alias to its canonical type.

    Raises:
        click.BadParameter: If the name is not recognised.
    """
    name = value.strip().lower()
    name = CONDITION_ALIASES.get(name, name)
    if name not in CONDITION_TYPES:
        choices = ", ".join(list(CONDITION_TYPES) + list(CONDITION_ALIASES))
        raise click.BadParameter(f"'{value}' is not one of: {choices}")
    return name


def parse_threshold(value: str) -> Decimal:
    """Parse a non-negative decimal threshold.

    Raises:
        click.BadParameter: If the value is not a non-negative number.
    """
    try:
        threshold = Decimal(value.strip().lstrip("$").rstrip("%").replace(",", ""))
    except InvalidOperation:
        raise click.BadParameter(f"'{value}' is not a number")
    if not threshold.is_finite() or threshold < 0:
        raise click.BadParameter("Threshold must be a non-negative number")
    return threshold


@click.command("alert")
@click.argument("owner")
@click.argument("coin")
@click.argument("condition")
@click.argument("threshold")
@click.option("--symbol", default=None, help="Coin symbol (default: COIN uppercased).")
@click.option("--name", "coin_name", default=None, help="Coin display name (default: COIN).")
@click.option("--repeat", is_flag=True, help="Re-arm the alert after it triggers.")
@click.option(
    "--cooldown",
    type=click.IntRange(min=0),
    default=60,
    show_default=True,
    help="Minutes between repeated notifications.",
)
@click.option("--notes", default=None, help="Notes included in the notification.")
@click.pass_context
def create_alert(
    ctx: click.Context,
    owner: str,
    coin: str,
    condition: str,
    threshold: str,
    symbol: Optional[str],
    coin_name: Optional[str],
    repeat: bool,
    cooldown: int,
    notes: Optional[str],
) -> None:
    """Create a price alert.

    OWNER is the recipient (the Telegram chat id).
    COIN is the CoinGecko coin id (e.g., bitcoin, ethereum).
    CONDITION is one of price_above, price_below, percentage_change_up,
    percentage_change_down (or above, below, up, down).
    THRESHOLD is a USD price or a percentage.

    \b
    Examples:
      coinwatch alert 12345 bitcoin above 100000
      coinwatch alert 12345 ethereum down 10 --repeat --cooldown 120
    """
    condition_type = parse_condition_type(condition)
    value = parse_threshold(threshold)
    coin_id = coin.strip().lower()

    try:
        store = get_data_store(get_settings(ctx))
        subscription = Subscription(
            owner_id=owner,
            resource_key=coin_id,
            resource_symbol=(symbol or coin_id).upper(),
            resource_name=coin_name or coin_id.capitalize(),
            condition_type=condition_type,
            threshold=value,
            repeat=repeat,
            cooldown_minutes=cooldown,
            notes=notes,
        )
        alert_id = store.add_subscription(subscription)

        console.print(Panel(
            f"[bold green]Alert Created[/bold green]\n\n"
            f"ID:        {alert_id}\n"
            f"Coin:      {subscription.resource_symbol} ({subscription.resource_name})\n"
            f"Condition: {describe_condition(subscription)}\n"
            f"Repeat:    {'yes, every ' + str(cooldown) + ' min' if repeat else 'no'}",
            title="[bold]New Alert[/bold]",
            border_style="green",
        ))

    except click.ClickException:
        raise
    except Exception as e:
        print_error("Failed to create alert", e)
        raise SystemExit(1)


def _alerts_table(subscriptions: list[Subscription]) -> Table:
    table = Table(title="Crypto Alerts", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Owner")
    table.add_column("Coin", style="bold")
    table.add_column("Condition")
    table.add_column("Status")
    table.add_column("Sent", justify="right")
    table.add_column("Trigger Price", justify="right")

    status_styles = {"Active": "green", "Triggered": "yellow", "Inactive": "dim"}
    for sub in subscriptions:
        style = status_styles.get(sub.status, "white")
        table.add_row(
            str(sub.id),
            sub.owner_id,
            f"{sub.resource_symbol} ({sub.resource_name})",
            describe_condition(sub) + (" [dim](repeat)[/dim]" if sub.repeat else ""),
            f"[{style}]{sub.status}[/{style}]",
            str(sub.notifications_sent),
            format_price(sub.trigger_value) if sub.trigger_value is not None else "-",
        )
    return table


@click.command("alerts")
@click.option("--owner", default=None, help="Only show alerts for this owner.")
@click.option("--remove", "remove_id", type=int, default=None, help="Remove alert with specified ID.")
@click.option("--disable", "disable_id", type=int, default=None, help="Deactivate alert with specified ID.")
@click.option("--enable", "enable_id", type=int, default=None, help="Reactivate alert with specified ID.")
@click.pass_context
def list_alerts(
    ctx: click.Context,
    owner: Optional[str],
    remove_id: Optional[int],
    disable_id: Optional[int],
    enable_id: Optional[int],
) -> None:
    """Display or manage alerts.

    \b
    Examples:
      coinwatch alerts                 # List all alerts
      coinwatch alerts --owner 12345   # List one owner's alerts
      coinwatch alerts --remove 5      # Remove alert 5
      coinwatch alerts --disable 5     # Stop checking alert 5
    """
    try:
        store = get_data_store(get_settings(ctx))

        if remove_id is not None:
            if store.delete_subscription(remove_id):
                console.print(f"[green]✓ Removed alert {remove_id}[/green]")
            else:
                console.print(f"[yellow]Alert with ID {remove_id} not found[/yellow]")
            return

        for alert_id, active in ((disable_id, False), (enable_id, True)):
            if alert_id is None:
                continue
            if store.set_active(alert_id, active):
                verb = "Enabled" if active else "Disabled"
                console.print(f"[green]✓ {verb} alert {alert_id}[/green]")
            else:
                console.print(f"[yellow]Alert with ID {alert_id} not found[/yellow]")
            return

        subscriptions = store.list_subscriptions(owner)
        if not subscriptions:
            console.print(Panel(
                "[dim]No alerts set. Use 'coinwatch alert OWNER COIN CONDITION THRESHOLD' to create one.[/dim]",
                title="[bold]Alerts[/bold]",
                border_style="dim",
            ))
            return

        console.print(_alerts_table(subscriptions))

    except click.ClickException:
        raise
    except Exception as e:
        print_error("Failed to manage alerts", e)
        raise SystemExit(1)


@click.command("summary")
@click.argument("owner")
@click.pass_context
def owner_summary(ctx: click.Context, owner: str) -> None:
    """Show alert counts for OWNER."""
    settings = get_settings(ctx)
    monitor = AlertMonitor(
        store=get_data_store(settings),
        fetcher=build_fetcher(settings),
        notifier=ConsoleNotifier(console),
    )
    summary = monitor.owner_summary(owner)
    if summary is None:
        console.print("[red]Failed to load alert summary (see log)[/red]")
        raise SystemExit(1)

    console.print(Panel(
        f"Active:    [green]{summary.active}[/green]\n"
        f"Triggered: [yellow]{summary.triggered}[/yellow]\n"
        f"Total:     {summary.total}",
        title=f"[bold]Alerts for {owner}[/bold]",
        border_style="cyan",
    ))
