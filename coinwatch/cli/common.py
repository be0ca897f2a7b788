"""Shared helpers for coinwatch CLI commands."""

import click
from rich.panel import Panel

from coinwatch.cli.main import console
from coinwatch.config import Settings, load_settings
from coinwatch.db.store import DataStore
from coinwatch.fetchers.coingecko import CoinGeckoFetcher
from coinwatch.notifiers import ConsoleNotifier, Notifier, TelegramNotifier


def get_settings(ctx: click.Context) -> Settings:
    """Load settings once per invocation."""
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        try:
            ctx.obj["settings"] = load_settings(ctx.obj.get("config_path"))
        except ValueError as e:
            raise click.ClickException(str(e))
    return ctx.obj["settings"]


def get_data_store(settings: Settings) -> DataStore:
    """Get the data store instance."""
    return DataStore(settings.db_path)


def build_fetcher(settings: Settings) -> CoinGeckoFetcher:
    return CoinGeckoFetcher(
        base_url=settings.coingecko_url,
        vs_currency=settings.vs_currency,
        timeout=settings.request_timeout,
        cache_seconds=settings.price_cache_seconds,
    )


def build_notifier(settings: Settings, dry_run: bool) -> Notifier:
    """Telegram when a token is configured, the console otherwise."""
    if dry_run or not settings.telegram_bot_token:
        return ConsoleNotifier(console)
    return TelegramNotifier(
        bot_token=settings.telegram_bot_token,
        timeout=settings.request_timeout,
    )


def print_error(title: str, error: Exception) -> None:
    console.print(Panel(
        f"[red]{title}:[/red]\n\n{str(error)}",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
