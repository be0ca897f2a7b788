"""Console notifier that prints alerts with rich."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel

from coinwatch.notifiers.base import Notifier


class ConsoleNotifier(Notifier):
    """Prints each alert as a panel instead of delivering it."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def send(self, owner_id: str, message: str) -> bool:
        self.console.print(Panel(
            message,
            title=f"[bold yellow]Alert for {owner_id}[/bold yellow]",
            border_style="yellow",
        ))
        return True
