"""CLI commands for coinwatch.

This package provides the command-line interface for managing alerts
and running the monitor.
"""

from coinwatch.cli.main import cli, main

__all__ = ["cli", "main"]
