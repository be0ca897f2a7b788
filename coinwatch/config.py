"""Configuration for coinwatch.

Settings come from built-in defaults, then the TOML config file, then
environment variables, each layer overriding the previous one.
"""

import os
from pathlib import Path
from typing import Any, Optional

import toml
from pydantic import BaseModel, Field

CONFIG_DIR = Path.home() / ".config" / "coinwatch"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "coinwatch.db"

# Environment variable -> settings field
ENV_OVERRIDES = {
    "COINWATCH_DB_PATH": "db_path",
    "COINWATCH_CHECK_INTERVAL": "check_interval_seconds",
    "COINWATCH_RETENTION_DAYS": "retention_days",
    "COINGECKO_API_URL": "coingecko_url",
    "TELEGRAM_BOT_TOKEN": "telegram_bot_token",
}


class Settings(BaseModel):
    """Runtime settings for the monitor and CLI."""

    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database path")
    check_interval_seconds: float = Field(
        default=120.0, gt=0, description="Seconds between poll cycles"
    )
    initial_delay_seconds: float = Field(
        default=5.0, ge=0, description="Delay before the first poll cycle"
    )
    retention_days: int = Field(
        default=30, ge=0, description="Days to keep triggered one-shot alerts"
    )
    cleanup_interval_hours: float = Field(
        default=24.0, gt=0, description="Hours between retention runs"
    )
    vs_currency: str = Field(default="usd", min_length=1, description="Quote currency")
    coingecko_url: str = Field(
        default="https://api.coingecko.com/api/v3", description="CoinGecko API base URL"
    )
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    price_cache_seconds: float = Field(
        default=300.0, ge=0, description="Seconds a price response is reused"
    )
    telegram_bot_token: Optional[str] = Field(
        default=None, description="Telegram bot token"
    )

    model_config = {"frozen": True}


def _flatten(data: dict[str, Any]) -> dict[str, Any]:
    """Accept both a flat file and ``[monitor]``/``[telegram]`` sections."""
    values: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            if key == "telegram" and "bot_token" in value:
                values["telegram_bot_token"] = value["bot_token"]
            for inner_key, inner_value in value.items():
                if inner_key in Settings.model_fields:
                    values[inner_key] = inner_value
        elif key in Settings.model_fields:
            values[key] = value
    return values


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[dict[str, str]] = None,
) -> Settings:
    """Load settings from the config file and environment.

    Args:
        config_path: TOML file to read; defaults to
            ``~/.config/coinwatch/config.toml``. A missing file is ignored.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Validated settings.

    Raises:
        ValueError: If the config file cannot be parsed.
        pydantic.ValidationError: If a value is invalid.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    environ = os.environ if environ is None else environ

    values: dict[str, Any] = {}
    if path.exists():
        try:
            values.update(_flatten(toml.load(path)))
        except toml.TomlDecodeError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e

    for env_name, field_name in ENV_OVERRIDES.items():
        env_value = environ.get(env_name)
        if env_value:
            values[field_name] = env_value

    return Settings(**values)
