"""
Telegram Notifier
=================

Delivers alert messages through the Telegram Bot API ``sendMessage``
endpoint. The alert owner id is used as the chat id.
"""

import logging

import requests

from coinwatch.notifiers.base import Notifier

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"
MAX_MESSAGE_LENGTH = 4000


class TelegramNotifier(Notifier):
    """Telegram bot message sender."""

    def __init__(
        self,
        bot_token: str,
        dry_run: bool = False,
        timeout: float = 10.0,
        api_url: str = TELEGRAM_API_URL,
    ):
        """
        Initialize the notifier.

        Args:
            bot_token: Telegram bot token
            dry_run: Log messages instead of sending them
            timeout: HTTP timeout in seconds
            api_url: Bot API base URL
        """
        if not dry_run and not bot_token:
            raise ValueError("TELEGRAM_BOT_TOKEN is required (or use --dry-run)")
        self.bot_token = bot_token
        self.dry_run = dry_run
        self.timeout = timeout
        self.api_url = api_url.rstrip("/")

    def _truncate_message(self, text: str) -> str:
        """Truncate message to Telegram's character limit."""
        if len(text) > MAX_MESSAGE_LENGTH:
            return text[:MAX_MESSAGE_LENGTH - 20] + "\n... (truncated)"
        return text

    def send(self, owner_id: str, message: str) -> bool:
        text = self._truncate_message(message)

        if self.dry_run:
            logger.info(f"[DRY RUN] Would send Telegram message to {owner_id}:\n{text}")
            return True

        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"
        payload = {
            "chat_id": owner_id,
            "text": text,
            "disable_web_page_preview": True,
        }

        try:
            response = requests.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Telegram request failed for chat {owner_id}: {e}")
            return False

        if response.status_code != 200:
            logger.error(
                f"Telegram API error {response.status_code} for chat {owner_id}: "
                f"{response.text[:200]}"
            )
            return False

        return True
