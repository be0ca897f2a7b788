"""Base notifier interface for coinwatch."""

from abc import ABC, abstractmethod


class Notifier(ABC):
    """Abstract base class for notification channels."""

    @abstractmethod
    def send(self, owner_id: str, message: str) -> bool:
        """Deliver a rendered alert message.

        Args:
            owner_id: Recipient (for Telegram, the chat id).
            message: Plain-text message.

        Returns:
            True if the channel accepted the message, False otherwise.
        """
        pass
