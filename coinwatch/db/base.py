"""Subscription store interface for coinwatch."""

from abc import ABC, abstractmethod
from datetime import datetime

from coinwatch.models import Subscription


class SubscriptionStore(ABC):
    """Abstract base class for alert persistence.

    The monitor only depends on this interface; the SQLite
    ``DataStore`` is the bundled implementation.
    """

    @abstractmethod
    def list_eligible(self) -> list[Subscription]:
        """Get all alerts that are active and not triggered.

        Returns:
            Eligible subscriptions ordered by ID.
        """
        pass

    @abstractmethod
    def save(self, subscription: Subscription) -> None:
        """Persist the trigger state of an existing subscription.

        Implementations write only the trigger fields (last known value,
        trigger flag and time, trigger value, notification count and time)
        so that concurrent owner edits survive a poll cycle.

        Args:
            subscription: Subscription with an ID.

        Raises:
            ValueError: If the subscription has no ID.
        """
        pass

    @abstractmethod
    def delete_triggered_before(self, cutoff: datetime, repeat: bool = False) -> int:
        """Delete triggered alerts whose trigger time is older than cutoff.

        Args:
            cutoff: Alerts triggered strictly before this time are removed.
            repeat: Only alerts with this repeat flag are removed.

        Returns:
            Number of alerts deleted.
        """
        pass

    @abstractmethod
    def count_by_owner(self, owner_id: str) -> dict[str, int]:
        """Count an owner's alerts by state.

        Args:
            owner_id: Alert owner.

        Returns:
            Dictionary with ``active``, ``triggered`` and ``total`` counts.
        """
        pass
