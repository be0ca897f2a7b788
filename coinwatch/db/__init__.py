"""Persistence for coinwatch."""

from coinwatch.db.base import SubscriptionStore
from coinwatch.db.store import DataStore

__all__ = ["DataStore", "SubscriptionStore"]
