"""Shared fixtures for coinwatch tests."""

import tempfile
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from coinwatch.db.store import DataStore
from coinwatch.models import Subscription
from coinwatch.notifiers.base import Notifier


T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier(Notifier):
    """Collects sent messages; can be told to fail."""

    def __init__(self, fail: bool = False, raise_error: bool = False):
        self.fail = fail
        self.raise_error = raise_error
        self.sent: list[tuple[str, str]] = []

    def send(self, owner_id: str, message: str) -> bool:
        if self.raise_error:
            raise ConnectionError("channel down")
        if self.fail:
            return False
        self.sent.append((owner_id, message))
        return True


def make_subscription(
    resource_key: str = "bitcoin",
    condition_type: str = "price_above",
    threshold="100",
    **kwargs,
) -> Subscription:
    """Build a subscription with sensible defaults."""
    values = {
        "owner_id": "1001",
        "resource_key": resource_key,
        "resource_symbol": resource_key[:3].upper(),
        "resource_name": resource_key.capitalize(),
        "condition_type": condition_type,
        "threshold": Decimal(str(threshold)),
        "created_at": T0,
    }
    values.update(kwargs)
    return Subscription(**values)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield DataStore(db_path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()
