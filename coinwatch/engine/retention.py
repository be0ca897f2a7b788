"""Cleanup of old one-shot alerts."""

import logging
from datetime import datetime, timedelta
from typing import Callable

from coinwatch.db.base import SubscriptionStore
from coinwatch.models import utcnow

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


def cleanup_old_alerts(
    store: SubscriptionStore,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    clock: Callable[[], datetime] = utcnow,
) -> int:
    """Delete one-shot alerts that triggered more than ``retention_days`` ago.

    Cleanup is best-effort: a store failure is logged and reported as
    nothing removed.

    Args:
        store: Alert persistence.
        retention_days: Age in days after which triggered alerts go.
        clock: Source of the current time.

    Returns:
        Number of alerts removed.
    """
    if retention_days < 0:
        raise ValueError("retention_days cannot be negative")

    cutoff = clock() - timedelta(days=retention_days)
    try:
        deleted = store.delete_triggered_before(cutoff, repeat=False)
    except Exception as e:
        logger.error(f"Error cleaning up old alerts: {e}")
        return 0

    if deleted > 0:
        logger.info(f"Cleaned up {deleted} old triggered alerts")
    return deleted
