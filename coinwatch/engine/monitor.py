"""
Alert Monitor Service
=====================

Wires the evaluator, the poll scheduler and the retention job together
behind the operational surface: start, stop, force_check, status,
owner_summary and cleanup.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from coinwatch.db.base import SubscriptionStore
from coinwatch.engine.cache import PriceCache
from coinwatch.engine.evaluator import Evaluator
from coinwatch.engine.retention import DEFAULT_RETENTION_DAYS, cleanup_old_alerts
from coinwatch.engine.scheduler import (
    DEFAULT_INITIAL_DELAY_SECONDS,
    DEFAULT_INTERVAL_SECONDS,
    Scheduler,
)
from coinwatch.fetchers.base import MetricFetcher
from coinwatch.models import CachedPrice, CycleResult, OwnerSummary, StatusSnapshot, utcnow
from coinwatch.notifiers.base import Notifier

logger = logging.getLogger(__name__)

DEFAULT_CLEANUP_INTERVAL_HOURS = 24.0


class AlertMonitor:
    """Background crypto alert monitor.

    Dependencies are injected; nothing is global. Cycle failures are
    logged and reflected in ``status()``, never raised to the caller.
    """

    def __init__(
        self,
        store: SubscriptionStore,
        fetcher: MetricFetcher,
        notifier: Notifier,
        check_interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        cleanup_interval_hours: Optional[float] = DEFAULT_CLEANUP_INTERVAL_HOURS,
        clock: Callable[[], datetime] = utcnow,
        async_notifications: bool = False,
    ):
        """
        Initialize the monitor.

        Args:
            store: Alert persistence
            fetcher: Batch price provider
            notifier: Message delivery channel
            check_interval_seconds: Poll period
            initial_delay_seconds: Delay before the first poll after start
            retention_days: Age after which triggered one-shot alerts are purged
            cleanup_interval_hours: Hours between retention runs, or None/0 to disable the job
            clock: Source of the current time
            async_notifications: Deliver messages on background threads
        """
        self.store = store
        self.retention_days = retention_days
        self.clock = clock
        self.cache = PriceCache()
        self.evaluator = Evaluator(
            store=store,
            fetcher=fetcher,
            notifier=notifier,
            cache=self.cache,
            clock=clock,
            async_notifications=async_notifications,
        )
        self._local = threading.local()

        self.scheduler = Scheduler(
            self._run_cycle,
            interval_seconds=check_interval_seconds,
            initial_delay_seconds=initial_delay_seconds,
            name="alert-monitor",
        )

        self.cleanup_scheduler: Optional[Scheduler] = None
        if cleanup_interval_hours:
            self.cleanup_scheduler = Scheduler(
                self.cleanup,
                interval_seconds=cleanup_interval_hours * 3600,
                initial_delay_seconds=cleanup_interval_hours * 3600,
                name="alert-cleanup",
            )

    @property
    def is_running(self) -> bool:
        return self.scheduler.is_running

    def start(self) -> None:
        """Start polling; does nothing if already running."""
        if self.scheduler.is_running:
            logger.warning("Alert monitor is already running")
            return
        self.scheduler.start()
        if self.cleanup_scheduler is not None:
            self.cleanup_scheduler.start()
        logger.info("Alert monitor started")

    def stop(self) -> None:
        """Stop polling; an in-flight cycle is allowed to finish."""
        if not self.scheduler.is_running:
            logger.warning("Alert monitor is not running")
            return
        self.scheduler.stop()
        if self.cleanup_scheduler is not None and self.cleanup_scheduler.is_running:
            self.cleanup_scheduler.stop()
        logger.info("Alert monitor stopped")

    def _run_cycle(self) -> None:
        # One result slot per thread; ticks never touch the caller's slot
        self._local.result = None
        self._local.result = self.evaluator.run_cycle()

    def force_check(self) -> Optional[CycleResult]:
        """Run one cycle now, unless one is already in progress.

        Returns:
            The cycle result, or None if the call was dropped or failed.
        """
        logger.info("Force checking crypto alerts...")
        self._local.result = None
        if not self.scheduler.run_once():
            return None
        return self._local.result

    def status(self) -> StatusSnapshot:
        last_check_time, checked, triggered = self.evaluator.stats()
        return StatusSnapshot(
            is_running=self.is_running,
            last_check_time=last_check_time,
            alerts_checked=checked,
            alerts_triggered=triggered,
            cached_resource_count=len(self.cache),
        )

    def get_cached_price(self, key: str) -> Optional[CachedPrice]:
        return self.cache.get(key)

    def owner_summary(self, owner_id: str) -> Optional[OwnerSummary]:
        """Alert counts for one owner.

        Returns:
            OwnerSummary, or None if the store could not be queried.
        """
        try:
            counts = self.store.count_by_owner(owner_id)
        except Exception as e:
            logger.error(f"Error getting alert summary for {owner_id}: {e}")
            return None

        return OwnerSummary(
            active=counts["active"],
            triggered=counts["triggered"],
            total=counts["total"],
            monitoring_running=self.is_running,
        )

    def cleanup(self, retention_days: Optional[int] = None) -> int:
        """Purge old triggered one-shot alerts.

        Returns:
            Number of alerts removed.
        """
        days = self.retention_days if retention_days is None else retention_days
        return cleanup_old_alerts(self.store, days, clock=self.clock)
