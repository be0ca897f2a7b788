"""
Poll Cycle Evaluator
====================

Runs one poll cycle: load eligible alerts, fetch each coin once,
evaluate conditions, gate notifications, persist trigger state and
hand the rendered message to the notifier.

A failure on one alert never aborts the cycle, and a failed
notification never rolls back the persisted trigger state.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from coinwatch.db.base import SubscriptionStore
from coinwatch.engine.cache import PriceCache
from coinwatch.engine.condition import is_satisfied
from coinwatch.engine.cooldown import can_notify, record_trigger
from coinwatch.engine.grouping import group_by_resource
from coinwatch.fetchers.base import MetricFetcher
from coinwatch.formatting import render_alert_message
from coinwatch.models import CycleResult, MetricSample, Subscription, utcnow
from coinwatch.notifiers.base import Notifier

logger = logging.getLogger(__name__)


class Evaluator:
    """Evaluates every eligible alert against fresh prices."""

    def __init__(
        self,
        store: SubscriptionStore,
        fetcher: MetricFetcher,
        notifier: Notifier,
        cache: Optional[PriceCache] = None,
        clock: Callable[[], datetime] = utcnow,
        async_notifications: bool = False,
        renderer: Callable[[Subscription, MetricSample], str] = render_alert_message,
    ):
        """
        Initialize the evaluator.

        Args:
            store: Alert persistence
            fetcher: Batch price provider
            notifier: Message delivery channel
            cache: Price cache to update each cycle
            clock: Source of the current time
            async_notifications: Deliver messages on background threads
            renderer: Builds the message for a triggered alert
        """
        self.store = store
        self.fetcher = fetcher
        self.notifier = notifier
        self.cache = cache if cache is not None else PriceCache()
        self.clock = clock
        self.async_notifications = async_notifications
        self.renderer = renderer

        self._stats_lock = threading.Lock()
        self.last_check_time: Optional[datetime] = None
        self.alerts_checked = 0
        self.alerts_triggered = 0

    def run_cycle(self) -> CycleResult:
        """Run one full poll cycle.

        Returns:
            Summary of the cycle.
        """
        now = self.clock()
        logger.info(f"Checking crypto alerts at {now.isoformat()}")

        eligible = self.store.list_eligible()
        if not eligible:
            logger.info("No active alerts to check")
            self._record(now, checked=0, triggered=0)
            return CycleResult(started_at=now)

        groups = group_by_resource(eligible)
        keys = list(groups)
        logger.info(f"Checking {len(eligible)} alerts for {len(keys)} coins")

        try:
            samples = self.fetcher.fetch_batch(keys)
        except Exception as e:
            logger.error(f"Price fetch failed for {len(keys)} coins: {e}")
            samples = {}

        for key, sample in samples.items():
            try:
                self.cache.update(key, sample, now)
            except Exception as e:
                logger.warning(f"Could not cache price for {key}: {e}")

        triggered_ids: list[int] = []
        missing: list[str] = []
        errors = 0

        for key, subscriptions in groups.items():
            sample = samples.get(key)
            if sample is None:
                logger.warning(f"No price data for {key}, skipping {len(subscriptions)} alerts")
                missing.append(key)
                continue

            for subscription in subscriptions:
                try:
                    if self._evaluate(subscription, sample, now):
                        triggered_ids.append(subscription.id)
                except Exception:
                    errors += 1
                    logger.exception(f"Error checking alert {subscription.id}")

        self._record(now, checked=len(eligible), triggered=len(triggered_ids))

        if triggered_ids:
            logger.info(f"Triggered {len(triggered_ids)} alerts")
        else:
            logger.info("Alert check completed - no alerts triggered")

        return CycleResult(
            started_at=now,
            checked=len(eligible),
            triggered=len(triggered_ids),
            fetched_keys=keys,
            missing_keys=missing,
            errors=errors,
            triggered_ids=triggered_ids,
        )

    def _evaluate(self, subscription: Subscription, sample: MetricSample, now: datetime) -> bool:
        """Evaluate one alert; persist and notify when it fires.

        Returns:
            True if the alert fired.
        """
        if not is_satisfied(
            subscription.condition_type,
            subscription.threshold,
            sample.value,
            sample.pct_change_24h,
        ):
            return False

        if not can_notify(subscription, now):
            logger.debug(f"Alert {subscription.id} satisfied but still cooling down")
            return False

        logger.info(f"Triggering alert {subscription.id} for {subscription.resource_symbol}")
        updated = record_trigger(subscription, sample.value, now)

        # Persist first: an unsaved trigger is retried next cycle
        self.store.save(updated)

        self._dispatch(updated, sample)
        return True

    def _dispatch(self, subscription: Subscription, sample: MetricSample) -> None:
        """Render and send a message, in the background when configured to."""
        if self.async_notifications:
            thread = threading.Thread(
                target=self._deliver,
                args=(subscription, sample),
                name=f"notify-{subscription.id}",
                daemon=True,
            )
            thread.start()
        else:
            self._deliver(subscription, sample)

    def _render(self, subscription: Subscription, sample: MetricSample) -> str:
        try:
            return self.renderer(subscription, sample)
        except Exception:
            logger.exception(f"Could not render message for alert {subscription.id}")
            return (
                f"Crypto alert {subscription.id} triggered: "
                f"{subscription.resource_symbol} at {sample.value}"
            )

    def _deliver(self, subscription: Subscription, sample: MetricSample) -> None:
        message = self._render(subscription, sample)
        try:
            sent = self.notifier.send(subscription.owner_id, message)
        except Exception as e:
            logger.error(
                f"Error sending alert {subscription.id} to {subscription.owner_id}: {e}"
            )
            return

        if sent:
            logger.info(f"Alert {subscription.id} notification sent")
        else:
            logger.error(
                f"Notification for alert {subscription.id} to {subscription.owner_id} was not delivered"
            )

    def _record(self, now: datetime, checked: int, triggered: int) -> None:
        with self._stats_lock:
            self.last_check_time = now
            self.alerts_checked = checked
            self.alerts_triggered = triggered

    def stats(self) -> tuple[Optional[datetime], int, int]:
        """Last check time, alerts checked and alerts triggered."""
        with self._stats_lock:
            return self.last_check_time, self.alerts_checked, self.alerts_triggered
