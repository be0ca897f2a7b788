"""Notification gating and trigger state transitions."""

from datetime import datetime, timedelta
from decimal import Decimal

from coinwatch.models import Subscription


def can_notify(subscription: Subscription, now: datetime) -> bool:
    """Decide whether a satisfied alert may notify at ``now``.

    One-shot alerts notify only while not yet triggered. Repeating
    alerts notify when they never notified before or when at least
    ``cooldown_minutes`` have passed since the last notification.

    Args:
        subscription: Alert whose condition is satisfied.
        now: Current time.

    Returns:
        True if a notification may be sent.
    """
    if not subscription.repeat:
        return not subscription.is_triggered

    if subscription.last_notification_at is None:
        return True

    cooldown = timedelta(minutes=subscription.cooldown_minutes)
    return now - subscription.last_notification_at >= cooldown


def record_trigger(subscription: Subscription, value: Decimal, now: datetime) -> Subscription:
    """Compute the alert state after a notify decision.

    Repeating alerts are re-armed in the same record, so they become
    eligible again on the next cycle; their cooldown is enforced by
    ``can_notify`` rather than at re-arm time.

    Args:
        subscription: Alert that passed the gate.
        value: Price that satisfied the condition.
        now: Trigger time.

    Returns:
        A new Subscription with the trigger fields set.
    """
    return subscription.model_copy(update={
        "last_known_value": value,
        "is_triggered": not subscription.repeat,
        "triggered_at": now,
        "trigger_value": value,
        "notifications_sent": subscription.notifications_sent + 1,
        "last_notification_at": now,
    })
