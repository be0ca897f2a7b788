"""Batching of alerts by coin."""

from typing import Iterable

from coinwatch.models import Subscription


def group_by_resource(subscriptions: Iterable[Subscription]) -> dict[str, list[Subscription]]:
    """Group alerts by coin id so each coin is fetched once.

    Args:
        subscriptions: Eligible alerts.

    Returns:
        Mapping of coin id to its alerts. Keys keep first-seen order and
        each list keeps the input order.
    """
    grouped: dict[str, list[Subscription]] = {}
    for subscription in subscriptions:
        grouped.setdefault(subscription.resource_key, []).append(subscription)
    return grouped
