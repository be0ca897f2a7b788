"""Data models for coinwatch."""

from coinwatch.models.metric import CachedPrice, MetricSample
from coinwatch.models.status import CycleResult, OwnerSummary, StatusSnapshot
from coinwatch.models.subscription import (
    CONDITION_TYPES,
    ConditionType,
    Subscription,
    utcnow,
)

__all__ = [
    "CONDITION_TYPES",
    "CachedPrice",
    "ConditionType",
    "CycleResult",
    "MetricSample",
    "OwnerSummary",
    "StatusSnapshot",
    "Subscription",
    "utcnow",
]
