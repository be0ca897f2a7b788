"""Alert monitoring engine."""

from coinwatch.engine.cache import PriceCache
from coinwatch.engine.condition import is_satisfied
from coinwatch.engine.cooldown import can_notify, record_trigger
from coinwatch.engine.evaluator import Evaluator
from coinwatch.engine.grouping import group_by_resource
from coinwatch.engine.monitor import AlertMonitor
from coinwatch.engine.retention import cleanup_old_alerts
from coinwatch.engine.scheduler import Scheduler

__all__ = [
    "AlertMonitor",
    "Evaluator",
    "PriceCache",
    "Scheduler",
    "can_notify",
    "cleanup_old_alerts",
    "group_by_resource",
    "is_satisfied",
    "record_trigger",
]
