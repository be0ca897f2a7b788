"""Subscription (alert) data model."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field


ConditionType = Literal[
    "price_above",
    "price_below",
    "percentage_change_up",
    "percentage_change_down",
]

CONDITION_TYPES: tuple[str, ...] = (
    "price_above",
    "price_below",
    "percentage_change_up",
    "percentage_change_down",
)


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class Subscription(BaseModel):
    """A user-defined threshold condition on a coin's price."""

    id: Optional[int] = Field(default=None, description="Database ID")
    owner_id: str = Field(..., min_length=1, description="Notification recipient")
    resource_key: str = Field(..., min_length=1, description="Coin id (e.g., bitcoin)")
    resource_symbol: str = Field(..., min_length=1, description="Coin symbol (e.g., BTC)")
    resource_name: str = Field(..., min_length=1, description="Full coin name")
    condition_type: ConditionType = Field(..., description="Alert condition")
    threshold: Decimal = Field(
        ..., ge=0, description="Price in USD or percentage magnitude"
    )
    last_known_value: Optional[Decimal] = Field(
        default=None, description="Price seen at the last trigger"
    )
    is_active: bool = Field(default=True, description="Participates in polling")
    is_triggered: bool = Field(default=False, description="Fired and not re-armed")
    triggered_at: Optional[datetime] = Field(default=None, description="Trigger time")
    trigger_value: Optional[Decimal] = Field(
        default=None, description="Price at which the alert triggered"
    )
    notifications_sent: int = Field(default=0, ge=0, description="Notification count")
    last_notification_at: Optional[datetime] = Field(
        default=None, description="When the last notification was sent"
    )
    repeat: bool = Field(default=False, description="Re-arm after notifying")
    cooldown_minutes: int = Field(
        default=60, ge=0, description="Minimum minutes between repeat notifications"
    )
    notes: Optional[str] = Field(default=None, description="User notes")
    created_at: datetime = Field(
        default_factory=utcnow, description="Creation timestamp"
    )

    model_config = {"frozen": True}

    @property
    def status(self) -> str:
        if not self.is_active:
            return "Inactive"
        return "Triggered" if self.is_triggered else "Active"
