"""Operational status models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StatusSnapshot(BaseModel):
    """Point-in-time view of the monitor's counters."""

    is_running: bool = Field(..., description="Whether the scheduler is running")
    last_check_time: Optional[datetime] = Field(
        default=None, description="Start time of the last poll cycle"
    )
    alerts_checked: int = Field(default=0, ge=0, description="Alerts considered last cycle")
    alerts_triggered: int = Field(default=0, ge=0, description="Alerts notified last cycle")
    cached_resource_count: int = Field(default=0, ge=0, description="Coins in the price cache")

    model_config = {"frozen": True}


class OwnerSummary(BaseModel):
    """Alert counts for a single owner."""

    active: int = Field(..., ge=0, description="Active, not triggered alerts")
    triggered: int = Field(..., ge=0, description="Triggered alerts")
    total: int = Field(..., ge=0, description="All alerts")
    monitoring_running: bool = Field(..., description="Whether the monitor is running")

    model_config = {"frozen": True}


class CycleResult(BaseModel):
    """Outcome of a single poll cycle."""

    started_at: datetime = Field(..., description="Cycle start time")
    checked: int = Field(default=0, ge=0, description="Eligible alerts considered")
    triggered: int = Field(default=0, ge=0, description="Alerts that notified")
    fetched_keys: list[str] = Field(default_factory=list, description="Keys requested")
    missing_keys: list[str] = Field(default_factory=list, description="Keys without data")
    errors: int = Field(default=0, ge=0, description="Per-alert failures")
    triggered_ids: list[int] = Field(default_factory=list, description="Triggered alert IDs")

    model_config = {"frozen": True}
