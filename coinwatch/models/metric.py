"""Metric sample and price cache entry models."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class MetricSample(BaseModel):
    """Latest price observation for one coin."""

    value: Decimal = Field(..., ge=0, description="Current price")
    pct_change_24h: Optional[Decimal] = Field(
        default=None, description="24h change in percent"
    )

    model_config = {"frozen": True}


class CachedPrice(BaseModel):
    """A metric sample with the time it was observed."""

    value: Decimal = Field(..., description="Observed price")
    pct_change_24h: Optional[Decimal] = Field(default=None, description="24h change")
    observed_at: datetime = Field(..., description="Observation time")

    model_config = {"frozen": True}
