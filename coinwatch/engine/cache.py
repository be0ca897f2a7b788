"""Last observed price per coin, for status queries."""

import threading
from datetime import datetime
from typing import Optional

from coinwatch.models import CachedPrice, MetricSample


class PriceCache:
    """Last-write-wins map of coin id to its latest sample.

    Written by the poll cycle, read by status queries from any thread.
    Never consulted when deciding whether an alert triggers.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, CachedPrice] = {}

    def update(self, key: str, sample: MetricSample, observed_at: datetime) -> None:
        entry = CachedPrice(
            value=sample.value,
            pct_change_24h=sample.pct_change_24h,
            observed_at=observed_at,
        )
        with self._lock:
            self._entries[key] = entry

    def get(self, key: str) -> Optional[CachedPrice]:
        with self._lock:
            return self._entries.get(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
