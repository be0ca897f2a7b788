"""In-memory fetcher for dry runs and tests."""

from decimal import Decimal
from typing import Optional, Union

from coinwatch.fetchers.base import MetricFetcher
from coinwatch.models import MetricSample

Number = Union[int, float, str, Decimal]


class StaticFetcher(MetricFetcher):
    """Serves prices that were set explicitly.

    Keeps a record of every batch requested so callers can inspect
    how many lookups were made.
    """

    def __init__(self, prices: Optional[dict[str, MetricSample]] = None):
        self._prices: dict[str, MetricSample] = dict(prices or {})
        self.calls: list[list[str]] = []

    def set_price(
        self,
        key: str,
        value: Number,
        pct_change_24h: Optional[Number] = None,
    ) -> None:
        """Set the sample returned for a coin."""
        self._prices[key] = MetricSample(
            value=Decimal(str(value)),
            pct_change_24h=None if pct_change_24h is None else Decimal(str(pct_change_24h)),
        )

    def remove_price(self, key: str) -> None:
        """Make a coin unavailable."""
        self._prices.pop(key, None)

    def fetch_batch(self, keys: list[str]) -> dict[str, MetricSample]:
        self.calls.append(list(keys))
        return {key: self._prices[key] for key in keys if key in self._prices}
