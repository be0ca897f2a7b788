"""CoinGecko price fetcher.

Single responsibility: turn a list of coin ids into metric samples with
one ``/simple/price`` request.
"""

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import requests

from coinwatch.fetchers.base import FetchError, MetricFetcher
from coinwatch.models import MetricSample

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.coingecko.com/api/v3"
DEFAULT_CACHE_SECONDS = 300


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


class CoinGeckoFetcher(MetricFetcher):
    """Batch price lookups against the CoinGecko public API.

    Responses are cached per key set for ``cache_seconds`` so that
    several callers within the same window share one request.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        vs_currency: str = "usd",
        timeout: float = 10.0,
        cache_seconds: float = DEFAULT_CACHE_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.vs_currency = vs_currency
        self.timeout = timeout
        self.cache_seconds = cache_seconds
        self._session = session or requests.Session()
        self._cache: dict[tuple[str, ...], tuple[float, dict[str, MetricSample]]] = {}

    def fetch_batch(self, keys: list[str]) -> dict[str, MetricSample]:
        """Get price and 24h change for each coin id.

        Args:
            keys: Coin ids (e.g., ``["bitcoin", "ethereum"]``).

        Returns:
            Mapping of coin id to sample; coins missing from the response
            or without a price are omitted.

        Raises:
            FetchError: On network errors or a non-200 response.
        """
        if not keys:
            return {}

        cache_key = tuple(sorted(set(keys)))
        cached = self._cache.get(cache_key)
        if cached is not None and time.monotonic() - cached[0] < self.cache_seconds:
            logger.debug(f"Using cached prices for {len(cache_key)} coins")
            return dict(cached[1])

        try:
            response = self._session.get(
                f"{self.base_url}/simple/price",
                params={
                    "ids": ",".join(cache_key),
                    "vs_currencies": self.vs_currency,
                    "include_24hr_change": "true",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch prices: {e}") from e

        if response.status_code != 200:
            raise FetchError(
                f"Price API returned {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"Price API returned invalid JSON: {e}") from e

        samples = self._parse(payload)
        self._store(cache_key, samples)
        return dict(samples)

    def _store(self, cache_key: tuple[str, ...], samples: dict[str, MetricSample]) -> None:
        """Cache a response and drop entries that have expired."""
        now = time.monotonic()
        self._cache = {
            key: entry
            for key, entry in self._cache.items()
            if now - entry[0] < self.cache_seconds
        }
        if self.cache_seconds > 0:
            self._cache[cache_key] = (now, samples)

    def _parse(self, payload: Any) -> dict[str, MetricSample]:
        """Convert the ``/simple/price`` payload into samples."""
        if not isinstance(payload, dict):
            raise FetchError(f"Unexpected price payload: {type(payload).__name__}")

        change_field = f"{self.vs_currency}_24h_change"
        samples: dict[str, MetricSample] = {}
        for coin_id, entry in payload.items():
            if not isinstance(entry, dict):
                logger.warning(f"Ignoring malformed price entry for {coin_id}")
                continue
            price = _to_decimal(entry.get(self.vs_currency))
            if price is None or price < 0:
                logger.warning(f"No {self.vs_currency} price for {coin_id}")
                continue
            samples[coin_id] = MetricSample(
                value=price,
                pct_change_24h=_to_decimal(entry.get(change_field)),
            )
        return samples

    def clear_cache(self) -> None:
        """Drop all cached responses."""
        self._cache.clear()
