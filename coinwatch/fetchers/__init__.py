"""Price providers for coinwatch."""

from coinwatch.fetchers.base import FetchError, MetricFetcher
from coinwatch.fetchers.coingecko import CoinGeckoFetcher
from coinwatch.fetchers.static import StaticFetcher

__all__ = [
    "CoinGeckoFetcher",
    "FetchError",
    "MetricFetcher",
    "StaticFetcher",
]
