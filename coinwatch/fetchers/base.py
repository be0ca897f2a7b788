"""Base metric fetcher interface for coinwatch."""

from abc import ABC, abstractmethod

from coinwatch.models import MetricSample


class FetchError(Exception):
    """Raised when a whole batch lookup fails."""


class MetricFetcher(ABC):
    """Abstract base class for price providers.

    Implementations must tolerate partial failures by leaving
    unavailable keys out of the result rather than raising.
    """

    @abstractmethod
    def fetch_batch(self, keys: list[str]) -> dict[str, MetricSample]:
        """Get the latest sample for several coins in one call.

        Args:
            keys: Distinct coin ids.

        Returns:
            Mapping of coin id to sample. Unknown coins are omitted.

        Raises:
            FetchError: If the provider could not be reached at all.
        """
        pass
