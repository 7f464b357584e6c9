"""Protocol definitions for dependency injection.

These protocols define the abstract interfaces that the comparison service and the
profile sources depend on, enabling isolated unit testing with fake implementations.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import pandas as pd

    from .domain.profiles import Profile


@runtime_checkable
class HttpClient(Protocol):
    """Abstract HTTP client for making JSON API requests."""

    def get_json(self, url: str, cache_key: str | None = None) -> dict[str, object]:
        """Fetch JSON from URL, optionally using cache.

        Args:
            url: The URL to fetch.
            cache_key: Optional cache key. If provided and cached, return cached value.

        Returns:
            Parsed JSON response as dict.

        Raises:
            UpstreamNotFoundError: If the resource does not exist (404).
            UpstreamRequestError: If the request fails for any other transport or HTTP reason.
        """
        ...


@runtime_checkable
class Cache(Protocol):
    """Abstract cache for storing/retrieving JSON data."""

    def get(self, key: str) -> dict[str, object] | None:
        """Retrieve cached value by key, or None if not present."""
        ...

    def set(self, key: str, value: dict[str, object]) -> None:
        """Store value in cache with given key."""
        ...

    def has(self, key: str) -> bool:
        """Check if key exists in cache."""
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Abstract filesystem for reading batch inputs and writing results."""

    def read_csv(self, path: Path) -> pd.DataFrame:
        """Read CSV file into DataFrame."""
        ...

    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        """Write DataFrame to CSV file."""
        ...

    def write_json(self, data: Mapping[str, object], path: Path) -> None:
        """Write JSON file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if path exists."""
        ...


@runtime_checkable
class RateLimiter(Protocol):
    """Abstract rate limiter for outbound requests."""

    def wait_if_needed(self) -> None:
        """Block until a request is allowed."""
        ...


@runtime_checkable
class CircuitBreaker(Protocol):
    """Abstract circuit breaker for outbound requests."""

    def check(self) -> None:
        """Raise if the circuit is open."""
        ...

    def record_success(self) -> None:
        """Record a successful request."""
        ...

    def record_failure(self) -> None:
        """Record a failed request."""
        ...


@runtime_checkable
class RetryPolicy(Protocol):
    """Abstract retry policy for transient failures."""

    max_retries: int
    retry_statuses: tuple[int, ...]
    retry_exceptions: tuple[type[Exception], ...]

    def compute_backoff(self, attempt: int, retry_after: int | None = None) -> float:
        """Return a delay for the next retry attempt."""
        ...


@runtime_checkable
class RequestGate(Protocol):
    """Inbound throttle for comparison requests, keyed by client."""

    def check(self, client_key: str) -> None:
        """Raise RateLimitExceededError if the client has no budget left."""
        ...


@runtime_checkable
class ProfileSource(Protocol):
    """Acquires a profile by username."""

    def fetch_profile(self, username: str) -> Profile | None:
        """Return the user's profile, or None if the user does not exist."""
        ...
