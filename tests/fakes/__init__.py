"""Exports for test fakes."""

from .cache import InMemoryCache
from .filesystem import InMemoryFileSystem
from .http import FakeHttpClient
from .profiles import RecordingRequestGate, StaticProfileSource
from .resilience import FakeCircuitBreaker, FakeRateLimiter

__all__ = [
    "FakeCircuitBreaker",
    "FakeHttpClient",
    "FakeRateLimiter",
    "InMemoryCache",
    "InMemoryFileSystem",
    "RecordingRequestGate",
    "StaticProfileSource",
]
