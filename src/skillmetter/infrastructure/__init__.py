"""Concrete infrastructure implementations and shared helpers."""

from .cache import DiskCache
from .filesystem import LocalFileSystem
from .http import CachedHttpClient, build_tryhackme_client, parse_retry_after
from .resilience import CircuitBreaker, RateLimiter, RetryPolicy
from .throttle import FixedWindowRequestGate

__all__ = [
    "CachedHttpClient",
    "CircuitBreaker",
    "DiskCache",
    "FixedWindowRequestGate",
    "LocalFileSystem",
    "RateLimiter",
    "RetryPolicy",
    "build_tryhackme_client",
    "parse_retry_after",
]
