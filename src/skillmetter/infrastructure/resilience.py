"""Resilience utilities for outbound TryHackMe requests.

Room pages are fetched from a small thread pool, so the limiter and breaker guard their
state with a lock.

Usage example:
    from skillmetter.infrastructure.resilience import CircuitBreaker, RateLimiter

    rate_limiter = RateLimiter(max_rpm=120, min_delay_seconds=0.2)
    circuit_breaker = CircuitBreaker(threshold=5)
"""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing_extensions import override

import requests

from ..exceptions import CircuitBreakerOpen
from ..protocols import CircuitBreaker as CircuitBreakerProtocol
from ..protocols import RateLimiter as RateLimiterProtocol
from ..protocols import RetryPolicy as RetryPolicyProtocol


@dataclass
class RateLimiter(RateLimiterProtocol):
    """Per-minute cap plus a minimum gap between consecutive requests."""

    max_rpm: int = 120
    min_delay_seconds: float = 0.2
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep
    requests_this_minute: int = field(default=0, init=False)
    minute_start: float | None = field(default=None, init=False)
    last_request_time: float | None = field(default=None, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @override
    def wait_if_needed(self) -> None:
        """Block until the next request fits both the gap and the per-minute budget."""
        with self._lock:
            now = self.clock()
            if self.minute_start is None:
                self.minute_start = now

            if self.last_request_time is not None:
                gap = now - self.last_request_time
                if gap < self.min_delay_seconds:
                    self.sleep(self.min_delay_seconds - gap)
                    now = self.clock()

            if self.max_rpm > 0:
                if now - self.minute_start >= 60:
                    self.requests_this_minute = 0
                    self.minute_start = now
                elif self.requests_this_minute >= self.max_rpm:
                    self.sleep(60 - (now - self.minute_start) + 0.1)
                    self.requests_this_minute = 0
                    self.minute_start = self.clock()

            self.requests_this_minute += 1
            self.last_request_time = self.clock()


@dataclass
class CircuitBreaker(CircuitBreakerProtocol):
    """Opens after ``threshold`` consecutive failures; probes again after a cool-down."""

    threshold: int = 5
    recovery_timeout_seconds: float = 60.0
    half_open_max_calls: int = 1
    clock: Callable[[], float] = time.monotonic
    consecutive_failures: int = field(default=0, init=False)
    state: str = field(default="closed", init=False)  # closed | open | half_open
    open_until: float | None = field(default=None, init=False)
    half_open_calls: int = field(default=0, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    @override
    def record_success(self) -> None:
        with self._lock:
            self._close()

    @override
    def record_failure(self) -> None:
        with self._lock:
            self.consecutive_failures += 1
            if self.state == "half_open" or self.consecutive_failures >= self.threshold:
                self.state = "open"
                self.open_until = self.clock() + self.recovery_timeout_seconds
                self.half_open_calls = 0

    @override
    def check(self) -> None:
        """Raise CircuitBreakerOpen while open; let a limited probe through once cooled down."""
        with self._lock:
            if self.state == "open":
                if self.open_until is not None and self.clock() >= self.open_until:
                    self.state = "half_open"
                    self.half_open_calls = 0
                else:
                    raise CircuitBreakerOpen(self.consecutive_failures, self.threshold)

            if self.state == "half_open":
                if self.half_open_calls >= self.half_open_max_calls:
                    raise CircuitBreakerOpen(self.consecutive_failures, self.threshold)
                self.half_open_calls += 1

    def reset(self) -> None:
        with self._lock:
            self._close()

    def _close(self) -> None:
        self.consecutive_failures = 0
        self.state = "closed"
        self.open_until = None
        self.half_open_calls = 0


@dataclass
class RetryPolicy(RetryPolicyProtocol):
    """Exponential backoff with jitter for transient upstream failures."""

    max_retries: int = 3
    backoff_factor: float = 0.5
    max_backoff_seconds: float = 60.0
    jitter_seconds: float = 0.1
    retry_statuses: tuple[int, ...] = (429, 500, 502, 503, 504)
    retry_exceptions: tuple[type[Exception], ...] = (requests.Timeout, requests.ConnectionError)

    @override
    def compute_backoff(self, attempt: int, retry_after: int | None = None) -> float:
        """Delay before retry ``attempt`` (0-based); Retry-After wins when it is longer."""
        delay = min(self.max_backoff_seconds, self.backoff_factor * (2**attempt))
        if retry_after is not None:
            delay = max(delay, float(retry_after))
        if self.jitter_seconds > 0:
            delay += random.uniform(0.0, self.jitter_seconds)
        return float(delay)
