"""HTTP client for the TryHackMe public API.

Usage example:
    from pathlib import Path

    from skillmetter.infrastructure.http import build_tryhackme_client

    client = build_tryhackme_client(
        user_agent="Skillmetter/1.0 (Educational Project)",
        cache_dir=Path("data/cache/tryhackme"),
        max_rpm=120,
        min_delay_seconds=0.2,
        circuit_breaker_threshold=5,
        circuit_breaker_timeout_seconds=60,
        max_retries=3,
        backoff_factor=0.5,
        max_backoff_seconds=60,
        jitter_seconds=0.1,
        timeout_seconds=30,
    )
    payload = client.get_json(
        "https://tryhackme.com/api/v2/public-profile?username=alice",
        cache_key="public-profile:alice",
    )
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing_extensions import override

import requests

from ..exceptions import (
    JsonObjectExpectedError,
    RateLimitError,
    UpstreamNotFoundError,
    UpstreamRequestError,
)
from ..observability import get_logger
from ..protocols import Cache, CircuitBreaker, HttpClient, RateLimiter, RetryPolicy
from .cache import DiskCache
from .io.validation import IncomingDataError, validate_as, validate_json_as
from .resilience import CircuitBreaker as CircuitBreakerImpl
from .resilience import RateLimiter as RateLimiterImpl
from .resilience import RetryPolicy as RetryPolicyImpl

logger = get_logger("infrastructure.http")


def build_tryhackme_client(
    *,
    user_agent: str,
    cache_dir: str | Path,
    max_rpm: int,
    min_delay_seconds: float,
    circuit_breaker_threshold: int,
    circuit_breaker_timeout_seconds: float,
    max_retries: int,
    backoff_factor: float,
    max_backoff_seconds: float,
    jitter_seconds: float,
    timeout_seconds: float,
    cache_ttl_seconds: float | None = 300.0,
) -> CachedHttpClient:
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
    cache = DiskCache(Path(cache_dir), ttl_seconds=cache_ttl_seconds)
    rate_limiter = RateLimiterImpl(max_rpm=max_rpm, min_delay_seconds=min_delay_seconds)
    circuit_breaker = CircuitBreakerImpl(
        threshold=circuit_breaker_threshold,
        recovery_timeout_seconds=circuit_breaker_timeout_seconds,
    )
    retry_policy = RetryPolicyImpl(
        max_retries=max_retries,
        backoff_factor=backoff_factor,
        max_backoff_seconds=max_backoff_seconds,
        jitter_seconds=jitter_seconds,
    )
    return CachedHttpClient(
        session=session,
        cache=cache,
        rate_limiter=rate_limiter,
        circuit_breaker=circuit_breaker,
        retry_policy=retry_policy,
        timeout_seconds=timeout_seconds,
    )


def parse_retry_after(headers: Mapping[str, str] | None) -> int | None:
    """Parse Retry-After header into seconds, if available."""
    if not headers:
        return None
    value = headers.get("Retry-After")
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return int(value)
    try:
        dt = parsedate_to_datetime(value)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        delta = (dt - datetime.now(UTC)).total_seconds()
        return max(0, int(delta))
    except (AttributeError, OverflowError, TypeError, ValueError):
        return None


def _response_details(response: requests.Response) -> str:
    """Return a compact status/body summary for error reporting."""
    try:
        body = response.text
    except (UnicodeDecodeError, ValueError, requests.RequestException):
        body = "<unreadable>"
    body = " ".join(body.split())
    if len(body) > 300:
        body = body[:300] + "..."
    return f"status={response.status_code}, body={body}"


class CachedHttpClient(HttpClient):
    """HTTP client with caching, rate limiting, retries and a circuit breaker.

    - 404 raises UpstreamNotFoundError without counting against the breaker
    - 429 and 5xx back off and retry; 429 surfaces as RateLimitError when retries run out
    - Timeouts and connection errors retry with exponential backoff
    - Every attempt passes through the rate limiter, failures included
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        cache: Cache,
        rate_limiter: RateLimiter | None = None,
        circuit_breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
        timeout_seconds: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session
        self.cache = cache
        self.rate_limiter = rate_limiter or RateLimiterImpl()
        self.circuit_breaker = circuit_breaker or CircuitBreakerImpl()
        self.retry_policy = retry_policy or RetryPolicyImpl()
        self.timeout_seconds = timeout_seconds
        self.sleep = sleep

    @override
    def get_json(self, url: str, cache_key: str | None = None) -> dict[str, object]:
        """Fetch a JSON object from ``url``.

        Raises:
            UpstreamNotFoundError: If the API returns 404.
            CircuitBreakerOpen: If too many consecutive failures.
            RateLimitError: If the rate limit persists after backoff.
            JsonObjectExpectedError: If the body is not a JSON object.
            UpstreamRequestError: For other HTTP errors, timeouts and connection failures.
        """
        if cache_key:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Cache hit for %s", cache_key)
                return cached

        attempt = 0
        while True:
            self.circuit_breaker.check()
            self.rate_limiter.wait_if_needed()

            try:
                r = self.session.get(url, timeout=self.timeout_seconds)
            except self.retry_policy.retry_exceptions as exc:
                if attempt < self.retry_policy.max_retries:
                    delay = self.retry_policy.compute_backoff(attempt)
                    logger.info("Transient error for %s; retrying in %.2fs", url, delay)
                    self.sleep(delay)
                    attempt += 1
                    continue
                self.circuit_breaker.record_failure()
                raise UpstreamRequestError(url, str(exc)) from exc
            except requests.RequestException as exc:
                self.circuit_breaker.record_failure()
                raise UpstreamRequestError(url, str(exc)) from exc

            if r.status_code == 404:
                # The user or resource is absent; the API itself is healthy.
                self.circuit_breaker.record_success()
                raise UpstreamNotFoundError(url)

            if r.status_code in self.retry_policy.retry_statuses:
                retry_after = parse_retry_after(getattr(r, "headers", None))
                if attempt < self.retry_policy.max_retries:
                    delay = self.retry_policy.compute_backoff(attempt, retry_after)
                    logger.info(
                        "Upstream answered %s for %s; retrying in %.2fs", r.status_code, url, delay
                    )
                    self.sleep(delay)
                    attempt += 1
                    continue
                self.circuit_breaker.record_failure()
                if r.status_code == 429:
                    logger.warning("Rate limit response: %s", _response_details(r))
                    raise RateLimitError(retry_after or 60)
                logger.warning("Request failed for %s: %s", url, _response_details(r))
                raise UpstreamRequestError(url, f"HTTP {r.status_code}")

            try:
                r.raise_for_status()
            except requests.HTTPError as exc:
                self.circuit_breaker.record_failure()
                logger.warning("Request failed for %s: %s", url, _response_details(r))
                raise UpstreamRequestError(url, str(exc)) from exc

            try:
                data = validate_json_as(dict[str, object], r.text)
            except IncomingDataError:
                try:
                    payload: object = r.json()
                except (TypeError, ValueError) as exc:
                    raise JsonObjectExpectedError(url) from exc
                try:
                    data = validate_as(dict[str, object], payload)
                except IncomingDataError as exc:
                    raise JsonObjectExpectedError(url) from exc

            self.circuit_breaker.record_success()

            if cache_key:
                self.cache.set(cache_key, data)

            return data
