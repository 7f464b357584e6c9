"""Custom exceptions for Skillmetter.

Invariant violations inside the scoring core are programmer errors and are raised
loudly. Request-level errors carry enough context for a caller to build a user-facing
message (and the HTTP-ish status the comparison endpoint used to answer with).
"""

from __future__ import annotations


class SkillmetterError(Exception):
    """Base exception for all Skillmetter errors."""

    pass


# ---------------------------------------------------------------------------
# Core invariants
# ---------------------------------------------------------------------------


class InvariantViolationError(SkillmetterError):
    """Raised when scoring inputs or constant tables break a core invariant."""

    pass


class WeightTableError(InvariantViolationError):
    """Raised when a scoring weight table does not sum to 1.0 or has negative weights."""

    def __init__(self, total: float, detail: str = "") -> None:
        self.total = total
        message = f"Scoring weights must be non-negative and sum to 1.0 (got {total:.6f})."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)


class DomainDistributionError(InvariantViolationError):
    """Raised when a profile's domain distribution does not match its room count."""

    def __init__(self, username: str, distribution_total: int, rooms_completed: int) -> None:
        self.username = username
        self.distribution_total = distribution_total
        self.rooms_completed = rooms_completed
        super().__init__(
            f"Domain distribution for {username!r} sums to {distribution_total}, "
            f"but rooms completed is {rooms_completed}."
        )


class IncompleteDomainDistributionError(InvariantViolationError):
    """Raised when a domain distribution is missing keys or holds negative counts."""

    def __init__(self, username: str, detail: str) -> None:
        self.username = username
        super().__init__(f"Domain distribution for {username!r} is invalid: {detail}")


# ---------------------------------------------------------------------------
# Comparison requests
# ---------------------------------------------------------------------------


class ComparisonRequestError(SkillmetterError):
    """Base for errors caused by the comparison request itself."""

    status_code: int = 400


class UsernameValidationError(ComparisonRequestError):
    """Raised when a username fails format validation."""

    def __init__(self, side: str, reason: str) -> None:
        self.side = side
        self.reason = reason
        super().__init__(f"{side}: {reason}")


class MissingUsernameError(ComparisonRequestError):
    """Raised when one of the two usernames is empty."""

    def __init__(self) -> None:
        super().__init__("Both usernames are required")


class SameUserComparisonError(ComparisonRequestError):
    """Raised when both sides of a comparison name the same user."""

    def __init__(self) -> None:
        super().__init__("Cannot compare a user with themselves")


class ProfileNotFoundError(ComparisonRequestError):
    """Raised when the profile source reports a user as absent."""

    status_code = 404

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(
            f'User "{username}" not found on TryHackMe. Please check the username.'
        )


class RateLimitExceededError(ComparisonRequestError):
    """Raised when a client exceeds the comparison request throttle."""

    status_code = 429

    def __init__(self, client_key: str, retry_after_seconds: float) -> None:
        self.client_key = client_key
        self.retry_after_seconds = retry_after_seconds
        super().__init__("Too many requests. Please try again in a minute.")


# ---------------------------------------------------------------------------
# Upstream API
# ---------------------------------------------------------------------------


class RateLimitError(SkillmetterError):
    """Raised when the upstream API rate limit is exceeded (429 Too Many Requests)."""

    def __init__(self, retry_after: int = 60) -> None:
        self.retry_after = retry_after
        super().__init__(f"Upstream rate limit exceeded. Retry after {retry_after} seconds.")


class CircuitBreakerOpen(SkillmetterError):
    """Raised when the circuit breaker trips due to repeated upstream failures."""

    def __init__(self, failure_count: int, threshold: int) -> None:
        self.failure_count = failure_count
        self.threshold = threshold
        super().__init__(
            f"Circuit breaker tripped: {failure_count} consecutive failures "
            f"(threshold: {threshold}). Stopping upstream requests."
        )


class UpstreamNotFoundError(SkillmetterError):
    """Raised when the upstream API answers 404 for a resource."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Upstream resource not found: {url}")


class UpstreamRequestError(SkillmetterError):
    """Raised when an upstream request fails in transport, status or payload."""

    status_code: int = 502

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Upstream request failed for {url}: {detail}")


class JsonObjectExpectedError(SkillmetterError):
    """Raised when an upstream response body is not a JSON object."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Expected a JSON object from {url}.")


# ---------------------------------------------------------------------------
# Batch and CLI
# ---------------------------------------------------------------------------


class BatchInputError(SkillmetterError):
    """Raised when a batch input file is missing or lacks required columns."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Batch input {path}: {detail}")


class UnknownProfileSourceError(SkillmetterError):
    """Raised when a profile source name is not recognised."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Unknown profile source {source!r}. Expected 'api' or 'mock'.")
