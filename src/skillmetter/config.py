"""Centralised, injectable configuration for Skillmetter.

The scoring core reads no configuration; everything here belongs to the surrounding
application (profile acquisition, throttling, HTTP resilience).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

PROFILE_SOURCES = frozenset({"api", "mock"})


class PositiveIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive integer.")


class NonNegativeNumberEnvVarError(ValueError):
    """Raised when an environment variable must be a non-negative number."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a non-negative number.")


class ProfileSourceEnvVarError(ValueError):
    """Raised when the profile source is not one of the supported values."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"SKILLMETTER_SOURCE must be one of {', '.join(sorted(PROFILE_SOURCES))} "
            f"(got {value!r})."
        )


@dataclass(frozen=True)
class SkillmetterConfig:
    """Immutable configuration for the comparison service.

    Load from environment with `SkillmetterConfig.from_env()` or construct directly for testing.
    """

    # Profile acquisition
    profile_source: str = "api"

    # TryHackMe API
    thm_api_base_url: str = "https://tryhackme.com/api/v2"
    thm_badges_cdn_url: str = "https://tryhackme-badges.s3.amazonaws.com"
    thm_user_agent: str = "Skillmetter/1.0 (Educational Project)"
    thm_timeout_seconds: float = 30.0
    thm_sleep_seconds: float = 0.2
    thm_max_rpm: int = 120
    thm_max_retries: int = 3
    thm_backoff_factor: float = 0.5
    thm_backoff_max_seconds: float = 60.0
    thm_backoff_jitter_seconds: float = 0.1
    thm_circuit_breaker_threshold: int = 5
    thm_circuit_breaker_timeout_seconds: float = 60.0
    thm_rooms_page_size: int = 50
    thm_rooms_page_concurrency: int = 3
    thm_cache_dir: str = "data/cache/tryhackme"

    # Inbound comparison throttle
    compare_rate_limit: int = 10
    compare_rate_window_seconds: float = 60.0

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            SkillmetterConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            profile_source=_parse_source(os.getenv("SKILLMETTER_SOURCE", "api")),
            thm_api_base_url=os.getenv("THM_API_BASE_URL", "https://tryhackme.com/api/v2")
            .strip()
            .rstrip("/")
            or "https://tryhackme.com/api/v2",
            thm_badges_cdn_url=os.getenv(
                "THM_BADGES_CDN_URL", "https://tryhackme-badges.s3.amazonaws.com"
            )
            .strip()
            .rstrip("/")
            or "https://tryhackme-badges.s3.amazonaws.com",
            thm_user_agent=os.getenv(
                "THM_USER_AGENT", "Skillmetter/1.0 (Educational Project)"
            ).strip()
            or "Skillmetter/1.0 (Educational Project)",
            thm_timeout_seconds=_parse_non_negative_float(
                os.getenv("THM_TIMEOUT_SECONDS", "30"), env_name="THM_TIMEOUT_SECONDS"
            ),
            thm_sleep_seconds=_parse_non_negative_float(
                os.getenv("THM_SLEEP_SECONDS", "0.2"), env_name="THM_SLEEP_SECONDS"
            ),
            thm_max_rpm=_parse_positive_int(os.getenv("THM_MAX_RPM", "120"), env_name="THM_MAX_RPM"),
            thm_max_retries=int(os.getenv("THM_MAX_RETRIES", "3")),
            thm_backoff_factor=float(os.getenv("THM_BACKOFF_FACTOR", "0.5")),
            thm_backoff_max_seconds=float(os.getenv("THM_BACKOFF_MAX_SECONDS", "60")),
            thm_backoff_jitter_seconds=float(os.getenv("THM_BACKOFF_JITTER_SECONDS", "0.1")),
            thm_circuit_breaker_threshold=_parse_positive_int(
                os.getenv("THM_CIRCUIT_BREAKER_THRESHOLD", "5"),
                env_name="THM_CIRCUIT_BREAKER_THRESHOLD",
            ),
            thm_circuit_breaker_timeout_seconds=float(
                os.getenv("THM_CIRCUIT_BREAKER_TIMEOUT_SECONDS", "60")
            ),
            thm_rooms_page_size=_parse_positive_int(
                os.getenv("THM_ROOMS_PAGE_SIZE", "50"), env_name="THM_ROOMS_PAGE_SIZE"
            ),
            thm_rooms_page_concurrency=_parse_positive_int(
                os.getenv("THM_ROOMS_PAGE_CONCURRENCY", "3"),
                env_name="THM_ROOMS_PAGE_CONCURRENCY",
            ),
            thm_cache_dir=os.getenv("THM_CACHE_DIR", "data/cache/tryhackme").strip()
            or "data/cache/tryhackme",
            compare_rate_limit=_parse_positive_int(
                os.getenv("COMPARE_RATE_LIMIT", "10"), env_name="COMPARE_RATE_LIMIT"
            ),
            compare_rate_window_seconds=_parse_non_negative_float(
                os.getenv("COMPARE_RATE_WINDOW_SECONDS", "60"),
                env_name="COMPARE_RATE_WINDOW_SECONDS",
            ),
        )

    def with_overrides(
        self,
        *,
        profile_source: str | None = None,
        thm_cache_dir: str | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            profile_source=self.profile_source
            if profile_source is None
            else _parse_source(profile_source),
            thm_cache_dir=self.thm_cache_dir if thm_cache_dir is None else thm_cache_dir.strip(),
        )


def _parse_source(value: str) -> str:
    source = value.strip().lower()
    if source not in PROFILE_SOURCES:
        raise ProfileSourceEnvVarError(value)
    return source


def _parse_positive_int(value: str, *, env_name: str) -> int:
    """Parse a positive integer from an environment variable."""
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise PositiveIntegerEnvVarError(env_name) from exc
    if parsed < 1:
        raise PositiveIntegerEnvVarError(env_name)
    return parsed


def _parse_non_negative_float(value: str, *, env_name: str) -> float:
    """Parse a non-negative float from an environment variable."""
    try:
        parsed = float(value.strip())
    except ValueError as exc:
        raise NonNegativeNumberEnvVarError(env_name) from exc
    if parsed < 0:
        raise NonNegativeNumberEnvVarError(env_name)
    return parsed
