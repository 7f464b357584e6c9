"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

from .application.mock_profiles import MockProfileSource
from .application.tryhackme_source import TryHackMeProfileSource
from .cli import CliDependencies, create_app
from .config import SkillmetterConfig
from .exceptions import UnknownProfileSourceError
from .infrastructure import FixedWindowRequestGate, LocalFileSystem, build_tryhackme_client
from .protocols import ProfileSource, RequestGate


def build_profile_source(config: SkillmetterConfig) -> ProfileSource:
    """Return the profile source named by ``config.profile_source``."""
    if config.profile_source == "mock":
        return MockProfileSource()
    if config.profile_source == "api":
        http_client = build_tryhackme_client(
            user_agent=config.thm_user_agent,
            cache_dir=config.thm_cache_dir,
            max_rpm=config.thm_max_rpm,
            min_delay_seconds=config.thm_sleep_seconds,
            circuit_breaker_threshold=config.thm_circuit_breaker_threshold,
            circuit_breaker_timeout_seconds=config.thm_circuit_breaker_timeout_seconds,
            max_retries=config.thm_max_retries,
            backoff_factor=config.thm_backoff_factor,
            max_backoff_seconds=config.thm_backoff_max_seconds,
            jitter_seconds=config.thm_backoff_jitter_seconds,
            timeout_seconds=config.thm_timeout_seconds,
        )
        return TryHackMeProfileSource(
            http_client=http_client,
            api_base_url=config.thm_api_base_url,
            badges_cdn_url=config.thm_badges_cdn_url,
            rooms_page_size=config.thm_rooms_page_size,
            rooms_page_concurrency=config.thm_rooms_page_concurrency,
        )
    raise UnknownProfileSourceError(config.profile_source)


def build_cli_dependencies(*, config: SkillmetterConfig, throttled: bool) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        config: Skillmetter configuration (profile source and API client wiring).
        throttled: Whether comparisons pass through the per-client request gate.
    """
    request_gate: RequestGate | None = None
    if throttled:
        request_gate = FixedWindowRequestGate(
            limit=config.compare_rate_limit,
            window_seconds=config.compare_rate_window_seconds,
        )
    return CliDependencies(
        fs=LocalFileSystem(),
        profile_source=build_profile_source(config),
        request_gate=request_gate,
    )


app = create_app(build_cli_dependencies)
