"""Tests for the composition root."""

from dataclasses import replace
from pathlib import Path

import pytest

from skillmetter.application.mock_profiles import MockProfileSource
from skillmetter.application.tryhackme_source import TryHackMeProfileSource
from skillmetter.composition import app, build_cli_dependencies, build_profile_source
from skillmetter.config import SkillmetterConfig
from skillmetter.exceptions import UnknownProfileSourceError
from skillmetter.infrastructure import CachedHttpClient, FixedWindowRequestGate, LocalFileSystem


def test_mock_source() -> None:
    source = build_profile_source(SkillmetterConfig(profile_source="mock"))

    assert isinstance(source, MockProfileSource)


def test_api_source_is_wired_to_cached_client(tmp_path: Path) -> None:
    config = SkillmetterConfig(profile_source="api", thm_cache_dir=str(tmp_path))

    source = build_profile_source(config)

    assert isinstance(source, TryHackMeProfileSource)
    assert isinstance(source.http_client, CachedHttpClient)
    assert source.api_base_url == config.thm_api_base_url


def test_unknown_source_is_rejected() -> None:
    config = replace(SkillmetterConfig(), profile_source="ftp")

    with pytest.raises(UnknownProfileSourceError):
        build_profile_source(config)


def test_throttled_dependencies_get_a_gate() -> None:
    config = SkillmetterConfig(profile_source="mock", compare_rate_limit=4)

    throttled = build_cli_dependencies(config=config, throttled=True)
    unthrottled = build_cli_dependencies(config=config, throttled=False)

    assert isinstance(throttled.request_gate, FixedWindowRequestGate)
    assert throttled.request_gate.limit == 4
    assert unthrottled.request_gate is None
    assert isinstance(throttled.fs, LocalFileSystem)


def test_entry_point_app_is_built() -> None:
    assert app.registered_commands
