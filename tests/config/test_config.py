"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from skillmetter.config import (
    NonNegativeNumberEnvVarError,
    PositiveIntegerEnvVarError,
    ProfileSourceEnvVarError,
    SkillmetterConfig,
)

ENV_NAMES = (
    "SKILLMETTER_SOURCE",
    "THM_API_BASE_URL",
    "THM_USER_AGENT",
    "THM_MAX_RPM",
    "THM_SLEEP_SECONDS",
    "THM_ROOMS_PAGE_SIZE",
    "THM_CACHE_DIR",
    "COMPARE_RATE_LIMIT",
    "COMPARE_RATE_WINDOW_SECONDS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_without_environment(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config = SkillmetterConfig.from_env(dotenv_path=str(tmp_path) + "/missing.env")

    assert config.profile_source == "api"
    assert config.thm_api_base_url == "https://tryhackme.com/api/v2"
    assert config.compare_rate_limit == 10
    assert config.compare_rate_window_seconds == 60.0
    assert config.thm_rooms_page_size == 50


def test_environment_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("SKILLMETTER_SOURCE", " Mock ")
    clean_env.setenv("THM_API_BASE_URL", "https://thm.test/api/v2/")
    clean_env.setenv("COMPARE_RATE_LIMIT", "3")
    clean_env.setenv("THM_SLEEP_SECONDS", "0")

    config = SkillmetterConfig.from_env(dotenv_path=str(tmp_path) + "/missing.env")

    assert config.profile_source == "mock"
    assert config.thm_api_base_url == "https://thm.test/api/v2"
    assert config.compare_rate_limit == 3
    assert config.thm_sleep_seconds == 0.0


@pytest.mark.parametrize(
    ("name", "value", "error"),
    [
        ("SKILLMETTER_SOURCE", "database", ProfileSourceEnvVarError),
        ("THM_MAX_RPM", "0", PositiveIntegerEnvVarError),
        ("COMPARE_RATE_LIMIT", "ten", PositiveIntegerEnvVarError),
        ("COMPARE_RATE_WINDOW_SECONDS", "-1", NonNegativeNumberEnvVarError),
    ],
)
def test_invalid_values_are_rejected(
    clean_env: pytest.MonkeyPatch, tmp_path: Path, name: str, value: str, error: type[Exception]
) -> None:
    clean_env.setenv(name, value)

    with pytest.raises(error):
        SkillmetterConfig.from_env(dotenv_path=str(tmp_path) + "/missing.env")


def test_with_overrides_validates_source() -> None:
    config = SkillmetterConfig()

    assert config.with_overrides(profile_source="MOCK").profile_source == "mock"
    assert config.with_overrides().profile_source == "api"
    with pytest.raises(ProfileSourceEnvVarError):
        config.with_overrides(profile_source="csv")
