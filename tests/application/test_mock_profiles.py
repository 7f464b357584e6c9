"""Tests for seeded synthetic profiles."""

import random
from datetime import date

import pytest

from skillmetter.application.mock_profiles import (
    MOCK_AVATAR_URL,
    TIERS,
    MockProfileSource,
    estimate_domain_distribution,
    generate_mock_profile,
    pick_tier,
)
from skillmetter.domain.aggregation import compute_scores
from skillmetter.domain.profiles import DOMAIN_ORDER

TODAY = date(2025, 1, 15)


def test_same_username_gives_same_profile() -> None:
    first = generate_mock_profile("alice", today=TODAY)
    second = generate_mock_profile("alice", today=TODAY)

    assert first == second


def test_seed_ignores_username_case() -> None:
    lower = generate_mock_profile("alice", today=TODAY)
    upper = generate_mock_profile("ALICE", today=TODAY)

    assert lower.global_rank == upper.global_rank
    assert lower.domain_scores == upper.domain_scores


@pytest.mark.parametrize("username", ["alice", "bob", "carol", "dave", "eve", "mallory"])
def test_mock_profiles_are_valid_and_scoreable(username: str) -> None:
    profile = generate_mock_profile(username, today=TODAY)

    assert sum(profile.domain_scores.values()) == profile.rooms_completed
    assert profile.best_streak >= profile.current_streak
    assert profile.last_active <= TODAY
    assert profile.avatar == MOCK_AVATAR_URL
    assert profile.level == profile.total_score // 1000 + 1
    assert 0.0 <= compute_scores(profile, TODAY).total_score <= 100.0


def test_mock_profile_stats_fall_inside_one_tier() -> None:
    profile = generate_mock_profile("alice", today=TODAY)

    assert any(
        tier.global_rank[0] <= profile.global_rank <= tier.global_rank[1]
        and tier.rooms_completed[0] <= profile.rooms_completed <= tier.rooms_completed[1]
        for tier in TIERS
    )


def test_pick_tier_uses_cumulative_rolls() -> None:
    assert pick_tier(0.05).name == "elite"
    assert pick_tier(0.10).name == "advanced"
    assert pick_tier(0.5).name == "intermediate"
    assert pick_tier(0.99).name == "beginner"


@pytest.mark.parametrize("total", [0, 1, 13, 57, 499])
def test_estimated_distribution_sums_exactly(total: int) -> None:
    distribution = estimate_domain_distribution(random.Random(total), total)

    assert set(distribution) == set(DOMAIN_ORDER)
    assert sum(distribution.values()) == total
    assert all(count >= 0 for count in distribution.values())


def test_source_uses_fixed_today() -> None:
    source = MockProfileSource(today=TODAY)

    profile = source.fetch_profile("alice")

    assert profile == generate_mock_profile("alice", today=TODAY)


def test_source_reads_clock_when_no_fixed_day() -> None:
    source = MockProfileSource(clock=lambda: TODAY)

    assert source.fetch_profile("bob") == generate_mock_profile("bob", today=TODAY)
