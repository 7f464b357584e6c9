"""Seeded synthetic profiles for demos and offline comparisons.

Every generated value comes from a ``random.Random`` seeded with the SHA-256 of the
lower-cased username, so the same name always yields the same profile for a given
``today``. Users fall into one of four tiers:

- elite (10%)
- advanced (25%)
- intermediate (35%)
- beginner (30%)

Usage example:
    from datetime import date

    from skillmetter.application.mock_profiles import MockProfileSource

    source = MockProfileSource(today=date(2025, 1, 15))
    profile = source.fetch_profile("alice")
"""

from __future__ import annotations

import hashlib
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing_extensions import override

from ..domain.profiles import (
    DOMAIN_ORDER,
    ActivityEntry,
    Badge,
    BadgeTier,
    Certification,
    CyberDomain,
    Profile,
    build_profile,
)
from ..protocols import ProfileSource
from .identifiers import generate_id

MOCK_AVATAR_URL = "https://tryhackme.com/img/avatars/default.png"
TIMELINE_DAYS = 90


@dataclass(frozen=True)
class TierRanges:
    """Inclusive stat ranges for one tier of synthetic users."""

    name: str
    upper_roll: float
    global_rank: tuple[int, int]
    total_score: tuple[int, int]
    rooms_completed: tuple[int, int]
    paths_completed: tuple[int, int]
    badges: tuple[int, int]
    certifications: tuple[int, int]
    current_streak: tuple[int, int]
    best_streak: tuple[int, int]
    events: tuple[int, int]


TIERS: tuple[TierRanges, ...] = (
    TierRanges(
        name="elite",
        upper_roll=0.10,
        global_rank=(1, 5_000),
        total_score=(80_000, 200_000),
        rooms_completed=(200, 500),
        paths_completed=(15, 30),
        badges=(10, 14),
        certifications=(4, 9),
        current_streak=(30, 365),
        best_streak=(60, 400),
        events=(10, 20),
    ),
    TierRanges(
        name="advanced",
        upper_roll=0.35,
        global_rank=(5_000, 30_000),
        total_score=(30_000, 80_000),
        rooms_completed=(80, 200),
        paths_completed=(8, 15),
        badges=(6, 10),
        certifications=(2, 5),
        current_streak=(10, 60),
        best_streak=(20, 100),
        events=(5, 12),
    ),
    TierRanges(
        name="intermediate",
        upper_roll=0.70,
        global_rank=(30_000, 150_000),
        total_score=(8_000, 30_000),
        rooms_completed=(30, 80),
        paths_completed=(3, 8),
        badges=(3, 7),
        certifications=(1, 3),
        current_streak=(3, 20),
        best_streak=(10, 40),
        events=(2, 6),
    ),
    TierRanges(
        name="beginner",
        upper_roll=1.0,
        global_rank=(150_000, 500_000),
        total_score=(500, 8_000),
        rooms_completed=(5, 30),
        paths_completed=(0, 3),
        badges=(1, 4),
        certifications=(0, 2),
        current_streak=(0, 10),
        best_streak=(0, 15),
        events=(0, 3),
    ),
)

BADGE_TEMPLATES: tuple[tuple[str, str, BadgeTier], ...] = (
    ("First Blood", "Completed first room", "bronze"),
    ("Path Finder", "Completed first learning path", "bronze"),
    ("Streak Starter", "Achieved 7-day streak", "bronze"),
    ("Network Ninja", "Mastered network fundamentals", "silver"),
    ("Web Warrior", "Completed web security rooms", "silver"),
    ("Linux Legend", "Linux fundamentals mastery", "silver"),
    ("Crypto Crusher", "Solved cryptography challenges", "silver"),
    ("Blue Team Pro", "Defensive security expert", "gold"),
    ("Red Team Elite", "Offensive security master", "gold"),
    ("100 Rooms Club", "Completed 100 rooms", "gold"),
    ("Streak Master", "30-day streak achieved", "gold"),
    ("Top 1%", "Reached top 1% globally", "platinum"),
    ("Advent Champion", "Completed Advent of Cyber", "platinum"),
    ("King of the Hill", "Won KotH competition", "platinum"),
)

CERTIFICATION_TEMPLATES: tuple[str, ...] = (
    "Jr Penetration Tester",
    "Pre Security",
    "CompTIA Pentest+",
    "Introduction to Cyber Security",
    "Web Fundamentals",
    "SOC Level 1",
    "Offensive Pentesting",
    "Red Teaming",
    "Cyber Defense",
)


def seeded_rng(username: str) -> random.Random:
    """Return a generator whose sequence depends only on the lower-cased username."""
    digest = hashlib.sha256(username.lower().encode("utf-8")).digest()
    return random.Random(int.from_bytes(digest[:8], "big"))


def pick_tier(roll: float) -> TierRanges:
    for tier in TIERS:
        if roll < tier.upper_roll:
            return tier
    return TIERS[-1]


def _between(rng: random.Random, bounds: tuple[int, int]) -> int:
    return rng.randint(bounds[0], bounds[1])


def random_day(rng: random.Random, start_year: int, end_year: int) -> date:
    """Pick a day in the given year range; days stop at 28 so every month is valid."""
    return date(rng.randint(start_year, end_year), rng.randint(1, 12), rng.randint(1, 28))


def estimate_domain_distribution(rng: random.Random, total_rooms: int) -> dict[CyberDomain, int]:
    """Split ``total_rooms`` across all domains with a skewed random weighting.

    Each domain but the last gets the floor of its weighted share; the last takes the
    remainder, so the counts always sum to ``total_rooms``.
    """
    weights = [rng.random() * rng.random() for _ in DOMAIN_ORDER]
    total_weight = sum(weights)
    distribution: dict[CyberDomain, int] = {}
    remaining = total_rooms
    for index, domain in enumerate(DOMAIN_ORDER):
        if index == len(DOMAIN_ORDER) - 1 or total_weight <= 0:
            allocation = remaining
        else:
            allocation = min(int(weights[index] / total_weight * total_rooms), remaining)
        distribution[domain] = allocation
        remaining -= allocation
    return distribution


def _badges(rng: random.Random, count: int) -> tuple[Badge, ...]:
    templates = list(BADGE_TEMPLATES)
    rng.shuffle(templates)
    return tuple(
        Badge(
            id=generate_id(rng=rng),
            name=name,
            description=description,
            tier=tier,
            earned_at=random_day(rng, 2020, 2025).isoformat(),
        )
        for name, description, tier in templates[:count]
    )


def _certifications(rng: random.Random, count: int) -> tuple[Certification, ...]:
    templates = list(CERTIFICATION_TEMPLATES)
    rng.shuffle(templates)
    return tuple(
        Certification(
            id=generate_id(rng=rng),
            name=name,
            earned_at=random_day(rng, 2021, 2025).isoformat(),
            verified=rng.random() > 0.2,
        )
        for name in templates[:count]
    )


def _timeline(rng: random.Random, today: date) -> tuple[ActivityEntry, ...]:
    # Recent days are more likely to carry activity.
    entries: list[ActivityEntry] = []
    for days_ago in range(TIMELINE_DAYS, -1, -1):
        chance = 0.3 + (TIMELINE_DAYS - days_ago) / 200
        if rng.random() < chance:
            entries.append(
                ActivityEntry(
                    day=today - timedelta(days=days_ago),
                    rooms_completed=rng.randint(1, 5),
                    points_earned=rng.randint(50, 500),
                )
            )
    return tuple(entries)


def generate_mock_profile(username: str, today: date | None = None) -> Profile:
    """Build the synthetic profile for ``username`` as seen on ``today``."""
    reference = today or datetime.now(UTC).date()
    rng = seeded_rng(username)
    tier = pick_tier(rng.random())

    global_rank = _between(rng, tier.global_rank)
    total_score = _between(rng, tier.total_score)
    rooms_completed = _between(rng, tier.rooms_completed)
    paths_completed = _between(rng, tier.paths_completed)
    badge_count = _between(rng, tier.badges)
    certification_count = _between(rng, tier.certifications)
    current_streak = _between(rng, tier.current_streak)
    best_streak = max(current_streak, _between(rng, tier.best_streak))
    events = _between(rng, tier.events)

    domain_scores = estimate_domain_distribution(rng, rooms_completed)
    timeline = _timeline(rng, reference)
    if timeline:
        last_active = timeline[-1].day
    else:
        last_active = min(random_day(rng, 2024, 2025), reference)
    join_date = date(rng.randint(2018, 2024), rng.randint(1, 12), 1)

    return build_profile(
        username=username,
        avatar=MOCK_AVATAR_URL,
        join_date=join_date,
        global_rank=global_rank,
        total_score=total_score,
        level=total_score // 1000 + 1,
        rooms_completed=rooms_completed,
        paths_completed=paths_completed,
        badges=_badges(rng, badge_count),
        certifications=_certifications(rng, certification_count),
        current_streak=current_streak,
        best_streak=best_streak,
        events_participated=events,
        domain_scores=domain_scores,
        activity_timeline=timeline,
        last_active=last_active,
        today=reference,
    )


class MockProfileSource(ProfileSource):
    """Profile source that never misses: every valid username gets a synthetic profile."""

    def __init__(self, *, today: date | None = None, clock: Callable[[], date] | None = None) -> None:
        self._today = today
        self._clock = clock or (lambda: datetime.now(UTC).date())

    @override
    def fetch_profile(self, username: str) -> Profile | None:
        return generate_mock_profile(username, today=self._today or self._clock())
