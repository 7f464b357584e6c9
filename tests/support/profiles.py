"""Profile builders shared by tests."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date

from skillmetter.domain.profiles import (
    DOMAIN_ORDER,
    Badge,
    Certification,
    CyberDomain,
    Profile,
    build_profile,
)

TODAY = date(2025, 1, 15)


def even_distribution(per_domain: int) -> dict[CyberDomain, int]:
    return dict.fromkeys(DOMAIN_ORDER, per_domain)


def make_badges(count: int) -> tuple[Badge, ...]:
    return tuple(
        Badge(
            id=f"b{index}",
            name=f"Badge {index}",
            description="Test badge",
            tier="bronze",
            earned_at="2024-01-01",
        )
        for index in range(count)
    )


def make_certifications(count: int) -> tuple[Certification, ...]:
    return tuple(
        Certification(id=f"c{index}", name=f"Cert {index}", earned_at="2024-01-01", verified=True)
        for index in range(count)
    )


def make_profile(
    *,
    username: str = "alice",
    global_rank: int = 50_000,
    domain_scores: Mapping[CyberDomain, int] | None = None,
    badges: int = 5,
    certifications: int = 1,
    current_streak: int = 10,
    best_streak: int | None = 20,
    paths_completed: int = 3,
    events_participated: int = 2,
    join_date: date = date(2022, 1, 1),
    last_active: date = TODAY,
    today: date = TODAY,
) -> Profile:
    """Build a valid profile; ``rooms_completed`` always matches the distribution."""
    distribution = dict(domain_scores) if domain_scores is not None else even_distribution(2)
    return build_profile(
        username=username,
        join_date=join_date,
        global_rank=global_rank,
        rooms_completed=sum(distribution.values()),
        domain_scores=distribution,
        last_active=last_active,
        total_score=10_000,
        level=11,
        paths_completed=paths_completed,
        badges=make_badges(badges),
        certifications=make_certifications(certifications),
        current_streak=current_streak,
        best_streak=best_streak,
        events_participated=events_participated,
        today=today,
    )
