"""Per-user insights relative to an opponent.

Rules run in a fixed order and each may contribute one insight. Unlike title rules,
several can fire; the list is truncated to ``MAX_INSIGHTS`` so rule order is priority.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from .aggregation import ScoreRecord
from .profiles import DOMAIN_LABELS, Profile, ranked_domains

MAX_INSIGHTS = 5
STREAK_STRENGTH_DAYS = 30
STREAK_DROPPED_BELOW = 7
STREAK_DROPPED_BEST = 30
DIVERSITY_STRENGTH = 70
DIVERSITY_SPECIALIST_BELOW = 40
ACTIVITY_STRENGTH = 90
ACTIVITY_WEAKNESS_BELOW = 50
CERTIFICATION_STRENGTH = 3
ROOMS_LEAD_FACTOR = 1.5


class InsightKind(StrEnum):
    STRENGTH = "strength"
    WEAKNESS = "weakness"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Insight:
    """One observation about a user."""

    kind: InsightKind
    message: str
    icon: str


@dataclass(frozen=True)
class InsightContext:
    profile: Profile
    scores: ScoreRecord
    is_winner: bool
    opponent: Profile


InsightRule = Callable[[InsightContext], Insight | None]


def _top_domain(ctx: InsightContext) -> Insight | None:
    domain, rooms = ranked_domains(ctx.profile.domain_scores)[0]
    if rooms <= 0:
        return None
    return Insight(
        InsightKind.STRENGTH,
        f"Dominates in {DOMAIN_LABELS[domain]} with {rooms} rooms",
        "🎯",
    )


def _rank(ctx: InsightContext) -> Insight | None:
    if ctx.profile.global_rank >= ctx.opponent.global_rank:
        return None
    return Insight(
        InsightKind.STRENGTH,
        f"Higher global rank (#{ctx.profile.global_rank:,})",
        "📈",
    )


def _streak(ctx: InsightContext) -> Insight | None:
    current = ctx.profile.current_streak
    best = ctx.profile.best_streak
    if current >= STREAK_STRENGTH_DAYS:
        return Insight(InsightKind.STRENGTH, f"Impressive {current}-day active streak", "🔥")
    if current < STREAK_DROPPED_BELOW and best >= STREAK_DROPPED_BEST:
        return Insight(
            InsightKind.WEAKNESS,
            f"Streak dropped from {best} to {current} days",
            "📉",
        )
    return None


def _diversity(ctx: InsightContext) -> Insight | None:
    if ctx.scores.diversity_score >= DIVERSITY_STRENGTH:
        return Insight(
            InsightKind.STRENGTH,
            "Well-rounded across multiple security domains",
            "🌐",
        )
    if ctx.scores.diversity_score < DIVERSITY_SPECIALIST_BELOW:
        return Insight(InsightKind.NEUTRAL, "Focused specialist rather than generalist", "🔬")
    return None


def _activity(ctx: InsightContext) -> Insight | None:
    if ctx.scores.activity_score >= ACTIVITY_STRENGTH:
        return Insight(InsightKind.STRENGTH, "Highly active in recent days", "⚡")
    if ctx.scores.activity_score < ACTIVITY_WEAKNESS_BELOW:
        return Insight(InsightKind.WEAKNESS, "Activity has decreased recently", "😴")
    return None


def _certifications(ctx: InsightContext) -> Insight | None:
    count = len(ctx.profile.certifications)
    if count < CERTIFICATION_STRENGTH:
        return None
    return Insight(InsightKind.STRENGTH, f"Holds {count} TryHackMe certifications", "📜")


def _rooms_lead(ctx: InsightContext) -> Insight | None:
    own = ctx.profile.rooms_completed
    theirs = ctx.opponent.rooms_completed
    if own <= theirs * ROOMS_LEAD_FACTOR:
        return None
    return Insight(
        InsightKind.STRENGTH,
        f"Completed {own - theirs} more rooms than opponent",
        "🏆",
    )


INSIGHT_RULES: tuple[InsightRule, ...] = (
    _top_domain,
    _rank,
    _streak,
    _diversity,
    _activity,
    _certifications,
    _rooms_lead,
)


def generate_user_insights(
    profile: Profile,
    scores: ScoreRecord,
    is_winner: bool,
    opponent: Profile,
) -> list[Insight]:
    """Return up to five insights for ``profile``, in rule priority order."""
    ctx = InsightContext(profile=profile, scores=scores, is_winner=is_winner, opponent=opponent)
    insights: list[Insight] = []
    for rule in INSIGHT_RULES:
        insight = rule(ctx)
        if insight is not None:
            insights.append(insight)
    return insights[:MAX_INSIGHTS]
