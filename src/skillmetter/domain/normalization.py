"""Score normalisation: raw profile metrics to 0–100 sub-scores.

Each transform is monotonic in its raw metric and clamped to [0, 100]. Rounding to two
decimals happens once, when a ``ScoreRecord`` is built, never here.

Usage example:
    from skillmetter.domain.normalization import score_rank, score_rooms

    assert score_rank(1) == 100.0
    assert score_rooms(500) == 100.0
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime

from .profiles import Profile

# Caps for score normalisation
MAX_RANK_FOR_SCORING = 500_000
MAX_ROOMS_FOR_SCORING = 500
MAX_BADGES_FOR_SCORING = 50
MAX_CERTS_FOR_SCORING = 10
MAX_STREAK_FOR_SCORING = 365
MAX_EVENTS_FOR_SCORING = 20
MAX_PATHS_FOR_SCORING = 30

# Activity freshness bands: (max days since active, score), checked in order
ACTIVITY_BANDS: tuple[tuple[int, float], ...] = (
    (1, 100.0),
    (7, 90.0),
    (14, 75.0),
    (30, 60.0),
    (60, 40.0),
    (90, 25.0),
)
STALE_ACTIVITY_SCORE = 10.0


@dataclass(frozen=True)
class SubScores:
    """The seven unrounded sub-scores for one profile."""

    rank: float
    rooms: float
    diversity: float
    badges: float
    streak: float
    events: float
    activity: float


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _capped_ratio(value: float, cap: float) -> float:
    return min(value / cap, 1.0)


def score_rank(rank: int) -> float:
    """Logarithmic rank score; lower rank scores higher, rank <= 0 scores 0."""
    if rank <= 0:
        return 0.0
    normalized_rank = min(rank, MAX_RANK_FOR_SCORING)
    score = 100 - (math.log10(normalized_rank) / math.log10(MAX_RANK_FOR_SCORING)) * 100
    return _clamp(score)


def score_rooms(rooms_completed: int) -> float:
    """Square-root room score for diminishing returns."""
    normalized = _capped_ratio(max(rooms_completed, 0), MAX_ROOMS_FOR_SCORING)
    return _clamp(math.sqrt(normalized) * 100)


def score_diversity(counts: Iterable[int]) -> float:
    """Diversity from the coefficient of variation of domain counts.

    An even spread scores 100; concentration in one domain scores low; no rooms scores 0.
    """
    values = list(counts)
    total = sum(values)
    if total == 0 or not values:
        return 0.0
    mean = total / len(values)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    cv = (math.sqrt(variance) / mean) * 100
    return _clamp(100 - cv)


def score_badges(badges: int, certifications: int) -> float:
    """Badges weigh 60, certifications 40."""
    badge_score = _capped_ratio(badges, MAX_BADGES_FOR_SCORING) * 60
    cert_score = _capped_ratio(certifications, MAX_CERTS_FOR_SCORING) * 40
    return _clamp(badge_score + cert_score)


def score_streak(current_streak: int, best_streak: int) -> float:
    """Current streak weighs 60, best streak 40."""
    current_score = _capped_ratio(current_streak, MAX_STREAK_FOR_SCORING) * 60
    best_score = _capped_ratio(best_streak, MAX_STREAK_FOR_SCORING) * 40
    return _clamp(current_score + best_score)


def score_events(events: int, paths: int) -> float:
    """Events and paths weigh 50 each."""
    events_score = _capped_ratio(events, MAX_EVENTS_FOR_SCORING) * 50
    paths_score = _capped_ratio(paths, MAX_PATHS_FOR_SCORING) * 50
    return _clamp(events_score + paths_score)


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days


def score_activity(last_active: date, today: date | None = None) -> float:
    """Step function of whole days since the last recorded activity."""
    reference = today or datetime.now(UTC).date()
    days_since_active = days_between(last_active, reference)
    for max_days, score in ACTIVITY_BANDS:
        if days_since_active <= max_days:
            return score
    return STALE_ACTIVITY_SCORE


def normalize_profile(profile: Profile, today: date | None = None) -> SubScores:
    """Compute the seven sub-scores for a profile (total is the aggregator's job)."""
    return SubScores(
        rank=score_rank(profile.global_rank),
        rooms=score_rooms(profile.rooms_completed),
        diversity=score_diversity(profile.domain_scores.values()),
        badges=score_badges(len(profile.badges), len(profile.certifications)),
        streak=score_streak(profile.current_streak, profile.best_streak),
        events=score_events(profile.events_participated, profile.paths_completed),
        activity=score_activity(profile.last_active, today),
    )
