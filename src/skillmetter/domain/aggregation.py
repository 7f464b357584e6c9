"""Weighted aggregation of sub-scores into a ScoreRecord.

The weight table is defined once here; the comparator reports weights from the same
table. Any table handed to the aggregator is validated first, because a table that does
not sum to 1.0 would silently produce a misleading total.

Usage example:
    from datetime import date

    from skillmetter.domain.aggregation import compute_scores

    scores = compute_scores(profile, today=date(2025, 1, 1))
    assert 0.0 <= scores.total_score <= 100.0
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from types import MappingProxyType

from ..exceptions import WeightTableError
from .normalization import SubScores, normalize_profile
from .profiles import Profile, validate_profile

WEIGHT_TOLERANCE = 1e-9


class Metric(StrEnum):
    """The seven scored metrics, in reporting order."""

    RANK = "rank"
    ROOMS = "rooms"
    DIVERSITY = "diversity"
    BADGES = "badges"
    STREAK = "streak"
    EVENTS = "events"
    ACTIVITY = "activity"


METRIC_ORDER: tuple[Metric, ...] = tuple(Metric)

DEFAULT_SCORING_WEIGHTS: Mapping[Metric, float] = MappingProxyType(
    {
        Metric.RANK: 0.20,
        Metric.ROOMS: 0.20,
        Metric.DIVERSITY: 0.15,
        Metric.BADGES: 0.15,
        Metric.STREAK: 0.10,
        Metric.EVENTS: 0.10,
        Metric.ACTIVITY: 0.10,
    }
)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative scores (0.5 -> 1, 12.125 -> 12.13)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def validate_weights(weights: Mapping[Metric, float]) -> Mapping[Metric, float]:
    """Return ``weights`` if it covers every metric, is non-negative and sums to 1.0."""
    total = math.fsum(weights.values())
    missing = [metric.value for metric in METRIC_ORDER if metric not in weights]
    if missing:
        raise WeightTableError(total, f"Missing metrics: {', '.join(missing)}.")
    negative = [str(metric) for metric, weight in weights.items() if weight < 0]
    if negative:
        raise WeightTableError(total, f"Negative weights: {', '.join(negative)}.")
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise WeightTableError(total)
    return weights


@dataclass(frozen=True)
class ScoreRecord:
    """Seven sub-scores plus the weighted total, all rounded to two decimals."""

    rank_score: float
    rooms_score: float
    diversity_score: float
    badges_score: float
    streak_score: float
    events_score: float
    activity_score: float
    total_score: float

    def for_metric(self, metric: Metric) -> float:
        """Return the stored sub-score for ``metric``."""
        return {
            Metric.RANK: self.rank_score,
            Metric.ROOMS: self.rooms_score,
            Metric.DIVERSITY: self.diversity_score,
            Metric.BADGES: self.badges_score,
            Metric.STREAK: self.streak_score,
            Metric.EVENTS: self.events_score,
            Metric.ACTIVITY: self.activity_score,
        }[metric]


def _sub_score_map(sub_scores: SubScores) -> dict[Metric, float]:
    return {
        Metric.RANK: sub_scores.rank,
        Metric.ROOMS: sub_scores.rooms,
        Metric.DIVERSITY: sub_scores.diversity,
        Metric.BADGES: sub_scores.badges,
        Metric.STREAK: sub_scores.streak,
        Metric.EVENTS: sub_scores.events,
        Metric.ACTIVITY: sub_scores.activity,
    }


def weighted_total(
    sub_scores: SubScores,
    weights: Mapping[Metric, float] = DEFAULT_SCORING_WEIGHTS,
) -> float:
    """Sum of sub-score x weight over all seven metrics (unrounded)."""
    validate_weights(weights)
    values = _sub_score_map(sub_scores)
    return math.fsum(values[metric] * weights[metric] for metric in METRIC_ORDER)


def build_score_record(
    sub_scores: SubScores,
    weights: Mapping[Metric, float] = DEFAULT_SCORING_WEIGHTS,
) -> ScoreRecord:
    total = weighted_total(sub_scores, weights)
    return ScoreRecord(
        rank_score=round_half_up(sub_scores.rank, 2),
        rooms_score=round_half_up(sub_scores.rooms, 2),
        diversity_score=round_half_up(sub_scores.diversity, 2),
        badges_score=round_half_up(sub_scores.badges, 2),
        streak_score=round_half_up(sub_scores.streak, 2),
        events_score=round_half_up(sub_scores.events, 2),
        activity_score=round_half_up(sub_scores.activity, 2),
        total_score=round_half_up(total, 2),
    )


def compute_scores(
    profile: Profile,
    today: date | None = None,
    weights: Mapping[Metric, float] = DEFAULT_SCORING_WEIGHTS,
) -> ScoreRecord:
    """Validate the profile, normalise it and aggregate into a ScoreRecord."""
    validate_profile(profile)
    return build_score_record(normalize_profile(profile, today), weights)
