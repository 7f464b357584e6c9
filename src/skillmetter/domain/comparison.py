"""Head-to-head metric comparison between two scored profiles."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from .aggregation import DEFAULT_SCORING_WEIGHTS, METRIC_ORDER, Metric, ScoreRecord
from .profiles import Profile


class Winner(StrEnum):
    """Which side of a comparison came out ahead."""

    USER1 = "user1"
    USER2 = "user2"
    TIE = "tie"

    def swapped(self) -> Winner:
        if self is Winner.USER1:
            return Winner.USER2
        if self is Winner.USER2:
            return Winner.USER1
        return self


METRIC_LABELS: Mapping[Metric, str] = MappingProxyType(
    {
        Metric.RANK: "Global Rank",
        Metric.ROOMS: "Rooms Completed",
        Metric.DIVERSITY: "Domain Diversity",
        Metric.BADGES: "Badges & Certs",
        Metric.STREAK: "Streak & Consistency",
        Metric.EVENTS: "Paths & Events",
        Metric.ACTIVITY: "Activity Freshness",
    }
)


@dataclass(frozen=True)
class MetricComparison:
    """One metric's raw values, percentages and winner for both users."""

    metric: Metric
    label: str
    user1_value: float
    user2_value: float
    user1_percentage: float
    user2_percentage: float
    winner: Winner
    weight: float


def determine_winner(value1: float, value2: float, higher_is_better: bool = True) -> Winner:
    """Exact equality is a tie; otherwise the better value wins. No tie band."""
    if value1 == value2:
        return Winner.TIE
    if higher_is_better:
        return Winner.USER1 if value1 > value2 else Winner.USER2
    return Winner.USER1 if value1 < value2 else Winner.USER2


def raw_metric_value(metric: Metric, profile: Profile, scores: ScoreRecord) -> float:
    """The value shown next to a metric's percentage.

    Diversity and activity have no natural raw count, so they echo their score.
    """
    match metric:
        case Metric.RANK:
            return profile.global_rank
        case Metric.ROOMS:
            return profile.rooms_completed
        case Metric.DIVERSITY:
            return scores.diversity_score
        case Metric.BADGES:
            return len(profile.badges) + len(profile.certifications)
        case Metric.STREAK:
            return profile.current_streak
        case Metric.EVENTS:
            return profile.paths_completed + profile.events_participated
        case Metric.ACTIVITY:
            return scores.activity_score


def generate_metric_comparisons(
    user1: Profile,
    scores1: ScoreRecord,
    user2: Profile,
    scores2: ScoreRecord,
    weights: Mapping[Metric, float] = DEFAULT_SCORING_WEIGHTS,
) -> list[MetricComparison]:
    """Compare the two users on every metric, winners decided on normalised percentages."""
    comparisons: list[MetricComparison] = []
    for metric in METRIC_ORDER:
        pct1 = scores1.for_metric(metric)
        pct2 = scores2.for_metric(metric)
        comparisons.append(
            MetricComparison(
                metric=metric,
                label=METRIC_LABELS[metric],
                user1_value=raw_metric_value(metric, user1, scores1),
                user2_value=raw_metric_value(metric, user2, scores2),
                user1_percentage=pct1,
                user2_percentage=pct2,
                winner=determine_winner(pct1, pct2),
                weight=weights[metric],
            )
        )
    return comparisons
