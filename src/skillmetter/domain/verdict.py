"""Final verdict: winner, closeness, strengths and narrative summary.

``margin`` on the verdict is a closeness value: 100 means a dead heat, 0 a total
blowout. Totals within ``TIE_BAND_PERCENT`` of each other are a tie regardless of which
is nominally higher.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .aggregation import METRIC_ORDER, Metric, ScoreRecord, round_half_up
from .comparison import Winner
from .profiles import Profile
from .titles import CyberTitle

TIE_BAND_PERCENT = 2.0
DECISIVE_MARGIN_PERCENT = 20.0
SOLID_MARGIN_PERCENT = 10.0
TIE_WINNER_NAME = "TIE"

STRENGTH_LABELS: Mapping[Metric, str] = MappingProxyType(
    {
        Metric.RANK: "Higher Rank",
        Metric.ROOMS: "More Rooms Completed",
        Metric.DIVERSITY: "Better Domain Coverage",
        Metric.BADGES: "More Badges & Certs",
        Metric.STREAK: "Better Consistency",
        Metric.EVENTS: "More Paths & Events",
        Metric.ACTIVITY: "More Recently Active",
    }
)


@dataclass(frozen=True)
class Verdict:
    """The outcome of one comparison."""

    winner: Winner
    winner_username: str
    margin: int
    user1_title: CyberTitle
    user2_title: CyberTitle
    user1_strengths: tuple[str, ...]
    user2_strengths: tuple[str, ...]
    summary: str


def margin_percentage(total1: float, total2: float) -> float:
    """Gap between totals as a percentage of the larger one (0 when both are 0)."""
    max_score = max(total1, total2)
    if max_score <= 0:
        return 0.0
    return abs(total1 - total2) / max_score * 100


def decide_winner(total1: float, total2: float) -> Winner:
    if margin_percentage(total1, total2) < TIE_BAND_PERCENT:
        return Winner.TIE
    return Winner.USER1 if total1 > total2 else Winner.USER2


def split_strengths(
    scores1: ScoreRecord,
    scores2: ScoreRecord,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Label each sub-score with whichever side is strictly higher."""
    user1: list[str] = []
    user2: list[str] = []
    for metric in METRIC_ORDER:
        value1 = scores1.for_metric(metric)
        value2 = scores2.for_metric(metric)
        if value1 > value2:
            user1.append(STRENGTH_LABELS[metric])
        elif value2 > value1:
            user2.append(STRENGTH_LABELS[metric])
    return tuple(user1), tuple(user2)


def build_summary(
    winner: Winner,
    margin_pct: float,
    user1: str,
    user2: str,
    winner_title: CyberTitle | None,
) -> str:
    if winner is Winner.TIE or winner_title is None:
        return (
            f"This is an incredibly close battle! Both {user1} and {user2} are evenly "
            "matched cyber warriors with nearly identical scores."
        )
    winner_name, loser_name = (user1, user2) if winner is Winner.USER1 else (user2, user1)
    if margin_pct > DECISIVE_MARGIN_PERCENT:
        return (
            f"{winner_name} dominates this battle as a {winner_title.title}! With a "
            f"significant lead, they've proven their superior cyber skills against {loser_name}."
        )
    if margin_pct > SOLID_MARGIN_PERCENT:
        return (
            f"{winner_name} claims victory as the {winner_title.title}! A solid performance "
            f"that edges out {loser_name} in this cyber duel."
        )
    return (
        f"In a close battle, {winner_name} narrowly defeats {loser_name}! Both hackers "
        f"showed impressive skills, but {winner_name} takes the crown."
    )


def generate_verdict(
    user1: Profile,
    scores1: ScoreRecord,
    user1_title: CyberTitle,
    user2: Profile,
    scores2: ScoreRecord,
    user2_title: CyberTitle,
) -> Verdict:
    """Synthesize the verdict from both score records and both titles."""
    margin_pct = margin_percentage(scores1.total_score, scores2.total_score)
    winner = decide_winner(scores1.total_score, scores2.total_score)
    if winner is Winner.USER1:
        winner_username, winner_title = user1.username, user1_title
    elif winner is Winner.USER2:
        winner_username, winner_title = user2.username, user2_title
    else:
        winner_username, winner_title = TIE_WINNER_NAME, None

    user1_strengths, user2_strengths = split_strengths(scores1, scores2)
    return Verdict(
        winner=winner,
        winner_username=winner_username,
        margin=int(round_half_up(100 - margin_pct)),
        user1_title=user1_title,
        user2_title=user2_title,
        user1_strengths=user1_strengths,
        user2_strengths=user2_strengths,
        summary=build_summary(winner, margin_pct, user1.username, user2.username, winner_title),
    )
