"""Convert comparison results into camelCase JSON payloads.

The key names follow the shape the comparison endpoint has always returned
(``user1Scores``, ``metricComparisons``, ``shareId`` and so on), so existing consumers
can read the CLI's ``--json`` output unchanged.
"""

from __future__ import annotations

from ..domain.aggregation import ScoreRecord
from ..domain.comparison import MetricComparison
from ..domain.insights import Insight
from ..domain.profiles import DOMAIN_ORDER, ActivityEntry, Badge, Certification, Profile
from ..domain.titles import CyberTitle
from ..domain.verdict import Verdict
from .compare import ComparisonResult, ScoreReport


def _badge(badge: Badge) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": badge.id,
        "name": badge.name,
        "description": badge.description,
        "tier": badge.tier,
        "earnedAt": badge.earned_at,
    }
    if badge.image_url:
        payload["imageUrl"] = badge.image_url
    return payload


def _certification(certification: Certification) -> dict[str, object]:
    return {
        "id": certification.id,
        "name": certification.name,
        "earnedAt": certification.earned_at,
        "verified": certification.verified,
    }


def _activity(entry: ActivityEntry) -> dict[str, object]:
    return {
        "date": entry.day.isoformat(),
        "roomsCompleted": entry.rooms_completed,
        "pointsEarned": entry.points_earned,
    }


def profile_to_payload(profile: Profile) -> dict[str, object]:
    payload: dict[str, object] = {
        "username": profile.username,
        "avatar": profile.avatar,
        "joinDate": profile.join_date.isoformat(),
        "globalRank": profile.global_rank,
        "totalScore": profile.total_score,
        "level": profile.level,
        "roomsCompleted": profile.rooms_completed,
        "pathsCompleted": profile.paths_completed,
        "badges": [_badge(badge) for badge in profile.badges],
        "certifications": [_certification(cert) for cert in profile.certifications],
        "currentStreak": profile.current_streak,
        "bestStreak": profile.best_streak,
        "eventsParticipated": profile.events_participated,
        "domainScores": {domain.value: profile.domain_scores[domain] for domain in DOMAIN_ORDER},
        "activityTimeline": [_activity(entry) for entry in profile.activity_timeline],
        "lastActive": profile.last_active.isoformat(),
        "isActive": profile.is_active,
        "dominantDomain": profile.dominant_domain.value,
        "secondaryDomain": profile.secondary_domain.value,
    }
    optional: dict[str, object | None] = {
        "country": profile.country,
        "topPercentage": profile.top_percentage,
        "isInTopTenPercent": profile.is_in_top_ten_percent,
        "isSubscribed": profile.is_subscribed,
        "userRole": profile.user_role,
        "badgeImageURL": profile.badge_image_url,
    }
    payload.update({key: value for key, value in optional.items() if value is not None})
    return payload


def scores_to_payload(scores: ScoreRecord) -> dict[str, object]:
    return {
        "rankScore": scores.rank_score,
        "roomsScore": scores.rooms_score,
        "diversityScore": scores.diversity_score,
        "badgesScore": scores.badges_score,
        "streakScore": scores.streak_score,
        "eventsScore": scores.events_score,
        "activityScore": scores.activity_score,
        "totalScore": scores.total_score,
    }


def title_to_payload(title: CyberTitle) -> dict[str, object]:
    return {
        "key": title.key.value,
        "title": title.title,
        "description": title.description,
        "icon": title.icon,
        "color": title.color,
    }


def comparison_to_metric_payload(comparison: MetricComparison) -> dict[str, object]:
    return {
        "metric": comparison.metric.value,
        "label": comparison.label,
        "user1Value": comparison.user1_value,
        "user2Value": comparison.user2_value,
        "user1Percentage": comparison.user1_percentage,
        "user2Percentage": comparison.user2_percentage,
        "winner": comparison.winner.value,
        "weight": comparison.weight,
    }


def insight_to_payload(insight: Insight) -> dict[str, object]:
    return {"type": insight.kind.value, "message": insight.message, "icon": insight.icon}


def verdict_to_payload(verdict: Verdict) -> dict[str, object]:
    return {
        "winner": verdict.winner.value,
        "winnerUsername": verdict.winner_username,
        "margin": verdict.margin,
        "user1Title": title_to_payload(verdict.user1_title),
        "user2Title": title_to_payload(verdict.user2_title),
        "user1Strengths": list(verdict.user1_strengths),
        "user2Strengths": list(verdict.user2_strengths),
        "summary": verdict.summary,
    }


def comparison_to_payload(result: ComparisonResult) -> dict[str, object]:
    """Serialise a full comparison into a JSON-ready dict."""
    return {
        "user1": profile_to_payload(result.user1),
        "user2": profile_to_payload(result.user2),
        "user1Scores": scores_to_payload(result.user1_scores),
        "user2Scores": scores_to_payload(result.user2_scores),
        "metricComparisons": [
            comparison_to_metric_payload(comparison) for comparison in result.metric_comparisons
        ],
        "user1Insights": [insight_to_payload(insight) for insight in result.user1_insights],
        "user2Insights": [insight_to_payload(insight) for insight in result.user2_insights],
        "verdict": verdict_to_payload(result.verdict),
        "comparedAt": result.compared_at.isoformat().replace("+00:00", "Z"),
        "shareId": result.share_id,
    }


def score_report_to_payload(report: ScoreReport) -> dict[str, object]:
    return {
        "profile": profile_to_payload(report.profile),
        "scores": scores_to_payload(report.scores),
        "title": title_to_payload(report.title),
    }
