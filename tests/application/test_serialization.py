"""Tests for camelCase JSON payloads."""

import json
from datetime import UTC, datetime

from skillmetter.application.compare import run_comparison, score_profile
from skillmetter.application.serialization import (
    comparison_to_payload,
    profile_to_payload,
    score_report_to_payload,
)
from tests.support.profiles import TODAY, make_profile

NOW = datetime(2025, 1, 15, 12, 30, tzinfo=UTC)


def test_comparison_payload_shape() -> None:
    result = run_comparison(
        make_profile(username="alice", global_rank=1_000),
        make_profile(username="bob"),
        today=TODAY,
        compared_at=NOW,
        share_id="abcdefghij",
    )

    payload = comparison_to_payload(result)

    assert set(payload) == {
        "user1",
        "user2",
        "user1Scores",
        "user2Scores",
        "metricComparisons",
        "user1Insights",
        "user2Insights",
        "verdict",
        "comparedAt",
        "shareId",
    }
    assert payload["comparedAt"] == "2025-01-15T12:30:00Z"
    assert payload["shareId"] == "abcdefghij"
    verdict = payload["verdict"]
    assert isinstance(verdict, dict)
    assert verdict["winner"] == "user1"
    assert verdict["user1Title"]["title"] == "Elite Hacker"
    json.dumps(payload)


def test_profile_payload_omits_unknown_optional_fields() -> None:
    payload = profile_to_payload(make_profile())

    assert payload["joinDate"] == "2022-01-01"
    assert payload["domainScores"]["webSecurity"] == 2
    assert payload["dominantDomain"] == "webSecurity"
    assert "country" not in payload
    assert "topPercentage" not in payload


def test_score_report_payload() -> None:
    payload = score_report_to_payload(score_profile(make_profile(), today=TODAY))

    assert set(payload) == {"profile", "scores", "title"}
    assert payload["scores"]["diversityScore"] == 100.0
