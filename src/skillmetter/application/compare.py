"""Comparison orchestration.

``run_comparison`` runs the pure scoring core over two profiles. ``ComparisonService``
wraps it with the request-level steps: throttling, username checks and fetching both
profiles from a ProfileSource.

Usage example:
    from skillmetter.application.compare import ComparisonService
    from skillmetter.application.mock_profiles import MockProfileSource
    from skillmetter.infrastructure import FixedWindowRequestGate

    service = ComparisonService(
        profile_source=MockProfileSource(),
        request_gate=FixedWindowRequestGate(limit=10, window_seconds=60),
    )
    result = service.compare("alice", "bob", client_key="127.0.0.1")
    print(result.verdict.winner_username)
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import UTC, date, datetime

from ..domain.aggregation import ScoreRecord, compute_scores
from ..domain.comparison import MetricComparison, Winner, generate_metric_comparisons
from ..domain.insights import Insight, generate_user_insights
from ..domain.profiles import Profile
from ..domain.titles import CyberTitle, assign_cyber_title
from ..domain.verdict import Verdict, generate_verdict
from ..exceptions import (
    MissingUsernameError,
    ProfileNotFoundError,
    SameUserComparisonError,
    UsernameValidationError,
)
from ..observability import get_logger
from ..protocols import ProfileSource, RequestGate
from .identifiers import generate_share_id
from .usernames import sanitize_input, validate_username

logger = get_logger("application.compare")

LOCAL_CLIENT_KEY = "local"


@dataclass(frozen=True)
class ComparisonResult:
    """Everything produced by one comparison."""

    user1: Profile
    user2: Profile
    user1_scores: ScoreRecord
    user2_scores: ScoreRecord
    metric_comparisons: tuple[MetricComparison, ...]
    user1_insights: tuple[Insight, ...]
    user2_insights: tuple[Insight, ...]
    verdict: Verdict
    compared_at: datetime
    share_id: str


@dataclass(frozen=True)
class ScoreReport:
    """A single profile's scores and title, without an opponent."""

    profile: Profile
    scores: ScoreRecord
    title: CyberTitle


def run_comparison(
    profile1: Profile,
    profile2: Profile,
    *,
    today: date | None = None,
    compared_at: datetime | None = None,
    share_id: str | None = None,
) -> ComparisonResult:
    """Score both profiles and synthesize the full result bundle.

    ``today`` anchors activity freshness and account age; it defaults to the date of
    ``compared_at``, which itself defaults to now (UTC).
    """
    timestamp = compared_at or datetime.now(UTC)
    reference = today or timestamp.date()

    scores1 = compute_scores(profile1, today=reference)
    scores2 = compute_scores(profile2, today=reference)
    comparisons = generate_metric_comparisons(profile1, scores1, profile2, scores2)
    title1 = assign_cyber_title(profile1, scores1, today=reference)
    title2 = assign_cyber_title(profile2, scores2, today=reference)
    verdict = generate_verdict(profile1, scores1, title1, profile2, scores2, title2)
    insights1 = generate_user_insights(profile1, scores1, verdict.winner is Winner.USER1, profile2)
    insights2 = generate_user_insights(profile2, scores2, verdict.winner is Winner.USER2, profile1)

    return ComparisonResult(
        user1=profile1,
        user2=profile2,
        user1_scores=scores1,
        user2_scores=scores2,
        metric_comparisons=tuple(comparisons),
        user1_insights=tuple(insights1),
        user2_insights=tuple(insights2),
        verdict=verdict,
        compared_at=timestamp,
        share_id=share_id or generate_share_id(),
    )


def score_profile(profile: Profile, *, today: date | None = None) -> ScoreReport:
    scores = compute_scores(profile, today=today)
    return ScoreReport(
        profile=profile, scores=scores, title=assign_cyber_title(profile, scores, today=today)
    )


def check_username(raw: str, side: str) -> str:
    """Sanitise one username and raise UsernameValidationError if it is unusable."""
    username = sanitize_input(raw)
    reason = validate_username(username)
    if reason is not None:
        raise UsernameValidationError(side, reason)
    return username


class ComparisonService:
    """Request-level entry point used by the CLI and the batch runner."""

    def __init__(
        self,
        *,
        profile_source: ProfileSource,
        request_gate: RequestGate | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.profile_source = profile_source
        self.request_gate = request_gate
        self._clock = clock or (lambda: datetime.now(UTC))

    def _fetch(self, username: str) -> Profile:
        profile = self.profile_source.fetch_profile(username)
        if profile is None:
            raise ProfileNotFoundError(username)
        return profile

    def compare(
        self, user1: str, user2: str, *, client_key: str = LOCAL_CLIENT_KEY
    ) -> ComparisonResult:
        """Compare two usernames end to end.

        Raises:
            RateLimitExceededError: If ``client_key`` has used up its request budget.
            MissingUsernameError: If either name is empty.
            SameUserComparisonError: If both names match, ignoring case.
            UsernameValidationError: If a name is malformed or reserved.
            ProfileNotFoundError: If the source has no profile for a name.
            UpstreamRequestError: If a live profile fetch fails upstream.
        """
        if self.request_gate is not None:
            self.request_gate.check(client_key)

        if not user1 or not user2:
            raise MissingUsernameError()
        name1 = sanitize_input(user1)
        name2 = sanitize_input(user2)
        if not name1 or not name2:
            raise MissingUsernameError()
        if name1.lower() == name2.lower():
            raise SameUserComparisonError()
        name1 = check_username(name1, "User 1")
        name2 = check_username(name2, "User 2")

        logger.info("Comparing %s vs %s", name1, name2)
        with ThreadPoolExecutor(max_workers=2) as pool:
            future1 = pool.submit(self._fetch, name1)
            future2 = pool.submit(self._fetch, name2)
            profile1 = future1.result()
            profile2 = future2.result()
        for profile in (profile1, profile2):
            logger.info(
                "Found %s: rank #%s, score %s",
                profile.username,
                profile.global_rank,
                profile.total_score,
            )

        compared_at = self._clock()
        result = run_comparison(
            profile1, profile2, today=compared_at.date(), compared_at=compared_at
        )
        logger.info(
            "Verdict %s: winner %s (%s vs %s), share id %s",
            result.verdict.winner,
            result.verdict.winner_username,
            result.user1_scores.total_score,
            result.user2_scores.total_score,
            result.share_id,
        )
        return result

    def score(self, username: str) -> ScoreReport:
        """Score one username on its own."""
        if not username:
            raise MissingUsernameError()
        name = check_username(username, "User")
        profile = self._fetch(name)
        return score_profile(profile, today=self._clock().date())
