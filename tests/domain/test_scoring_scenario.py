"""End-to-end scoring of two contrasting profiles through the pure core."""

from skillmetter.application.compare import run_comparison
from skillmetter.domain.comparison import Winner
from skillmetter.domain.profiles import DOMAIN_ORDER, CyberDomain
from skillmetter.domain.titles import TitleKey
from tests.support.profiles import TODAY, make_profile


def test_elite_red_teamer_beats_even_generalist() -> None:
    red_teamer = make_profile(
        username="alice",
        global_rank=500,
        current_streak=150,
        domain_scores={CyberDomain.RED_TEAM: 160, CyberDomain.BLUE_TEAM: 40},
    )
    generalist = make_profile(
        username="bob",
        global_rank=50_000,
        current_streak=5,
        domain_scores=dict.fromkeys(DOMAIN_ORDER[:12], 5),
    )

    result = run_comparison(red_teamer, generalist, today=TODAY, share_id="abcdefghij")

    assert red_teamer.rooms_completed == 200
    assert generalist.rooms_completed == 60
    assert result.verdict.user1_title.key is TitleKey.ELITE_HACKER
    assert result.verdict.winner is Winner.USER1
    assert result.verdict.winner_username == "alice"
    assert "Higher Rank" in result.verdict.user1_strengths
    assert "More Rooms Completed" in result.verdict.user1_strengths
    assert len(result.user1_insights) <= 5
    assert len(result.user2_insights) <= 5
    assert result.share_id == "abcdefghij"
