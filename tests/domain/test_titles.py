"""Tests for the title rule table.

Each rule gets a profile built so that every earlier rule stays silent.
"""

from datetime import date

from skillmetter.domain.aggregation import compute_scores
from skillmetter.domain.profiles import CyberDomain, Profile
from skillmetter.domain.titles import (
    CYBER_TITLES,
    TITLE_RULES,
    TitleKey,
    assign_cyber_title,
    build_title_context,
    matching_title_rule,
    months_between,
)
from tests.support.profiles import TODAY, even_distribution, make_profile


def _title_key(profile: Profile) -> TitleKey:
    return assign_cyber_title(profile, compute_scores(profile, TODAY), today=TODAY).key


def _rule_name(profile: Profile) -> str:
    ctx = build_title_context(profile, compute_scores(profile, TODAY), TODAY)
    return matching_title_rule(ctx).name


def test_catalogue_has_seventeen_titles() -> None:
    assert len(CYBER_TITLES) == 17
    assert set(CYBER_TITLES) == set(TitleKey)


def test_rule_table_ends_with_catch_all() -> None:
    assert TITLE_RULES[-1].name == "fallback"


def test_months_are_whole_thirty_day_blocks() -> None:
    assert months_between(date(2024, 1, 1), date(2024, 1, 30)) == 0
    assert months_between(date(2024, 1, 1), date(2024, 1, 31)) == 1


def test_elite_rank_beats_every_other_rule() -> None:
    profile = make_profile(global_rank=500, current_streak=150)

    assert _rule_name(profile) == "elite_rank"
    assert _title_key(profile) is TitleKey.ELITE_HACKER


def test_consistency_from_current_streak() -> None:
    assert _title_key(make_profile(current_streak=120)) is TitleKey.CONSISTENCY_KING


def test_consistency_from_best_streak() -> None:
    profile = make_profile(current_streak=0, best_streak=250)

    assert _title_key(profile) is TitleKey.CONSISTENCY_KING


def test_all_round_warrior_needs_diversity_and_volume() -> None:
    profile = make_profile(domain_scores=even_distribution(8))

    assert _rule_name(profile) == "all_round"
    assert _title_key(profile) is TitleKey.ALL_ROUND_WARRIOR


def test_rising_hacker_for_recent_busy_accounts() -> None:
    profile = make_profile(
        join_date=date(2024, 10, 1),
        domain_scores={CyberDomain.WEB_SECURITY: 20, CyberDomain.LINUX: 10},
    )

    assert _rule_name(profile) == "rising"
    assert _title_key(profile) is TitleKey.RISING_HACKER


def test_rising_hacker_requires_recent_activity() -> None:
    profile = make_profile(
        join_date=date(2024, 10, 1),
        domain_scores={CyberDomain.WEB_SECURITY: 20, CyberDomain.LINUX: 10},
        last_active=date(2024, 12, 1),
    )

    assert _rule_name(profile) != "rising"


def test_specialist_gets_domain_title() -> None:
    distribution = even_distribution(1)
    distribution[CyberDomain.WEB_SECURITY] = 20
    profile = make_profile(domain_scores=distribution)

    assert _rule_name(profile) == "specialist"
    assert _title_key(profile) is TitleKey.WEB_EXPLOIT_MASTER


def test_specialist_in_untitled_domain_falls_through() -> None:
    profile = make_profile(domain_scores={CyberDomain.PRIVILEGE_ESCALATION: 60})

    assert _rule_name(profile) == "veteran"
    assert _title_key(profile) is TitleKey.VETERAN_OPERATOR


def test_veteran_operator_for_long_standing_members() -> None:
    profile = make_profile(domain_scores=even_distribution(4))

    assert _rule_name(profile) == "veteran"
    assert _title_key(profile) is TitleKey.VETERAN_OPERATOR


def test_fallback_uses_top_domain_title() -> None:
    profile = make_profile(
        join_date=date(2024, 1, 1),
        domain_scores={CyberDomain.OSINT: 5},
    )

    assert _rule_name(profile) == "fallback"
    assert _title_key(profile) is TitleKey.OSINT_SPECIALIST


def test_fallback_without_domain_title_is_all_round_warrior() -> None:
    profile = make_profile(
        join_date=date(2024, 1, 1),
        domain_scores={CyberDomain.PRIVILEGE_ESCALATION: 5},
    )

    assert _title_key(profile) is TitleKey.ALL_ROUND_WARRIOR
