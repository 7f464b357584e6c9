"""Title catalogue and the ordered title classification rules.

Classification is a rule table evaluated top to bottom; the first rule whose predicate
holds picks the title. The last rule always matches, so every profile gets exactly one
title. A profile's title never depends on its opponent.

Usage example:
    from skillmetter.domain.titles import assign_cyber_title

    title = assign_cyber_title(profile, scores, today=date(2025, 1, 1))
    print(title.title, title.icon)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from types import MappingProxyType

from .aggregation import ScoreRecord
from .profiles import CyberDomain, Profile, ranked_domains

ELITE_RANK_THRESHOLD = 1000
CONSISTENCY_CURRENT_STREAK = 100
CONSISTENCY_BEST_STREAK = 200
ALL_ROUND_DIVERSITY = 70
ALL_ROUND_MIN_ROOMS = 100
RISING_MAX_MONTHS = 6
RISING_MIN_ROOMS = 30
RISING_MIN_ACTIVITY = 80
SPECIALIST_SHARE = 0.30
SPECIALIST_MIN_ROOMS = 10
VETERAN_MIN_MONTHS = 24
VETERAN_MIN_ROOMS = 50
DAYS_PER_MONTH = 30


class TitleKey(StrEnum):
    """Identifiers for every title in the catalogue."""

    RED_TEAM_PREDATOR = "redTeamPredator"
    BLUE_TEAM_SENTINEL = "blueTeamSentinel"
    WEB_EXPLOIT_MASTER = "webExploitMaster"
    SOC_ANALYST_PRO = "socAnalystPro"
    ALL_ROUND_WARRIOR = "allRoundWarrior"
    CONSISTENCY_KING = "consistencyKing"
    RISING_HACKER = "risingHacker"
    FORENSIC_DETECTIVE = "forensicDetective"
    CLOUD_ARCHITECT = "cloudArchitect"
    CRYPTO_MASTER = "cryptoMaster"
    NETWORK_NINJA = "networkNinja"
    LINUX_LEGEND = "linuxLegend"
    WINDOWS_WARRIOR = "windowsWarrior"
    MALWARE_HUNTER = "malwareHunter"
    OSINT_SPECIALIST = "osintSpecialist"
    ELITE_HACKER = "eliteHacker"
    VETERAN_OPERATOR = "veteranOperator"


@dataclass(frozen=True)
class CyberTitle:
    """A display title with its description and styling."""

    key: TitleKey
    title: str
    description: str
    icon: str
    color: str


def _title(key: TitleKey, title: str, description: str, icon: str, color: str) -> CyberTitle:
    return CyberTitle(key=key, title=title, description=description, icon=icon, color=color)


CYBER_TITLES: Mapping[TitleKey, CyberTitle] = MappingProxyType(
    {
        title.key: title
        for title in (
            _title(
                TitleKey.RED_TEAM_PREDATOR,
                "Red Team Predator",
                "Dominates offensive security and penetration testing",
                "🎯",
                "#ff3366",
            ),
            _title(
                TitleKey.BLUE_TEAM_SENTINEL,
                "Blue Team Sentinel",
                "Master of defense and threat detection",
                "🛡️",
                "#00d4ff",
            ),
            _title(
                TitleKey.WEB_EXPLOIT_MASTER,
                "Web Exploitation Master",
                "Expert in web application security",
                "🕷️",
                "#ff6b6b",
            ),
            _title(
                TitleKey.SOC_ANALYST_PRO,
                "SOC Analyst Pro",
                "Security Operations Center specialist",
                "📊",
                "#00ff88",
            ),
            _title(
                TitleKey.ALL_ROUND_WARRIOR,
                "All-Round Cyber Warrior",
                "Versatile across all security domains",
                "⚔️",
                "#a855f7",
            ),
            _title(
                TitleKey.CONSISTENCY_KING,
                "Consistency King",
                "Unmatched dedication and daily practice",
                "👑",
                "#ffd93d",
            ),
            _title(
                TitleKey.RISING_HACKER,
                "Rising Hacker",
                "Rapidly climbing the ranks",
                "🚀",
                "#f97316",
            ),
            _title(
                TitleKey.FORENSIC_DETECTIVE,
                "Forensic Detective",
                "Expert in digital forensics and investigation",
                "🔍",
                "#f97316",
            ),
            _title(
                TitleKey.CLOUD_ARCHITECT,
                "Cloud Security Architect",
                "Master of cloud infrastructure security",
                "☁️",
                "#a855f7",
            ),
            _title(
                TitleKey.CRYPTO_MASTER,
                "Crypto Master",
                "Expert in cryptography and encryption",
                "🔐",
                "#8b5cf6",
            ),
            _title(
                TitleKey.NETWORK_NINJA,
                "Network Ninja",
                "Master of network protocols and security",
                "🌐",
                "#4ecdc4",
            ),
            _title(
                TitleKey.LINUX_LEGEND,
                "Linux Legend",
                "Expert in Linux systems and administration",
                "🐧",
                "#ffd93d",
            ),
            _title(
                TitleKey.WINDOWS_WARRIOR,
                "Windows Warrior",
                "Master of Windows security and Active Directory",
                "🪟",
                "#00b4d8",
            ),
            _title(
                TitleKey.MALWARE_HUNTER,
                "Malware Hunter",
                "Expert in malware analysis and reverse engineering",
                "🦠",
                "#dc2626",
            ),
            _title(
                TitleKey.OSINT_SPECIALIST,
                "OSINT Specialist",
                "Master of open-source intelligence gathering",
                "🔎",
                "#22c55e",
            ),
            _title(
                TitleKey.ELITE_HACKER,
                "Elite Hacker",
                "Top-tier rank with exceptional skills",
                "💀",
                "#ff00ff",
            ),
            _title(
                TitleKey.VETERAN_OPERATOR,
                "Veteran Operator",
                "Long-standing member with extensive experience",
                "🎖️",
                "#00ff88",
            ),
        )
    }
)

# Privilege escalation has no dedicated title.
DOMAIN_TITLES: Mapping[CyberDomain, TitleKey] = MappingProxyType(
    {
        CyberDomain.RED_TEAM: TitleKey.RED_TEAM_PREDATOR,
        CyberDomain.BLUE_TEAM: TitleKey.BLUE_TEAM_SENTINEL,
        CyberDomain.WEB_SECURITY: TitleKey.WEB_EXPLOIT_MASTER,
        CyberDomain.SOC: TitleKey.SOC_ANALYST_PRO,
        CyberDomain.FORENSICS: TitleKey.FORENSIC_DETECTIVE,
        CyberDomain.CLOUD_SECURITY: TitleKey.CLOUD_ARCHITECT,
        CyberDomain.CRYPTOGRAPHY: TitleKey.CRYPTO_MASTER,
        CyberDomain.NETWORK_SECURITY: TitleKey.NETWORK_NINJA,
        CyberDomain.LINUX: TitleKey.LINUX_LEGEND,
        CyberDomain.WINDOWS: TitleKey.WINDOWS_WARRIOR,
        CyberDomain.MALWARE: TitleKey.MALWARE_HUNTER,
        CyberDomain.OSINT: TitleKey.OSINT_SPECIALIST,
    }
)


@dataclass(frozen=True)
class TitleContext:
    """Facts about one profile that the title rules read."""

    profile: Profile
    scores: ScoreRecord
    top_domain: CyberDomain
    top_domain_rooms: int
    total_rooms: int
    months_since_join: int

    @property
    def top_domain_share(self) -> float:
        if self.total_rooms == 0:
            return 0.0
        return self.top_domain_rooms / self.total_rooms

    @property
    def domain_title(self) -> TitleKey | None:
        return DOMAIN_TITLES.get(self.top_domain)


@dataclass(frozen=True)
class TitleRule:
    """One rule of the cascade: a predicate and the title it selects."""

    name: str
    applies: Callable[[TitleContext], bool]
    select: Callable[[TitleContext], TitleKey]


def months_between(start: date, end: date) -> int:
    """Whole 30-day months from ``start`` to ``end``."""
    return (end - start).days // DAYS_PER_MONTH


def build_title_context(
    profile: Profile,
    scores: ScoreRecord,
    today: date | None = None,
) -> TitleContext:
    reference = today or datetime.now(UTC).date()
    top_domain, top_rooms = ranked_domains(profile.domain_scores)[0]
    return TitleContext(
        profile=profile,
        scores=scores,
        top_domain=top_domain,
        top_domain_rooms=top_rooms,
        total_rooms=profile.total_domain_rooms,
        months_since_join=months_between(profile.join_date, reference),
    )


def _is_elite(ctx: TitleContext) -> bool:
    return ctx.profile.global_rank <= ELITE_RANK_THRESHOLD


def _is_consistent(ctx: TitleContext) -> bool:
    return (
        ctx.profile.current_streak >= CONSISTENCY_CURRENT_STREAK
        or ctx.profile.best_streak >= CONSISTENCY_BEST_STREAK
    )


def _is_all_rounder(ctx: TitleContext) -> bool:
    return (
        ctx.scores.diversity_score >= ALL_ROUND_DIVERSITY and ctx.total_rooms >= ALL_ROUND_MIN_ROOMS
    )


def _is_rising(ctx: TitleContext) -> bool:
    return (
        ctx.months_since_join <= RISING_MAX_MONTHS
        and ctx.total_rooms >= RISING_MIN_ROOMS
        and ctx.scores.activity_score >= RISING_MIN_ACTIVITY
    )


def _is_specialist(ctx: TitleContext) -> bool:
    return (
        ctx.top_domain_share > SPECIALIST_SHARE
        and ctx.top_domain_rooms >= SPECIALIST_MIN_ROOMS
        and ctx.domain_title is not None
    )


def _is_veteran(ctx: TitleContext) -> bool:
    return ctx.months_since_join >= VETERAN_MIN_MONTHS and ctx.total_rooms >= VETERAN_MIN_ROOMS


def _domain_title_or_all_rounder(ctx: TitleContext) -> TitleKey:
    return ctx.domain_title or TitleKey.ALL_ROUND_WARRIOR


def _fixed(key: TitleKey) -> Callable[[TitleContext], TitleKey]:
    return lambda _ctx: key


TITLE_RULES: tuple[TitleRule, ...] = (
    TitleRule("elite_rank", _is_elite, _fixed(TitleKey.ELITE_HACKER)),
    TitleRule("consistency", _is_consistent, _fixed(TitleKey.CONSISTENCY_KING)),
    TitleRule("all_round", _is_all_rounder, _fixed(TitleKey.ALL_ROUND_WARRIOR)),
    TitleRule("rising", _is_rising, _fixed(TitleKey.RISING_HACKER)),
    TitleRule("specialist", _is_specialist, _domain_title_or_all_rounder),
    TitleRule("veteran", _is_veteran, _fixed(TitleKey.VETERAN_OPERATOR)),
    TitleRule("fallback", lambda _ctx: True, _domain_title_or_all_rounder),
)


def matching_title_rule(ctx: TitleContext) -> TitleRule:
    """Return the first rule whose predicate holds for ``ctx``."""
    for rule in TITLE_RULES:
        if rule.applies(ctx):
            return rule
    raise AssertionError("Title rules must end with a catch-all rule.")


def assign_cyber_title(
    profile: Profile,
    scores: ScoreRecord,
    today: date | None = None,
) -> CyberTitle:
    """Pick exactly one title for a profile from the catalogue."""
    ctx = build_title_context(profile, scores, today)
    rule = matching_title_rule(ctx)
    return CYBER_TITLES[rule.select(ctx)]
