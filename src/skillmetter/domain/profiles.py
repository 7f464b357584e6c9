"""Profile model for compared users.

The domain distribution is a closed mapping over ``CyberDomain``: every key is present
and the counts sum to ``rooms_completed``. Profile sources are responsible for that
invariant; ``validate_profile`` enforces it before anything is scored.

Usage example:
    from datetime import date

    from skillmetter.domain.profiles import CyberDomain, build_profile

    profile = build_profile(
        username="alice",
        join_date=date(2022, 1, 1),
        global_rank=1200,
        rooms_completed=3,
        domain_scores={CyberDomain.LINUX: 3},
        last_active=date(2024, 5, 1),
    )
    assert profile.dominant_domain is CyberDomain.LINUX
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Literal

from ..exceptions import DomainDistributionError, IncompleteDomainDistributionError


class CyberDomain(StrEnum):
    """Skill areas used to bucket completed rooms. Member order is the tie-break order."""

    WEB_SECURITY = "webSecurity"
    NETWORK_SECURITY = "networkSecurity"
    LINUX = "linux"
    WINDOWS = "windows"
    PRIVILEGE_ESCALATION = "privilegeEscalation"
    BLUE_TEAM = "blueTeam"
    RED_TEAM = "redTeam"
    SOC = "soc"
    CLOUD_SECURITY = "cloudSecurity"
    FORENSICS = "forensics"
    MALWARE = "malware"
    OSINT = "osint"
    CRYPTOGRAPHY = "cryptography"


DOMAIN_ORDER: tuple[CyberDomain, ...] = tuple(CyberDomain)

DOMAIN_LABELS: Mapping[CyberDomain, str] = MappingProxyType(
    {
        CyberDomain.WEB_SECURITY: "Web Security",
        CyberDomain.NETWORK_SECURITY: "Network Security",
        CyberDomain.LINUX: "Linux",
        CyberDomain.WINDOWS: "Windows",
        CyberDomain.PRIVILEGE_ESCALATION: "Privilege Escalation",
        CyberDomain.BLUE_TEAM: "Blue Team",
        CyberDomain.RED_TEAM: "Red Team",
        CyberDomain.SOC: "SOC",
        CyberDomain.CLOUD_SECURITY: "Cloud Security",
        CyberDomain.FORENSICS: "Forensics",
        CyberDomain.MALWARE: "Malware Analysis",
        CyberDomain.OSINT: "OSINT",
        CyberDomain.CRYPTOGRAPHY: "Cryptography",
    }
)

DOMAIN_COLORS: Mapping[CyberDomain, str] = MappingProxyType(
    {
        CyberDomain.WEB_SECURITY: "#ff6b6b",
        CyberDomain.NETWORK_SECURITY: "#4ecdc4",
        CyberDomain.LINUX: "#ffd93d",
        CyberDomain.WINDOWS: "#00b4d8",
        CyberDomain.PRIVILEGE_ESCALATION: "#ff00ff",
        CyberDomain.BLUE_TEAM: "#00d4ff",
        CyberDomain.RED_TEAM: "#ff3366",
        CyberDomain.SOC: "#00ff88",
        CyberDomain.CLOUD_SECURITY: "#a855f7",
        CyberDomain.FORENSICS: "#f97316",
        CyberDomain.MALWARE: "#dc2626",
        CyberDomain.OSINT: "#22c55e",
        CyberDomain.CRYPTOGRAPHY: "#8b5cf6",
    }
)

# Keyword sets for categorising rooms by title/description (first match wins, in order)
DOMAIN_KEYWORDS: Mapping[CyberDomain, tuple[str, ...]] = MappingProxyType(
    {
        CyberDomain.WEB_SECURITY: (
            "web",
            "owasp",
            "sql",
            "xss",
            "injection",
            "burp",
            "http",
            "api",
            "jwt",
            "ssrf",
            "csrf",
            "offensive",
        ),
        CyberDomain.NETWORK_SECURITY: (
            "network",
            "nmap",
            "wireshark",
            "tcp",
            "udp",
            "firewall",
            "vpn",
            "dns",
            "dhcp",
            "arp",
        ),
        CyberDomain.LINUX: (
            "linux",
            "bash",
            "shell",
            "ubuntu",
            "kali",
            "debian",
            "terminal",
            "chmod",
            "grep",
        ),
        CyberDomain.WINDOWS: (
            "windows",
            "powershell",
            "active directory",
            "ad ",
            "ntlm",
            "kerberos",
            "registry",
            "mimikatz",
        ),
        CyberDomain.PRIVILEGE_ESCALATION: (
            "privilege",
            "privesc",
            "escalation",
            "sudo",
            "suid",
            "root",
            "admin",
        ),
        CyberDomain.BLUE_TEAM: (
            "blue",
            "defense",
            "detection",
            "siem",
            "splunk",
            "elk",
            "monitoring",
            "incident",
            "defensive",
        ),
        CyberDomain.RED_TEAM: (
            "red",
            "offensive",
            "attack",
            "exploit",
            "payload",
            "metasploit",
            "cobalt",
            "pentest",
        ),
        CyberDomain.SOC: ("soc", "analyst", "alert", "triage", "investigation", "threat intel"),
        CyberDomain.CLOUD_SECURITY: (
            "cloud",
            "aws",
            "azure",
            "gcp",
            "s3",
            "iam",
            "kubernetes",
            "docker",
            "container",
        ),
        CyberDomain.FORENSICS: (
            "forensic",
            "autopsy",
            "memory",
            "disk",
            "artifact",
            "evidence",
            "volatility",
        ),
        CyberDomain.MALWARE: (
            "malware",
            "reverse",
            "assembly",
            "binary",
            "virus",
            "trojan",
            "ransomware",
            "rat",
        ),
        CyberDomain.OSINT: ("osint", "recon", "reconnaissance", "google", "social", "dork", "shodan"),
        CyberDomain.CRYPTOGRAPHY: (
            "crypto",
            "cipher",
            "encrypt",
            "hash",
            "rsa",
            "aes",
            "base64",
            "decode",
        ),
    }
)

BadgeTier = Literal["bronze", "silver", "gold", "platinum"]


@dataclass(frozen=True)
class Badge:
    """An earned badge."""

    id: str
    name: str
    description: str
    tier: BadgeTier
    earned_at: str
    image_url: str | None = None


@dataclass(frozen=True)
class Certification:
    """An earned (or estimated) certification."""

    id: str
    name: str
    earned_at: str
    verified: bool


@dataclass(frozen=True)
class ActivityEntry:
    """One day of recorded activity."""

    day: date
    rooms_completed: int
    points_earned: int


@dataclass(frozen=True)
class Profile:
    """One user's achievements across the fixed domain set."""

    username: str
    avatar: str
    join_date: date
    global_rank: int
    total_score: int
    level: int
    rooms_completed: int
    paths_completed: int
    badges: tuple[Badge, ...]
    certifications: tuple[Certification, ...]
    current_streak: int
    best_streak: int
    events_participated: int
    domain_scores: MappingProxyType[CyberDomain, int]
    activity_timeline: tuple[ActivityEntry, ...]
    last_active: date
    is_active: bool
    dominant_domain: CyberDomain
    secondary_domain: CyberDomain
    country: str | None = None
    top_percentage: float | None = None
    is_in_top_ten_percent: bool | None = None
    is_subscribed: bool | None = None
    user_role: str | None = None
    badge_image_url: str | None = None

    @property
    def total_domain_rooms(self) -> int:
        return sum(self.domain_scores.values())


def ranked_domains(domain_scores: Mapping[CyberDomain, int]) -> list[tuple[CyberDomain, int]]:
    """Return domains sorted by count descending, ties kept in enumeration order."""
    return sorted(
        ((domain, domain_scores.get(domain, 0)) for domain in DOMAIN_ORDER),
        key=lambda item: -item[1],
    )


def find_dominant_domains(
    domain_scores: Mapping[CyberDomain, int],
) -> tuple[CyberDomain, CyberDomain]:
    """Return the two highest-count domains."""
    ranked = ranked_domains(domain_scores)
    return ranked[0][0], ranked[1][0]


def empty_distribution() -> dict[CyberDomain, int]:
    return dict.fromkeys(DOMAIN_ORDER, 0)


def check_domain_distribution(
    username: str,
    domain_scores: Mapping[CyberDomain, int],
    rooms_completed: int,
) -> None:
    """Raise if the distribution is incomplete, negative, or off by any room."""
    missing = [domain.value for domain in DOMAIN_ORDER if domain not in domain_scores]
    if missing:
        raise IncompleteDomainDistributionError(username, f"missing keys {', '.join(missing)}")
    extra = [str(key) for key in domain_scores if key not in DOMAIN_LABELS]
    if extra:
        raise IncompleteDomainDistributionError(username, f"unknown keys {', '.join(extra)}")
    negative = [domain.value for domain, count in domain_scores.items() if count < 0]
    if negative:
        raise IncompleteDomainDistributionError(
            username, f"negative counts for {', '.join(negative)}"
        )
    total = sum(domain_scores.values())
    if total != rooms_completed:
        raise DomainDistributionError(username, total, rooms_completed)


def validate_profile(profile: Profile) -> Profile:
    """Check the profile invariants and return the profile unchanged."""
    check_domain_distribution(profile.username, profile.domain_scores, profile.rooms_completed)
    return profile


def build_profile(
    *,
    username: str,
    join_date: date,
    global_rank: int,
    rooms_completed: int,
    domain_scores: Mapping[CyberDomain, int],
    last_active: date,
    avatar: str = "",
    total_score: int = 0,
    level: int = 1,
    paths_completed: int = 0,
    badges: tuple[Badge, ...] = (),
    certifications: tuple[Certification, ...] = (),
    current_streak: int = 0,
    best_streak: int | None = None,
    events_participated: int = 0,
    activity_timeline: tuple[ActivityEntry, ...] = (),
    is_active: bool | None = None,
    today: date | None = None,
    country: str | None = None,
    top_percentage: float | None = None,
    is_in_top_ten_percent: bool | None = None,
    is_subscribed: bool | None = None,
    user_role: str | None = None,
    badge_image_url: str | None = None,
) -> Profile:
    """Assemble a validated profile, deriving dominant/secondary domains.

    Domains absent from ``domain_scores`` count as zero. ``best_streak`` defaults to the
    current streak and is never allowed below it. ``is_active`` defaults to "seen in the
    last 30 days" relative to ``today``.
    """
    distribution = empty_distribution()
    distribution.update(domain_scores)
    check_domain_distribution(username, distribution, rooms_completed)
    dominant, secondary = find_dominant_domains(distribution)
    best = current_streak if best_streak is None else max(best_streak, current_streak)
    if is_active is None:
        reference = today or datetime.now(UTC).date()
        is_active = (reference - last_active).days < 30
    return Profile(
        username=username,
        avatar=avatar,
        join_date=join_date,
        global_rank=global_rank,
        total_score=total_score,
        level=level,
        rooms_completed=rooms_completed,
        paths_completed=paths_completed,
        badges=tuple(badges),
        certifications=tuple(certifications),
        current_streak=current_streak,
        best_streak=best,
        events_participated=events_participated,
        domain_scores=MappingProxyType(distribution),
        activity_timeline=tuple(activity_timeline),
        last_active=last_active,
        is_active=is_active,
        dominant_domain=dominant,
        secondary_domain=secondary,
        country=country,
        top_percentage=top_percentage,
        is_in_top_ten_percent=is_in_top_ten_percent,
        is_subscribed=is_subscribed,
        user_role=user_role,
        badge_image_url=badge_image_url,
    )
