"""Live profile acquisition from the TryHackMe v2 public API.

Three endpoints feed a profile:

1. ``public-profile`` supplies rank, level, streak and the room count.
2. ``users/badges`` supplies earned badges.
3. ``public-profile/completed-rooms`` is paginated and supplies the rooms that get
   bucketed into domains by keyword.

The API exposes no paths, events or certification history, so those are estimated from
the room count and level. When room or badge data is missing, seeded estimates fill the
gap so the same user always gets the same figures.

Usage example:
    from skillmetter.application.tryhackme_source import TryHackMeProfileSource

    source = TryHackMeProfileSource(
        http_client=client,
        api_base_url="https://tryhackme.com/api/v2",
        badges_cdn_url="https://tryhackme-badges.s3.amazonaws.com",
    )
    profile = source.fetch_profile("alice")
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, date, datetime, timedelta
from typing_extensions import override
from urllib.parse import urlencode

import requests

from ..domain.profiles import (
    DOMAIN_KEYWORDS,
    DOMAIN_ORDER,
    ActivityEntry,
    Badge,
    BadgeTier,
    Certification,
    CyberDomain,
    Profile,
    build_profile,
    empty_distribution,
)
from ..exceptions import (
    CircuitBreakerOpen,
    JsonObjectExpectedError,
    RateLimitError,
    UpstreamNotFoundError,
    UpstreamRequestError,
)
from ..infrastructure.io.validation import (
    IncomingDataError,
    parse_badges,
    parse_public_profile,
    parse_rooms_page,
)
from ..io_contracts import ThmBadgeIO, ThmPublicProfileIO, ThmRoomIO
from ..observability import get_logger
from ..protocols import HttpClient, ProfileSource
from .identifiers import generate_id
from .mock_profiles import estimate_domain_distribution, seeded_rng

logger = get_logger("application.tryhackme")

AVATAR_FALLBACK_URL = "https://tryhackme-images.s3.amazonaws.com/user-avatars/{username}.png"

DIFFICULTY_POINTS: Mapping[str, int] = {
    "info": 50,
    "easy": 100,
    "medium": 250,
    "hard": 500,
    "insane": 1000,
}
FALLBACK_POINTS_PER_ROOM = 150
ROOMS_PER_PATH = 12
ROOMS_PER_EVENT = 25
TIMELINE_DAYS = 30
NEW_ACCOUNT_DAYS = 30

# (minimum rooms, minimum level, name) for certificates inferred from progress.
ESTIMATED_CERTIFICATIONS: tuple[tuple[int, int, str], ...] = (
    (10, 0, "Pre Security"),
    (30, 3, "Introduction to Cyber Security"),
    (50, 5, "Jr Penetration Tester"),
)

ESTIMATED_BADGE_TEMPLATES: tuple[tuple[str, BadgeTier], ...] = (
    ("First 4 Rooms", "bronze"),
    ("7 Day Streak", "bronze"),
    ("Path Finder", "bronze"),
    ("Linux Fundamentals", "silver"),
    ("Network Fundamentals", "silver"),
    ("Web Security", "silver"),
    ("Blue Team", "gold"),
    ("Red Team", "gold"),
    ("30 Day Streak", "gold"),
    ("Advent of Cyber", "gold"),
    ("100 Rooms", "platinum"),
    ("King of the Hill", "platinum"),
)

_BADGE_TIER_KEYWORDS: tuple[tuple[BadgeTier, tuple[str, ...]], ...] = (
    ("platinum", ("100", "king", "elite", "365", "master")),
    ("gold", ("30-day", "advent", "ctf", "champion", "expert")),
    ("silver", ("7-day", "blue", "red", "path", "fundamentals")),
)

# Badges and room pages are optional; any of these leaves the profile to estimates.
_OPTIONAL_ENDPOINT_FAILURES: tuple[type[Exception], ...] = (
    UpstreamNotFoundError,
    UpstreamRequestError,
    RateLimitError,
    CircuitBreakerOpen,
    JsonObjectExpectedError,
    IncomingDataError,
    requests.RequestException,
)


def format_badge_name(slug: str) -> str:
    """Turn a badge slug such as ``"30-day-streak"`` into ``"30 Day Streak"``."""
    return " ".join(part[:1].upper() + part[1:] for part in slug.split("-"))


def determine_badge_tier(name: str) -> BadgeTier:
    lowered = name.lower()
    for tier, keywords in _BADGE_TIER_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return tier
    return "bronze"


def categorize_room(room: ThmRoomIO) -> CyberDomain:
    """Bucket a room by the first domain whose keywords appear in its text."""
    search_text = f"{room['title']} {room['description']} {room['code']}".lower()
    for domain in DOMAIN_ORDER:
        if any(keyword in search_text for keyword in DOMAIN_KEYWORDS[domain]):
            return domain
    # Beginner rooms mostly cover Linux basics.
    if room["difficulty"] == "info" or room["type"] == "walkthrough":
        return CyberDomain.LINUX
    return CyberDomain.NETWORK_SECURITY


def categorize_rooms(rooms: Iterable[ThmRoomIO]) -> dict[CyberDomain, int]:
    distribution = empty_distribution()
    for room in rooms:
        distribution[categorize_room(room)] += 1
    return distribution


def difficulty_breakdown(rooms: Iterable[ThmRoomIO]) -> dict[str, int]:
    counts = dict.fromkeys(DIFFICULTY_POINTS, 0)
    for room in rooms:
        difficulty = room["difficulty"] or "easy"
        if difficulty in counts:
            counts[difficulty] += 1
    return counts


def estimate_total_score(rooms_completed: int, breakdown: Mapping[str, int]) -> int:
    """Difficulty-weighted points, or a flat per-room estimate when no rooms were seen."""
    room_points = sum(DIFFICULTY_POINTS[level] * count for level, count in breakdown.items())
    if room_points == 0 and rooms_completed > 0:
        return rooms_completed * FALLBACK_POINTS_PER_ROOM
    return room_points


def estimate_best_streak(current_streak: int, account_age_days: int) -> int:
    potential_max = min(365, account_age_days // 10)
    return max(current_streak, math.floor(potential_max * 0.3))


def estimate_certifications(
    level: int,
    rooms_completed: int,
    certificate_type: str | None,
    today: date,
    rng: random.Random | None = None,
) -> tuple[Certification, ...]:
    certifications: list[Certification] = []
    earned_at = today.isoformat()
    if certificate_type:
        certifications.append(
            Certification(
                id=generate_id(rng=rng), name=certificate_type, earned_at=earned_at, verified=True
            )
        )
    for min_rooms, min_level, name in ESTIMATED_CERTIFICATIONS:
        if rooms_completed >= min_rooms and level >= min_level:
            certifications.append(
                Certification(
                    id=generate_id(rng=rng), name=name, earned_at=earned_at, verified=False
                )
            )
    return tuple(certifications)


def estimate_badges(
    badge_count: int, username: str, today: date, rng: random.Random | None = None
) -> tuple[Badge, ...]:
    """Stand-in badges for users whose badge list came back empty."""
    seed = sum(ord(char) for char in username)
    return tuple(
        Badge(
            id=generate_id(rng=rng),
            name=name,
            description=f"Achievement: {name}",
            tier=tier,
            earned_at=(today - timedelta(days=(seed + index) * 5)).isoformat(),
        )
        for index, (name, tier) in enumerate(ESTIMATED_BADGE_TEMPLATES[:badge_count])
    )


def estimate_activity_timeline(
    rng: random.Random, current_streak: int, today: date
) -> tuple[ActivityEntry, ...]:
    entries: list[ActivityEntry] = []
    for days_ago in range(TIMELINE_DAYS, -1, -1):
        chance = rng.random()
        streak_bonus = 0.3 if days_ago <= current_streak else 0.0
        if chance + streak_bonus > 0.5:
            entries.append(
                ActivityEntry(
                    day=today - timedelta(days=days_ago),
                    rooms_completed=math.floor(chance * 3) + 1,
                    points_earned=math.floor(chance * 300) + 100,
                )
            )
    return tuple(entries)


def reconcile_distribution(
    counted: Mapping[CyberDomain, int],
    rooms_completed: int,
    rng: random.Random,
) -> dict[CyberDomain, int]:
    """Make the room buckets sum to ``rooms_completed``.

    Rooms the API reported but did not list are spread with the seeded estimate.
    """
    distribution = empty_distribution()
    distribution.update(counted)
    missing = rooms_completed - sum(distribution.values())
    if missing > 0:
        for domain, extra in estimate_domain_distribution(rng, missing).items():
            distribution[domain] += extra
    return distribution


def _parse_sign_up(value: str, today: date) -> date:
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return today


class TryHackMeProfileSource(ProfileSource):
    """Builds profiles from the TryHackMe public API through an HttpClient."""

    def __init__(
        self,
        *,
        http_client: HttpClient,
        api_base_url: str,
        badges_cdn_url: str,
        rooms_page_size: int = 50,
        rooms_page_concurrency: int = 3,
        clock: Callable[[], date] | None = None,
    ) -> None:
        self.http_client = http_client
        self.api_base_url = api_base_url.rstrip("/")
        self.badges_cdn_url = badges_cdn_url.rstrip("/")
        self.rooms_page_size = rooms_page_size
        self.rooms_page_concurrency = rooms_page_concurrency
        self._clock = clock or (lambda: datetime.now(UTC).date())

    def _url(self, path: str, **params: object) -> str:
        return f"{self.api_base_url}/{path}?{urlencode(params)}"

    def _fetch_public_profile(self, username: str) -> ThmPublicProfileIO | None:
        url = self._url("public-profile", username=username)
        try:
            payload = self.http_client.get_json(
                url, cache_key=f"public-profile:{username.lower()}"
            )
            return parse_public_profile(payload)
        except UpstreamNotFoundError:
            return None
        except requests.RequestException as exc:
            raise UpstreamRequestError(url, str(exc)) from exc
        except IncomingDataError as exc:
            detail = f"unexpected public profile payload: {exc}"
            raise UpstreamRequestError(url, detail) from exc

    def _fetch_badges(self, username: str) -> list[ThmBadgeIO]:
        try:
            payload = self.http_client.get_json(
                self._url("users/badges", username=username),
                cache_key=f"badges:{username.lower()}",
            )
            return parse_badges(payload)
        except _OPTIONAL_ENDPOINT_FAILURES as exc:
            logger.warning("Badges unavailable for %s: %s", username, exc)
            return []

    def _fetch_rooms_page(self, user_id: str, page: int) -> list[ThmRoomIO]:
        try:
            payload = self.http_client.get_json(
                self._url(
                    "public-profile/completed-rooms",
                    user=user_id,
                    limit=self.rooms_page_size,
                    page=page,
                ),
                cache_key=f"completed-rooms:{user_id}:{self.rooms_page_size}:{page}",
            )
            parsed = parse_rooms_page(payload)
        except _OPTIONAL_ENDPOINT_FAILURES as exc:
            logger.warning("Rooms page %s unavailable for %s: %s", page, user_id, exc)
            return []
        return parsed["rooms"] if parsed is not None else []

    def _fetch_all_rooms(self, user_id: str, total_rooms: int) -> list[ThmRoomIO]:
        """Fetch every page, a few pages at a time, keeping page order."""
        if not user_id or total_rooms <= 0:
            return []
        total_pages = math.ceil(total_rooms / self.rooms_page_size)
        pages = list(range(1, total_pages + 1))
        rooms: list[ThmRoomIO] = []
        with ThreadPoolExecutor(max_workers=self.rooms_page_concurrency) as pool:
            for start in range(0, len(pages), self.rooms_page_concurrency):
                group = pages[start : start + self.rooms_page_concurrency]
                for page_rooms in pool.map(lambda page: self._fetch_rooms_page(user_id, page), group):
                    rooms.extend(page_rooms)
        return rooms

    @override
    def fetch_profile(self, username: str) -> Profile | None:
        today = self._clock()
        logger.info("Fetching TryHackMe profile for %s", username)
        public = self._fetch_public_profile(username)
        if public is None:
            logger.info("User not found: %s", username)
            return None
        logger.info(
            "Found user %s: rank #%s, level %s, %s rooms",
            public["username"],
            public["rank"],
            public["level"],
            public["completed_rooms"],
        )

        with ThreadPoolExecutor(max_workers=1) as pool:
            badges_future = pool.submit(self._fetch_badges, username)
            rooms = self._fetch_all_rooms(public["id"], public["completed_rooms"])
            raw_badges = badges_future.result()
        logger.info("Fetched %s badges and %s rooms for %s", len(raw_badges), len(rooms), username)

        return self.build_profile_from_api(public, raw_badges, rooms, today=today)

    def build_profile_from_api(
        self,
        public: ThmPublicProfileIO,
        raw_badges: list[ThmBadgeIO],
        rooms: list[ThmRoomIO],
        *,
        today: date,
    ) -> Profile:
        """Assemble a profile from parsed API payloads, estimating what the API omits."""
        username = public["username"]
        rng = seeded_rng(username)
        rooms_completed = max(public["completed_rooms"], len(rooms))
        if rooms:
            domain_scores = reconcile_distribution(categorize_rooms(rooms), rooms_completed, rng)
        else:
            domain_scores = estimate_domain_distribution(rng, rooms_completed)

        join_date = _parse_sign_up(public["date_sign_up"], today)
        account_age_days = abs((today - join_date).days)

        if raw_badges:
            badges = tuple(
                Badge(
                    id=badge["id"] or generate_id(rng=rng),
                    name=format_badge_name(badge["name"]),
                    description=f"Badge: {format_badge_name(badge['name'])}",
                    tier=determine_badge_tier(badge["name"]),
                    earned_at=today.isoformat(),
                    image_url=f"{self.badges_cdn_url}/{badge['image']}" if badge["image"] else None,
                )
                for badge in raw_badges
            )
        else:
            badges = estimate_badges(public["badges_number"], username, today, rng)

        return build_profile(
            username=username,
            avatar=public["avatar"] or AVATAR_FALLBACK_URL.format(username=username),
            join_date=join_date,
            country=public["country"] or None,
            global_rank=public["rank"],
            total_score=estimate_total_score(rooms_completed, difficulty_breakdown(rooms)),
            level=public["level"],
            rooms_completed=rooms_completed,
            paths_completed=rooms_completed // ROOMS_PER_PATH,
            badges=badges,
            certifications=estimate_certifications(
                public["level"], rooms_completed, public["certificate_type"], today, rng
            ),
            current_streak=public["streak"],
            best_streak=estimate_best_streak(public["streak"], account_age_days),
            events_participated=rooms_completed // ROOMS_PER_EVENT,
            domain_scores=domain_scores,
            activity_timeline=estimate_activity_timeline(rng, public["streak"], today),
            last_active=today,
            is_active=public["streak"] > 0 or account_age_days < NEW_ACCOUNT_DAYS,
            today=today,
            top_percentage=public["top_percentage"],
            is_in_top_ten_percent=public["is_in_top_ten_percent"],
            is_subscribed=public["subscribed"],
            user_role=public["user_role"] or None,
            badge_image_url=public["badge_image_url"] or None,
        )
