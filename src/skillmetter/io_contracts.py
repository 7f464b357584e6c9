"""Boundary-neutral IO contracts for TryHackMe payload validation.

Usage example:
    from skillmetter.io_contracts import ThmRoomIO

    room: ThmRoomIO = {
        "id": "5f0c",
        "title": "OWASP Top 10",
        "code": "owasptop10",
        "description": "Learn about the OWASP top 10 web vulnerabilities.",
        "difficulty": "easy",
        "type": "walkthrough",
    }
"""

from __future__ import annotations

from typing_extensions import TypedDict


class ThmPublicProfileIO(TypedDict):
    """TryHackMe public profile, with missing fields filled with neutral values."""

    id: str
    username: str
    avatar: str
    level: int
    country: str
    date_sign_up: str
    certificate_type: str | None
    completed_rooms: int
    badges_number: int
    streak: int
    rank: int
    top_percentage: float | None
    is_in_top_ten_percent: bool | None
    subscribed: bool
    badge_image_url: str
    user_role: str


class ThmBadgeIO(TypedDict):
    """TryHackMe earned badge payload shape."""

    id: str
    name: str
    image: str


class ThmRoomIO(TypedDict):
    """TryHackMe completed room payload shape."""

    id: str
    title: str
    code: str
    description: str
    difficulty: str
    type: str


class ThmRoomsPageIO(TypedDict):
    """One page of completed rooms."""

    rooms: list[ThmRoomIO]
    page: int
    total_pages: int
    has_next_page: bool
