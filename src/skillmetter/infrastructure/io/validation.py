"""Pydantic-based validation helpers for inbound TryHackMe payloads.

Every endpoint answers with a ``{"status": "success", "data": ...}`` envelope. Parsers
return ``None`` when the envelope reports anything other than success.
"""

from __future__ import annotations

from typing import TypeVar

from typing_extensions import TypedDict

from pydantic import TypeAdapter, ValidationError

from ...io_contracts import ThmBadgeIO, ThmPublicProfileIO, ThmRoomIO, ThmRoomsPageIO


class IncomingDataError(ValueError):
    """Raised when inbound data fails validation."""


class EnvelopeInput(TypedDict, total=False):
    status: str | None
    data: object


class PublicProfileInput(TypedDict, total=False):
    id: int | str | None
    username: str | None
    avatar: str | None
    level: int | None
    country: str | None
    dateSignUp: str | None
    certificateType: str | None
    completedRoomsNumber: int | None
    badgesNumber: int | None
    streak: int | None
    rank: int | None
    topPercentage: float | None
    isInTopTenPercent: bool | None
    subscribed: int | bool | None
    badgeImageURL: str | None
    userRole: str | None


class BadgeInput(TypedDict, total=False):
    name: str | None
    image: str | None


class RoomInput(TypedDict, total=False):
    title: str | None
    code: str | None
    description: str | None
    difficulty: str | None
    type: str | None


class RoomsPageInput(TypedDict, total=False):
    docs: list[object] | None
    page: int | None
    totalPages: int | None
    hasNextPage: bool | None


SchemaT = TypeVar("SchemaT")


def validate_as(schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        message = f"Invalid payload for {schema}."
        raise IncomingDataError(message) from exc


def validate_json_as(schema: type[SchemaT], payload: str | bytes | bytearray) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_json(payload)
    except ValidationError as exc:
        message = f"Invalid JSON payload for {schema}."
        raise IncomingDataError(message) from exc


def _as_str(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)


def _document_id(payload: object) -> str:
    """Return the Mongo-style ``_id`` that the TypedDict inputs do not carry."""
    raw = validate_as(dict[str, object], payload)
    return _as_str(raw.get("_id"))


def _unwrap(payload: object) -> object | None:
    envelope = validate_as(EnvelopeInput, payload)
    if envelope.get("status") != "success":
        return None
    return envelope.get("data")


def parse_public_profile(payload: object) -> ThmPublicProfileIO | None:
    data = _unwrap(payload)
    if not data:
        return None
    profile = validate_as(PublicProfileInput, data)
    username = _as_str(profile.get("username"))
    if not username:
        return None
    legacy_id = profile.get("id")
    return {
        "id": _document_id(data) or (str(legacy_id) if legacy_id is not None else ""),
        "username": username,
        "avatar": _as_str(profile.get("avatar")),
        "level": max(1, profile.get("level") or 1),
        "country": _as_str(profile.get("country")).upper(),
        "date_sign_up": _as_str(profile.get("dateSignUp")),
        "certificate_type": _as_str(profile.get("certificateType")) or None,
        "completed_rooms": _as_count(profile.get("completedRoomsNumber")),
        "badges_number": _as_count(profile.get("badgesNumber")),
        "streak": _as_count(profile.get("streak")),
        "rank": _as_count(profile.get("rank")),
        "top_percentage": profile.get("topPercentage"),
        "is_in_top_ten_percent": profile.get("isInTopTenPercent"),
        "subscribed": bool(profile.get("subscribed")),
        "badge_image_url": _as_str(profile.get("badgeImageURL")),
        "user_role": _as_str(profile.get("userRole")),
    }


def parse_badges(payload: object) -> list[ThmBadgeIO]:
    data = _unwrap(payload)
    if not data:
        return []
    badges: list[ThmBadgeIO] = []
    for raw_badge in validate_as(list[object], data):
        badge = validate_as(BadgeInput, raw_badge)
        name = _as_str(badge.get("name"))
        if not name:
            continue
        badges.append(
            {
                "id": _document_id(raw_badge),
                "name": name,
                "image": _as_str(badge.get("image")),
            }
        )
    return badges


def parse_room(payload: object) -> ThmRoomIO:
    room = validate_as(RoomInput, payload)
    return {
        "id": _document_id(payload),
        "title": _as_str(room.get("title")),
        "code": _as_str(room.get("code")),
        "description": _as_str(room.get("description")),
        "difficulty": _as_str(room.get("difficulty")).lower(),
        "type": _as_str(room.get("type")).lower(),
    }


def parse_rooms_page(payload: object) -> ThmRoomsPageIO | None:
    data = _unwrap(payload)
    if not data:
        return None
    page = validate_as(RoomsPageInput, data)
    rooms = [parse_room(raw_room) for raw_room in page.get("docs") or []]
    return {
        "rooms": rooms,
        "page": page.get("page") or 1,
        "total_pages": page.get("totalPages") or 0,
        "has_next_page": bool(page.get("hasNextPage")),
    }
