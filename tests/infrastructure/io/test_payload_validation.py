"""Tests for inbound TryHackMe payload parsing."""

import pytest

from skillmetter.infrastructure.io.validation import (
    IncomingDataError,
    parse_badges,
    parse_public_profile,
    parse_room,
    parse_rooms_page,
    validate_as,
    validate_json_as,
)


def test_validate_as_wraps_pydantic_errors() -> None:
    with pytest.raises(IncomingDataError):
        validate_as(dict[str, object], [1, 2])


def test_validate_json_as_rejects_malformed_json() -> None:
    with pytest.raises(IncomingDataError):
        validate_json_as(dict[str, object], "{not json")


def test_public_profile_is_normalised() -> None:
    parsed = parse_public_profile(
        {
            "status": "success",
            "data": {
                "_id": "abc123",
                "username": " alice ",
                "level": 0,
                "country": "gb",
                "completedRoomsNumber": 42,
                "streak": -3,
                "rank": 1500,
                "subscribed": 0,
            },
        }
    )

    assert parsed is not None
    assert parsed["id"] == "abc123"
    assert parsed["username"] == "alice"
    assert parsed["level"] == 1
    assert parsed["country"] == "GB"
    assert parsed["completed_rooms"] == 42
    assert parsed["streak"] == 0
    assert parsed["subscribed"] is False
    assert parsed["certificate_type"] is None


def test_public_profile_without_username_is_absent() -> None:
    assert parse_public_profile({"status": "success", "data": {"rank": 5}}) is None
    assert parse_public_profile({"status": "success", "data": None}) is None
    assert parse_public_profile({"status": "fail", "data": {"username": "alice"}}) is None


def test_public_profile_with_wrong_types_is_rejected() -> None:
    with pytest.raises(IncomingDataError):
        parse_public_profile({"status": "success", "data": {"username": "alice", "rank": "top"}})


def test_badges_skip_unnamed_entries() -> None:
    badges = parse_badges(
        {
            "status": "success",
            "data": [
                {"_id": "b1", "name": "streak-7", "image": "s7.svg"},
                {"_id": "b2", "name": ""},
            ],
        }
    )

    assert badges == [{"id": "b1", "name": "streak-7", "image": "s7.svg"}]


def test_room_difficulty_and_type_are_lower_cased() -> None:
    room = parse_room({"title": "Blue", "difficulty": "Easy", "type": "Walkthrough"})

    assert room["difficulty"] == "easy"
    assert room["type"] == "walkthrough"
    assert room["id"] == ""


def test_rooms_page_defaults() -> None:
    page = parse_rooms_page({"status": "success", "data": {"docs": [{"title": "Blue"}]}})

    assert page is not None
    assert page["page"] == 1
    assert page["has_next_page"] is False
    assert [room["title"] for room in page["rooms"]] == ["Blue"]
    assert parse_rooms_page({"status": "error"}) is None
