"""Tests for batch comparisons."""

from datetime import UTC, date, datetime
from pathlib import Path
from typing_extensions import override

import pandas as pd
import pytest
import requests

from skillmetter.application.batch import run_batch_compare
from skillmetter.application.compare import ComparisonService
from skillmetter.application.tryhackme_source import TryHackMeProfileSource
from skillmetter.domain.profiles import Profile
from skillmetter.exceptions import BatchInputError
from skillmetter.schemas import BATCH_OUTPUT_COLUMNS
from tests.fakes import FakeHttpClient, InMemoryFileSystem, StaticProfileSource
from tests.support.profiles import make_profile

PAIRS = Path("pairs.csv")
OUT = Path("verdicts.csv")


def _service() -> ComparisonService:
    source = StaticProfileSource(
        profiles={
            "alice": make_profile(username="alice", global_rank=1_000),
            "bob": make_profile(username="bob", global_rank=200_000),
        }
    )
    return ComparisonService(
        profile_source=source, clock=lambda: datetime(2025, 1, 15, tzinfo=UTC)
    )


def test_batch_writes_one_row_per_pair(in_memory_fs: InMemoryFileSystem) -> None:
    in_memory_fs.write_csv(
        pd.DataFrame({"user1": ["alice", "alice", "bob"], "user2": ["bob", "ghost", "bob"]}),
        PAIRS,
    )

    summary = run_batch_compare(
        PAIRS, OUT, service=_service(), fs=in_memory_fs, show_progress=False
    )

    assert (summary.total, summary.succeeded, summary.failed) == (3, 1, 2)
    out = in_memory_fs.read_csv(OUT)
    assert list(out.columns) == list(BATCH_OUTPUT_COLUMNS)
    assert list(out["status"]) == ["ok", "error", "error"]
    assert out.loc[0, "winner_username"] == "alice"
    assert out.loc[0, "user1_title"] == "Elite Hacker"
    assert out.loc[1, "error"] == 'User "ghost" not found on TryHackMe. Please check the username.'
    assert out.loc[2, "error"] == "Cannot compare a user with themselves"


def test_batch_requires_input_file(in_memory_fs: InMemoryFileSystem) -> None:
    with pytest.raises(BatchInputError, match="file not found"):
        run_batch_compare(PAIRS, OUT, service=_service(), fs=in_memory_fs, show_progress=False)


def test_batch_requires_user_columns(in_memory_fs: InMemoryFileSystem) -> None:
    in_memory_fs.write_csv(pd.DataFrame({"left": ["alice"], "right": ["bob"]}), PAIRS)

    with pytest.raises(BatchInputError, match="missing required columns"):
        run_batch_compare(PAIRS, OUT, service=_service(), fs=in_memory_fs, show_progress=False)


def _public_profile(username: str, user_id: str) -> dict[str, object]:
    return {
        "status": "success",
        "data": {
            "_id": user_id,
            "username": username,
            "level": 3,
            "dateSignUp": "2023-01-15T10:00:00.000Z",
            "completedRoomsNumber": 0,
            "badgesNumber": 0,
            "streak": 2,
            "rank": 5000,
        },
    }


def test_batch_records_upstream_connection_failures(in_memory_fs: InMemoryFileSystem) -> None:
    client = FakeHttpClient(
        responses={
            "public-profile?username=alice": _public_profile("alice", "u-1"),
            "public-profile?username=carol": _public_profile("carol", "u-2"),
            "public-profile?username=bob": requests.ConnectionError("boom"),
            "users/badges": {"status": "success", "data": []},
        }
    )
    source = TryHackMeProfileSource(
        http_client=client,
        api_base_url="https://tryhackme.test/api/v2",
        badges_cdn_url="https://badges.test",
        clock=lambda: date(2025, 1, 15),
    )
    service = ComparisonService(
        profile_source=source, clock=lambda: datetime(2025, 1, 15, tzinfo=UTC)
    )
    in_memory_fs.write_csv(
        pd.DataFrame({"user1": ["alice", "alice"], "user2": ["carol", "bob"]}), PAIRS
    )

    summary = run_batch_compare(PAIRS, OUT, service=service, fs=in_memory_fs, show_progress=False)

    assert (summary.total, summary.succeeded, summary.failed) == (2, 1, 1)
    out = in_memory_fs.read_csv(OUT)
    assert list(out["status"]) == ["ok", "error"]
    assert "boom" in out.loc[1, "error"]


class _BrokenProfileSource(StaticProfileSource):
    @override
    def fetch_profile(self, username: str) -> Profile | None:
        if username == "dave":
            raise RuntimeError("unexpected")
        return super().fetch_profile(username)


def test_batch_keeps_finished_rows_when_interrupted(in_memory_fs: InMemoryFileSystem) -> None:
    source = _BrokenProfileSource(
        profiles={
            "alice": make_profile(username="alice"),
            "bob": make_profile(username="bob"),
        }
    )
    in_memory_fs.write_csv(
        pd.DataFrame({"user1": ["alice", "alice"], "user2": ["bob", "dave"]}), PAIRS
    )

    with pytest.raises(RuntimeError, match="unexpected"):
        run_batch_compare(
            PAIRS,
            OUT,
            service=ComparisonService(profile_source=source),
            fs=in_memory_fs,
            show_progress=False,
        )

    out = in_memory_fs.read_csv(OUT)
    assert list(out["user2"]) == ["bob"]
    assert list(out["status"]) == ["ok"]
