"""Tests for the local filesystem adapter."""

import json
from pathlib import Path

import pandas as pd

from skillmetter.infrastructure import LocalFileSystem


def test_csv_round_trip_keeps_strings(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    path = tmp_path / "nested" / "pairs.csv"

    fs.write_csv(pd.DataFrame({"user1": ["alice", "007"], "user2": ["bob", None]}), path)
    df = fs.read_csv(path)

    assert fs.exists(path)
    assert list(df["user1"]) == ["alice", "007"]
    assert list(df["user2"]) == ["bob", ""]


def test_write_json_creates_parent_dirs(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    path = tmp_path / "out" / "result.json"

    fs.write_json({"shareId": "abc", "summary": "Gewinner ✓"}, path)

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "shareId": "abc",
        "summary": "Gewinner ✓",
    }
