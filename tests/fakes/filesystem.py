"""Filesystem fakes for tests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing_extensions import override

import pandas as pd

from skillmetter.protocols import FileSystem
from tests.support.errors import FakeFileNotFoundError, FakeFileTypeError


def _empty_files() -> dict[str, object]:
    return {}


@dataclass
class InMemoryFileSystem(FileSystem):
    """In-memory filesystem for testing."""

    _files: dict[str, object] = field(default_factory=_empty_files)

    @override
    def read_csv(self, path: Path) -> pd.DataFrame:
        key = str(path)
        if key not in self._files:
            raise FakeFileNotFoundError(str(path))
        data = self._files[key]
        if isinstance(data, pd.DataFrame):
            return data.copy()
        raise FakeFileTypeError("DataFrame", str(path))

    @override
    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        self._files[str(path)] = df.copy()

    @override
    def write_json(self, data: Mapping[str, object], path: Path) -> None:
        self._files[str(path)] = dict(data)

    @override
    def exists(self, path: Path) -> bool:
        return str(path) in self._files

    def read_json(self, path: Path) -> dict[str, object]:
        key = str(path)
        if key not in self._files:
            raise FakeFileNotFoundError(str(path))
        data = self._files[key]
        if isinstance(data, dict):
            return data
        raise FakeFileTypeError("dict", str(path))
