"""Disk cache for upstream JSON responses.

Entries expire after ``ttl_seconds`` so repeated comparisons within a few minutes reuse
the same TryHackMe responses without serving stale profiles forever.

Usage example:
    from pathlib import Path

    from skillmetter.infrastructure.cache import DiskCache

    cache = DiskCache(Path("data/cache/tryhackme"), ttl_seconds=300)
    cache.set("public-profile:alice", {"status": "success"})
    cached = cache.get("public-profile:alice")
"""

from __future__ import annotations

import hashlib
import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing_extensions import override

from ..protocols import Cache
from .io.validation import IncomingDataError, validate_json_as

DEFAULT_TTL_SECONDS = 300.0


@dataclass
class DiskCache(Cache):
    """One JSON file per key, named by the key's SHA-256."""

    cache_dir: Path
    ttl_seconds: float | None = DEFAULT_TTL_SECONDS
    clock: Callable[[], float] = time.time

    def __post_init__(self) -> None:
        self.cache_dir = Path(self.cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.cache_dir / f"{digest}.json"

    def _read_entry(self, key: str) -> dict[str, object] | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            entry = validate_json_as(dict[str, object], path.read_text(encoding="utf-8"))
        except IncomingDataError:
            return None
        stored_at = entry.get("stored_at")
        if self.ttl_seconds is not None:
            if not isinstance(stored_at, int | float):
                return None
            if self.clock() - stored_at > self.ttl_seconds:
                return None
        return entry

    @override
    def get(self, key: str) -> dict[str, object] | None:
        entry = self._read_entry(key)
        if entry is None:
            return None
        try:
            return validate_json_as(dict[str, object], json.dumps(entry.get("payload")))
        except IncomingDataError:
            return None

    @override
    def set(self, key: str, value: dict[str, object]) -> None:
        entry = {"key": key, "stored_at": self.clock(), "payload": value}
        self._path(key).write_text(json.dumps(entry, ensure_ascii=False, indent=2), encoding="utf-8")

    @override
    def has(self, key: str) -> bool:
        return self._read_entry(key) is not None
