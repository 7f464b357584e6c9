"""Inbound throttle for comparison requests.

A fixed window per client key: the first request opens a window, and at most
``limit`` requests are admitted until the window expires. Opening a window also
drops any other windows that have expired.

Usage example:
    from skillmetter.infrastructure.throttle import FixedWindowRequestGate

    gate = FixedWindowRequestGate(limit=10, window_seconds=60)
    gate.check("203.0.113.7")
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing_extensions import override

from ..exceptions import RateLimitExceededError
from ..protocols import RequestGate


@dataclass
class _Window:
    started_at: float
    count: int


@dataclass
class FixedWindowRequestGate(RequestGate):
    """Admit at most ``limit`` requests per client per ``window_seconds``."""

    limit: int = 10
    window_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic
    _windows: dict[str, _Window] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @override
    def check(self, client_key: str) -> None:
        with self._lock:
            now = self.clock()
            window = self._windows.get(client_key)
            if window is None or now - window.started_at > self.window_seconds:
                self._drop_expired(now)
                self._windows[client_key] = _Window(started_at=now, count=1)
                return
            if window.count >= self.limit:
                retry_after = max(0.0, self.window_seconds - (now - window.started_at))
                raise RateLimitExceededError(client_key, retry_after)
            window.count += 1

    def prune(self) -> int:
        """Forget expired windows; returns how many were dropped."""
        with self._lock:
            return self._drop_expired(self.clock())

    def _drop_expired(self, now: float) -> int:
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.started_at > self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        return len(expired)
