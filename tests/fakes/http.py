"""HTTP fakes for tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing_extensions import override

from skillmetter.protocols import HttpClient
from tests.support.errors import FakeResponseMissingError


def _empty_responses() -> dict[str, dict[str, object] | Exception]:
    return {}


def _empty_calls() -> list[str]:
    return []


@dataclass
class FakeHttpClient(HttpClient):
    """Fake HTTP client that returns canned responses.

    Responses are matched by substring, longest pattern first, so a page-specific URL
    can override a generic one. An Exception value is raised instead of returned.
    """

    responses: dict[str, dict[str, object] | Exception] = field(default_factory=_empty_responses)
    calls: list[str] = field(default_factory=_empty_calls)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @override
    def get_json(self, url: str, cache_key: str | None = None) -> dict[str, object]:
        with self._lock:
            self.calls.append(url)
        for pattern in sorted(self.responses, key=len, reverse=True):
            if pattern in url:
                response = self.responses[pattern]
                if isinstance(response, Exception):
                    raise response
                return response
        raise FakeResponseMissingError(url)
