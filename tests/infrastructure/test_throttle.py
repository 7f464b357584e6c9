"""Tests for the per-client comparison throttle."""

import pytest

from skillmetter.exceptions import RateLimitExceededError
from skillmetter.infrastructure import FixedWindowRequestGate


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_admits_up_to_limit_then_refuses() -> None:
    clock = FakeClock()
    gate = FixedWindowRequestGate(limit=3, window_seconds=60, clock=clock)

    for _ in range(3):
        gate.check("1.2.3.4")

    with pytest.raises(RateLimitExceededError) as exc_info:
        gate.check("1.2.3.4")

    assert exc_info.value.client_key == "1.2.3.4"
    assert str(exc_info.value) == "Too many requests. Please try again in a minute."


def test_clients_are_counted_separately() -> None:
    gate = FixedWindowRequestGate(limit=1, window_seconds=60, clock=FakeClock())

    gate.check("a")
    gate.check("b")

    with pytest.raises(RateLimitExceededError):
        gate.check("a")


def test_window_resets_after_expiry() -> None:
    clock = FakeClock()
    gate = FixedWindowRequestGate(limit=1, window_seconds=60, clock=clock)
    gate.check("a")

    clock.now += 61
    gate.check("a")

    with pytest.raises(RateLimitExceededError) as exc_info:
        gate.check("a")
    assert exc_info.value.retry_after_seconds == pytest.approx(60.0)


def test_prune_drops_only_expired_windows() -> None:
    clock = FakeClock()
    gate = FixedWindowRequestGate(limit=5, window_seconds=60, clock=clock)
    gate.check("old")
    clock.now += 45
    gate.check("new")
    clock.now += 20

    assert gate.prune() == 1
    assert gate.prune() == 0


def test_opening_a_window_drops_expired_ones() -> None:
    clock = FakeClock()
    gate = FixedWindowRequestGate(limit=1, window_seconds=60, clock=clock)
    gate.check("a")
    gate.check("b")
    clock.now += 61

    gate.check("c")

    assert gate.prune() == 0
    gate.check("a")
