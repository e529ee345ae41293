"""Unit tests for the in-memory fixed-window rate limiter."""

from unittest.mock import Mock

import pytest

from mp_lookup.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter


def test_allows_up_to_limit_in_same_window() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(limit=3, window_seconds=60, clock=clock)

    assert limiter.consume("k").allowed is True
    assert limiter.consume("k").allowed is True
    result = limiter.consume("k")
    assert result.allowed is True
    assert result.remaining == 0
    assert result.retry_after_seconds is None


def test_eleventh_call_in_window_is_blocked() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(limit=10, window_seconds=60, clock=clock)

    results = []
    for i in range(11):
        clock.return_value = 1000.0 + i
        results.append(limiter.consume("203.0.113.7"))

    assert all(r.allowed for r in results[:10])
    assert [r.remaining for r in results[:10]] == [9, 8, 7, 6, 5, 4, 3, 2, 1, 0]
    blocked = results[10]
    assert blocked.allowed is False
    assert blocked.remaining == 0
    assert blocked.reset_in_seconds > 0
    assert blocked.retry_after_seconds == blocked.reset_in_seconds


def test_reset_in_counts_from_first_request() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(limit=5, window_seconds=60, clock=clock)

    assert limiter.consume("k").reset_in_seconds == 60

    clock.return_value = 1020.4
    # ceil(1060 - 1020.4)
    assert limiter.consume("k").reset_in_seconds == 40


def test_blocked_calls_still_count() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(limit=1, window_seconds=60, clock=clock)

    limiter.consume("k")
    limiter.consume("k")
    limiter.consume("k")

    clock.return_value = 1059.0
    assert limiter.consume("k").allowed is False


def test_resets_after_window_elapsed() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(limit=2, window_seconds=10, clock=clock)

    for _ in range(5):
        limiter.consume("k")
    assert limiter.consume("k").allowed is False

    clock.return_value = 1010.0
    result = limiter.consume("k")
    assert result.allowed is True
    # Fresh window: count restarted at 1
    assert result.remaining == 1
    assert result.reset_in_seconds == 10


def test_window_is_not_aligned_to_clock_boundaries() -> None:
    clock = Mock(return_value=1055.0)
    limiter = InMemoryFixedWindowRateLimiter(limit=1, window_seconds=60, clock=clock)

    assert limiter.consume("k").allowed is True

    # Crossing a wall-clock minute boundary does not open a new window
    clock.return_value = 1061.0
    assert limiter.consume("k").allowed is False


def test_isolated_by_key() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(limit=1, window_seconds=60, clock=clock)

    assert limiter.consume("k1").allowed is True
    assert limiter.consume("k1").allowed is False

    assert limiter.consume("k2").allowed is True


def test_sweeps_stale_entries_above_threshold() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(
        limit=5, window_seconds=60, cleanup_threshold=3, clock=clock
    )

    for key in ("a", "b", "c", "d"):
        limiter.consume(key)
    assert len(limiter) == 4

    clock.return_value = 1100.0
    limiter.consume("e")

    assert len(limiter) == 1


def test_does_not_sweep_at_or_below_threshold() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(
        limit=5, window_seconds=60, cleanup_threshold=3, clock=clock
    )

    for key in ("a", "b", "c"):
        limiter.consume(key)

    clock.return_value = 1100.0
    limiter.consume("d")

    assert len(limiter) == 4


def test_sweep_keeps_live_windows() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryFixedWindowRateLimiter(
        limit=5, window_seconds=60, cleanup_threshold=2, clock=clock
    )

    limiter.consume("old-1")
    limiter.consume("old-2")
    clock.return_value = 1050.0
    limiter.consume("live")

    clock.return_value = 1070.0
    limiter.consume("new")

    assert len(limiter) == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0, "window_seconds": 60},
        {"limit": 1, "window_seconds": 0},
        {"limit": 1, "window_seconds": 60, "cleanup_threshold": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InMemoryFixedWindowRateLimiter(**kwargs)


def test_empty_key_rejected() -> None:
    limiter = InMemoryFixedWindowRateLimiter(limit=1, window_seconds=60)

    with pytest.raises(ValueError):
        limiter.consume("")
