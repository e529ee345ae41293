"""Unit tests for the client-side session throttle."""

import pytest

from mp_lookup.adapters.rate_limit.session import SessionRateLimiter


class FakeClock:
    """Deterministic monotonic clock."""

    def __init__(self, start: float = 500.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def test_first_lookup_is_allowed(clock: FakeClock) -> None:
    limiter = SessionRateLimiter(clock=clock)

    check = limiter.check()

    assert check.allowed is True
    assert check.message == ""


def test_check_does_not_record(clock: FakeClock) -> None:
    limiter = SessionRateLimiter(clock=clock)

    limiter.check()
    limiter.check()

    assert limiter.request_count == 0


def test_cooldown_blocks_rapid_resubmission(clock: FakeClock) -> None:
    limiter = SessionRateLimiter(cooldown_seconds=3, clock=clock)
    limiter.record()

    clock.advance(0.5)
    check = limiter.check()

    assert check.allowed is False
    assert check.wait_seconds == 3
    assert check.message == "Please wait 3 seconds before trying again."


def test_cooldown_message_singular(clock: FakeClock) -> None:
    limiter = SessionRateLimiter(cooldown_seconds=3, clock=clock)
    limiter.record()

    clock.advance(2.5)
    check = limiter.check()

    assert check.wait_seconds == 1
    assert check.message == "Please wait 1 second before trying again."


def test_allowed_after_cooldown(clock: FakeClock) -> None:
    limiter = SessionRateLimiter(cooldown_seconds=3, clock=clock)
    limiter.record()

    clock.advance(3)

    assert limiter.check().allowed is True


def test_lifetime_cap_never_resets(clock: FakeClock) -> None:
    limiter = SessionRateLimiter(cooldown_seconds=3, max_lookups=20, clock=clock)
    for _ in range(20):
        assert limiter.check().allowed is True
        limiter.record()
        clock.advance(3)

    clock.advance(10_000)
    check = limiter.check()

    assert check.allowed is False
    assert check.wait_seconds is None
    assert "maximum number of lookups" in check.message
    assert limiter.remaining == 0


def test_cap_is_checked_before_cooldown(clock: FakeClock) -> None:
    limiter = SessionRateLimiter(cooldown_seconds=3, max_lookups=1, clock=clock)
    limiter.record()

    check = limiter.check()

    assert check.wait_seconds is None
    assert "maximum number of lookups" in check.message


@pytest.mark.parametrize(
    "kwargs",
    [
        {"cooldown_seconds": -1},
        {"max_lookups": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SessionRateLimiter(**kwargs)
