"""Tests for the fixed-window rate limiter."""

from api.rate_limit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_allows_up_to_limit_per_window():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=5, window_sec=60, clock=clock)

    results = [limiter.allow("1.2.3.4") for _ in range(6)]

    assert results == [True, True, True, True, True, False]


def test_window_resets():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_sec=60, clock=clock)

    assert limiter.allow("a")
    assert not limiter.allow("a")
    clock.now = 60.0
    assert limiter.allow("a")


def test_clients_are_counted_separately():
    limiter = RateLimiter(max_requests=1, window_sec=60, clock=FakeClock())

    assert limiter.allow("a")
    assert limiter.allow("b")
    assert not limiter.allow("a")


def test_reset_clears_counters():
    limiter = RateLimiter(max_requests=1, window_sec=60, clock=FakeClock())
    limiter.allow("a")

    limiter.reset()

    assert limiter.allow("a")
