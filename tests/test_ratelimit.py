"""Tests for the fixed-window rate limiter."""

from __future__ import annotations

from trading_signals.api.ratelimit import RateLimiter


class _Clock:
    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t


class TestRateLimiter:
    def test_allows_up_to_limit(self):
        limiter = RateLimiter(max_requests=3, window_seconds=60, clock=_Clock())
        assert [limiter.hit("1.2.3.4") for _ in range(4)] == [True, True, True, False]

    def test_keys_are_independent(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60, clock=_Clock())
        assert limiter.hit("a") is True
        assert limiter.hit("b") is True
        assert limiter.hit("a") is False

    def test_window_resets(self):
        clock = _Clock()
        limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
        assert limiter.hit("a") is True
        clock.t = 59.0
        assert limiter.hit("a") is False
        clock.t = 60.5
        assert limiter.hit("a") is True

    def test_reset(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60, clock=_Clock())
        limiter.hit("a")
        limiter.hit("b")
        limiter.reset("a")
        assert limiter.hit("a") is True
        assert limiter.hit("b") is False
        limiter.reset()
        assert limiter.hit("b") is True

    def test_expired_windows_are_dropped(self):
        clock = _Clock()
        limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
        for host in ("a", "b", "c"):
            limiter.hit(host)
        assert limiter.tracked_keys == 3

        clock.t = 61.0
        assert limiter.hit("d") is True
        assert limiter.tracked_keys == 1

    def test_live_windows_survive_sweep(self):
        clock = _Clock()
        limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
        limiter.hit("a")
        clock.t = 30.0
        limiter.hit("b")
        clock.t = 61.0
        limiter.hit("c")
        assert limiter.tracked_keys == 2
        assert limiter.hit("b") is False
