"""Fixed-window request counter keyed by caller identity."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Thread-unsafe dict + monotonic clock limiter. State is per process."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._next_sweep = clock() + window_seconds

    def hit(self, key: str) -> bool:
        """Count one request for *key*; False once the window is full."""
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)
        window = self._windows.get(key)
        if window is None or now > window.reset_at:
            self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
            return True
        if window.count >= self.max_requests:
            return False
        window.count += 1
        return True

    def _sweep(self, now: float) -> None:
        """Drop windows that have run out so idle callers are forgotten."""
        self._windows = {k: w for k, w in self._windows.items() if now <= w.reset_at}
        self._next_sweep = now + self.window_seconds

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when *key* is None."""
        if key is None:
            self._windows.clear()
        else:
            self._windows.pop(key, None)
