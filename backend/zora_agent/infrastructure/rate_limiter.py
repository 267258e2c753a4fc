"""Rate Limiter — fixed-window request counter per client key, held in memory.

Invariants:
    - At most `max_requests` hits per key are allowed inside one window
    - A key whose window has expired starts a fresh window on its next hit
    - Expired entries are evicted: on access for the key itself, and by a full
      sweep that runs at most once per window length
    - Clock is injected (monotonic seconds) so tests control time

Design Decisions:
    - One instance per app, built at startup and injected via dependencies
    - Per-process state only: counts reset on restart
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class _Window:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after_seconds: int = 0


class RateLimiter:
    """Fixed-window limiter keyed by client identifier (IP address)."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._next_sweep = clock() + window_seconds

    def __len__(self) -> int:
        return len(self._windows)

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        self._sweep(now)

        window = self._windows.get(key)
        if window is None or now >= window.reset_at:
            self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
            return RateLimitDecision(True, self.max_requests - 1)

        if window.count >= self.max_requests:
            return RateLimitDecision(
                False, 0, max(1, math.ceil(window.reset_at - now)),
            )

        window.count += 1
        return RateLimitDecision(True, self.max_requests - window.count)

    def _sweep(self, now: float) -> None:
        if now < self._next_sweep:
            return
        expired = [k for k, w in self._windows.items() if now >= w.reset_at]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self.window_seconds
