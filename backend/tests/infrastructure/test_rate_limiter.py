"""Rate Limiter — verifies fixed-window counting, retry hints and eviction.

Tests:
    - Up to max_requests hits allowed per window, then denied with retry_after
    - Keys are independent
    - Window reset after expiry; expired keys swept at most once per window
"""

from zora_agent.infrastructure.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_allows_until_limit_then_denies():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=3, window_seconds=60, clock=clock)
    decisions = [limiter.hit("1.2.3.4") for _ in range(4)]
    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert decisions[2].remaining == 0
    assert decisions[3].retry_after_seconds == 60


def test_retry_after_shrinks_with_time():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    limiter.hit("ip")
    clock.now += 45.5
    assert limiter.hit("ip").retry_after_seconds == 15


def test_keys_are_independent():
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())
    assert limiter.hit("a").allowed
    assert limiter.hit("b").allowed
    assert not limiter.hit("a").allowed


def test_window_resets_after_expiry():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    limiter.hit("ip")
    clock.now += 60
    assert limiter.hit("ip").allowed


def test_expired_entries_are_swept():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=5, window_seconds=60, clock=clock)
    for key in ("a", "b", "c"):
        limiter.hit(key)
    assert len(limiter) == 3
    clock.now += 61
    limiter.hit("d")
    assert len(limiter) == 1
