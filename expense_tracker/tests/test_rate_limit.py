from __future__ import annotations

from expense_tracker.shared.middleware.rate_limit import InMemoryRateLimiter


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_limiter_blocks_after_limit_per_key() -> None:
    limiter = InMemoryRateLimiter(limit=3, window_seconds=60.0)

    assert [limiter.allow("1.2.3.4") for _ in range(4)] == [True, True, True, False]
    assert limiter.allow("5.6.7.8")


def test_limiter_window_expires() -> None:
    clock = _Clock()
    limiter = InMemoryRateLimiter(limit=1, window_seconds=10.0, clock=clock)

    assert limiter.allow("k")
    assert not limiter.allow("k")
    clock.now += 11
    assert limiter.allow("k")


def test_retry_after_counts_down() -> None:
    clock = _Clock()
    limiter = InMemoryRateLimiter(limit=2, window_seconds=30.0, clock=clock)

    assert limiter.retry_after("k") == 0.0
    limiter.allow("k")
    clock.now += 5
    limiter.allow("k")

    assert limiter.retry_after("k") == 25.0
    clock.now += 26
    assert limiter.retry_after("k") == 0.0
