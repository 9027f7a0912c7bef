# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-client sliding-window limits for the credential endpoints."""

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from threading import Lock

from flask import jsonify, request

from expense_tracker.shared.config import load_config
from expense_tracker.shared.logging import logger
from expense_tracker.shared.middleware.request_logger import client_ip


class InMemoryRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = Lock()

    @property
    def window(self) -> float:
        return self._window

    def _prune(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] > self._window:
            hits.popleft()

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            self._prune(hits, now)
            if len(hits) >= self._limit:
                return False
            hits.append(now)
            return True

    def retry_after(self, key: str) -> float:
        """Seconds until ``key`` may be admitted again (0 when it already may)."""

        now = self._clock()
        with self._lock:
            hits = self._hits.get(key)
            if not hits:
                return 0.0
            self._prune(hits, now)
            if len(hits) < self._limit:
                return 0.0
            return max(0.0, self._window - (now - hits[0]))


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    config = load_config()

    def decorator(f: Callable):
        if not config.security.enable_rate_limit:
            return f

        limiter = InMemoryRateLimiter(
            limit or config.security.rate_limit_requests,
            window_seconds or config.security.rate_limit_window,
        )

        @wraps(f)
        def wrapper(*args, **kwargs):
            key = f"{request.endpoint}:{client_ip(request)}"
            if not limiter.allow(key):
                wait = limiter.retry_after(key)
                logger.warning(
                    f"rate_limit: rejected {request.method} {request.path} "
                    f"(client={client_ip(request)}, retry_after={wait:.0f}s)"
                )
                response = jsonify({"error": "rate_limited"})
                response.headers["Retry-After"] = str(max(1, math.ceil(wait)))
                return response, 429
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]
