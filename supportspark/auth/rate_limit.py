"""In-memory fixed-window rate limiting for the auth endpoints.

One :class:`RateLimiter` lives on ``app.state.auth_limiter`` so each app
instance (and therefore each test client) starts with a clean slate.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow at most *limit* hits per *window* seconds for each key."""

    def __init__(
        self,
        limit: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> bool:
        """Record one request for *key*; return ``False`` once over the limit."""
        now = self._clock()
        with self._lock:
            self._hits = {
                k: v for k, v in self._hits.items() if now - v[0] < self.window
            }
            started, count = self._hits.get(key, (now, 0))
            count += 1
            self._hits[key] = (started, count)
            return count <= self.limit

    def retry_after(self, key: str) -> int:
        started, _ = self._hits.get(key, (self._clock(), 0))
        return max(0, int(self.window - (self._clock() - started)))

    def __len__(self) -> int:
        """Number of client keys with an open window."""
        return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def auth_rate_limit(request: Request) -> None:
    """FastAPI dependency: 429 once a client exceeds the auth attempt budget."""
    limiter: RateLimiter = request.app.state.auth_limiter
    key = request.client.host if request.client else "unknown"
    if not limiter.hit(key):
        logger.warning("Auth rate limit exceeded for %s on %s", key, request.url.path)
        raise HTTPException(
            status_code=429,
            detail="Too many login attempts, please try again later",
            headers={"Retry-After": str(limiter.retry_after(key))},
        )
