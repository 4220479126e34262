"""
Fixed-window, in-memory rate limiting.

Each named limiter keeps `identifier -> (count, reset_at)`. The first
request opens a window; once `max_requests` is reached further requests
are refused until the window expires. State is per process: with several
gunicorn workers the effective limit is multiplied by the worker count.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request

from app.core.config import settings
from app.core.errors import RateLimitExceededError

logger = logging.getLogger(__name__)

# Expired windows are swept once a limiter tracks this many identifiers.
SWEEP_THRESHOLD = 10_000


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: float
    message: Optional[str] = None


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    def __init__(
        self,
        window_seconds: float,
        max_requests: int,
        message: str = "Too many requests, please try again later.",
        clock: Callable[[], float] = time.time,
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.message = message
        self._clock = clock
        self._store: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def check(self, identifier: str) -> RateLimitResult:
        now = self._clock()
        with self._lock:
            window = self._store.get(identifier)
            if window is not None and now > window.reset_at:
                del self._store[identifier]
                window = None

            if window is None:
                reset_at = now + self.window_seconds
                self._store[identifier] = _Window(count=1, reset_at=reset_at)
                return RateLimitResult(
                    allowed=True,
                    remaining=self.max_requests - 1,
                    reset_at=reset_at,
                )

            if window.count >= self.max_requests:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_at=window.reset_at,
                    message=self.message,
                )

            window.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=self.max_requests - window.count,
                reset_at=window.reset_at,
            )

    def cleanup(self) -> int:
        """Drop expired windows. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, w in self._store.items() if now > w.reset_at]
            for key in expired:
                del self._store[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._store)

    def now(self) -> float:
        return self._clock()

    def reset(self) -> None:
        with self._lock:
            self._store.clear()


rate_limiters: dict[str, RateLimiter] = {
    "api": RateLimiter(60, 100, "Too many API requests. Please try again in a minute."),
    "auth": RateLimiter(15 * 60, 5, "Too many authentication attempts. Please try again later."),
    "tasks": RateLimiter(60, 30, "Too many task operations. Please slow down."),
    "forms": RateLimiter(60, 10, "Too many form submissions. Please try again in a minute."),
}


def get_client_identifier(request: Request) -> str:
    headers = request.headers
    forwarded = headers.get("x-forwarded-for")
    ip = (
        (forwarded.split(",")[0].strip() if forwarded else None)
        or headers.get("x-real-ip")
        or headers.get("cf-connecting-ip")
        or (request.client.host if request.client else None)
        or "unknown"
    )
    if settings.APP_ENV == "development":
        return f"dev-{ip}"
    return ip


def rate_limit(name: str = "api"):
    """FastAPI dependency factory: `Depends(rate_limit("tasks"))`."""
    limiter = rate_limiters[name]

    def dependency(request: Request) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return
        identifier = get_client_identifier(request)
        if len(limiter) >= SWEEP_THRESHOLD:
            limiter.cleanup()
        result = limiter.check(identifier)
        if result.allowed:
            return
        retry_after = max(1, math.ceil(result.reset_at - limiter.now()))
        logger.warning("Rate limit %r hit by %s", name, identifier)
        raise RateLimitExceededError(
            message=result.message or "Rate limit exceeded",
            retry_after=retry_after,
            remaining=result.remaining,
            reset_at=result.reset_at,
        )

    return dependency
