"""In-memory fixed window rate limiter keyed by client IP."""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from src.config.settings import Settings

logger = logging.getLogger(__name__)

# Only API routes are limited; /health, /docs and friends pass through
LIMITED_PREFIX = "/api/"


@dataclass
class _Window:
    started_at: float
    count: int = 0


class FixedWindowCounter:
    """Counts hits per key in fixed windows of `window_seconds`."""

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        """Forget keys whose window has ended, at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        expired = [k for k, w in self._windows.items() if now - w.started_at >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str) -> tuple[bool, int]:
        """Record a hit for `key`. Returns (allowed, retry_after_seconds)."""
        now = self._clock()
        self._sweep(now)
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            window = _Window(started_at=now)
            self._windows[key] = window

        if window.count >= self.max_requests:
            remaining = self.window_seconds - (now - window.started_at)
            return False, max(1, math.ceil(remaining))

        window.count += 1
        return True, 0

    def reset(self) -> None:
        self._windows.clear()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimiterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, settings: Settings, clock: Callable[[], float] = time.monotonic):
        super().__init__(app)
        self.counter = FixedWindowCounter(
            settings.RATE_LIMIT_MAX_REQUESTS,
            settings.RATE_LIMIT_WINDOW_SECONDS,
            clock=clock,
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(LIMITED_PREFIX):
            return await call_next(request)

        ip = _client_ip(request)
        allowed, retry_after = self.counter.hit(ip)
        if not allowed:
            logger.warning("Rate limit exceeded for %s on %s %s", ip, request.method, request.url.path)
            return JSONResponse(
                status_code=429,
                content={
                    "status": "error",
                    "error": {
                        "type": "rate_limit",
                        "message": "Too many requests, please try again later",
                        "request_id": getattr(request.state, "request_id", "unknown"),
                    },
                },
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
