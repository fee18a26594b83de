# =============================================================================
# app/middleware.py - Request Logging and Rate Limiting
# =============================================================================
# - client_ip(): best-effort client address behind proxies
# - log_requests(): HTTP middleware logging method, path, status and timing
# - RateLimiter: per-IP fixed-window limiter used as a route dependency
#
# Rate limit counters live in process memory. They reset on restart and
# are not shared between worker processes.
# =============================================================================

import logging
import math
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from fastapi import Request, Response

from app.config import settings
from app.exceptions import RateLimitExceededError, unhandled_exception_handler

logger = logging.getLogger(__name__)

# Expired windows are swept once per this many limiter hits
SWEEP_EVERY = 100


def client_ip(request: Request) -> str:
    """
    Client address for logging and rate limiting.

    Order: first X-Forwarded-For entry, X-Real-IP, socket peer, "unknown".
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first

    real_ip = request.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """
    Log each request on entry and exit.

    Unexpected errors are turned into the 500 envelope here, inside the
    CORS layer, so browsers can read them cross-origin.
    """
    start = time.perf_counter()
    method, path = request.method, request.url.path
    logger.info(f"{method} {path} - IP: {client_ip(request)}")

    try:
        response = await call_next(request)
    except Exception as e:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.error(f"{method} {path} - ERROR - {duration_ms:.0f}ms - {e}")
        return await unhandled_exception_handler(request, e)

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{method} {path} - {response.status_code} - {duration_ms:.0f}ms")
    return response


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """
    Fixed-window request limiter keyed by client IP.

    Use as a dependency:

        limiter = RateLimiter()

        @router.get("/listings", dependencies=[Depends(limiter)])
        async def list_listings(): ...

    Args:
        max_requests: Requests allowed per window
        window_seconds: Window length
        clock: Monotonic time source (seconds)
    """

    def __init__(
        self,
        max_requests: int | None = None,
        window_seconds: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests or settings.RATE_LIMIT_MAX_REQUESTS
        self.window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self.clock = clock
        self._windows: dict[str, _Window] = {}
        self._hits = 0

    def __len__(self) -> int:
        return len(self._windows)

    def reset(self) -> None:
        """Forget all counters."""
        self._windows.clear()
        self._hits = 0

    def _sweep(self, now: float) -> None:
        expired = [ip for ip, window in self._windows.items() if window.reset_at <= now]
        for ip in expired:
            del self._windows[ip]
        if expired:
            logger.debug(f"Rate limiter swept {len(expired)} expired windows")

    def hit(self, ip: str) -> None:
        """
        Count one request from `ip`.

        Raises:
            RateLimitExceededError: If the window's budget is spent
        """
        now = self.clock()

        self._hits += 1
        if self._hits % SWEEP_EVERY == 0:
            self._sweep(now)

        window = self._windows.get(ip)
        if window is None or window.reset_at <= now:
            self._windows[ip] = _Window(count=1, reset_at=now + self.window_seconds)
            return

        if window.count >= self.max_requests:
            retry_after = max(1, math.ceil(window.reset_at - now))
            logger.warning(f"Rate limit exceeded for {ip} (retry in {retry_after}s)")
            raise RateLimitExceededError(retry_after)

        window.count += 1

    async def __call__(self, request: Request) -> None:
        self.hit(client_ip(request))


# Shared limiter for the public collection endpoints
limiter = RateLimiter()
