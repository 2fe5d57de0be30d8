import logging
import time
from typing import Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from backend.tube_api.utils.redis_client import RedisClient

logger = logging.getLogger(__name__)

RATE_LIMIT_KEY_PREFIX = "ratelimit"


def get_client_ip(request: Request, trust_proxy: bool = False) -> str:
    """Peer address, or the first X-Forwarded-For hop when a trusted proxy sets it."""
    if trust_proxy:
        forwarded = (request.headers.get("x-forwarded-for") or "").strip()
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class MemoryRateLimiter:
    """
    Fixed-window counters kept in this process only. Counters are lost on
    restart and are not shared between workers.
    """

    def __init__(self, window_seconds: int, max_requests: int):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._counts: Dict[str, int] = {}
        self._active_window: Optional[int] = None

    def _current_window(self) -> int:
        return int(time.time() // self.window_seconds)

    async def hit(self, client_key: str) -> int:
        window = self._current_window()
        if window != self._active_window:
            # every stored counter belongs to the active window
            self._counts = {}
            self._active_window = window

        count = self._counts.get(client_key, 0) + 1
        self._counts[client_key] = count
        return count


class RedisRateLimiter:
    """Same fixed-window policy, with counters shared through Redis."""

    def __init__(self, window_seconds: int, max_requests: int):
        self.window_seconds = window_seconds
        self.max_requests = max_requests

    async def hit(self, client_key: str) -> int:
        window = int(time.time() // self.window_seconds)
        key = f"{RATE_LIMIT_KEY_PREFIX}:{client_key}:{window}"
        return await RedisClient.incr_window(key, self.window_seconds)


def build_rate_limiter(storage: str, window_seconds: int, max_requests: int):
    if storage == "redis":
        return RedisRateLimiter(window_seconds, max_requests)
    if storage != "memory":
        logger.warning(f"[RateLimit] Unknown storage '{storage}', falling back to memory")
    return MemoryRateLimiter(window_seconds, max_requests)


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter, trust_proxy: bool = False):
        super().__init__(app)
        self.limiter = limiter
        self.trust_proxy = trust_proxy

    async def dispatch(self, request: Request, call_next):
        client_ip = get_client_ip(request, self.trust_proxy)
        count = await self.limiter.hit(client_ip)
        remaining = max(self.limiter.max_requests - count, 0)

        if count > self.limiter.max_requests:
            logger.warning(f"[RateLimit] {client_ip} exceeded {self.limiter.max_requests} requests")
            minutes = max(self.limiter.window_seconds // 60, 1)
            return JSONResponse(
                {
                    "error": "Too many requests from this IP, please try again later.",
                    "retryAfter": f"{minutes} minutes",
                },
                status_code=429,
                headers={
                    "X-RateLimit-Limit": str(self.limiter.max_requests),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(self.limiter.window_seconds),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
