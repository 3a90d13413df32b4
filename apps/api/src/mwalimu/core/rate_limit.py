"""
Rate Limiting Module

Sliding-window rate limiting for public endpoints, backed by Redis sorted
sets. Falls back to in-memory windows when Redis is unavailable or fails;
the fallback is per-process and does not hold across server instances.

School creation is public because it happens during sign-up, before the
user has an account, so it is limited per client IP.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import HTTPException, Request, status
from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

MEMORY_SWEEP_INTERVAL_SECONDS = 60


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


class RateLimiter:
    """Sliding-window limiter over Redis with an in-memory fallback."""

    def __init__(self, redis: Redis | None = None):
        self._redis = redis
        # {key: (window_seconds, [timestamp, ...])}
        self._memory_store: dict[str, tuple[int, list[float]]] = {}
        self._last_sweep = 0.0

    async def _check_redis(self, redis: Redis, key: str, limit: int, window_seconds: int) -> bool:
        now = time.time()
        window_start = now - window_seconds

        pipe = redis.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zcard(key)
        pipe.zadd(key, {str(now): now})
        pipe.expire(key, window_seconds)

        results = await pipe.execute()
        current_count = results[1]

        return current_count < limit

    def _check_memory(self, key: str, limit: int, window_seconds: int) -> bool:
        now = time.time()
        if now - self._last_sweep >= MEMORY_SWEEP_INTERVAL_SECONDS:
            self._sweep(now)

        _, entries = self._memory_store.get(key, (window_seconds, []))
        timestamps = [ts for ts in entries if ts > now - window_seconds]
        if len(timestamps) >= limit:
            self._memory_store[key] = (window_seconds, timestamps)
            return False

        timestamps.append(now)
        self._memory_store[key] = (window_seconds, timestamps)
        return True

    def _sweep(self, now: float) -> None:
        """Drop keys with no requests left in their window."""
        for key, (window_seconds, timestamps) in list(self._memory_store.items()):
            if not timestamps or timestamps[-1] <= now - window_seconds:
                del self._memory_store[key]
        self._last_sweep = now

    async def check(self, key: str, limit: int, window_seconds: int) -> bool:
        """
        Record a request and report whether it is within the limit.

        Args:
            key: Rate limit key (e.g., "rate_limit:10.0.0.1:/api/v1/schools")
            limit: Maximum requests allowed in the window
            window_seconds: Window length in seconds

        Returns:
            True if the request is allowed, False if the limit is exceeded
        """
        if self._redis is not None:
            try:
                return await self._check_redis(self._redis, key, limit, window_seconds)
            except (RedisError, OSError) as e:
                logger.warning(f"Redis rate limit check failed, using memory: {e}")

        return self._check_memory(key, limit, window_seconds)


def client_ip_key(request: Request) -> str:
    """Rate limit key from client IP and request path."""
    client_ip = request.client.host if request.client else "unknown"
    return f"rate_limit:{client_ip}:{request.url.path}"


def rate_limit(
    limit: int,
    window_seconds: int,
    key_func: Callable[[Request], str] = client_ip_key,
) -> Callable[[Request], Awaitable[None]]:
    """
    Build a FastAPI dependency enforcing a rate limit.

    The limiter is read from `request.app.state.rate_limiter`; when none is
    configured the dependency lets every request through.

    Usage:
        @router.post("", dependencies=[Depends(rate_limit(10, 60))])
        async def create(...):
            ...

    Raises:
        RateLimitExceeded: When the limit is exceeded (HTTP 429)
    """

    async def dependency(request: Request) -> None:
        limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
        if limiter is None:
            return

        key = key_func(request)
        if not await limiter.check(key, limit, window_seconds):
            logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
            raise RateLimitExceeded(limit, window_seconds)

    return dependency


__all__ = [
    "RateLimiter",
    "RateLimitExceeded",
    "client_ip_key",
    "rate_limit",
]
