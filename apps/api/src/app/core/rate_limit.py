"""
Rate Limiting Module

Sliding-window rate limiting for sensitive public endpoints (login and
forgot-password). Uses Redis sorted sets when the shared client is connected
and falls back to in-memory counters otherwise.
"""

import logging
import time
from collections.abc import Callable

from fastapi import HTTPException, Request, status

from app.core.redis import get_redis

logger = logging.getLogger(__name__)

# In-memory fallback: {key: [timestamp, ...]} with a per-key expiry like Redis EXPIRE
_memory_store: dict[str, list[float]] = {}
_memory_expires_at: dict[str, float] = {}
_last_sweep = 0.0
SWEEP_INTERVAL_SECONDS = 60


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int, message: str | None = None):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": message
                or f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(client, key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using a Redis sorted set keyed by request timestamps.

    Returns:
        True if the request is allowed
    """
    now = time.time()

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now - window_seconds)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)
    results = await pipe.execute()

    return results[1] < limit


def _sweep_memory_store(now: float) -> None:
    """Drop keys whose window has fully elapsed."""
    global _last_sweep
    if now - _last_sweep < SWEEP_INTERVAL_SECONDS:
        return
    _last_sweep = now

    for key in [k for k, expires_at in _memory_expires_at.items() if expires_at <= now]:
        _memory_store.pop(key, None)
        del _memory_expires_at[key]


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using process-local storage.

    Does not coordinate across multiple server processes.
    """
    now = time.time()
    _sweep_memory_store(now)
    window = [ts for ts in _memory_store.get(key, []) if ts > now - window_seconds]

    if len(window) >= limit:
        _memory_store[key] = window
        return False

    window.append(now)
    _memory_store[key] = window
    _memory_expires_at[key] = now + window_seconds
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check whether a request identified by ``key`` is within its limit.

    Args:
        key: Unique key for this limit (e.g. "forgot_password:10.0.0.1")
        limit: Maximum requests allowed in the window
        window_seconds: Window length in seconds

    Returns:
        True if the request is allowed, False if the limit is exceeded
    """
    client = get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


def client_ip_key(prefix: str) -> Callable[[Request], str]:
    """Build a key function scoping a limit to the client IP."""

    def key_func(request: Request) -> str:
        client_ip = request.client.host if request.client else "unknown"
        return f"{prefix}:{client_ip}"

    return key_func


async def enforce_rate_limit(
    request: Request,
    prefix: str,
    limit: int,
    window_seconds: int,
    message: str | None = None,
) -> None:
    """
    Enforce a per-IP limit for the current request.

    Raises:
        RateLimitExceeded: When the limit is exceeded (HTTP 429)
    """
    key = client_ip_key(prefix)(request)
    if not await check_rate_limit(key, limit, window_seconds):
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
        raise RateLimitExceeded(limit, window_seconds, message)


__all__ = [
    "RateLimitExceeded",
    "check_rate_limit",
    "client_ip_key",
    "enforce_rate_limit",
]
