"""
Redis Connection

Async Redis client shared by the rate limiter. Redis is optional: when it is
unreachable the rate limiter falls back to process-local counters.
"""

import logging

from redis.asyncio import Redis, from_url

from app.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Connect to Redis and verify the connection.

    Call this on application startup.
    """
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    redis_client = client
    return redis_client


def get_redis() -> Redis | None:
    """Return the shared Redis client, or None if it was never connected."""
    return redis_client


async def close_redis() -> None:
    """Close the Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
