"""
Redis Configuration

Async Redis client used for rate limiting.
"""

from redis.asyncio import Redis, from_url

from mwalimu.core.config import Settings


async def create_redis(settings: Settings) -> Redis:
    """
    Create a Redis client and check the connection.

    Call this from the application lifespan; the caller owns the client
    and must close it on shutdown. A client that fails the ping is closed
    before the error is raised.
    """
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise
    return client


async def close_redis(client: Redis | None) -> None:
    """Close a Redis client created by create_redis."""
    if client is not None:
        await client.aclose()
