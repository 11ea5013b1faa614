"""
Redis Configuration

Async Redis client for sessions.
"""

from redis.asyncio import Redis, from_url


async def init_redis(redis_url: str) -> Redis:
    """
    Initialize Redis connection.

    Call this on application startup.
    """
    client = from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    # Test connection
    await client.ping()
    return client


async def close_redis(client: Redis | None) -> None:
    """Close Redis connection."""
    if client is not None:
        await client.aclose()
