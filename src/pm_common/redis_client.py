"""Redis client factory — used for request rate limiting only.

Balances, pools and positions never touch Redis (those go through PostgreSQL).
"""

import redis.asyncio as aioredis

from config.settings import settings

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Get or create the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


async def hit_fixed_window(redis: aioredis.Redis, key: str, window_seconds: int) -> int:
    """INCR a fixed-window counter, starting its TTL on the first hit. Returns the count."""
    count = int(await redis.incr(key))
    if count == 1:
        await redis.expire(key, window_seconds)
    return count
