"""
Redis client - item detail and platform stats cache.
Fails gracefully: a cache outage only costs extra database reads.
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis

from swapshop.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Shared async Redis client (connection pool managed by redis-py)
_redis: Redis | None = None


async def get_redis() -> Redis:
    """Get Redis connection."""
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis


async def cache_get(key: str) -> str | None:
    """Get value from cache. Returns None if miss or error."""
    if not settings.cache_enabled:
        return None
    try:
        client = await get_redis()
        return await client.get(key)
    except Exception as e:
        logger.warning("cache_get failed: key=%s error=%s", key, e)
        return None


async def cache_set(key: str, value: str | dict[str, Any], ttl_seconds: int = 300) -> bool:
    """Set value in cache with TTL. Dict is JSON-serialized."""
    if not settings.cache_enabled:
        return False
    try:
        client = await get_redis()
        if isinstance(value, dict):
            value = json.dumps(value)
        await client.setex(key, ttl_seconds, value)
        return True
    except Exception as e:
        logger.warning("cache_set failed: key=%s error=%s", key, e)
        return False


async def cache_delete(*keys: str) -> bool:
    """Invalidate cache keys (e.g. after an item status change)."""
    if not settings.cache_enabled or not keys:
        return False
    try:
        client = await get_redis()
        await client.delete(*keys)
        return True
    except Exception as e:
        logger.warning("cache_delete failed: keys=%s error=%s", keys, e)
        return False
