"""
Redis client - caching of public reputation profiles.
Challenge: Connection pooling, fail gracefully when Redis is down.
Design: Single client instance, dependency injection for testability.
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Shared async Redis client (connection pool managed by redis-py)
_redis: Redis | None = None

PROFILE_PREFIX = "user-profile:"


def profile_key(user_id: int) -> str:
    return f"{PROFILE_PREFIX}{user_id}"


async def get_redis() -> Redis:
    """Get Redis connection. Used as FastAPI dependency."""
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis


async def cache_get(key: str) -> str | None:
    """Get value from cache. Returns None if miss or error (graceful degradation)."""
    try:
        client = await get_redis()
        return await client.get(key)
    except Exception as e:
        logger.warning("cache_get failed: key=%s error=%s", key, e)
        return None


async def cache_set(key: str, value: str | dict[str, Any], ttl_seconds: int = 300) -> bool:
    """Set value in cache with TTL. Dict is JSON-serialized."""
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
    """Invalidate cache keys (e.g. after a rating or completed swap)."""
    if not keys:
        return True
    try:
        client = await get_redis()
        await client.delete(*keys)
        return True
    except Exception as e:
        logger.warning("cache_delete failed: keys=%s error=%s", keys, e)
        return False


# session.info key holding cache keys to drop once the request transaction commits
STALE_KEYS = "stale_cache_keys"


async def invalidate_on_commit(session, *keys: str) -> bool:
    """
    Drop keys now and again after commit (see app.db.session.get_db). A read
    racing the open transaction can re-cache old values; the second delete clears them.
    """
    session.info.setdefault(STALE_KEYS, set()).update(keys)
    return await cache_delete(*keys)


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None
