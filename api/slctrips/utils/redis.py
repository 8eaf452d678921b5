"""
Redis Connection & Caching Utilities
"""
import redis.asyncio as redis
from typing import Optional, Any
import json
import logging

from slctrips.config import settings

logger = logging.getLogger(__name__)

# Redis client instance
redis_client: Optional[redis.Redis] = None


async def init_redis():
    """Initialize Redis connection"""
    global redis_client
    logger.info("Initializing Redis connection...")
    redis_client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    try:
        await redis_client.ping()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Caching will be disabled.")


async def close_redis():
    """Close Redis connection"""
    global redis_client
    if redis_client:
        logger.info("Closing Redis connection...")
        await redis_client.close()
        logger.info("Redis connection closed")


class NoOpCache:
    """A no-op cache that does nothing - used when Redis is unavailable"""
    async def get(self, key: str) -> None:
        return None

    async def setex(self, key: str, ttl: int, value: Any) -> bool:
        return True

    async def delete(self, key: str) -> int:
        return 0

    async def ping(self) -> bool:
        return False


_noop_cache = NoOpCache()


async def get_redis() -> redis.Redis:
    """
    Dependency that provides Redis client
    Usage: cache: redis.Redis = Depends(get_redis)

    Returns a no-op cache if Redis is unavailable (graceful degradation)
    """
    if redis_client is None:
        logger.debug("Redis client not initialized, using no-op cache")
        return _noop_cache

    try:
        await redis_client.ping()
        return redis_client
    except Exception as e:
        logger.warning(f"Redis ping failed: {e}, using no-op cache")
        return _noop_cache


class CacheService:
    """
    JSON get/set on top of a Redis (or no-op) client
    """

    def __init__(self, client):
        self.client = client

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        try:
            value = await self.client.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if value:
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return None

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Set value in cache with TTL"""
        if isinstance(value, (dict, list)):
            value = json.dumps(value, default=str)
        try:
            return await self.client.setex(key, ttl, value)
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False
