# Redis caching logic
# backend/app/data_access/redis_client.py

import json
import logging
from typing import Optional, Any

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

# --- Cache keys ---
CATEGORIES_CACHE_KEY = "categories:all"
TOP_RATED_CACHE_KEY = "movies:top_rated"


class CacheRepository:
    """
    JSON read-through cache on top of an async Redis client.

    Redis failures never fail a request: reads degrade to a miss and writes
    or invalidations report False.
    """
    def __init__(self, client: redis.Redis):
        self.client = client
        logger.debug("Initialized CacheRepository.")

    async def get(self, key: str) -> Optional[Any]:
        """Gets a value from cache, deserializing JSON lists/objects."""
        try:
            value = await self.client.get(key)
            if value is None:
                logger.debug(f"Cache miss for key: {key}")
                return None

            logger.debug(f"Cache hit for key: {key}")
            if isinstance(value, bytes):
                value = value.decode("utf-8")
            try:
                if isinstance(value, str) and value.startswith(('[', '{')):
                    return json.loads(value)
                return value
            except json.JSONDecodeError:
                logger.warning(f"Failed to decode JSON from cache key {key}. Treating as a miss.")
                return None
        except RedisError as e:
            logger.error(f"Redis GET error for key {key}: {e}", exc_info=True)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Sets a value in cache, serializing lists/dicts to JSON."""
        try:
            if isinstance(value, (list, dict)):
                value_to_set = json.dumps(value)
            else:
                value_to_set = value

            logger.debug(f"Setting cache for key: {key} with TTL: {ttl_seconds}s")
            await self.client.set(key, value_to_set, ex=ttl_seconds)
            return True
        except RedisError as e:
            logger.error(f"Redis SET error for key {key}: {e}", exc_info=True)
            return False

    # --- Versioned entries ---
    # A cached list lives under "<key>:v<generation>". Writers bump the
    # generation instead of deleting, so a fill computed before the bump lands
    # under a key no reader will ask for again.

    @staticmethod
    def versioned_key(key: str, version: int) -> str:
        return f"{key}:v{version}"

    async def current_version(self, key: str) -> Optional[int]:
        """Current generation of `key`, or None if Redis cannot be reached."""
        try:
            value = await self.client.get(f"{key}:version")
            return int(value) if value is not None else 0
        except (RedisError, ValueError) as e:
            logger.error(f"Redis error reading version for key {key}: {e}", exc_info=True)
            return None

    async def bump_version(self, key: str) -> bool:
        """Invalidates every cached generation of `key`."""
        try:
            version = await self.client.incr(f"{key}:version")
            logger.debug(f"Cache key {key} moved to generation {version}")
            return True
        except RedisError as e:
            logger.error(f"Redis INCR error for key {key}: {e}", exc_info=True)
            return False
