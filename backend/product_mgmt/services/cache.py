"""
Redis Caching Service

Caches category listings to reduce database load.
Cache invalidation happens on:
- Category create, update or delete
- TTL expiration
"""
import json
import hashlib
from typing import Optional, Any
from datetime import timedelta
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from product_mgmt.config import get_settings

logger = logging.getLogger(__name__)

# Cache key prefixes
PREFIX_CATEGORIES = "categories:"

# Default TTLs
TTL_CATEGORIES = timedelta(hours=1)  # Categories rarely change


class CacheService:
    """Redis-based caching service with fallback to no-cache."""

    def __init__(self):
        self._client: Optional[redis.Redis] = None
        self._connected = False

    async def connect(self, url: Optional[str] = None):
        """Initialize Redis connection."""
        if self._connected:
            return

        try:
            self._client = redis.from_url(
                url or get_settings().redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            # Test connection
            await self._client.ping()
            self._connected = True
            logger.info("Redis cache connected")
        except (RedisError, OSError) as e:
            logger.warning(f"Redis not available, caching disabled: {e}")
            self._client = None
            self._connected = False

    async def disconnect(self):
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._connected = False

    def _make_key(self, prefix: str, params: dict) -> str:
        """Generate cache key from prefix and parameters."""
        # Sort params for consistent key generation
        param_str = json.dumps(params, sort_keys=True, default=str)
        hash_val = hashlib.md5(param_str.encode()).hexdigest()[:12]
        return f"{prefix}{hash_val}"

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        if not self._client:
            return None

        try:
            value = await self._client.get(key)
            if value:
                return json.loads(value)
            return None
        except RedisError as e:
            logger.error(f"Cache get error: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: timedelta = TTL_CATEGORIES):
        """Set value in cache with TTL."""
        if not self._client:
            return

        try:
            await self._client.setex(
                key,
                int(ttl.total_seconds()),
                json.dumps(value, default=str)
            )
        except RedisError as e:
            logger.error(f"Cache set error: {e}")

    async def delete_pattern(self, pattern: str):
        """Delete all keys matching pattern."""
        if not self._client:
            return

        try:
            cursor = 0
            while True:
                cursor, keys = await self._client.scan(cursor, match=pattern, count=100)
                if keys:
                    await self._client.delete(*keys)
                if cursor == 0:
                    break
            logger.info(f"Cleared cache keys matching: {pattern}")
        except RedisError as e:
            logger.error(f"Cache delete pattern error: {e}")

    async def get_categories(self, params: dict) -> Optional[dict]:
        """Get a cached category listing."""
        return await self.get(self._make_key(PREFIX_CATEGORIES, params))

    async def set_categories(self, params: dict, data: dict):
        """Cache a category listing."""
        await self.set(self._make_key(PREFIX_CATEGORIES, params), data, TTL_CATEGORIES)

    async def invalidate_categories(self):
        """Invalidate all category listing caches."""
        await self.delete_pattern(f"{PREFIX_CATEGORIES}*")

    @property
    def is_connected(self) -> bool:
        """Check if cache is available."""
        return self._connected


# Singleton instance
cache = CacheService()
