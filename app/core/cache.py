"""
Reference Data Cache
--------------------
Short-lived Redis cache for reference-data lists.

Values are stored as JSON under keys such as ``reference:ref_country:<company>``.
The cache is strictly best effort: any Redis failure is logged and treated as a
miss so the request falls through to the database.
"""

import json
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from app.core.config_manager import settings
from app.core.redis_connection import RedisManager


class ReferenceDataCache:
    """JSON cache over the async Redis client owned by a RedisManager."""

    def __init__(
        self, redis_manager: RedisManager, default_ttl: Optional[int] = None
    ):
        self._redis_manager = redis_manager
        self.default_ttl = default_ttl or settings.cache_ttl_seconds

    async def get(self, key: str) -> Optional[Any]:
        """
        Read a cached value.

        Args:
            key: Cache key

        Returns:
            The decoded value, or None on a miss or any Redis error
        """
        try:
            raw = await self._redis_manager.client.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            logger.debug(f"Cache miss: {key}")
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store a JSON-serializable value with a TTL in seconds.

        Returns:
            bool: True if Redis accepted the write
        """
        try:
            await self._redis_manager.client.set(
                key, json.dumps(value), ex=ttl or self.default_ttl
            )
            return True
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False

    async def invalidate(self, key: str) -> None:
        try:
            await self._redis_manager.client.delete(key)
            logger.debug(f"Cache invalidated: {key}")
        except Exception as e:
            logger.warning(f"Cache invalidation failed for {key}: {e}")

    async def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        """
        Return the cached value, or call ``fetch`` and cache its result.

        Args:
            key: Cache key
            fetch: Coroutine function producing the fresh value
            ttl: Optional TTL override in seconds

        Returns:
            The cached or freshly fetched value
        """
        cached = await self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached

        value = await fetch()
        await self.set(key, value, ttl)
        return value
