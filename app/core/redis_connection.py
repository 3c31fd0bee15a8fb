"""
Redis Connection Manager
------------------------
Owns the Redis connection pool behind the reference-data cache.

Redis is optional for this service: when it cannot be reached the cache
reports misses and every read goes to PostgreSQL, so failures here are logged
as warnings rather than raised.
"""

from typing import Optional
import redis.asyncio as aioredis
from redis.asyncio.connection import ConnectionPool
from loguru import logger

from app.core.config_manager import settings


class RedisManager:
    """Lazily built connection pool and client for the cache."""

    def __init__(self):
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[aioredis.Redis] = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def initialize(self, url: Optional[str] = None) -> None:
        """
        Build the pool from ``url`` or, by default, the configured Redis URL.

        Creating the pool does not connect; the first command or ``ping()``
        does.
        """
        if self._pool is not None:
            logger.warning("Redis connection pool already initialized")
            return

        url = url or settings.redis_url
        logger.info(
            f"Initializing Redis cache connection to {settings.redis_host}:{settings.redis_port}"
        )
        self._pool = ConnectionPool.from_url(
            url,
            max_connections=settings.redis_max_connections,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
            health_check_interval=30,
        )
        self._client = aioredis.Redis(connection_pool=self._pool)

    async def close(self) -> None:
        if self._client is None:
            return

        await self._client.aclose()
        await self._pool.disconnect()
        self._client = None
        self._pool = None
        logger.info("Redis cache connections closed")

    async def ping(self) -> bool:
        """True when Redis answers; any failure means the cache is degraded."""
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except Exception as e:
            logger.warning(f"Redis ping failed, cache degraded: {e}")
            return False

    @property
    def client(self) -> aioredis.Redis:
        if self._client is None:
            raise RuntimeError("Redis not initialized. Call initialize() first.")
        return self._client


redis_manager = RedisManager()
