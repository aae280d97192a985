"""
Redis-backed cache for deployments running more than one API process.

Every operation degrades to a miss (or a no-op) when Redis is unreachable;
callers never see a cache error.
"""
from typing import Any, Optional
from redis import RedisError
from redis import asyncio as aioredis
from eventora.cache.base import BaseCache
from eventora.core.config import settings
from eventora.core.logging import logger


class RedisCache(BaseCache):
    """JSON values in Redis behind a lazily created connection pool."""

    def __init__(self, url: Optional[str] = None, max_connections: int = 20):
        self.url = url or settings.REDIS_URL
        self.max_connections = max_connections
        self._client: Optional[aioredis.Redis] = None

    def _get_client(self) -> aioredis.Redis:
        if self._client is None:
            self._client = aioredis.from_url(
                self.url,
                decode_responses=True,
                max_connections=self.max_connections,
            )
            logger.info("Redis connection pool created")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        try:
            payload = await self._get_client().get(key)
            return self.loads(payload)
        except (RedisError, OSError, ValueError) as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    async def set(self, key: str, value: Any, expire: int = 300) -> bool:
        """
        Store a value with a TTL.

        Args:
            key: Cache key
            value: JSON-serialisable value
            expire: Time to live in seconds

        Returns:
            True if the value was written
        """
        try:
            await self._get_client().set(key, self.dumps(value), ex=expire)
            return True
        except (RedisError, OSError, TypeError, ValueError) as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._get_client().delete(key))
        except (RedisError, OSError) as e:
            logger.error(f"Redis DELETE error for key {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob, walking the keyspace with SCAN."""
        try:
            client = self._get_client()
            keys = [key async for key in client.scan_iter(match=pattern, count=500)]
            if not keys:
                return 0
            return await client.delete(*keys)
        except (RedisError, OSError) as e:
            logger.error(f"Redis DELETE_PATTERN error for pattern {pattern}: {e}")
            return 0

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._get_client().exists(key))
        except (RedisError, OSError) as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection pool closed")
