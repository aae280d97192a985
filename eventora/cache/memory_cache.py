"""
Process-local cache with the same interface as RedisCache.

Entries carry an absolute expiry that is only checked when the key is read;
nothing runs in the background to evict them.
"""
import fnmatch
import time
from typing import Any, Dict, Optional, Tuple
from eventora.cache.base import BaseCache
from eventora.core.logging import logger


class MemoryCache(BaseCache):
    """Best-effort in-memory cache storing JSON payloads."""

    def __init__(self):
        self._store: Dict[str, Tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, payload = entry
        if time.monotonic() >= expires_at:
            self._store.pop(key, None)
            return None
        return self.loads(payload)

    async def set(self, key: str, value: Any, expire: int = 300) -> bool:
        try:
            payload = self.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Memory cache SET error for key {key}: {e}")
            return False
        self._store[key] = (time.monotonic() + expire, payload)
        return True

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        keys = [key for key in self._store if fnmatch.fnmatchcase(key, pattern)]
        for key in keys:
            self._store.pop(key, None)
        return len(keys)

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    async def close(self) -> None:
        self._store.clear()
