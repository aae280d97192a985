"""
Shared cache instance, selected by CACHE_BACKEND ("memory" or "redis").
"""
from eventora.core.config import settings
from eventora.cache.memory_cache import MemoryCache
from eventora.cache.redis_client import RedisCache


def build_cache(backend: str):
    if backend == "redis":
        return RedisCache(settings.REDIS_URL)
    if backend == "memory":
        return MemoryCache()
    raise ValueError(f"Unknown CACHE_BACKEND: {backend!r}")


cache = build_cache(settings.CACHE_BACKEND)

__all__ = ["cache", "build_cache", "MemoryCache", "RedisCache"]
