"""
Result caching for async repository functions.
"""
import hashlib
import json
from functools import wraps
from typing import Any, Callable
from sqlalchemy.ext.asyncio import AsyncSession
import eventora.cache as cache_module
from eventora.core.logging import logger


def cached(key_prefix: str, expire: int = 300):
    """
    Cache an async function's JSON-serialisable result.

    Keys are ``<key_prefix>:<digest of the arguments>``; database sessions
    are left out of the digest.

    Usage:
        @cached('events:list', expire=60)
        async def list_events(db, **filters):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            cache = cache_module.cache
            cache_key = f"{key_prefix}:{_generate_key_from_args(args, kwargs)}"

            hit = await cache.get(cache_key)
            if hit is not None:
                logger.debug(f"Cache hit for key: {cache_key}")
                return hit

            logger.debug(f"Cache miss for key: {cache_key}")
            result = await func(*args, **kwargs)
            await cache.set(cache_key, result, expire)
            return result
        return wrapper
    return decorator


async def invalidate_prefix(prefix: str) -> int:
    """Drop every key cached under ``prefix``."""
    cleared = await cache_module.cache.delete_pattern(f"{prefix}:*")
    if cleared:
        logger.debug(f"Invalidated {cleared} cache entries under {prefix}")
    return cleared


def _generate_key_from_args(args: tuple, kwargs: dict) -> str:
    key_data = {
        "args": [str(arg) for arg in args if not _is_session(arg)],
        "kwargs": {k: str(v) for k, v in kwargs.items() if not _is_session(v)},
    }
    return hashlib.md5(json.dumps(key_data, sort_keys=True).encode()).hexdigest()


def _is_session(value) -> bool:
    return isinstance(value, AsyncSession)
