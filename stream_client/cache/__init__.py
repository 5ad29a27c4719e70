"""
Response Caching Layer.

Memoizes raw GET responses from the Stream API in an expiring store:
- MemoryCache: in-process, default backend
- RedisCache: shared across processes, degrades to no caching when down

Usage:
    from stream_client.cache import CacheKeys, create_cache

    cache = create_cache()
    cache.set(CacheKeys.response(url), {"status": 200, "body": "{}"}, ttl=300)
    raw = cache.get(CacheKeys.response(url))
"""

from typing import Optional

from stream_client.cache.base import CacheStore
from stream_client.cache.cache_keys import CacheKeys
from stream_client.cache.memory import MemoryCache
from stream_client.cache.redis_client import RedisCache
from stream_client.config import Settings, get_settings


def create_cache(settings: Optional[Settings] = None) -> CacheStore:
    """Build the cache backend selected by ``STREAM_CACHE_BACKEND``."""
    settings = settings or get_settings()
    if settings.cache_backend == "redis":
        return RedisCache(settings)
    return MemoryCache()


__all__ = [
    "CacheStore",
    "CacheKeys",
    "MemoryCache",
    "RedisCache",
    "create_cache",
]
