"""
In-process response cache.

Implements the same interface as RedisCache so the client can run without a
Redis server. Backed by a cachetools TLRUCache: every entry carries its own
TTL, expired entries are swept on each write, and the map is bounded by
``maxsize`` (least recently used entries go first).
"""

from __future__ import annotations

import copy
import time
from collections.abc import Callable
from typing import Any, Dict, Optional, Tuple

from cachetools import TLRUCache  # type: ignore[import-untyped]

from stream_client.logging import get_logger

logger = get_logger("cache.memory")


def _entry_expiry(key: str, entry: Tuple[int, Dict[str, Any]], now: float) -> float:
    ttl, _ = entry
    return now + ttl


class MemoryCache:
    def __init__(
        self,
        maxsize: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        # key -> (ttl, value)
        self._entries: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_entry_expiry, timer=clock)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return copy.deepcopy(entry[1])

    def set(self, key: str, value: Dict[str, Any], ttl: int = 300) -> bool:
        if ttl <= 0:
            return False
        self._entries[key] = (ttl, copy.deepcopy(value))
        return True

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self, prefix: str = "") -> int:
        """Drop every entry whose key starts with ``prefix``."""
        self._entries.expire()
        keys = [key for key in list(self._entries.keys()) if key.startswith(prefix)]
        for key in keys:
            self._entries.pop(key, None)
        logger.info("cache_cleared", prefix=prefix, deleted=len(keys))
        return len(keys)

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)
