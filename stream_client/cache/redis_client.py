"""
Redis-backed response cache.

Provides:
- Lazy connection pooling
- JSON serialization of raw responses
- SETEX-based expiry
- Graceful degradation when Redis is unavailable
"""

import json
from typing import Any, Optional

import redis
from redis.exceptions import ConnectionError, TimeoutError

from stream_client.cache.cache_keys import CacheKeys
from stream_client.config import Settings, get_settings
from stream_client.logging import get_logger

logger = get_logger("cache.redis")


class RedisCache:
    """
    Redis cache client with connection pooling.

    Features:
    - Connection pool created on first use
    - JSON serialization
    - Graceful fallback (every read misses) when Redis is unavailable

    Usage:
        from stream_client.cache import RedisCache

        cache = RedisCache()
        cache.set("key", {"status": 200, "body": "{}"}, ttl=300)
        data = cache.get("key")
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional["redis.Redis"] = None,
    ):
        self._settings = settings
        self._pool: Optional["redis.ConnectionPool"] = None
        self._client = client
        self._initialized = False
        self._available = False

    def initialize(self, force: bool = False) -> bool:
        """
        Initialize Redis connection pool.

        Args:
            force: Force re-initialization even if already initialized

        Returns:
            True if Redis is available and connected, False otherwise
        """
        if self._initialized and not force:
            return self._available

        try:
            if self._client is None:
                settings = self._settings or get_settings()
                self._pool = redis.ConnectionPool(
                    host=settings.redis_host,
                    port=settings.redis_port,
                    db=settings.redis_db,
                    password=settings.redis_password,
                    max_connections=50,
                    socket_timeout=5,
                    socket_connect_timeout=5,
                    decode_responses=False,  # We handle encoding ourselves
                )
                self._client = redis.Redis(connection_pool=self._pool)

            self._client.ping()

            self._available = True
            self._initialized = True
            logger.info("redis_connected")
            return True

        except (ConnectionError, TimeoutError) as e:
            logger.warning("redis_connection_failed", error=str(e))
        except redis.RedisError as e:
            logger.warning("redis_init_error", error=str(e))

        self._available = False
        self._initialized = True
        return False

    @property
    def client(self) -> Optional["redis.Redis"]:
        """Get Redis client, initializing on first access."""
        if not self._initialized:
            self.initialize()

        if not self._available:
            return None
        return self._client

    @property
    def is_available(self) -> bool:
        """Check if Redis is available."""
        if not self._initialized:
            self.initialize()
        return self._available

    def get(self, key: str) -> dict[str, Any] | None:
        """
        Get a cached response.

        Args:
            key: Cache key

        Returns:
            Parsed JSON data or None if not found/unavailable
        """
        client = self.client
        if client is None:
            return None

        try:
            data = client.get(key)
            if data is None:
                return None
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            parsed = json.loads(data)
            return parsed if isinstance(parsed, dict) else None
        except (json.JSONDecodeError, UnicodeDecodeError, redis.RedisError) as e:
            logger.debug("cache_get_error", key=key, error=str(e))
            return None

    def set(self, key: str, value: dict[str, Any], ttl: int = 300) -> bool:
        """
        Store a response.

        Args:
            key: Cache key
            value: Data to cache (must be JSON-serializable)
            ttl: Time-to-live in seconds (default: 5 minutes)

        Returns:
            True if cached successfully, False otherwise
        """
        client = self.client
        if client is None or ttl <= 0:
            return False

        try:
            client.setex(key, ttl, json.dumps(value).encode("utf-8"))
            return True
        except (TypeError, redis.RedisError) as e:
            logger.debug("cache_set_error", key=key, error=str(e))
            return False

    def delete(self, key: str) -> bool:
        """Delete a key from cache."""
        client = self.client
        if client is None:
            return False

        try:
            client.delete(key)
            return True
        except redis.RedisError:
            return False

    def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a pattern.

        Args:
            pattern: Redis pattern (e.g., "wp_stream_*")

        Returns:
            Number of keys deleted
        """
        client = self.client
        if client is None:
            return 0

        try:
            keys = list(client.scan_iter(match=pattern))
            if not keys:
                return 0
            return int(client.delete(*keys))
        except redis.RedisError:
            return 0

    def clear(self, prefix: str = CacheKeys.PREFIX_RESPONSE) -> int:
        """Drop every cached response stored under ``prefix``."""
        deleted = self.delete_pattern(CacheKeys.response_pattern(prefix))
        logger.info("cache_cleared", prefix=prefix, deleted=deleted)
        return deleted

    def health_check(self) -> dict[str, Any]:
        """
        Get cache health status.

        Returns:
            Dictionary with health information
        """
        status: dict[str, Any] = {
            "available": self.is_available,
            "initialized": self._initialized,
        }

        client = self.client
        if client is None:
            status["status"] = "unavailable"
            return status

        try:
            memory_info = client.info("memory")
            if isinstance(memory_info, dict):
                status["memory_used"] = memory_info.get("used_memory_human", "unknown")
            status["status"] = "healthy"
        except redis.RedisError as e:
            logger.warning("redis_health_check_failed", error=str(e))
            status["status"] = "degraded"

        return status
