"""Interface shared by the response cache backends."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """
    Expiring key-value store for raw API responses.

    Implementations never raise: a backend failure reads as a miss and
    writes/deletes report ``False``.
    """

    def get(self, key: str) -> dict[str, Any] | None:
        """Return the stored mapping, or None if missing/expired."""

    def set(self, key: str, value: dict[str, Any], ttl: int) -> bool:
        """Store ``value`` for ``ttl`` seconds."""

    def delete(self, key: str) -> bool:
        """Remove ``key`` if present."""

    def clear(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``; returns the count."""
