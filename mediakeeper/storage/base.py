"""Abstract storage interfaces used by the dispatcher."""

from abc import ABC, abstractmethod
from typing import Any

DEFAULT_TTL_SECONDS = 86400


class StoreError(Exception):
    """Raised when a storage backend rejects an operation."""


class BlobStore(ABC):
    """Durable byte storage keyed by archival key."""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store *data* under *key*. Raises StoreError on failure."""


class DedupStore(ABC):
    """Key-value store for "already archived" markers with expiry."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> bool:
        """Store *value* under *key* for *ttl_seconds*. Returns success."""

    async def close(self) -> None:
        """Release backend connections."""
