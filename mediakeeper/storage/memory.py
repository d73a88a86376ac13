"""In-process stores for local development and tests."""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable

from loguru import logger

from mediakeeper.storage.base import DEFAULT_TTL_SECONDS, BlobStore, DedupStore


@dataclass
class StoredObject:
    data: bytes
    content_type: str


class MemoryBlobStore(BlobStore):
    """Keeps uploaded objects in a dict."""

    def __init__(self):
        self.objects: dict[str, StoredObject] = {}

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        self.objects[key] = StoredObject(data=bytes(data), content_type=content_type)
        logger.debug(f"Stored {key} in memory ({len(data)} bytes)")


class MemoryDedupStore(DedupStore):
    """Dict-backed marker store.

    Expired entries are dropped when read and swept on every write.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}  # key → (value, expires_at)

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> bool:
        serialized = value if isinstance(value, str) else json.dumps(value)
        now = self._clock()
        self._sweep(now)
        self._entries[key] = (serialized, now + ttl_seconds)
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
