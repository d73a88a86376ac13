"""Per-message and per-album "already archived" markers."""

from datetime import datetime, timezone

from loguru import logger

from mediakeeper.media.keys import generate_media_group_key, generate_message_key
from mediakeeper.storage.base import DEFAULT_TTL_SECONDS, DedupStore


class DedupService:
    """Records archived messages and albums in a DedupStore.

    A marker's existence means "already archived"; absence means not yet
    archived or expired.
    """

    def __init__(self, store: DedupStore, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.store = store
        self.ttl_seconds = ttl_seconds

    async def is_message_processed(self, message_id: int) -> bool:
        return await self.store.get(generate_message_key(message_id)) is not None

    async def mark_message_processed(self, message_id: int, keys: list[str]) -> bool:
        return await self._mark(generate_message_key(message_id), keys)

    async def is_media_group_processed(self, media_group_id: str) -> bool:
        return await self.store.get(generate_media_group_key(media_group_id)) is not None

    async def mark_media_group_processed(self, media_group_id: str, keys: list[str]) -> bool:
        return await self._mark(generate_media_group_key(media_group_id), keys)

    async def _mark(self, marker_key: str, keys: list[str]) -> bool:
        value = {
            "archived_at": datetime.now(timezone.utc).isoformat(),
            "keys": list(keys),
        }
        ok = await self.store.set(marker_key, value, self.ttl_seconds)
        if not ok:
            logger.warning(f"Could not record dedup marker {marker_key}")
        return ok
