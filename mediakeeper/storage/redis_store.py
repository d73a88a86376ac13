"""Redis-backed dedup marker store."""

import json
from typing import Any

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError

from mediakeeper.storage.base import DEFAULT_TTL_SECONDS, DedupStore


class RedisDedupStore(DedupStore):
    """Markers stored as plain string keys with ``EX`` expiry.

    Backend failures never propagate: ``get`` degrades to "absent" and
    ``set`` to ``False``.
    """

    def __init__(self, client: Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisDedupStore":
        return cls(Redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        try:
            value = await self._client.get(key)
        except RedisError as e:
            logger.error(f"Error getting key {key} from Redis: {e}")
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> bool:
        serialized = value if isinstance(value, str) else json.dumps(value)
        try:
            await self._client.set(key, serialized, ex=ttl_seconds)
        except RedisError as e:
            logger.error(f"Error setting key {key} in Redis: {e}")
            return False
        return True

    async def close(self) -> None:
        await self._client.aclose()
