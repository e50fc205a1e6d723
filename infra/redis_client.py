"""
Redis-backed key-value store.

Purpose:
- Persist notification records and subscription documents in Redis
- Implement the prefix scan used for per-recipient listing with SCAN MATCH
  (non-blocking, unlike KEYS)
- Lazily create the async connection on first use

Usage:
- store = RedisKeyValueStore(settings.REDIS_URL)
- await store.set(key, b"...") / await store.get(key)
- await store.list_with_prefix("notifications/recipients/recipient/ab/cd/.../")

Production notes:
- Errors are not swallowed here: a failed GET/SET/DEL propagates so callers
  never mistake an outage for an empty mailbox
- Keys are written without TTL; expiry is evaluated on read from each
  record's dateCreated + maxAge
- Monitor memory and eviction policies (use noeviction for this keyspace)
"""
import logging
from typing import List, Optional, Tuple

import redis.asyncio as redis

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = "\\*?[]"
_MGET_BATCH = 200


def escape_glob(value: str) -> str:
    """Escape Redis glob metacharacters so `value` matches literally in SCAN MATCH."""
    return "".join("\\" + ch if ch in _GLOB_SPECIAL else ch for ch in value)


class RedisKeyValueStore:
    """Async Redis client wrapper implementing the KeyValueStore contract."""

    def __init__(self, url: str, client: Optional[redis.Redis] = None):
        self.url = url
        self.redis: Optional[redis.Redis] = client

    def _client(self) -> redis.Redis:
        if self.redis is None:
            logger.info("Creating Redis client for %s", self.url)
            self.redis = redis.Redis.from_url(self.url, decode_responses=False)
        return self.redis

    async def disconnect(self):
        """Close Redis connection."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def get(self, key: str) -> Optional[bytes]:
        return await self._client().get(key)

    async def set(self, key: str, value: bytes) -> None:
        await self._client().set(key, value)

    async def delete(self, key: str) -> None:
        await self._client().delete(key)

    async def list_with_prefix(self, prefix: str) -> List[Tuple[str, bytes]]:
        """
        Scan keys starting with `prefix` and fetch their values.

        Keys deleted between the SCAN and the MGET are skipped.
        """
        client = self._client()
        keys = set()
        async for raw_key in client.scan_iter(match=escape_glob(prefix) + "*", count=500):
            keys.add(raw_key.decode("utf-8") if isinstance(raw_key, bytes) else raw_key)

        ordered = sorted(keys)
        items: List[Tuple[str, bytes]] = []
        for start in range(0, len(ordered), _MGET_BATCH):
            batch = ordered[start:start + _MGET_BATCH]
            values = await client.mget(batch)
            items.extend((key, value) for key, value in zip(batch, values) if value is not None)

        logger.debug("SCAN %s* -> %d keys", prefix, len(items))
        return items
