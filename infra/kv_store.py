"""
Key-value store interface and in-memory backend.

Purpose:
- Define the minimal store contract the mailbox services are built on
  (get / set / delete / prefix scan)
- Provide a process-local backend for development and tests
- Select the configured backend (memory or redis)

Production notes:
- The in-memory backend is lost on restart and not shared between workers;
  use STORE_BACKEND=redis for anything multi-process
"""
import logging
from typing import Dict, List, Optional, Protocol, Tuple

from config.settings import Settings

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[bytes]: ...

    async def set(self, key: str, value: bytes) -> None: ...

    async def delete(self, key: str) -> None:
        """Remove `key`; removing a missing key is not an error."""
        ...

    async def list_with_prefix(self, prefix: str) -> List[Tuple[str, bytes]]:
        """All (key, value) pairs whose key starts with `prefix`, sorted by key."""
        ...


class InMemoryKeyValueStore:
    """Dict-backed store. Values are kept as bytes, same as the Redis backend."""

    def __init__(self):
        self._data: Dict[str, bytes] = {}

    async def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_with_prefix(self, prefix: str) -> List[Tuple[str, bytes]]:
        return sorted((k, v) for k, v in self._data.items() if k.startswith(prefix))

    def keys(self) -> List[str]:
        """Debug helper: every stored key, sorted."""
        return sorted(self._data)


def build_kv_store(settings: Settings) -> KeyValueStore:
    """Create the store selected by STORE_BACKEND."""
    backend = settings.STORE_BACKEND.lower()
    if backend == "redis":
        from infra.redis_client import RedisKeyValueStore

        logger.info("Using Redis key-value store at %s", settings.REDIS_URL)
        return RedisKeyValueStore(settings.REDIS_URL)
    if backend == "memory":
        logger.info("Using in-memory key-value store")
        return InMemoryKeyValueStore()
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r} (expected 'memory' or 'redis')")
