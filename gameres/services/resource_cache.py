"""Short-lived caching of launcher resource descriptors."""

import time
from collections.abc import Callable
from typing import Any

import structlog

from ..models.game import GameBiz
from ..models.resource import LauncherGameResource
from .launcher_client import LauncherClient

log = structlog.stdlib.get_logger()

DEFAULT_RESOURCE_TTL = 10.0


class MemoryCache:
    """Process-wide key/value store whose entries expire by insertion time.

    Freshness is decided by the reader (``get_item(key, ttl)``), so the same
    entry can be considered fresh by one caller and stale by another.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._items: dict[str, tuple[float, Any]] = {}

    def get_item(self, key: str, ttl: float) -> Any | None:
        entry = self._items.get(key)
        if entry is None:
            return None
        inserted_at, value = entry
        if self._clock() - inserted_at > ttl:
            return None
        return value

    def set_item(self, key: str, value: Any) -> None:
        self._items[key] = (self._clock(), value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


_memory_cache: MemoryCache | None = None


def get_memory_cache() -> MemoryCache:
    """Get the global memory cache instance."""
    global _memory_cache
    if _memory_cache is None:
        _memory_cache = MemoryCache()
    return _memory_cache


class RemoteResourceCache:
    """Returns a launcher resource descriptor at most ``ttl`` seconds old.

    Concurrent misses are not deduplicated and failed fetches are not cached:
    the error propagates and the cache is left as it was.
    """

    def __init__(
        self,
        client: LauncherClient,
        cache: MemoryCache | None = None,
        ttl: float = DEFAULT_RESOURCE_TTL,
    ) -> None:
        self._client = client
        self._cache = cache if cache is not None else get_memory_cache()
        self._ttl = ttl

    @staticmethod
    def cache_key(biz: GameBiz) -> str:
        return f"launcher_resource_{biz.value}"

    async def get(self, biz: GameBiz) -> LauncherGameResource:
        """Cached descriptor of ``biz``, fetched again when missing or expired.

        Raises:
            RemoteFetchError: If a fetch was needed and failed
        """
        key = self.cache_key(biz)
        resource = self._cache.get_item(key, self._ttl)
        if resource is not None:
            log.debug("Launcher resource cache hit", biz=biz.value)
            return resource

        log.debug("Launcher resource cache miss", biz=biz.value)
        resource = await self._client.get_launcher_game_resource(biz)
        self._cache.set_item(key, resource)
        return resource

    def invalidate(self, biz: GameBiz) -> None:
        self._cache.remove_item(self.cache_key(biz))
