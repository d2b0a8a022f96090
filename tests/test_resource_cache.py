"""Tests for the short-lived launcher resource cache."""

import asyncio

import pytest

from gameres.models import GameBiz
from gameres.services import MemoryCache, RemoteFetchError, RemoteResourceCache, get_memory_cache

from factories import FakeClock, FakeLauncherClient, launcher_resource


def make_cache(client: FakeLauncherClient, clock: FakeClock, ttl: float = 10.0) -> RemoteResourceCache:
    return RemoteResourceCache(client, cache=MemoryCache(clock=clock), ttl=ttl)  # type: ignore[arg-type]


def test_fresh_entry_is_served_without_fetching() -> None:
    clock = FakeClock()
    client = FakeLauncherClient(launcher_resource())
    cache = make_cache(client, clock)

    first = asyncio.run(cache.get(GameBiz.HK4E_CN))
    clock.advance(9.5)
    second = asyncio.run(cache.get(GameBiz.HK4E_CN))

    assert first is second
    assert client.calls == [GameBiz.HK4E_CN]


def test_expired_entry_is_refetched() -> None:
    clock = FakeClock()
    client = FakeLauncherClient(launcher_resource("1.3.0"))
    cache = make_cache(client, clock)

    asyncio.run(cache.get(GameBiz.HK4E_CN))
    client.resource = launcher_resource("1.4.0")
    clock.advance(10.5)
    refreshed = asyncio.run(cache.get(GameBiz.HK4E_CN))

    assert str(refreshed.game.latest.version) == "1.4.0"
    assert len(client.calls) == 2


def test_entries_are_keyed_by_identity() -> None:
    clock = FakeClock()
    client = FakeLauncherClient(launcher_resource())
    cache = make_cache(client, clock)

    asyncio.run(cache.get(GameBiz.HK4E_CN))
    asyncio.run(cache.get(GameBiz.HK4E_GLOBAL))
    asyncio.run(cache.get(GameBiz.HK4E_CN))

    assert client.calls == [GameBiz.HK4E_CN, GameBiz.HK4E_GLOBAL]


def test_failed_fetch_propagates_and_is_not_cached() -> None:
    clock = FakeClock()
    client = FakeLauncherClient(error=RemoteFetchError("boom"))
    cache = make_cache(client, clock)

    with pytest.raises(RemoteFetchError):
        asyncio.run(cache.get(GameBiz.HKRPG_CN))

    client.error = None
    client.resource = launcher_resource()
    asyncio.run(cache.get(GameBiz.HKRPG_CN))
    assert len(client.calls) == 2


def test_failed_refresh_leaves_previous_entry() -> None:
    clock = FakeClock()
    memory = MemoryCache(clock=clock)
    client = FakeLauncherClient(launcher_resource("1.3.0"))
    cache = RemoteResourceCache(client, cache=memory, ttl=10.0)  # type: ignore[arg-type]

    original = asyncio.run(cache.get(GameBiz.HK4E_CN))
    clock.advance(11)
    client.error = RemoteFetchError("offline")
    with pytest.raises(RemoteFetchError):
        asyncio.run(cache.get(GameBiz.HK4E_CN))

    # A reader with a wider freshness window still sees the previous snapshot
    assert memory.get_item(RemoteResourceCache.cache_key(GameBiz.HK4E_CN), ttl=60) is original


def test_invalidate_forces_refetch() -> None:
    clock = FakeClock()
    client = FakeLauncherClient(launcher_resource())
    cache = make_cache(client, clock)

    asyncio.run(cache.get(GameBiz.BH3_CN))
    cache.invalidate(GameBiz.BH3_CN)
    asyncio.run(cache.get(GameBiz.BH3_CN))

    assert len(client.calls) == 2


def test_memory_cache_is_process_wide() -> None:
    assert get_memory_cache() is get_memory_cache()
