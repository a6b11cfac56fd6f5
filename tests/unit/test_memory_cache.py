"""Unit tests for the in-memory TLRU cache provider."""

from __future__ import annotations

import pytest

from src.providers.cache.memory_cache import MemoryCacheProvider


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> _Clock:
    return _Clock()


@pytest.fixture
def cache(clock: _Clock) -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=3, ttl=60, timer=clock)


class TestMemoryCacheProvider:
    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("k", {"v": 1})
        assert await cache.get("k") == {"v": 1}
        assert await cache.exists("k") is True

    @pytest.mark.asyncio
    async def test_miss(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("missing") is None
        assert await cache.exists("missing") is False

    @pytest.mark.asyncio
    async def test_default_ttl_expires(self, cache: MemoryCacheProvider, clock: _Clock) -> None:
        await cache.set("k", "v")
        clock.now = 59
        assert await cache.get("k") == "v"
        clock.now = 61
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_per_entry_ttl(self, cache: MemoryCacheProvider, clock: _Clock) -> None:
        await cache.set("short", "s", ttl=5)
        await cache.set("long", "l")
        clock.now = 10
        assert await cache.get("short") is None
        assert await cache.get("long") == "l"

    @pytest.mark.asyncio
    async def test_delete(self, cache: MemoryCacheProvider) -> None:
        await cache.set("k", "v")
        await cache.delete("k")
        await cache.delete("never-set")
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_evicts_least_recently_used(self, cache: MemoryCacheProvider) -> None:
        for key in ("a", "b", "c"):
            await cache.set(key, key)
        await cache.get("a")
        await cache.set("d", "d")
        assert len(cache) == 3
        assert await cache.get("b") is None
        assert await cache.get("a") == "a"
