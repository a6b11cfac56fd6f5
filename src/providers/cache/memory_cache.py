"""In-memory cache provider built on ``cachetools.TLRUCache``.

Holds generated profiles for a single process.  Unlike a plain
``TTLCache`` every entry carries its own time-to-use, so ``set(..., ttl=)``
is honored; entries without one fall back to the provider default.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, NamedTuple

from cachetools import TLRUCache

from src.interfaces.cache_provider import ICacheProvider
from src.utils.logging import get_logger


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCacheProvider(ICacheProvider):
    """Process-local TTL cache.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used one is
        evicted.
    ttl:
        Default time-to-live in seconds.
    timer:
        Clock used for expiry; tests pass a controllable one.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl: int = 2700,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = ttl
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=max_size, ttu=_time_to_use, timer=timer
        )
        self._logger = get_logger(__name__)

    async def get(self, key: str) -> Any | None:
        entry = self._cache.get(key)
        if entry is None:
            self._logger.debug("cache_miss", key=key)
            return None
        self._logger.debug("cache_hit", key=key)
        return entry.value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        effective_ttl = self._default_ttl if ttl is None else ttl
        self._cache[key] = _Entry(value=value, ttl=effective_ttl)
        self._logger.debug("cache_set", key=key, ttl=effective_ttl)

    async def delete(self, key: str) -> None:
        self._cache.pop(key, None)
        self._logger.debug("cache_delete", key=key)

    async def exists(self, key: str) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)
