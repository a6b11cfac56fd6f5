"""Cache providers.

MemoryCacheProvider keeps generated profiles in process memory.  It is not
shared across workers; a multi-worker deployment would add another
ICacheProvider adapter without touching the profile service.
"""

from src.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
