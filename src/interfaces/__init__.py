"""Public interface definitions for all external service providers.

Every external service tastegraph talks to is reached only through the
abstract base classes in this package.  Concrete adapters live in
``src/providers/`` and are wired up in ``src/main.py`` (API) or
``src/cli/profile.py`` (CLI); tests inject mocks built from the same
interfaces.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    IListeningHistoryProvider  →  SpotifyWebAPIProvider
    ICatalogSearchProvider     →  SpotifyWebAPIProvider
    ICacheProvider             →  MemoryCacheProvider
"""

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.catalog_search_provider import ICatalogSearchProvider
from src.interfaces.listening_history_provider import IListeningHistoryProvider

__all__ = [
    "ICacheProvider",
    "ICatalogSearchProvider",
    "IListeningHistoryProvider",
]
