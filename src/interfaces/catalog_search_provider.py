"""Abstract base class for catalog search providers.

The catalog's own search ranking is opaque to tastegraph.  A provider
returns raw playlist records exactly as the catalog sent them; shapes are
inconsistent across results, so callers must pass every record through
:func:`src.utils.playlist_normalizer.normalize_playlist`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICatalogSearchProvider(ABC):
    """Contract for free-text catalog search."""

    @abstractmethod
    async def search(
        self,
        query: str,
        kind: str = "playlist",
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        """Search the catalog for *query*.

        Parameters
        ----------
        query:
            Free-text search string.
        kind:
            Catalog object type to search for.
        limit:
            Maximum number of records to return.

        Returns
        -------
        list[dict[str, Any]]
            Raw records; entries may be ``None`` or partially populated.

        Raises
        ------
        src.utils.errors.TasteProfileError
            If the search call fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable name for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and can be called."""
