"""Abstract base class for listening-history providers.

Defines the contract for reading a user's listening samples from a music
catalog: top tracks, recently played, saved tracks and followed artists.
Concrete providers own authentication and transport; the profile service
only ever sees normalized :class:`~src.models.catalog.Track` and
:class:`~src.models.catalog.ArtistRef` snapshots.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.catalog import ArtistRef, Track
from src.models.recommendation import UserRef


class IListeningHistoryProvider(ABC):
    """Contract for services that expose a user's listening history."""

    @abstractmethod
    async def get_top_tracks(self, limit: int = 50) -> list[Track]:
        """Return the user's most-played tracks.

        Raises
        ------
        src.utils.errors.TasteProfileError
            If the catalog call fails.  The profile service treats this
            failure as fatal.
        """

    @abstractmethod
    async def get_recently_played(self, limit: int = 50) -> list[Track]:
        """Return the user's recently played tracks, most recent first."""

    @abstractmethod
    async def get_saved_tracks(self, limit: int = 50) -> list[Track]:
        """Return tracks the user saved to their library."""

    @abstractmethod
    async def get_followed_artists(self, limit: int = 50) -> list[ArtistRef]:
        """Return artists the user follows."""

    @abstractmethod
    async def get_current_user(self) -> UserRef:
        """Return the user the provider is authenticated as."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable name for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and can be called."""
