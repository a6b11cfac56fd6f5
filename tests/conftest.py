"""Shared pytest fixtures for the tastegraph test suite."""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.catalog_search_provider import ICatalogSearchProvider
from src.interfaces.listening_history_provider import IListeningHistoryProvider
from src.models.catalog import AlbumRef, ArtistRef, CandidatePlaylist, Track
from src.models.insights import GenreShare, MusicInsights, PopularityBias
from src.models.recommendation import UserRef

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_track(
    track_id: str = "t1",
    name: str = "Untitled",
    artists: list[tuple[str, str]] | None = None,
    album_name: str = "",
    release_date: str | None = None,
    duration_ms: int = 200000,
    popularity: int | None = 50,
    explicit: bool = False,
) -> Track:
    return Track(
        id=track_id,
        name=name,
        artists=[ArtistRef(id=a_id, name=a_name) for a_id, a_name in (artists or [("a1", "Someone")])],
        album=AlbumRef(name=album_name, release_date=release_date),
        duration_ms=duration_ms,
        popularity=popularity,
        explicit=explicit,
    )


def make_playlist(
    playlist_id: str = "p1",
    name: str = "Playlist",
    description: str | None = None,
    followers: int = 0,
    track_count: int = 0,
    owner_name: str = "Unknown User",
) -> CandidatePlaylist:
    return CandidatePlaylist(
        id=playlist_id,
        name=name,
        description=description,
        followers=followers,
        track_count=track_count,
        owner_name=owner_name,
    )


def make_raw_playlist(
    playlist_id: str = "p1",
    name: str = "Playlist",
    description: str | None = "",
    followers: int | None = 0,
    track_count: int = 0,
    owner_name: str | None = "someone",
) -> dict[str, Any]:
    """A search record shaped like the catalog sends it."""
    record: dict[str, Any] = {
        "id": playlist_id,
        "name": name,
        "description": description,
        "tracks": {"href": "", "total": track_count},
        "images": [{"url": f"https://img.example/{playlist_id}.jpg", "height": 640, "width": 640}],
        "uri": f"spotify:playlist:{playlist_id}",
        "external_urls": {"spotify": f"https://open.spotify.com/playlist/{playlist_id}"},
    }
    if followers is not None:
        record["followers"] = {"href": None, "total": followers}
    if owner_name is not None:
        record["owner"] = {"id": "owner", "display_name": owner_name}
    return record


def make_insights(
    genres: list[tuple[str, int]] | None = None,
    artist_diversity: int = 50,
    discovery_rate: int | None = None,
    popularity_bias: PopularityBias = PopularityBias.MIXED,
) -> MusicInsights:
    return MusicInsights(
        top_genres=[
            GenreShare(genre=genre, count=pct / 10, percentage=pct) for genre, pct in (genres or [])
        ],
        artist_diversity=artist_diversity,
        discovery_rate=artist_diversity if discovery_rate is None else discovery_rate,
        popularity_bias=popularity_bias,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user() -> UserRef:
    return UserRef(id="user-1", display_name="Test Listener")


@pytest.fixture
def dj_nova_tracks() -> list[Track]:
    """Three remix tracks by an artist whose name reads as electronic."""
    return [
        make_track(
            track_id=f"nova-{i}",
            name="Night Drive (Remix)",
            artists=[("nova", "DJ Nova")],
            duration_ms=200000,
            popularity=85,
        )
        for i in range(3)
    ]


@pytest.fixture
def mock_search_provider() -> MagicMock:
    """ICatalogSearchProvider mock returning no results by default.

    Override ``mock_search_provider.search.side_effect`` with an async
    function of ``(query, kind="playlist", limit=20)`` for specific tests.
    """
    mock = MagicMock(spec=ICatalogSearchProvider)
    mock.get_provider_name.return_value = "mock-catalog"
    mock.is_available.return_value = True
    mock.search = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def mock_history_provider(dj_nova_tracks: list[Track]) -> MagicMock:
    """IListeningHistoryProvider mock serving the DJ Nova sample."""
    mock = MagicMock(spec=IListeningHistoryProvider)
    mock.get_provider_name.return_value = "mock-history"
    mock.is_available.return_value = True
    mock.get_top_tracks = AsyncMock(return_value=dj_nova_tracks)
    mock.get_recently_played = AsyncMock(return_value=[])
    mock.get_saved_tracks = AsyncMock(return_value=[])
    mock.get_followed_artists = AsyncMock(return_value=[])
    mock.get_current_user = AsyncMock(return_value=UserRef(id="user-1", display_name="Test Listener"))
    return mock


def search_router(routes: dict[str, list[Any]]) -> Callable[..., Any]:
    """Build a fake ``search`` returning ``routes[query]`` (empty when unknown).

    A route value that is an exception instance is raised instead.
    """

    async def _search(query: str, kind: str = "playlist", limit: int = 20) -> list[Any]:
        result = routes.get(query, [])
        if isinstance(result, BaseException):
            raise result
        return list(result)

    return _search


def searched_queries(mock: MagicMock) -> list[str]:
    """Queries a mocked ``search`` was called with, in call order."""
    return [
        call.args[0] if call.args else call.kwargs["query"]
        for call in mock.search.call_args_list
    ]
