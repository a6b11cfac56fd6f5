"""Unit tests for MusicProfileService and ProfileCache."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.models.catalog import ArtistRef
from src.models.recommendation import UserMusicProfile, UserRef
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.candidate_sourcer import CandidateSourcer
from src.services.profile_analyzer import ProfileAnalyzer
from src.services.profile_service import (
    CACHE_VERSION,
    MusicProfileService,
    ProfileCache,
)
from src.utils.errors import ProfileGenerationError, ProviderUnavailableError, RateLimitError
from tests.conftest import make_insights, make_raw_playlist, search_router, searched_queries


@pytest.fixture
def service(mock_history_provider: MagicMock, mock_search_provider: MagicMock) -> MusicProfileService:
    return MusicProfileService(
        history_provider=mock_history_provider,
        search_provider=mock_search_provider,
        analyzer=ProfileAnalyzer(current_year=2026),
        sourcer=CandidateSourcer(mock_search_provider, concurrency=3),
        sample_limit=25,
    )


# ======================================================================
# Profile generation
# ======================================================================


class TestGenerateProfile:
    @pytest.mark.asyncio
    async def test_end_to_end_with_mocks(
        self,
        service: MusicProfileService,
        mock_history_provider: MagicMock,
        mock_search_provider: MagicMock,
        user: UserRef,
    ) -> None:
        mock_search_provider.search.side_effect = search_router(
            {'"k-pop" hits charts': [make_raw_playlist("kp", "K-Pop Hits", followers=80_000, track_count=50)]}
        )

        profile = await service.generate_profile(user)

        assert profile.insights.top_genres[0].genre == "k-pop"
        assert [r.playlist.id for r in profile.recommendations] == ["kp"]
        assert profile.recommendations[0].matching_genres == ["k-pop"]
        assert profile.last_updated.tzinfo is not None
        mock_history_provider.get_top_tracks.assert_awaited_once_with(25)

    @pytest.mark.asyncio
    async def test_top_tracks_failure_is_fatal(
        self, service: MusicProfileService, mock_history_provider: MagicMock, user: UserRef
    ) -> None:
        mock_history_provider.get_top_tracks.side_effect = RateLimitError(provider_name="spotify")

        with pytest.raises(ProfileGenerationError) as exc_info:
            await service.generate_profile(user)

        assert exc_info.value.provider_name == "mock-history"
        assert exc_info.value.message == "Unable to analyze your music preferences"

    @pytest.mark.asyncio
    async def test_optional_sources_degrade(
        self, service: MusicProfileService, mock_history_provider: MagicMock, user: UserRef
    ) -> None:
        mock_history_provider.get_recently_played.side_effect = ProviderUnavailableError()
        mock_history_provider.get_saved_tracks.side_effect = RateLimitError()
        mock_history_provider.get_followed_artists.side_effect = ProviderUnavailableError()

        profile = await service.generate_profile(user)

        assert profile.insights.artist_diversity == 33

    @pytest.mark.asyncio
    async def test_followed_artists_drive_artist_queries(
        self,
        service: MusicProfileService,
        mock_history_provider: MagicMock,
        mock_search_provider: MagicMock,
        user: UserRef,
    ) -> None:
        mock_history_provider.get_followed_artists.return_value = [ArtistRef(id="b", name="Bonobo")]
        await service.generate_profile(user)

        queries = searched_queries(mock_search_provider)
        assert "Bonobo" in queries
        assert "Taylor Swift" not in queries

    @pytest.mark.asyncio
    async def test_no_history_still_recommends(
        self,
        service: MusicProfileService,
        mock_history_provider: MagicMock,
        mock_search_provider: MagicMock,
        user: UserRef,
    ) -> None:
        mock_history_provider.get_top_tracks.return_value = []
        mock_search_provider.search.side_effect = search_router(
            {"chill mood": [make_raw_playlist("m1", "Chill Evening", track_count=30)]}
        )

        profile = await service.generate_profile(user)

        assert profile.insights.top_genres == []
        assert [r.playlist.id for r in profile.recommendations] == ["m1"]


# ======================================================================
# Cache
# ======================================================================


def _profile() -> UserMusicProfile:
    return UserMusicProfile(
        insights=make_insights(genres=[("jazz", 40)]),
        recommendations=[],
        last_updated=datetime(2026, 3, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_service() -> MagicMock:
    mock = MagicMock(spec=MusicProfileService)
    mock.generate_profile = AsyncMock(return_value=_profile())
    return mock


@pytest.fixture
def memory_cache() -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=10, ttl=60)


class TestProfileCache:
    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(
        self, mock_service: MagicMock, memory_cache: MemoryCacheProvider, user: UserRef
    ) -> None:
        cache = ProfileCache(mock_service, memory_cache)

        first = await cache.get_or_generate(user)
        second = await cache.get_or_generate(user)

        assert first == second
        mock_service.generate_profile.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_force_refresh_regenerates(
        self, mock_service: MagicMock, memory_cache: MemoryCacheProvider, user: UserRef
    ) -> None:
        cache = ProfileCache(mock_service, memory_cache)
        await cache.get_or_generate(user)
        await cache.get_or_generate(user, force_refresh=True)
        assert mock_service.generate_profile.await_count == 2

    @pytest.mark.asyncio
    async def test_entry_shape(
        self, mock_service: MagicMock, memory_cache: MemoryCacheProvider, user: UserRef
    ) -> None:
        await ProfileCache(mock_service, memory_cache).get_or_generate(user)
        entry = await memory_cache.get("music_intelligence_user-1")
        assert entry["version"] == CACHE_VERSION
        assert entry["user_id"] == "user-1"
        assert entry["profile"]["insights"]["top_genres"][0]["genre"] == "jazz"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "entry",
        [
            {"version": "1.0", "user_id": "user-1", "profile": {}},
            {"version": CACHE_VERSION, "user_id": "someone-else", "profile": {}},
            {"version": CACHE_VERSION, "user_id": "user-1", "profile": {"bogus": True}},
            {"version": CACHE_VERSION, "user_id": "user-1"},
            "not-a-dict",
        ],
    )
    async def test_stale_or_corrupt_entries_are_discarded(
        self,
        mock_service: MagicMock,
        memory_cache: MemoryCacheProvider,
        user: UserRef,
        entry: object,
    ) -> None:
        await memory_cache.set("music_intelligence_user-1", entry)
        cache = ProfileCache(mock_service, memory_cache)

        assert await cache.get(user) is None
        assert await memory_cache.exists("music_intelligence_user-1") is False

    @pytest.mark.asyncio
    async def test_invalidate(
        self, mock_service: MagicMock, memory_cache: MemoryCacheProvider, user: UserRef
    ) -> None:
        cache = ProfileCache(mock_service, memory_cache)
        await cache.get_or_generate(user)
        await cache.invalidate(user)
        assert await cache.get(user) is None

    @pytest.mark.asyncio
    async def test_entries_are_per_user(
        self, mock_service: MagicMock, memory_cache: MemoryCacheProvider, user: UserRef
    ) -> None:
        cache = ProfileCache(mock_service, memory_cache)
        await cache.get_or_generate(user)
        assert await cache.get(UserRef(id="user-2")) is None

    @pytest.mark.asyncio
    async def test_ttl_is_passed_to_provider(self, mock_service: MagicMock, user: UserRef) -> None:
        provider = MagicMock()
        provider.get = AsyncMock(return_value=None)
        provider.set = AsyncMock()
        await ProfileCache(mock_service, provider, ttl=123).get_or_generate(user)
        assert provider.set.await_args.kwargs["ttl"] == 123
