"""Profile generation entry point and its per-user cache.

``MusicProfileService.generate_profile`` is the pipeline driver:

    fetch samples ─► ProfileAnalyzer ─► CandidateSourcer ─► Scorer ─► Ranker
    (concurrent)      (insights)         (async search)      (pure)    (pure)

Only the top-tracks fetch is required.  If it fails the whole generation
fails with :class:`ProfileGenerationError`; every other listening source
degrades to an empty list with a warning.

``ProfileCache`` sits in front of the service and keeps one profile per
user for ``ttl`` seconds (45 minutes by default).  Entries carry a format
version and the owning user id; a mismatch on either discards the entry.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.catalog_search_provider import ICatalogSearchProvider
from src.interfaces.listening_history_provider import IListeningHistoryProvider
from src.models.catalog import ArtistRef, Track
from src.models.recommendation import UserMusicProfile, UserRef
from src.services import ranker
from src.services.candidate_sourcer import CandidateSourcer
from src.services.profile_analyzer import ProfileAnalyzer
from src.services.scorer import Scorer
from src.utils.errors import ProfileGenerationError, TasteProfileError
from src.utils.logging import get_logger

CACHE_VERSION = "2.0"
DEFAULT_CACHE_TTL = 45 * 60


class MusicProfileService:
    """Builds a :class:`UserMusicProfile` from a user's listening history.

    The history and search providers are usually the same Spotify adapter
    but are injected separately so either can be swapped in tests.
    """

    def __init__(
        self,
        history_provider: IListeningHistoryProvider,
        search_provider: ICatalogSearchProvider,
        analyzer: ProfileAnalyzer | None = None,
        sourcer: CandidateSourcer | None = None,
        scorer: Scorer | None = None,
        sample_limit: int = 50,
        followed_artists_limit: int = 50,
    ) -> None:
        self._history = history_provider
        self._analyzer = analyzer or ProfileAnalyzer()
        self._sourcer = sourcer or CandidateSourcer(search_provider)
        self._scorer = scorer or Scorer()
        self._sample_limit = sample_limit
        self._followed_artists_limit = followed_artists_limit
        self._logger = get_logger(__name__)

    async def generate_profile(self, user: UserRef) -> UserMusicProfile:
        """Run the full pipeline for *user*.

        Raises
        ------
        ProfileGenerationError
            If the user's top tracks cannot be fetched.
        """
        self._logger.info("profile_generation_started", user_id=user.id)

        top, recent, saved, followed = await asyncio.gather(
            self._history.get_top_tracks(self._sample_limit),
            self._history.get_recently_played(self._sample_limit),
            self._history.get_saved_tracks(self._sample_limit),
            self._history.get_followed_artists(self._followed_artists_limit),
            return_exceptions=True,
        )

        if isinstance(top, BaseException):
            self._logger.error("top_tracks_fetch_failed", user_id=user.id, error=str(top))
            raise ProfileGenerationError(
                provider_name=self._history.get_provider_name()
            ) from top

        recent_tracks: list[Track] = self._optional(recent, "recently_played", user)
        saved_tracks: list[Track] = self._optional(saved, "saved_tracks", user)
        followed_artists: list[ArtistRef] = self._optional(followed, "followed_artists", user)

        insights = self._analyzer.analyze(top, recent_tracks, saved_tracks)
        candidates = await self._sourcer.source(insights, followed_artists)
        scored = self._scorer.score_all(candidates, insights)
        recommendations = ranker.rank(scored, insights)

        profile = UserMusicProfile(
            insights=insights,
            recommendations=recommendations,
            last_updated=datetime.now(tz=timezone.utc),
        )
        self._logger.info(
            "profile_generation_complete",
            user_id=user.id,
            track_samples=len(top) + len(recent_tracks) + len(saved_tracks),
            candidates=len(candidates),
            recommendations=len(recommendations),
        )
        return profile

    def _optional(self, result: Any, source: str, user: UserRef) -> list[Any]:
        if isinstance(result, BaseException):
            self._logger.warning(
                "optional_source_unavailable",
                source=source,
                user_id=user.id,
                error=str(result),
            )
            return []
        return list(result)


class ProfileCache:
    """Per-user profile cache in front of :class:`MusicProfileService`."""

    def __init__(
        self,
        service: MusicProfileService,
        cache: ICacheProvider,
        ttl: int = DEFAULT_CACHE_TTL,
    ) -> None:
        self._service = service
        self._cache = cache
        self._ttl = ttl
        self._logger = get_logger(__name__)

    @staticmethod
    def cache_key(user: UserRef) -> str:
        return f"music_intelligence_{user.id}"

    async def get(self, user: UserRef) -> UserMusicProfile | None:
        """Return the cached profile for *user*, or ``None`` if absent or stale."""
        key = self.cache_key(user)
        entry = await self._cache.get(key)
        if entry is None:
            return None

        if (
            not isinstance(entry, dict)
            or entry.get("version") != CACHE_VERSION
            or entry.get("user_id") != user.id
        ):
            self._logger.info("profile_cache_entry_discarded", user_id=user.id)
            await self._cache.delete(key)
            return None

        try:
            return UserMusicProfile.model_validate(entry["profile"])
        except (KeyError, ValidationError) as exc:
            self._logger.warning("profile_cache_entry_corrupt", user_id=user.id, error=str(exc))
            await self._cache.delete(key)
            return None

    async def put(self, user: UserRef, profile: UserMusicProfile) -> None:
        await self._cache.set(
            self.cache_key(user),
            {
                "version": CACHE_VERSION,
                "user_id": user.id,
                "profile": profile.model_dump(mode="json"),
            },
            ttl=self._ttl,
        )

    async def get_or_generate(
        self,
        user: UserRef,
        force_refresh: bool = False,
    ) -> UserMusicProfile:
        """Return a cached profile when valid, otherwise generate and store one."""
        if not force_refresh:
            cached = await self.get(user)
            if cached is not None:
                self._logger.debug("profile_cache_hit", user_id=user.id)
                return cached

        profile = await self._service.generate_profile(user)
        try:
            await self.put(user, profile)
        except TasteProfileError as exc:
            self._logger.warning("profile_cache_store_failed", user_id=user.id, error=str(exc))
        return profile

    async def invalidate(self, user: UserRef) -> None:
        await self._cache.delete(self.cache_key(user))
        self._logger.info("profile_cache_invalidated", user_id=user.id)
