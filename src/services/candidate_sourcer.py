"""Multi-strategy candidate generation against the catalog search API.

Four strategies each turn the user's insights into search queries:

- genre: top genres, several query wordings per genre, popularity filtered
- artist: one query per followed artist
- mood: mood keywords derived from the profile
- serendipity: pool genres the user and the other strategies have not touched

Genre, artist and mood run concurrently.  Serendipity runs afterwards
because it needs to know which genres the others already covered.  Every
query is independent: a failed or empty query is logged and skipped, and
results are only concatenated once a strategy has finished.  No dedup
happens here; that is the ranker's job.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from src.config.domain_knowledge import (
    DEFAULT_GENRES,
    EXAMPLE_ARTISTS,
    FILLER_MOODS,
    GENRE_QUERY_TEMPLATES,
    SERENDIPITY_GENRE_POOL,
)
from src.interfaces.catalog_search_provider import ICatalogSearchProvider
from src.models.catalog import ArtistRef, CandidatePlaylist
from src.models.insights import MusicInsights, PopularityBias
from src.models.recommendation import SourcedCandidate, SourceStrategy
from src.services.follower_estimator import estimate_followers
from src.utils.concurrency import (
    DEFAULT_SEARCH_CONCURRENCY,
    make_search_semaphore,
    parallel_search,
    throttled_gather,
)
from src.utils.errors import TasteProfileError
from src.utils.logging import get_logger
from src.utils.playlist_normalizer import normalize_playlists

MAX_GENRES = 4
GENRE_QUERY_LIMIT = 20
GENRE_KEEP = 8
MIN_REAL_FOLLOWERS = 1000
MIN_ESTIMATED_FOLLOWERS = 5000

MAX_ARTISTS = 6
ARTIST_QUERY_LIMIT = 10

MAX_MOODS = 4
MOOD_QUERY_LIMIT = 5

MAX_SERENDIPITY_GENRES = 2
SERENDIPITY_QUERY_LIMIT = 3

_HIGH_DISCOVERY = 70
_HIGH_DIVERSITY = 80


def mood_keywords(insights: MusicInsights) -> list[str]:
    """Derive up to ``MAX_MOODS`` mood search terms from *insights*."""
    moods: list[str] = []
    if insights.popularity_bias is PopularityBias.MAINSTREAM:
        moods.extend(["popular", "hits", "trending"])
    elif insights.popularity_bias is PopularityBias.UNDERGROUND:
        moods.extend(["indie", "alternative", "underground"])
    if insights.discovery_rate > _HIGH_DISCOVERY:
        moods.extend(["discovery", "new music", "fresh"])
    if insights.artist_diversity > _HIGH_DIVERSITY:
        moods.extend(["eclectic", "diverse", "variety"])
    moods.extend(FILLER_MOODS)
    return moods[:MAX_MOODS]


def passes_popularity_filter(playlist: CandidatePlaylist) -> bool:
    """Real followers >= 1000, or, with no follower data, estimate >= 5000."""
    if playlist.has_follower_data:
        return playlist.followers >= MIN_REAL_FOLLOWERS
    return estimate_followers(playlist) >= MIN_ESTIMATED_FOLLOWERS


def unexplored_genres(
    insights: MusicInsights,
    covered: Sequence[SourcedCandidate],
) -> list[str]:
    """Pool genres absent from the user's top genres and from *covered*."""
    user_genres = {genre.lower() for genre in insights.genre_names}
    covered_genres = {
        c.term.lower()
        for c in covered
        if c.strategy in (SourceStrategy.GENRE, SourceStrategy.SERENDIPITY)
    }
    return [
        genre
        for genre in SERENDIPITY_GENRE_POOL
        if genre not in user_genres and genre not in covered_genres
    ][:MAX_SERENDIPITY_GENRES]


class CandidateSourcer:
    """Runs the four search strategies for one profile generation.

    Parameters
    ----------
    search_provider:
        Catalog search adapter.
    concurrency:
        Limit on simultaneous searches across all strategies.
    semaphore:
        An existing semaphore to share with other sourcers; overrides
        *concurrency*.
    """

    def __init__(
        self,
        search_provider: ICatalogSearchProvider,
        concurrency: int = DEFAULT_SEARCH_CONCURRENCY,
        semaphore: asyncio.Semaphore | None = None,
    ) -> None:
        self._search = search_provider
        self._semaphore = semaphore or make_search_semaphore(concurrency)
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def source(
        self,
        insights: MusicInsights,
        followed_artists: Sequence[ArtistRef],
    ) -> list[SourcedCandidate]:
        """Return every candidate found by every strategy, undeduplicated."""
        outcomes = await asyncio.gather(
            self.source_by_genre(insights),
            self.source_by_artist(followed_artists),
            self.source_by_mood(insights),
            return_exceptions=True,
        )

        candidates: list[SourcedCandidate] = []
        for strategy, outcome in zip(
            (SourceStrategy.GENRE, SourceStrategy.ARTIST, SourceStrategy.MOOD), outcomes
        ):
            if isinstance(outcome, BaseException):
                self._logger.warning(
                    "sourcing_strategy_failed", strategy=strategy.value, error=str(outcome)
                )
                continue
            candidates.extend(outcome)

        candidates.extend(await self.source_serendipity(insights, candidates))

        self._logger.info(
            "candidate_sourcing_complete",
            total=len(candidates),
            by_strategy={
                s.value: sum(1 for c in candidates if c.strategy is s) for s in SourceStrategy
            },
        )
        return candidates

    # ------------------------------------------------------------------
    # Genre strategy
    # ------------------------------------------------------------------

    async def source_by_genre(self, insights: MusicInsights) -> list[SourcedCandidate]:
        genres = insights.genre_names[:MAX_GENRES] or list(DEFAULT_GENRES)
        results = await throttled_gather(
            [self._search_genre(genre) for genre in genres],
            semaphore=self._semaphore,
        )

        candidates: list[SourcedCandidate] = []
        for genre, result in zip(genres, results):
            if isinstance(result, BaseException):
                self._logger.warning("genre_search_failed", genre=genre, error=str(result))
                continue
            candidates.extend(result)
        return candidates

    async def _search_genre(self, genre: str) -> list[SourcedCandidate]:
        """Try each query wording until one yields a usable candidate."""
        for template in GENRE_QUERY_TEMPLATES:
            query = template.format(genre=genre)
            try:
                raw = await self._search.search(query, kind="playlist", limit=GENRE_QUERY_LIMIT)
            except TasteProfileError as exc:
                self._logger.warning("genre_query_failed", genre=genre, query=query, error=str(exc))
                continue

            usable = [
                p
                for p in normalize_playlists(raw)[:GENRE_QUERY_LIMIT]
                if passes_popularity_filter(p)
            ]
            if not usable:
                self._logger.debug("genre_query_empty", genre=genre, query=query)
                continue

            usable.sort(key=lambda p: (p.followers, estimate_followers(p)), reverse=True)
            self._logger.debug(
                "genre_query_productive", genre=genre, query=query, kept=min(len(usable), GENRE_KEEP)
            )
            return [
                SourcedCandidate(playlist=p, strategy=SourceStrategy.GENRE, term=genre)
                for p in usable[:GENRE_KEEP]
            ]

        self._logger.info("genre_queries_exhausted", genre=genre)
        return []

    # ------------------------------------------------------------------
    # Artist strategy
    # ------------------------------------------------------------------

    async def source_by_artist(
        self, followed_artists: Sequence[ArtistRef]
    ) -> list[SourcedCandidate]:
        artists = list(followed_artists[:MAX_ARTISTS]) or [
            ArtistRef(id=artist_id, name=name) for artist_id, name in EXAMPLE_ARTISTS
        ]
        return await self._fan_out(
            SourceStrategy.ARTIST,
            [(artist.name, artist.name, ARTIST_QUERY_LIMIT) for artist in artists],
        )

    # ------------------------------------------------------------------
    # Mood strategy
    # ------------------------------------------------------------------

    async def source_by_mood(self, insights: MusicInsights) -> list[SourcedCandidate]:
        return await self._fan_out(
            SourceStrategy.MOOD,
            [(mood, f"{mood} mood", MOOD_QUERY_LIMIT) for mood in mood_keywords(insights)],
        )

    # ------------------------------------------------------------------
    # Serendipity strategy
    # ------------------------------------------------------------------

    async def source_serendipity(
        self,
        insights: MusicInsights,
        covered: Sequence[SourcedCandidate],
    ) -> list[SourcedCandidate]:
        genres = unexplored_genres(insights, covered)
        return await self._fan_out(
            SourceStrategy.SERENDIPITY,
            [(genre, f"{genre} discover new", SERENDIPITY_QUERY_LIMIT) for genre in genres],
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _fan_out(
        self,
        strategy: SourceStrategy,
        jobs: list[tuple[str, str, int]],
    ) -> list[SourcedCandidate]:
        """Run one query per ``(term, query, limit)`` job and tag the results.

        At most ``limit`` playlists are kept per query, whatever the
        provider returns.
        """
        if not jobs:
            return []

        term_by_query = {query: term for term, query, _ in jobs}
        succeeded = await parallel_search(
            self._search.search,
            [{"query": query, "kind": "playlist", "limit": limit} for _, query, limit in jobs],
            semaphore=self._semaphore,
            logger=self._logger,
            error_event=f"{strategy.value}_query_failed",
        )

        candidates: list[SourcedCandidate] = []
        for query_kwargs, raw in succeeded:
            term = term_by_query[query_kwargs["query"]]
            playlists = normalize_playlists(raw)[: query_kwargs["limit"]]
            if not playlists:
                self._logger.debug(f"{strategy.value}_query_empty", term=term)
                continue
            candidates.extend(
                SourcedCandidate(playlist=p, strategy=strategy, term=term) for p in playlists
            )
        return candidates
