"""Relevance scoring for sourced candidate playlists.

Every candidate gets a 0-100 score from the scorer matching the strategy
that found it.  The three scorers share one popularity primitive,
:func:`follower_quality_score`, which is deliberately a step function: the
bucket edges decide which candidates tie, and the ranker's tie-break relies
on those groupings.

All scoring functions are pure.  :class:`Scorer` is the only stateful piece
and it only holds a logger.
"""

from __future__ import annotations

from src.config.domain_knowledge import (
    DOWNBEAT_MOODS,
    GENRE_VALENCE_PULL,
    MELLOW_MOODS,
    UPBEAT_MOODS,
    get_genre_synonyms,
    get_mood_synonyms,
)
from src.models.catalog import CandidatePlaylist
from src.models.insights import MusicInsights, PopularityBias
from src.models.recommendation import (
    Recommendation,
    SimilarityType,
    SourcedCandidate,
    SourceStrategy,
)
from src.utils.logging import get_logger

DEFAULT_SCORE = 40.0
SERENDIPITY_FACTOR = 0.7

# (inclusive lower bound, quality) for the 1K-and-up range.
_QUALITY_STEPS_INCLUSIVE: tuple[tuple[int, int], ...] = (
    (10_000_000, 100),
    (5_000_000, 95),
    (1_000_000, 90),
    (500_000, 85),
    (250_000, 80),
    (100_000, 75),
    (50_000, 70),
    (25_000, 65),
    (10_000, 60),
    (5_000, 55),
    (2_500, 50),
    (1_000, 45),
)
# (exclusive lower bound, quality) below 1K.
_QUALITY_STEPS_STRICT: tuple[tuple[int, int], ...] = (
    (500, 40),
    (250, 35),
    (100, 30),
    (50, 25),
    (25, 20),
    (10, 15),
    (5, 10),
)
_QUALITY_FLOOR = 5

_SIMILARITY_BY_STRATEGY: dict[SourceStrategy, SimilarityType] = {
    SourceStrategy.GENRE: SimilarityType.GENRE,
    SourceStrategy.ARTIST: SimilarityType.ARTIST,
    SourceStrategy.MOOD: SimilarityType.USER_PATTERN,
    SourceStrategy.SERENDIPITY: SimilarityType.USER_PATTERN,
}


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def follower_quality_score(followers: int) -> int:
    """Map a follower count onto the 0-100 quality ladder."""
    if followers <= 0:
        return 0
    for threshold, quality in _QUALITY_STEPS_INCLUSIVE:
        if followers >= threshold:
            return quality
    for threshold, quality in _QUALITY_STEPS_STRICT:
        if followers > threshold:
            return quality
    return _QUALITY_FLOOR


# ---------------------------------------------------------------------------
# Per-strategy scorers
# ---------------------------------------------------------------------------


def genre_score(
    playlist: CandidatePlaylist,
    genre: str,
    insights: MusicInsights | None = None,
) -> float:
    """Score a playlist found by a genre (or serendipity) query."""
    score = 30.0
    followers = playlist.followers

    score += follower_quality_score(followers) * 0.4
    if followers > 1_000_000:
        score += 15
    elif followers > 250_000:
        score += 10

    genre_lower = genre.lower()
    text = playlist.searchable_text
    if genre_lower in playlist.name.lower():
        score += 30
    elif genre_lower in text:
        score += 20
    elif any(synonym in text for synonym in get_genre_synonyms(genre)):
        score += 15

    tracks = playlist.track_count
    if 30 <= tracks <= 80:
        score += 20
    elif 15 <= tracks < 30:
        score += 15
    elif 80 < tracks <= 150:
        score += 15
    elif tracks > 150:
        score += 5
    else:
        score -= 10

    if insights is not None:
        share = insights.genre_share(genre)
        if share is not None:
            score += min(share.percentage / 2, 15)

        if insights.discovery_rate > 70 and followers < 10_000:
            score += 10
        elif insights.discovery_rate < 30 and followers > 50_000:
            score += 10

    description = playlist.description or ""
    if "updated" in description:
        score += 5
    if "curated" in description:
        score += 8

    name = playlist.name
    if name[:1].isdigit() or "test" in name:
        score -= 15
    if description and len(description) < 20:
        score -= 5

    return _clamp(score)


def artist_score(
    playlist: CandidatePlaylist,
    artist_name: str,
    insights: MusicInsights | None = None,
) -> float:
    """Score a playlist found by searching for a followed artist."""
    score = 35.0
    text = playlist.searchable_text
    artist_lower = artist_name.lower()

    if artist_lower in playlist.name.lower():
        score += 35
    elif artist_lower in text:
        score += 25

    if any(len(token) > 3 and token in text for token in artist_lower.split()):
        score += 10

    followers = playlist.followers
    score += follower_quality_score(followers) * 0.35
    if followers >= 500_000:
        score += 15
    elif followers >= 100_000:
        score += 10

    tracks = playlist.track_count
    if 20 <= tracks <= 60:
        score += 15
    elif tracks > 60:
        score += 5

    if insights is not None:
        if insights.artist_diversity > 70:
            score += 8
        if insights.popularity_bias is PopularityBias.MAINSTREAM and followers > 10_000:
            score += 8
        elif insights.popularity_bias is PopularityBias.UNDERGROUND and followers < 5_000:
            score += 8

    return _clamp(score)


def estimate_user_valence(insights: MusicInsights) -> float:
    """Rough 0-1 valence for the user, pulled by the genres they play."""
    valence = 0.5
    for share in insights.top_genres:
        pull = GENRE_VALENCE_PULL.get(share.genre)
        if pull is not None:
            valence += pull * (share.percentage / 100)
    return _clamp(valence, 0.0, 1.0)


def _mood_matches_valence(mood: str, valence: float) -> bool:
    if mood in UPBEAT_MOODS:
        return valence > 0.6
    if mood in DOWNBEAT_MOODS:
        return valence < 0.4
    if mood in MELLOW_MOODS:
        return 0.4 <= valence <= 0.7
    return False


def mood_score(
    playlist: CandidatePlaylist,
    mood: str,
    insights: MusicInsights | None = None,
) -> float:
    """Score a playlist found by a mood query."""
    score = 30.0
    text = playlist.searchable_text
    mood_lower = mood.lower()

    if mood_lower in text:
        score += 25
    elif any(synonym in text for synonym in get_mood_synonyms(mood)):
        score += 15

    description = playlist.description or ""
    if len(description) > 50:
        score += 12
    if "carefully" in description:
        score += 8
    if "perfect for" in description:
        score += 6

    followers = playlist.followers
    score += follower_quality_score(followers) * 0.3
    if followers >= 250_000:
        score += 12
    elif followers >= 100_000:
        score += 8

    tracks = playlist.track_count
    if 25 <= tracks <= 100:
        score += 12
    elif tracks > 100:
        score += 6

    if insights is not None and _mood_matches_valence(mood_lower, estimate_user_valence(insights)):
        score += 10

    return _clamp(score)


# ---------------------------------------------------------------------------
# Scorer
# ---------------------------------------------------------------------------


class Scorer:
    """Turns sourced candidates into scored :class:`Recommendation` objects."""

    def __init__(self) -> None:
        self._logger = get_logger(__name__)

    def score(self, candidate: SourcedCandidate, insights: MusicInsights) -> Recommendation:
        """Score one candidate.  A failure in scoring yields the default score."""
        try:
            value = self._raw_score(candidate, insights)
        except Exception as exc:
            self._logger.warning(
                "candidate_scoring_failed",
                playlist_id=candidate.playlist.id,
                strategy=candidate.strategy.value,
                error=str(exc),
            )
            value = DEFAULT_SCORE

        return Recommendation(
            playlist=candidate.playlist,
            score=value,
            reasons=[self._reason(candidate)],
            matching_genres=self._matching_genres(candidate),
            similarity_type=_SIMILARITY_BY_STRATEGY[candidate.strategy],
        )

    def score_all(
        self,
        candidates: list[SourcedCandidate],
        insights: MusicInsights,
    ) -> list[Recommendation]:
        return [self.score(candidate, insights) for candidate in candidates]

    @staticmethod
    def _raw_score(candidate: SourcedCandidate, insights: MusicInsights) -> float:
        playlist, term = candidate.playlist, candidate.term
        strategy = candidate.strategy

        if strategy is SourceStrategy.GENRE:
            return genre_score(playlist, term, insights)
        if strategy is SourceStrategy.ARTIST:
            return artist_score(playlist, term, insights)
        if strategy is SourceStrategy.MOOD:
            return mood_score(playlist, term, insights)
        # Serendipity candidates are scored without user alignment.
        return genre_score(playlist, term) * SERENDIPITY_FACTOR

    @staticmethod
    def _reason(candidate: SourcedCandidate) -> str:
        term = candidate.term
        if candidate.strategy is SourceStrategy.GENRE:
            return f"Matches your {term} music taste"
        if candidate.strategy is SourceStrategy.ARTIST:
            return f"Similar to {term}"
        if candidate.strategy is SourceStrategy.MOOD:
            return f"Perfect for your {term} listening mood"
        return f"Discover new {term} music"

    @staticmethod
    def _matching_genres(candidate: SourcedCandidate) -> list[str]:
        if candidate.strategy in (SourceStrategy.GENRE, SourceStrategy.SERENDIPITY):
            return [candidate.term]
        return []
