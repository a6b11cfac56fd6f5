"""Aggregates listening samples into a ``MusicInsights`` profile.

The three samples (top tracks, recently played, saved tracks) are simply
concatenated.  A track present in two samples counts twice, which weights
tracks the user returns to across sources.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timezone

from src.models.catalog import Track
from src.models.insights import (
    EraPreference,
    GenreShare,
    ListeningPatterns,
    MusicInsights,
    PopularityBias,
)
from src.services.genre_classifier import GenreClassifier
from src.utils.logging import get_logger

_MAX_TOP_GENRES = 10
_MAINSTREAM_THRESHOLD = 70
_UNDERGROUND_THRESHOLD = 40
_DEFAULT_TRACK_LENGTH_MS = 210000

# Era preference: share of dated tracks needed to call a lean.
_ERA_MAJORITY = 0.6
_RECENT_YEARS = 5
_CLASSIC_YEARS = 15


def _round_half_up(value: float) -> int:
    """Round like a catalog dashboard does (0.5 → 1), not banker's rounding."""
    return int(math.floor(value + 0.5))


def default_insights() -> MusicInsights:
    """Insights for a user with no listening history at all."""
    return MusicInsights(
        top_genres=[],
        artist_diversity=0,
        popularity_bias=PopularityBias.MIXED,
        discovery_rate=0,
        listening_patterns=ListeningPatterns(
            average_track_length_ms=_DEFAULT_TRACK_LENGTH_MS,
            explicit_content_ratio=0,
            recent_vs_old=EraPreference.MIXED,
        ),
    )


class ProfileAnalyzer:
    """Builds :class:`MusicInsights` from a user's track samples."""

    def __init__(
        self,
        classifier: GenreClassifier | None = None,
        current_year: int | None = None,
    ) -> None:
        self._classifier = classifier or GenreClassifier(current_year=current_year)
        self._current_year = current_year
        self._logger = get_logger(__name__)

    def analyze(
        self,
        top_tracks: Sequence[Track],
        recently_played: Sequence[Track],
        saved_tracks: Sequence[Track],
    ) -> MusicInsights:
        """Summarize the combined samples.  Never raises on empty input."""
        all_tracks = [*top_tracks, *recently_played, *saved_tracks]
        total = len(all_tracks)

        if total == 0:
            self._logger.info("profile_analysis_empty_sample")
            return default_insights()

        tallies = self._classifier.tally(all_tracks)
        top_genres = [
            GenreShare(
                genre=genre,
                count=count,
                percentage=_round_half_up(count / total * 100),
            )
            for genre, count in sorted(tallies.items(), key=lambda kv: kv[1], reverse=True)
        ][:_MAX_TOP_GENRES]

        unique_artists = {artist.id for track in all_tracks for artist in track.artists}
        diversity = _round_half_up(min(len(unique_artists) / total, 1.0) * 100)

        insights = MusicInsights(
            top_genres=top_genres,
            artist_diversity=diversity,
            popularity_bias=self._popularity_bias(all_tracks),
            discovery_rate=diversity,
            listening_patterns=ListeningPatterns(
                average_track_length_ms=_round_half_up(
                    sum(t.duration_ms for t in all_tracks) / total
                ),
                explicit_content_ratio=_round_half_up(
                    sum(1 for t in all_tracks if t.explicit) / total * 100
                ),
                recent_vs_old=self._era_preference(all_tracks),
            ),
        )

        self._logger.info(
            "profile_analysis_complete",
            track_count=total,
            genre_count=len(tallies),
            top_genre=top_genres[0].genre if top_genres else None,
            popularity_bias=insights.popularity_bias.value,
            artist_diversity=insights.artist_diversity,
        )
        return insights

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _popularity_bias(tracks: Sequence[Track]) -> PopularityBias:
        # Tracks without a popularity value are left out of the mean.
        scores = [t.popularity for t in tracks if t.popularity is not None]
        if not scores:
            return PopularityBias.MIXED

        mean = sum(scores) / len(scores)
        if mean > _MAINSTREAM_THRESHOLD:
            return PopularityBias.MAINSTREAM
        if mean < _UNDERGROUND_THRESHOLD:
            return PopularityBias.UNDERGROUND
        return PopularityBias.MIXED

    def _era_preference(self, tracks: Sequence[Track]) -> EraPreference:
        year_now = self._current_year or datetime.now(tz=timezone.utc).year
        years = [t.album.release_year for t in tracks if t.album.release_year is not None]
        if not years:
            return EraPreference.MIXED

        recent = sum(1 for y in years if year_now - y <= _RECENT_YEARS)
        classic = sum(1 for y in years if year_now - y > _CLASSIC_YEARS)
        if recent / len(years) >= _ERA_MAJORITY:
            return EraPreference.RECENT
        if classic / len(years) >= _ERA_MAJORITY:
            return EraPreference.CLASSIC
        return EraPreference.MIXED
