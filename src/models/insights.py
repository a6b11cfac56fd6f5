"""Listening-profile models for the tastegraph pipeline.

Defines the ``MusicInsights`` summary that ProfileAnalyzer produces from a
user's track samples, plus the ``GenreSignal`` value object emitted by the
genre classifier.  Insights are recomputed wholesale on every profile
refresh; nothing here is updated incrementally.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PopularityBias(str, Enum):
    """Where the user's listening sits on the mainstream/underground axis."""

    MAINSTREAM = "mainstream"    # mean track popularity > 70
    UNDERGROUND = "underground"  # mean track popularity < 40
    MIXED = "mixed"


class EraPreference(str, Enum):
    """Whether the user mostly plays new releases or older catalogue."""

    RECENT = "recent"
    CLASSIC = "classic"
    MIXED = "mixed"


class GenreSignal(BaseModel):
    """One weighted genre vote produced by a single classifier pass."""

    model_config = ConfigDict(frozen=True)

    genre: str
    weight: float


class GenreShare(BaseModel):
    """A genre's share of the user's listening.

    ``count`` is the summed signal weight, not a track count, and
    ``percentage`` is relative to the number of sampled tracks -- shares can
    add up to more than 100 because one track may vote for several genres.
    """

    model_config = ConfigDict(frozen=True)

    genre: str
    count: float
    percentage: int


class ListeningPatterns(BaseModel):
    """Aggregate listening habits across the whole sample."""

    model_config = ConfigDict(frozen=True)

    average_track_length_ms: int = 210000
    explicit_content_ratio: int = Field(default=0, ge=0, le=100)
    recent_vs_old: EraPreference = EraPreference.MIXED


class MusicInsights(BaseModel):
    """The aggregated summary of a user's music taste."""

    model_config = ConfigDict(frozen=True)

    top_genres: list[GenreShare] = Field(default_factory=list)
    artist_diversity: int = Field(default=0, ge=0, le=100)
    popularity_bias: PopularityBias = PopularityBias.MIXED
    # Deliberately the same ratio as artist_diversity.
    discovery_rate: int = Field(default=0, ge=0, le=100)
    listening_patterns: ListeningPatterns = Field(default_factory=ListeningPatterns)

    def genre_share(self, genre: str) -> GenreShare | None:
        """Return the user's share for *genre*, or ``None`` if it is not a top genre."""
        for share in self.top_genres:
            if share.genre == genre:
                return share
        return None

    @property
    def genre_names(self) -> list[str]:
        return [share.genre for share in self.top_genres]
