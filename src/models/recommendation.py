"""Recommendation models for the tastegraph pipeline.

Defines Pydantic v2 models for sourced candidates, scored recommendations
and the complete user profile.  All models use frozen config; the ranker
adjusts scores by building copies, never by mutating in place.

The recommendation flow is:
    1. CandidateSourcer emits ``SourcedCandidate`` records, one per playlist
       found by a search strategy (genre, artist, mood, serendipity).
    2. Scorer turns each into a ``Recommendation`` with a 0-100 score.
    3. Ranker dedups, adjusts and orders them into the final top 20.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.catalog import CandidatePlaylist
from src.models.insights import MusicInsights


class SourceStrategy(str, Enum):
    """The search strategy that surfaced a candidate."""

    GENRE = "genre"
    ARTIST = "artist"
    MOOD = "mood"
    SERENDIPITY = "serendipity"


class SimilarityType(str, Enum):
    """How a recommendation relates to the user's taste.

    Mood and serendipity candidates both map to ``USER_PATTERN``.
    ``POPULARITY`` is part of the public vocabulary but no strategy emits it
    today.
    """

    GENRE = "genre"
    ARTIST = "artist"
    POPULARITY = "popularity"
    USER_PATTERN = "user_pattern"


# ---------------------------------------------------------------------------
# SourcedCandidate -- raw strategy output, not yet scored.
# ---------------------------------------------------------------------------
class SourcedCandidate(BaseModel):
    """A normalized playlist plus the strategy metadata that produced it."""

    model_config = ConfigDict(frozen=True)

    playlist: CandidatePlaylist
    strategy: SourceStrategy
    # The genre, artist name or mood keyword the query was built from.
    term: str


# ---------------------------------------------------------------------------
# Recommendation -- a scored candidate.
# ---------------------------------------------------------------------------
class Recommendation(BaseModel):
    """A scored playlist recommendation with human-readable reasoning."""

    model_config = ConfigDict(frozen=True)

    playlist: CandidatePlaylist
    score: float
    reasons: list[str] = Field(default_factory=list)
    matching_genres: list[str] = Field(default_factory=list)
    similarity_type: SimilarityType

    @field_validator("matching_genres")
    @classmethod
    def _unique_genres(cls, value: list[str]) -> list[str]:
        # Set semantics, first-seen order kept for stable JSON output.
        return list(dict.fromkeys(value))


# ---------------------------------------------------------------------------
# UserRef / UserMusicProfile -- the entry point's input and output.
# ---------------------------------------------------------------------------
class UserRef(BaseModel):
    """Opaque handle for the user whose profile is generated."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str | None = None


class UserMusicProfile(BaseModel):
    """Insights plus ranked recommendations for one generation cycle."""

    model_config = ConfigDict(frozen=True)

    insights: MusicInsights
    recommendations: list[Recommendation] = Field(default_factory=list)
    last_updated: datetime
