"""tastegraph domain models -- re-exports all public model classes.

Other parts of the codebase can import from ``src.models`` directly
(e.g. ``from src.models import Track``) instead of the individual modules.

The models are organized across three submodules by domain concern:
    - catalog.py        -- catalog snapshots (tracks, artists, albums, playlists)
    - insights.py       -- the aggregated listening profile and genre signals
    - recommendation.py -- sourced candidates, scored recommendations, profiles

If you add a new model class, remember to add it to ``__all__`` too.
"""

from __future__ import annotations

from src.models.catalog import (
    AlbumRef,
    ArtistRef,
    CandidatePlaylist,
    ImageRef,
    Track,
)
from src.models.insights import (
    EraPreference,
    GenreShare,
    GenreSignal,
    ListeningPatterns,
    MusicInsights,
    PopularityBias,
)
from src.models.recommendation import (
    Recommendation,
    SimilarityType,
    SourcedCandidate,
    SourceStrategy,
    UserMusicProfile,
    UserRef,
)

__all__ = [
    "AlbumRef",
    "ArtistRef",
    "CandidatePlaylist",
    "EraPreference",
    "GenreShare",
    "GenreSignal",
    "ImageRef",
    "ListeningPatterns",
    "MusicInsights",
    "PopularityBias",
    "Recommendation",
    "SimilarityType",
    "SourceStrategy",
    "SourcedCandidate",
    "Track",
    "UserMusicProfile",
    "UserRef",
]
