"""Catalog snapshot models for the tastegraph pipeline.

Defines Pydantic v2 models for the records read from the external music
catalog: tracks (with their artists and album) and normalized candidate
playlists.  All models use frozen config to enforce immutability -- the
core only ever reads these snapshots.

Tracks come from the listening-history provider (top tracks, recently
played, saved tracks).  Candidate playlists come from catalog search and are
always produced by ``src.utils.playlist_normalizer.normalize_playlist``,
which guarantees every field is populated.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

_YEAR_RE = re.compile(r"^(\d{4})")


# ---------------------------------------------------------------------------
# Small reference records shared by tracks and playlists.
# ---------------------------------------------------------------------------
class ImageRef(BaseModel):
    """A cover image reference (album art, playlist mosaic)."""

    model_config = ConfigDict(frozen=True)

    url: str
    height: int | None = None
    width: int | None = None


class ArtistRef(BaseModel):
    """An artist as it appears on a track or in the followed-artists list."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class AlbumRef(BaseModel):
    """The album a track belongs to."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    # Catalog release dates come at year, month or day precision:
    # "1997", "1997-03" or "1997-03-15".
    release_date: str | None = None
    images: list[ImageRef] = Field(default_factory=list)

    @property
    def release_year(self) -> int | None:
        """Four-digit release year, or ``None`` when the date is absent/garbled."""
        if not self.release_date:
            return None
        match = _YEAR_RE.match(self.release_date)
        return int(match.group(1)) if match else None


# ---------------------------------------------------------------------------
# Track -- one listening sample.
# ---------------------------------------------------------------------------
class Track(BaseModel):
    """An immutable track snapshot from the listening history."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    artists: list[ArtistRef] = Field(default_factory=list)
    album: AlbumRef = Field(default_factory=AlbumRef)
    duration_ms: int = 0
    # Absent for some local files and podcast episodes; excluded from the
    # popularity mean rather than counted as zero.
    popularity: int | None = Field(default=None, ge=0, le=100)
    explicit: bool = False


# ---------------------------------------------------------------------------
# CandidatePlaylist -- normalized search result.
# ---------------------------------------------------------------------------
class CandidatePlaylist(BaseModel):
    """A playlist returned by catalog search, with every field defaulted.

    ``followers == 0`` means the catalog did not report a follower count;
    downstream code falls back to an estimate in that case.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    followers: int = Field(default=0, ge=0)
    track_count: int = Field(default=0, ge=0)
    owner_name: str = "Unknown User"
    images: list[ImageRef] = Field(default_factory=list)
    uri: str = ""
    external_url: str = ""

    @property
    def has_follower_data(self) -> bool:
        return self.followers > 0

    @property
    def searchable_text(self) -> str:
        """Lowercased ``name + description`` used by the text-relevance rules."""
        return f"{self.name} {self.description or ''}".lower()
