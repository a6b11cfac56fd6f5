"""Normalization of raw catalog playlist records.

Search results arrive with inconsistent shapes: whole entries can be
``None``, ``followers`` may be missing or ``null``, ``owner`` may lack a
display name, and numeric fields sometimes come back as strings.  This
module is the single boundary where a raw record becomes a fully populated
:class:`~src.models.catalog.CandidatePlaylist`; nothing past it sees a
missing field.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import ValidationError

from src.models.catalog import CandidatePlaylist, ImageRef
from src.utils.logging import get_logger

UNKNOWN_OWNER = "Unknown User"

_logger = get_logger(__name__)


def _as_count(value: Any) -> int:
    """Coerce a catalog count to a non-negative int, defaulting to 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return 0


def _nested_total(value: Any) -> int:
    # Catalog wraps counts as {"href": ..., "total": N}.
    if isinstance(value, dict):
        return _as_count(value.get("total"))
    return _as_count(value)


def _images(value: Any) -> list[ImageRef]:
    if not isinstance(value, list):
        return []
    images: list[ImageRef] = []
    for item in value:
        if isinstance(item, dict) and isinstance(item.get("url"), str) and item["url"]:
            images.append(
                ImageRef(
                    url=item["url"],
                    height=item.get("height") if isinstance(item.get("height"), int) else None,
                    width=item.get("width") if isinstance(item.get("width"), int) else None,
                )
            )
    return images


def normalize_playlist(raw: Any) -> CandidatePlaylist | None:
    """Turn one raw search record into a :class:`CandidatePlaylist`.

    Returns ``None`` when the record is not a mapping or lacks an id or a
    name; every other missing field is replaced with its default.
    """
    if not isinstance(raw, dict):
        return None

    playlist_id = raw.get("id")
    name = raw.get("name")
    if not isinstance(playlist_id, str) or not playlist_id:
        return None
    if not isinstance(name, str) or not name:
        return None

    owner = raw.get("owner") if isinstance(raw.get("owner"), dict) else {}
    owner_name = owner.get("display_name") or owner.get("id") or UNKNOWN_OWNER
    description = raw.get("description")
    external_urls = raw.get("external_urls") if isinstance(raw.get("external_urls"), dict) else {}

    try:
        return CandidatePlaylist(
            id=playlist_id,
            name=name,
            description=description if isinstance(description, str) else None,
            followers=_nested_total(raw.get("followers")),
            track_count=_nested_total(raw.get("tracks")),
            owner_name=str(owner_name),
            images=_images(raw.get("images")),
            uri=raw.get("uri") if isinstance(raw.get("uri"), str) else "",
            external_url=external_urls.get("spotify") or "",
        )
    except ValidationError as exc:
        _logger.debug("playlist_record_rejected", playlist_id=playlist_id, error=str(exc))
        return None


def normalize_playlists(records: list[Any]) -> list[CandidatePlaylist]:
    """Normalize a list of raw records, dropping the malformed ones.

    A record that cannot be normalized is skipped on its own; it never
    costs the rest of the batch.
    """
    playlists: list[CandidatePlaylist] = []
    for record in records:
        try:
            playlist = normalize_playlist(record)
        except (TypeError, ValueError, OverflowError) as exc:
            _logger.warning("playlist_record_unreadable", error=str(exc))
            continue
        if playlist is not None:
            playlists.append(playlist)
    return playlists
