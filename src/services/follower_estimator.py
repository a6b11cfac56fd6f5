"""Heuristic follower estimates for playlists the catalog reports no followers for.

Search results often come back with ``followers.total`` missing.  The
estimate is built additively from cheap signals (size, title wording,
description length, owner name) and is only ever used where real data is
absent: the genre-strategy popularity filter and the ranker's sort fallback.
It never feeds the scoring multipliers.
"""

from __future__ import annotations

import re

from src.models.catalog import CandidatePlaylist

MAX_ESTIMATE = 100000

# (minimum track count exclusive, estimate); first match wins.
_TRACK_COUNT_BUCKETS: tuple[tuple[int, int], ...] = (
    (200, 15000),
    (100, 8000),
    (50, 5000),
    (20, 2500),
    (10, 1000),
)

# (title keywords, bonus); every matching group contributes once.
_TITLE_BONUSES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("chart", "billboard"), 25000),
    (("hits", "best", "top"), 15000),
    (("popular", "greatest"), 10000),
    (("official",), 8000),
    (("radio", "mainstream"), 8000),
    (("2023", "2024"), 5000),
)

_RANKING_NUMBER_RE = re.compile(r"(\btop\s*\d+|#\s*\d+|\b\d+\s*(best|hits|songs)\b)")
_RANKING_NUMBER_BONUS = 8000

_LONG_DESCRIPTION_CHARS = 100
_LONG_DESCRIPTION_BONUS = 3000

_OWNER_KEYWORDS = ("official", "music", "records")
_OWNER_BONUS = 15000


def estimate_followers(playlist: CandidatePlaylist) -> int:
    """Estimate a follower count for *playlist* from its metadata alone."""
    estimate = 0

    for threshold, value in _TRACK_COUNT_BUCKETS:
        if playlist.track_count > threshold:
            estimate += value
            break

    title = playlist.name.lower()
    for keywords, bonus in _TITLE_BONUSES:
        if any(keyword in title for keyword in keywords):
            estimate += bonus
    if _RANKING_NUMBER_RE.search(title):
        estimate += _RANKING_NUMBER_BONUS

    if playlist.description and len(playlist.description) > _LONG_DESCRIPTION_CHARS:
        estimate += _LONG_DESCRIPTION_BONUS

    owner = playlist.owner_name.lower()
    if any(keyword in owner for keyword in _OWNER_KEYWORDS):
        estimate += _OWNER_BONUS

    return min(estimate, MAX_ESTIMATE)


def effective_followers(playlist: CandidatePlaylist) -> int:
    """Real followers when the catalog reported any, otherwise the estimate."""
    if playlist.has_follower_data:
        return playlist.followers
    return estimate_followers(playlist)
