"""Final ranking pass over scored recommendations.

Pipeline, in order:

1. follower estimation for playlists with no real follower data (used only
   as the sort fallback below)
2. dedup by playlist id, first occurrence wins
3. cross-candidate adjustment: anti-redundancy penalty, popularity-bias
   multipliers stacked on a quality multiplier, discovery bonus
4. sort by adjusted score, where scores within ``TIE_BAND`` of each other
   are ordered by follower count instead
5. truncate to ``MAX_RECOMMENDATIONS``

The tie-break makes the ordering score-bucketed rather than a strict
ordering by score, so the sort uses an explicit comparator.
"""

from __future__ import annotations

import functools
from collections.abc import Sequence

from src.models.insights import MusicInsights, PopularityBias
from src.models.recommendation import Recommendation, SimilarityType
from src.services.follower_estimator import effective_followers
from src.utils.logging import get_logger

MAX_RECOMMENDATIONS = 20
TIE_BAND = 5.0

_REDUNDANCY_LIMIT = 3
_REDUNDANCY_PENALTY = 0.85
_DISCOVERY_BONUS = 1.15
_DISCOVERY_THRESHOLD = 70

_logger = get_logger(__name__)


def dedupe(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """Drop repeated playlist ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[Recommendation] = []
    for rec in recommendations:
        if rec.playlist.id in seen:
            continue
        seen.add(rec.playlist.id)
        unique.append(rec)
    return unique


def quality_multiplier(followers: int) -> float:
    if followers >= 1_000_000:
        return 1.25
    if followers >= 500_000:
        return 1.20
    if followers >= 100_000:
        return 1.15
    if followers >= 50_000:
        return 1.10
    return 1.0


def bias_multiplier(bias: PopularityBias, followers: int) -> float:
    """Multiplier aligning a playlist's reach with the user's popularity bias."""
    if bias is PopularityBias.MAINSTREAM:
        if followers > 100_000:
            return 1.2
        if followers > 50_000:
            return 1.15
        if followers > 10_000:
            return 1.1
        if followers < 5_000:
            return 0.9
        return 1.0
    if bias is PopularityBias.UNDERGROUND:
        if followers < 10_000:
            return 1.15
        if followers < 50_000:
            return 1.1
        if followers > 500_000:
            return 0.9
        return 1.0
    if followers > 250_000:
        return 1.1
    if followers > 50_000:
        return 1.05
    return 1.0


def _redundant_peers(rec: Recommendation, pool: Sequence[Recommendation]) -> int:
    genres = set(rec.matching_genres)
    return sum(
        1
        for other in pool
        if other is not rec
        and other.similarity_type is rec.similarity_type
        and genres.intersection(other.matching_genres)
    )


def adjust(
    recommendations: Sequence[Recommendation],
    insights: MusicInsights,
) -> list[Recommendation]:
    """Apply the cross-candidate multipliers.  Returns new objects."""
    adjusted: list[Recommendation] = []
    for rec in recommendations:
        score = rec.score
        if _redundant_peers(rec, recommendations) > _REDUNDANCY_LIMIT:
            score *= _REDUNDANCY_PENALTY

        followers = rec.playlist.followers
        score *= bias_multiplier(insights.popularity_bias, followers)
        score *= quality_multiplier(followers)

        if (
            insights.discovery_rate > _DISCOVERY_THRESHOLD
            and rec.similarity_type is SimilarityType.USER_PATTERN
        ):
            score *= _DISCOVERY_BONUS

        adjusted.append(rec.model_copy(update={"score": score}))
    return adjusted


def _compare(
    a: tuple[Recommendation, int],
    b: tuple[Recommendation, int],
) -> int:
    (rec_a, followers_a), (rec_b, followers_b) = a, b
    if abs(rec_a.score - rec_b.score) <= TIE_BAND and followers_a != followers_b:
        return -1 if followers_a > followers_b else 1
    if rec_a.score != rec_b.score:
        return -1 if rec_a.score > rec_b.score else 1
    return 0


def sort_recommendations(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """Order by score, breaking near-ties by (real or estimated) followers."""
    keyed = [(rec, effective_followers(rec.playlist)) for rec in recommendations]
    keyed.sort(key=functools.cmp_to_key(_compare))
    return [rec for rec, _ in keyed]


def rank(
    recommendations: Sequence[Recommendation],
    insights: MusicInsights,
    limit: int = MAX_RECOMMENDATIONS,
) -> list[Recommendation]:
    """Dedup, adjust, order and truncate *recommendations*."""
    unique = dedupe(recommendations)
    ranked = sort_recommendations(adjust(unique, insights))[:limit]

    _logger.info(
        "recommendations_ranked",
        input_count=len(recommendations),
        unique_count=len(unique),
        returned_count=len(ranked),
    )
    return ranked
