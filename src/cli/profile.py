"""Standalone CLI for generating a listening profile.

Usage::

    python -m src.cli.profile --token BQD...
    python -m src.cli.profile --json
    python -m src.cli.profile --json --output profile.json

The token falls back to ``SPOTIFY_ACCESS_TOKEN`` from the environment or
``.env``.  Logs go to stderr so stdout carries only the report.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import random
import sys
import time
from pathlib import Path

import httpx

from src.config.settings import Settings
from src.models.recommendation import UserMusicProfile, UserRef
from src.providers.spotify.spotify_web_api_provider import SpotifyWebAPIProvider
from src.services.candidate_sourcer import CandidateSourcer
from src.services.genre_classifier import GenreClassifier
from src.services.profile_analyzer import ProfileAnalyzer
from src.services.profile_service import MusicProfileService
from src.utils.errors import TasteProfileError
from src.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_text_output(user: UserRef, profile: UserMusicProfile) -> str:
    """Render *profile* as a human-readable report."""
    insights = profile.insights
    patterns = insights.listening_patterns
    sep = "=" * 60

    lines = [
        sep,
        f"  tastegraph: profile for {user.display_name or user.id}",
        sep,
        "",
        "INSIGHTS",
        "-" * 40,
        f"  Popularity bias:   {insights.popularity_bias.value}",
        f"  Artist diversity:  {insights.artist_diversity}%",
        f"  Discovery rate:    {insights.discovery_rate}%",
        f"  Avg track length:  {patterns.average_track_length_ms / 1000:.0f}s",
        f"  Explicit content:  {patterns.explicit_content_ratio}%",
        f"  Era preference:    {patterns.recent_vs_old.value}",
        "",
    ]

    if insights.top_genres:
        lines.append("TOP GENRES")
        lines.append("-" * 40)
        for share in insights.top_genres:
            lines.append(f"  {share.genre:<16} {share.percentage:>4}%  (weight {share.count:.1f})")
        lines.append("")

    lines.append(f"RECOMMENDATIONS ({len(profile.recommendations)})")
    lines.append("-" * 40)
    for rank, rec in enumerate(profile.recommendations, start=1):
        followers = f"{rec.playlist.followers:,}" if rec.playlist.has_follower_data else "n/a"
        lines.append(f"  {rank:>2}. {rec.playlist.name}  [{rec.score:.1f}]")
        lines.append(
            f"      {rec.similarity_type.value} | followers: {followers} | "
            f"tracks: {rec.playlist.track_count}"
        )
        for reason in rec.reasons:
            lines.append(f"      - {reason}")

    return "\n".join(lines)


def format_json_output(user: UserRef, profile: UserMusicProfile) -> str:
    payload = {
        "user": user.model_dump(mode="json"),
        "profile": profile.model_dump(mode="json"),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


async def _run(token: str, json_output: bool, output_file: str | None, settings: Settings) -> int:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as http_client:
        provider = SpotifyWebAPIProvider(
            http_client=http_client,
            access_token=token,
            base_url=settings.spotify_api_base_url,
        )
        rng = random.Random(settings.classifier_seed) if settings.classifier_seed is not None else None
        service = MusicProfileService(
            history_provider=provider,
            search_provider=provider,
            analyzer=ProfileAnalyzer(classifier=GenreClassifier(rng=rng)),
            sourcer=CandidateSourcer(provider, concurrency=settings.search_concurrency),
            sample_limit=settings.history_sample_limit,
            followed_artists_limit=settings.followed_artists_limit,
        )

        start = time.monotonic()
        try:
            user = await provider.get_current_user()
            print(f"Generating profile for: {user.display_name or user.id}", file=sys.stderr)
            profile = await service.generate_profile(user)
        except TasteProfileError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1
        print(f"Done in {time.monotonic() - start:.1f}s", file=sys.stderr)

    text = format_json_output(user, profile) if json_output else format_text_output(user, profile)
    if output_file:
        Path(output_file).write_text(text, encoding="utf-8")
        print(f"Profile written to: {output_file}", file=sys.stderr)
    else:
        print(text)
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.profile",
        description=(
            "Build a listening profile from your Spotify history and rank "
            "playlist recommendations against it."
        ),
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Spotify access token (defaults to SPOTIFY_ACCESS_TOKEN).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output the profile as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write the profile to a file instead of stdout.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override LOG_LEVEL for this run.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging to stderr and run the pipeline."""
    args = _build_parser().parse_args(argv)
    settings = Settings()

    configure_logging(
        log_level=args.log_level or ("WARNING" if args.json_output else settings.log_level),
        stream=sys.stderr,
    )

    token = args.token or settings.spotify_access_token
    if not token:
        print(
            "Error: no access token. Pass --token or set SPOTIFY_ACCESS_TOKEN.",
            file=sys.stderr,
        )
        return 2

    return asyncio.run(_run(token, args.json_output, args.output, settings))


if __name__ == "__main__":
    sys.exit(main())
