"""Unit tests for the profile CLI formatting and argument handling."""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.cli import profile as profile_cli
from src.cli.profile import _build_parser, format_json_output, format_text_output, main
from src.models.recommendation import Recommendation, SimilarityType, UserMusicProfile, UserRef
from tests.conftest import make_insights, make_playlist


@pytest.fixture
def profile() -> UserMusicProfile:
    return UserMusicProfile(
        insights=make_insights(genres=[("jazz", 40)]),
        recommendations=[
            Recommendation(
                playlist=make_playlist(name="Jazz Classics", followers=12_345, track_count=40),
                score=81.3,
                reasons=["Matches your jazz music taste"],
                matching_genres=["jazz"],
                similarity_type=SimilarityType.GENRE,
            ),
            Recommendation(
                playlist=make_playlist(playlist_id="p2", name="Chill Evening"),
                score=55.0,
                reasons=["Perfect for your chill listening mood"],
                similarity_type=SimilarityType.USER_PATTERN,
            ),
        ],
        last_updated=datetime(2026, 3, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def logging_setup(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Keep ``main`` from pointing structlog at this test's captured stderr."""
    setup = MagicMock()
    monkeypatch.setattr(profile_cli, "configure_logging", setup)
    return setup


class TestFormatting:
    def test_text_report(self, profile: UserMusicProfile) -> None:
        text = format_text_output(UserRef(id="u1", display_name="Kim"), profile)
        assert "profile for Kim" in text
        assert "RECOMMENDATIONS (2)" in text
        assert " 1. Jazz Classics  [81.3]" in text
        assert "followers: 12,345" in text
        assert "followers: n/a" in text
        assert "- Perfect for your chill listening mood" in text

    def test_text_report_falls_back_to_user_id(self, profile: UserMusicProfile) -> None:
        assert "profile for u1" in format_text_output(UserRef(id="u1"), profile)

    def test_json_report(self, profile: UserMusicProfile) -> None:
        payload = json.loads(format_json_output(UserRef(id="u1"), profile))
        assert payload["user"]["id"] == "u1"
        assert payload["profile"]["recommendations"][0]["similarity_type"] == "genre"
        assert payload["profile"]["insights"]["top_genres"][0]["percentage"] == 40


class TestArguments:
    def test_parser_flags(self) -> None:
        args = _build_parser().parse_args(["--token", "abc", "--json", "-o", "out.json"])
        assert args.token == "abc"
        assert args.json_output is True
        assert args.output == "out.json"

    def test_missing_token_exits_with_usage_error(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        logging_setup: MagicMock,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("SPOTIFY_ACCESS_TOKEN", raising=False)

        assert main(["--json"]) == 2
        assert "no access token" in capsys.readouterr().err
        assert logging_setup.call_args.kwargs["stream"] is sys.stderr
        assert logging_setup.call_args.kwargs["log_level"] == "WARNING"
