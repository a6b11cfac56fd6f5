"""Unit tests for Settings and the layered YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.config.loader import _deep_merge, load_config
from src.config.settings import Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SPOTIFY_ACCESS_TOKEN", raising=False)
        settings = Settings(_env_file=None)
        assert settings.search_concurrency == 5
        assert settings.profile_cache_ttl == 2700
        assert settings.classifier_seed is None
        assert settings.has_default_token() is False

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPOTIFY_ACCESS_TOKEN", "BQD-test")
        monkeypatch.setenv("SEARCH_CONCURRENCY", "2")
        monkeypatch.setenv("CLASSIFIER_SEED", "42")
        settings = Settings(_env_file=None)
        assert settings.has_default_token() is True
        assert settings.search_concurrency == 2
        assert settings.classifier_seed == 42


class TestLoadConfig:
    def test_yaml_merged_with_settings(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "app:\n  name: tastegraph\n  port: 1\ncache:\n  enabled: true\n  ttl: 10\n"
        )
        settings = Settings(_env_file=None, app_port=9000, profile_cache_ttl=600)

        config = load_config(str(config_file), settings=settings)

        assert config["app"]["name"] == "tastegraph"
        assert config["app"]["port"] == 9000
        assert config["cache"] == {"enabled": True, "ttl": 600, "max_size": 1000}
        assert config["profile"]["search_concurrency"] == 5

    def test_missing_file_uses_settings_only(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=Settings(_env_file=None))
        assert config["logging"]["level"] == "INFO"
        assert "cors_origins" not in config["app"]


class TestDeepMerge:
    def test_nested_merge(self) -> None:
        base = {"cache": {"enabled": True}, "keep": 1}
        _deep_merge(base, {"cache": {"ttl": 600}, "new": {"x": 1}})
        assert base == {"cache": {"enabled": True, "ttl": 600}, "keep": 1, "new": {"x": 1}}

    def test_scalar_replaces_dict(self) -> None:
        base = {"cache": {"enabled": True}}
        _deep_merge(base, {"cache": None})
        assert base == {"cache": None}
