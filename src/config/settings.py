"""Application settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

  1. Environment variables, e.g. ``SPOTIFY_ACCESS_TOKEN=BQD...``
  2. A ``.env`` file in the working directory (local development only)

Field ``spotify_access_token`` maps to env var ``SPOTIFY_ACCESS_TOKEN``.
Defaults apply when neither source sets a value.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """tastegraph application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Catalog ===
    spotify_api_base_url: str = "https://api.spotify.com/v1/"
    # Only used by the CLI; API requests carry their own bearer token.
    spotify_access_token: str = ""
    http_timeout: float = 30.0

    # === Profile generation ===
    # Tracks requested per listening source (top / recent / saved).
    history_sample_limit: int = 50
    followed_artists_limit: int = 50
    # Simultaneous catalog searches across all strategies.
    search_concurrency: int = 5
    # Seed for the classifier's audio-proxy noise; unset = neutral 0.5 proxies.
    classifier_seed: int | None = None

    # === Profile cache ===
    profile_cache_ttl: int = 45 * 60
    profile_cache_max_size: int = 1000

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def has_default_token(self) -> bool:
        """Return ``True`` if a fallback access token is configured."""
        return bool(self.spotify_access_token)
