"""Spotify Web API adapter (listening history and playlist search)."""

from src.providers.spotify.spotify_web_api_provider import SpotifyWebAPIProvider

__all__ = ["SpotifyWebAPIProvider"]
