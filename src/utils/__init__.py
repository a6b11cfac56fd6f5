"""Utility modules for tastegraph.

- **errors** -- exception hierarchy rooted at TasteProfileError; provider
  adapters raise the subclasses and services catch them where the
  pipeline degrades gracefully.
- **concurrency** -- semaphore-bounded fan-out helpers for catalog search.
- **logging** -- structlog setup: coloured console output in development,
  JSON in production.
- **playlist_normalizer** -- turns raw catalog search records into fully
  defaulted CandidatePlaylist models.
"""

from src.utils.errors import (
    AuthenticationError,
    CatalogError,
    ConfigurationError,
    ProfileGenerationError,
    ProviderUnavailableError,
    RateLimitError,
    TasteProfileError,
)
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "AuthenticationError",
    "CatalogError",
    "ConfigurationError",
    "ProfileGenerationError",
    "ProviderUnavailableError",
    "RateLimitError",
    "TasteProfileError",
    "configure_logging",
    "get_logger",
]
