"""tastegraph FastAPI application entry point.

Wires providers, services and routes together.  Loads configuration from
``.env`` and ``config/config.yaml``, configures structured logging, and
stores the shared components on ``app.state`` for the route dependencies.

Catalog providers are per request (one per bearer token); everything else
(the HTTP client, the profile cache) is shared for the app's lifetime.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import API_VERSION
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.catalog_search_provider import ICatalogSearchProvider
from src.interfaces.listening_history_provider import IListeningHistoryProvider
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.spotify.spotify_web_api_provider import SpotifyWebAPIProvider
from src.services.candidate_sourcer import CandidateSourcer
from src.services.genre_classifier import GenreClassifier
from src.services.profile_analyzer import ProfileAnalyzer
from src.services.profile_service import MusicProfileService
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component factories
# ---------------------------------------------------------------------------


def build_service_factory(
    app_settings: Settings,
) -> Callable[[IListeningHistoryProvider, ICatalogSearchProvider], MusicProfileService]:
    """Return a factory that builds a profile service around given providers."""

    def _factory(
        history: IListeningHistoryProvider,
        search: ICatalogSearchProvider,
    ) -> MusicProfileService:
        rng = (
            random.Random(app_settings.classifier_seed)
            if app_settings.classifier_seed is not None
            else None
        )
        return MusicProfileService(
            history_provider=history,
            search_provider=search,
            analyzer=ProfileAnalyzer(classifier=GenreClassifier(rng=rng)),
            sourcer=CandidateSourcer(search, concurrency=app_settings.search_concurrency),
            sample_limit=app_settings.history_sample_limit,
            followed_artists_limit=app_settings.followed_artists_limit,
        )

    return _factory


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every shared component for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    http_client = httpx.AsyncClient(timeout=app_settings.http_timeout)

    def provider_factory(token: str) -> SpotifyWebAPIProvider:
        return SpotifyWebAPIProvider(
            http_client=http_client,
            access_token=token,
            base_url=app_settings.spotify_api_base_url,
        )

    cache_provider = MemoryCacheProvider(
        max_size=app_settings.profile_cache_max_size,
        ttl=app_settings.profile_cache_ttl,
    )

    return {
        "http_client": http_client,
        "provider_factory": provider_factory,
        "service_factory": build_service_factory(app_settings),
        "cache_provider": cache_provider,
        "profile_cache_ttl": app_settings.profile_cache_ttl,
        "provider_registry": {
            "catalog": "spotify",
            "cache": "memory",
            "default_token": app_settings.has_default_token(),
        },
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Build shared components on startup, close the HTTP client on shutdown."""
    components = _build_all(settings)
    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=API_VERSION,
        environment=settings.app_env,
        search_concurrency=settings.search_concurrency,
        cache_ttl=settings.profile_cache_ttl,
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="tastegraph API",
        version=API_VERSION,
        description=(
            "Builds a listening profile from a user's catalog history and "
            "ranks playlist recommendations against it."
        ),
        lifespan=_lifespan,
    )

    # Last added runs first.
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=config.get("app", {}).get("cors_origins"))

    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
