"""FastAPI route definitions for the tastegraph API.

Endpoint                   Method  Description
─────────────────────────────────────────────────────────────────
/api/v1/health             GET     Health check + provider status
/api/v1/profile            GET     Cached or freshly generated profile
/api/v1/profile/refresh    POST    Force regeneration
/api/v1/profile            DELETE  Drop the cached profile

Every profile endpoint takes the user's catalog token as
``Authorization: Bearer <token>``.  Shared components are read from
``app.state`` (populated by ``main.py``) through ``Depends`` helpers, so
tests can swap them without touching the routes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request

from src.api.schemas import HealthResponse, InvalidateResponse, ProfileResponse
from src.interfaces.listening_history_provider import IListeningHistoryProvider
from src.services.profile_service import ProfileCache
from src.utils.errors import AuthenticationError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

API_VERSION = "0.1.0"

router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependency injection helpers
# ---------------------------------------------------------------------------


@dataclass
class ProfileSession:
    """Per-request wiring: the user's catalog provider and the profile cache."""

    history: IListeningHistoryProvider
    profiles: ProfileCache


def _bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError(message="Missing or malformed bearer token")
    return token.strip()


def _get_profile_session(request: Request) -> ProfileSession:
    """Build the provider and cache for the caller's token."""
    token = _bearer_token(request)
    state = request.app.state
    provider = state.provider_factory(token)
    service = state.service_factory(provider, provider)
    return ProfileSession(
        history=provider,
        profiles=ProfileCache(service, state.cache_provider, ttl=state.profile_cache_ttl),
    )


ProfileSessionDep = Annotated[ProfileSession, Depends(_get_profile_session)]


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version and configured providers."""
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))
    return HealthResponse(status="healthy", version=API_VERSION, providers=providers)


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get the caller's music profile and recommendations",
)
async def get_profile(session: ProfileSessionDep) -> ProfileResponse:
    user = await session.history.get_current_user()
    cached = await session.profiles.get(user)
    if cached is not None:
        return ProfileResponse(
            user_id=user.id, display_name=user.display_name, cached=True, profile=cached
        )

    profile = await session.profiles.get_or_generate(user, force_refresh=True)
    return ProfileResponse(
        user_id=user.id, display_name=user.display_name, cached=False, profile=profile
    )


@router.post(
    "/profile/refresh",
    response_model=ProfileResponse,
    summary="Regenerate the caller's profile, bypassing the cache",
)
async def refresh_profile(session: ProfileSessionDep) -> ProfileResponse:
    user = await session.history.get_current_user()
    profile = await session.profiles.get_or_generate(user, force_refresh=True)
    _logger.info("profile_refreshed", user_id=user.id)
    return ProfileResponse(
        user_id=user.id, display_name=user.display_name, cached=False, profile=profile
    )


@router.delete(
    "/profile",
    response_model=InvalidateResponse,
    summary="Drop the caller's cached profile",
)
async def invalidate_profile(session: ProfileSessionDep) -> InvalidateResponse:
    user = await session.history.get_current_user()
    await session.profiles.invalidate(user)
    return InvalidateResponse(user_id=user.id)
