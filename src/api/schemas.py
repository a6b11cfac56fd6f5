"""Pydantic request/response schemas for the tastegraph API.

Response bodies reuse the domain models from :mod:`src.models` directly;
the wrappers here only add request-level metadata (which user, whether
the answer came from cache).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.models.recommendation import UserMusicProfile


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ProfileResponse(BaseModel):
    """A user's generated profile."""

    user_id: str
    display_name: str | None = None
    cached: bool = Field(description="True when served from the profile cache")
    profile: UserMusicProfile


class InvalidateResponse(BaseModel):
    """Result of dropping a user's cached profile."""

    user_id: str
    invalidated: bool = True


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
