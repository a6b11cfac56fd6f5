"""Integration tests for the tastegraph API routes and error middleware."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.middleware import ErrorHandlingMiddleware
from src.api.routes import router
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.candidate_sourcer import CandidateSourcer
from src.services.profile_analyzer import ProfileAnalyzer
from src.services.profile_service import MusicProfileService
from src.utils.errors import ProviderUnavailableError, RateLimitError
from tests.conftest import make_raw_playlist, search_router

_AUTH = {"Authorization": "Bearer test-token"}


def _build_test_app(history: MagicMock, search: MagicMock) -> FastAPI:
    """Create a FastAPI app wired to mocked catalog providers."""
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.include_router(router)

    tokens: list[str] = []

    def provider_factory(token: str) -> MagicMock:
        tokens.append(token)
        return history

    def service_factory(history_provider, _search_provider) -> MusicProfileService:
        return MusicProfileService(
            history_provider=history_provider,
            search_provider=search,
            analyzer=ProfileAnalyzer(current_year=2026),
            sourcer=CandidateSourcer(search, concurrency=3),
        )

    app.state.provider_factory = provider_factory
    app.state.service_factory = service_factory
    app.state.cache_provider = MemoryCacheProvider(max_size=10, ttl=60)
    app.state.profile_cache_ttl = 60
    app.state.provider_registry = {"catalog": "mock", "cache": "memory"}
    app.state.seen_tokens = tokens
    return app


@pytest.fixture
def app(mock_history_provider: MagicMock, mock_search_provider: MagicMock) -> FastAPI:
    mock_search_provider.search.side_effect = search_router(
        {'"k-pop" hits charts': [make_raw_playlist("kp", "K-Pop Hits", followers=80_000, track_count=50)]}
    )
    return _build_test_app(mock_history_provider, mock_search_provider)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


# ======================================================================
# Health
# ======================================================================


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["providers"] == {"catalog": "mock", "cache": "memory"}


# ======================================================================
# Profile
# ======================================================================


class TestProfileRoutes:
    def test_requires_bearer_token(self, client: TestClient) -> None:
        response = client.get("/api/v1/profile")
        assert response.status_code == 401
        assert response.json() == {
            "error": "AuthenticationError",
            "detail": "Missing or malformed bearer token",
        }

    def test_rejects_other_schemes(self, client: TestClient) -> None:
        response = client.get("/api/v1/profile", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401

    def test_generated_then_cached(self, client: TestClient, app: FastAPI) -> None:
        first = client.get("/api/v1/profile", headers=_AUTH)
        second = client.get("/api/v1/profile", headers=_AUTH)

        assert first.status_code == 200
        assert first.json()["cached"] is False
        assert second.json()["cached"] is True
        body = second.json()
        assert body["user_id"] == "user-1"
        assert body["profile"]["insights"]["top_genres"][0]["genre"] == "k-pop"
        assert body["profile"]["recommendations"][0]["playlist"]["id"] == "kp"
        assert app.state.seen_tokens == ["test-token", "test-token"]

    def test_refresh_bypasses_cache(
        self, client: TestClient, mock_history_provider: MagicMock
    ) -> None:
        client.get("/api/v1/profile", headers=_AUTH)
        response = client.post("/api/v1/profile/refresh", headers=_AUTH)

        assert response.status_code == 200
        assert response.json()["cached"] is False
        assert mock_history_provider.get_top_tracks.await_count == 2

    def test_delete_invalidates(self, client: TestClient) -> None:
        client.get("/api/v1/profile", headers=_AUTH)
        deleted = client.delete("/api/v1/profile", headers=_AUTH)
        after = client.get("/api/v1/profile", headers=_AUTH)

        assert deleted.status_code == 200
        assert deleted.json() == {"user_id": "user-1", "invalidated": True}
        assert after.json()["cached"] is False


# ======================================================================
# Error mapping
# ======================================================================


class TestErrorMapping:
    def test_top_tracks_failure_is_bad_gateway(
        self, client: TestClient, mock_history_provider: MagicMock
    ) -> None:
        mock_history_provider.get_top_tracks.side_effect = ProviderUnavailableError()

        response = client.get("/api/v1/profile", headers=_AUTH)

        assert response.status_code == 502
        assert response.json() == {
            "error": "ProfileGenerationError",
            "detail": "Unable to analyze your music preferences",
        }

    def test_rate_limited_user_lookup(
        self, client: TestClient, mock_history_provider: MagicMock
    ) -> None:
        mock_history_provider.get_current_user.side_effect = RateLimitError()

        response = client.get("/api/v1/profile", headers=_AUTH)

        assert response.status_code == 429
        assert response.json()["error"] == "RateLimitError"
