"""Spotify Web API provider.

Implements both :class:`IListeningHistoryProvider` and
:class:`ICatalogSearchProvider` against ``https://api.spotify.com/v1/``
using an injected ``httpx.AsyncClient``.  One instance is bound to one
user's bearer token.

Status mapping (the only place catalog HTTP statuses are interpreted):

    401            → AuthenticationError
    403            → ProviderUnavailableError ("Premium account may be required")
    429            → RateLimitError
    other non-2xx  → CatalogError
    transport err  → ProviderUnavailableError

No retries happen here; callers decide which failures are fatal.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from src.interfaces.catalog_search_provider import ICatalogSearchProvider
from src.interfaces.listening_history_provider import IListeningHistoryProvider
from src.models.catalog import AlbumRef, ArtistRef, ImageRef, Track
from src.models.recommendation import UserRef
from src.utils.errors import (
    AuthenticationError,
    CatalogError,
    ProviderUnavailableError,
    RateLimitError,
)
from src.utils.logging import get_logger

DEFAULT_BASE_URL = "https://api.spotify.com/v1/"
_PROVIDER_NAME = "spotify"
_MAX_PAGE_SIZE = 50


class SpotifyWebAPIProvider(IListeningHistoryProvider, ICatalogSearchProvider):
    """Listening history and playlist search backed by the Spotify Web API.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient``; owned by the caller.
    access_token:
        OAuth bearer token for the user.  Obtaining and refreshing it is
        outside this provider.
    base_url:
        API root, overridable for tests.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self._http = http_client
        self._token = access_token
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self._base_url}{endpoint.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._http.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            self._logger.warning("spotify_request_failed", endpoint=endpoint, error=str(exc))
            raise ProviderUnavailableError(
                message=f"Spotify request failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        status = response.status_code
        if status == 401:
            raise AuthenticationError(provider_name=_PROVIDER_NAME)
        if status == 403:
            raise ProviderUnavailableError(
                message="Access forbidden. Premium account may be required.",
                provider_name=_PROVIDER_NAME,
            )
        if status == 429:
            self._logger.warning(
                "spotify_rate_limited",
                endpoint=endpoint,
                retry_after=response.headers.get("Retry-After"),
            )
            raise RateLimitError(provider_name=_PROVIDER_NAME)
        if not response.is_success:
            raise CatalogError(
                message=f"Spotify API error: {status} {response.reason_phrase}",
                provider_name=_PROVIDER_NAME,
            )

        # 204 and empty bodies happen on some library endpoints.
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogError(
                message="Spotify returned a non-JSON body",
                provider_name=_PROVIDER_NAME,
            ) from exc
        return payload if isinstance(payload, dict) else {}

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _parse_track(self, item: Any) -> Track | None:
        if not isinstance(item, dict) or not item.get("id") or not item.get("name"):
            return None

        album_raw = item.get("album") if isinstance(item.get("album"), dict) else {}
        try:
            return Track(
                id=item["id"],
                name=item["name"],
                artists=[
                    ArtistRef(id=a.get("id") or a.get("name", ""), name=a.get("name", ""))
                    for a in item.get("artists") or []
                    if isinstance(a, dict) and a.get("name")
                ],
                album=AlbumRef(
                    id=album_raw.get("id") or "",
                    name=album_raw.get("name") or "",
                    release_date=album_raw.get("release_date"),
                    images=[
                        ImageRef(url=img["url"], height=img.get("height"), width=img.get("width"))
                        for img in album_raw.get("images") or []
                        if isinstance(img, dict) and img.get("url")
                    ],
                ),
                duration_ms=item.get("duration_ms") or 0,
                popularity=item.get("popularity"),
                explicit=bool(item.get("explicit", False)),
            )
        except ValidationError as exc:
            self._logger.debug("spotify_track_skipped", track_id=item.get("id"), error=str(exc))
            return None

    def _parse_tracks(self, items: list[Any], wrapped: bool = False) -> list[Track]:
        tracks: list[Track] = []
        for item in items:
            raw = item.get("track") if wrapped and isinstance(item, dict) else item
            track = self._parse_track(raw)
            if track is not None:
                tracks.append(track)
        return tracks

    @staticmethod
    def _page_size(limit: int) -> int:
        return max(1, min(limit, _MAX_PAGE_SIZE))

    # ------------------------------------------------------------------
    # IListeningHistoryProvider
    # ------------------------------------------------------------------

    async def get_top_tracks(self, limit: int = 50) -> list[Track]:
        data = await self._request("me/top/tracks", {"limit": self._page_size(limit)})
        return self._parse_tracks(data.get("items") or [])

    async def get_recently_played(self, limit: int = 50) -> list[Track]:
        data = await self._request(
            "me/player/recently-played", {"limit": self._page_size(limit)}
        )
        return self._parse_tracks(data.get("items") or [], wrapped=True)

    async def get_saved_tracks(self, limit: int = 50) -> list[Track]:
        data = await self._request("me/tracks", {"limit": self._page_size(limit)})
        return self._parse_tracks(data.get("items") or [], wrapped=True)

    async def get_followed_artists(self, limit: int = 50) -> list[ArtistRef]:
        data = await self._request(
            "me/following", {"type": "artist", "limit": self._page_size(limit)}
        )
        artists_block = data.get("artists") if isinstance(data.get("artists"), dict) else {}
        return [
            ArtistRef(id=item["id"], name=item["name"])
            for item in artists_block.get("items") or []
            if isinstance(item, dict) and item.get("id") and item.get("name")
        ]

    async def get_current_user(self) -> UserRef:
        data = await self._request("me")
        if not data.get("id"):
            raise CatalogError(
                message="Spotify profile response has no user id",
                provider_name=_PROVIDER_NAME,
            )
        return UserRef(id=data["id"], display_name=data.get("display_name"))

    # ------------------------------------------------------------------
    # ICatalogSearchProvider
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str,
        kind: str = "playlist",
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        data = await self._request(
            "search", {"q": query, "type": kind, "limit": self._page_size(limit)}
        )
        block = data.get(f"{kind}s")
        if not isinstance(block, dict):
            return []
        items = block.get("items") or []
        self._logger.debug("spotify_search", query=query, kind=kind, results=len(items))
        return list(items)

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def is_available(self) -> bool:
        return bool(self._token)
