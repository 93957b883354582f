"""Spotify Web API catalog adapter.

Implements the core CatalogPort with an httpx client authenticated through
the OAuth2 client-credentials grant. The access token is shared by every
pipeline run, so refreshing it is serialized behind one lock.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from core.errors import CatalogAuthError, CatalogFetchError
from core.models import CandidateReference, CatalogItem, Contributor, ReferenceKind

LOGGER = logging.getLogger(__name__)

API_BASE_URL = "https://api.spotify.com/v1"
TOKEN_URL = "https://accounts.spotify.com/api/token"

# Refresh a little early so a token never expires mid-request.
TOKEN_EXPIRY_MARGIN_SECONDS = 60.0

_ENDPOINTS = {
    ReferenceKind.TRACK: "tracks",
    ReferenceKind.ALBUM: "albums",
}


def _spotify_url(payload: Dict[str, Any]) -> str:
    return payload["external_urls"]["spotify"]


def _first_image_url(payload: Dict[str, Any]) -> Optional[str]:
    images = payload.get("images") or []
    if not images:
        return None
    first = images[0]
    if not isinstance(first, dict):
        return None
    return first.get("url")


def _contributors(payload: Dict[str, Any]) -> tuple[Contributor, ...]:
    return tuple(
        Contributor(name=artist["name"], url=_spotify_url(artist))
        for artist in payload.get("artists") or []
    )


def parse_track(payload: Dict[str, Any]) -> CatalogItem:
    """Map a /tracks/{id} response onto a CatalogItem."""

    album = payload["album"]
    return CatalogItem(
        name=payload["name"],
        canonical_url=_spotify_url(payload),
        collection_name=album["name"],
        collection_url=_spotify_url(album),
        collection_release_date=album.get("release_date", ""),
        contributors=_contributors(payload),
        thumbnail_url=_first_image_url(album),
        kind=ReferenceKind.TRACK,
    )


def parse_album(payload: Dict[str, Any]) -> CatalogItem:
    """Map an /albums/{id} response onto a CatalogItem."""

    return CatalogItem(
        name=payload["name"],
        canonical_url=_spotify_url(payload),
        collection_name=payload["name"],
        collection_url=_spotify_url(payload),
        collection_release_date=payload.get("release_date", ""),
        contributors=_contributors(payload),
        thumbnail_url=_first_image_url(payload),
        kind=ReferenceKind.ALBUM,
        total_tracks=payload.get("total_tracks"),
    )


class SpotifyCatalogClient:
    """Async client for Spotify catalog lookups.

    Security: never logs the client secret or the access token.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        timeout_seconds: float = 10.0,
        base_url: str = API_BASE_URL,
        token_url: str = TOKEN_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._token_url = token_url
        self._clock = clock
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"User-Agent": "trackcard/0.1"},
            transport=transport,
        )
        # Created on first use so it binds to the loop that runs the bot.
        self._token_lock: Optional[asyncio.Lock] = None
        self._access_token: Optional[str] = None
        self._expires_at = 0.0

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SpotifyCatalogClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _lock(self) -> asyncio.Lock:
        if self._token_lock is None:
            self._token_lock = asyncio.Lock()
        return self._token_lock

    async def authenticate(self) -> None:
        """Obtain the first access token. Raises CatalogAuthError on failure."""

        async with self._lock():
            await self._request_token()
        LOGGER.info("Authenticated with the Spotify Web API")

    async def _request_token(self) -> str:
        # Caller must hold the token lock.
        try:
            response = await self._client.post(
                self._token_url,
                data={"grant_type": "client_credentials"},
                auth=(self._client_id, self._client_secret),
            )
        except httpx.HTTPError as exc:
            raise CatalogAuthError(f"Token request failed: {exc}") from exc

        if response.status_code != 200:
            raise CatalogAuthError(f"Token request rejected ({response.status_code})")

        try:
            body = response.json()
            token = body["access_token"]
            expires_in = float(body.get("expires_in", 3600))
        except (ValueError, KeyError, TypeError) as exc:
            raise CatalogAuthError("Malformed token response") from exc

        self._access_token = token
        self._expires_at = self._clock() + expires_in
        LOGGER.debug("Spotify access token refreshed, valid for %ss", int(expires_in))
        return token

    async def _current_token(self) -> str:
        async with self._lock():
            if self._access_token and self._clock() < self._expires_at - TOKEN_EXPIRY_MARGIN_SECONDS:
                return self._access_token
            return await self._request_token()

    async def _invalidate(self, token: str) -> None:
        async with self._lock():
            # Another run may already have replaced the token.
            if self._access_token == token:
                self._access_token = None

    async def fetch_item(self, reference: CandidateReference, market: str) -> CatalogItem:
        """Fetch one track or album. Any failure raises CatalogFetchError."""

        token = await self._current_token()
        url = f"{self._base_url}/{_ENDPOINTS[reference.kind]}/{reference.identifier}"
        try:
            response = await self._client.get(
                url,
                params={"market": market},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise CatalogFetchError(f"Transport error for {reference.identifier}: {exc}") from exc

        if response.status_code == 401:
            await self._invalidate(token)
        if response.status_code != 200:
            raise CatalogFetchError(
                f"Spotify returned {response.status_code} for {reference.kind.value} {reference.identifier}"
            )

        try:
            payload = response.json()
            if reference.kind is ReferenceKind.ALBUM:
                return parse_album(payload)
            return parse_track(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise CatalogFetchError(f"Malformed payload for {reference.identifier}") from exc
