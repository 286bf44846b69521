"""Lidarr API client implementing the target-system port."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from roonarr.adapters.http_resilience import ResilientClient
from roonarr.domain.errors import TargetSystemError

from .schema import LidarrAlbum, LidarrArtist, LidarrStatus
from .translator import build_artist_payload, translate_album, translate_artist

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from roonarr.config.http_resilience import ResilienceConfig
    from roonarr.config.lidarr import LidarrConfig
    from roonarr.domain.ports.target import ArtistDefaults, TargetAlbum, TargetArtist

log = getLogger(__name__)

_ARTISTS = TypeAdapter(list[LidarrArtist])
_ALBUMS = TypeAdapter(list[LidarrAlbum])

REFRESH_ARTIST_COMMAND = "RefreshArtist"
ALBUM_SEARCH_COMMAND = "AlbumSearch"


class LidarrAPIError(TargetSystemError):
    """Raised when a Lidarr request fails or returns an unexpected payload."""


class LidarrClient:
    """Async client for the subset of the Lidarr v1 API the reconciler drives.

    Transport errors and non-2xx responses are retried by the underlying
    ``ResilientClient``; whatever still fails surfaces as ``LidarrAPIError``.
    """

    def __init__(
        self,
        *,
        config: LidarrConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> LidarrClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def ping(self) -> None:
        status = await self.fetch_status()
        log.debug("Lidarr reachable (version %s)", status.version)

    async def fetch_status(self) -> LidarrStatus:
        payload = await self._request("GET", "system/status")
        return self._validate(LidarrStatus, payload)

    async def find_artist(self, foreign_artist_id: str) -> TargetArtist | None:
        payload = await self._request("GET", "artist")
        artists = self._validate_list(_ARTISTS, payload)
        for artist in artists:
            if artist.foreign_artist_id == foreign_artist_id:
                return translate_artist(artist)
        return None

    async def add_artist(
        self,
        *,
        foreign_artist_id: str,
        artist_name: str,
        defaults: ArtistDefaults,
    ) -> TargetArtist | None:
        body = build_artist_payload(
            foreign_artist_id=foreign_artist_id,
            artist_name=artist_name,
            defaults=defaults,
        )
        payload = await self._request("POST", "artist", json=body)
        if not payload:
            return None
        return translate_artist(self._validate(LidarrArtist, payload))

    async def find_album(self, *, artist_id: int, foreign_album_id: str) -> TargetAlbum | None:
        payload = await self._request(
            "GET",
            "album",
            params={"artistId": str(artist_id), "includeAllArtistAlbums": "true"},
        )
        albums = self._validate_list(_ALBUMS, payload)
        match = next(
            (album for album in albums if album.foreign_album_id == foreign_album_id),
            None,
        )
        if match is None:
            return None

        detailed = await self._request("GET", f"album/{match.id}")
        return translate_album(self._validate(LidarrAlbum, detailed))

    async def set_album_monitored(self, album_id: int, monitored: bool) -> None:
        # PUT expects the complete resource, so round-trip the raw payload
        payload = await self._request("GET", f"album/{album_id}")
        if not isinstance(payload, dict):
            raise LidarrAPIError(f"Unexpected Lidarr payload for album {album_id}")
        payload["monitored"] = monitored
        await self._request("PUT", f"album/{album_id}", json=payload)

    async def refresh_artist(self, artist_id: int) -> None:
        await self._command({"name": REFRESH_ARTIST_COMMAND, "artistId": artist_id})

    async def search_album(self, album_id: int) -> None:
        await self._command({"name": ALBUM_SEARCH_COMMAND, "albumIds": [album_id]})

    async def _command(self, body: dict[str, object]) -> None:
        await self._request("POST", "command", json=body)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: object = None,
        params: dict[str, str] | None = None,
    ) -> object:
        attempts = self._resilience.retry.attempts
        try:
            response = await self._get_client().request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            raise LidarrAPIError(
                f"Lidarr request failed after {attempts} attempts: {exc}"
            ) from exc

        if not response.is_success:
            raise LidarrAPIError(
                f"Lidarr request failed after {attempts} attempts: "
                f"HTTP {response.status_code}: {response.text}"
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise LidarrAPIError(f"Invalid JSON from Lidarr {method} {path}") from exc

    @staticmethod
    def _validate[T: LidarrStatus | LidarrArtist | LidarrAlbum](
        model: type[T],
        payload: object,
    ) -> T:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise LidarrAPIError(f"Unexpected Lidarr {model.__name__} payload: {exc}") from exc

    @staticmethod
    def _validate_list[T](adapter: TypeAdapter[list[T]], payload: object) -> list[T]:
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise LidarrAPIError(f"Unexpected Lidarr list payload: {exc}") from exc

    def _get_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        return self._client
