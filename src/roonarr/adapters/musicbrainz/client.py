"""MusicBrainz API client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from roonarr.adapters.http_resilience import ResilientClient

from .schema import MusicBrainzReleaseSearch

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from roonarr.config.http_resilience import ResilienceConfig
    from roonarr.config.musicbrainz import MusicBrainzConfig

log = getLogger(__name__)

DEFAULT_RELEASE_INC = ("release-groups",)
DEFAULT_SEARCH_LIMIT = 10


class MusicBrainzAPIError(RuntimeError):
    """Raised when the MusicBrainz API returns an unexpected response."""


class MusicBrainzClient:
    """Low-level HTTP client for the MusicBrainz release search.

    The underlying ``ResilientClient`` is created on first use and kept for the
    lifetime of this object so that its rate limiter spans all lookups.
    """

    def __init__(
        self,
        *,
        config: MusicBrainzConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> MusicBrainzClient:
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

    async def search_releases(
        self,
        *,
        query: str,
        limit: int = DEFAULT_SEARCH_LIMIT,
        inc: tuple[str, ...] | None = None,
    ) -> MusicBrainzReleaseSearch:
        inc_values = inc if inc is not None else DEFAULT_RELEASE_INC
        params: dict[str, str] = {
            "query": query,
            "fmt": "json",
            "limit": str(limit),
        }
        if inc_values:
            params["inc"] = "+".join(inc_values)

        if self._resilience.base_url is None:
            raise MusicBrainzAPIError("Missing MusicBrainz base_url in resilience configuration")

        response = await self._get_client().get("release/", params=params)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise MusicBrainzAPIError("Unexpected MusicBrainz response payload")

        return MusicBrainzReleaseSearch.model_validate(payload)

    def _get_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        return self._client
