"""Resolve source albums to MusicBrainz artist and release-group ids."""

from __future__ import annotations

import json
import re
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from roonarr.domain.model import ResolvedAlbum
from roonarr.domain.similarity import MATCH_THRESHOLD, select_best_match

from .client import MusicBrainzAPIError

if TYPE_CHECKING:
    from .client import MusicBrainzClient

log = getLogger(__name__)

_LUCENE_SPECIAL = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/])')


def escape_lucene(term: str) -> str:
    """Backslash-escape every Lucene query metacharacter in ``term``."""

    return _LUCENE_SPECIAL.sub(r"\\\1", term)


def build_release_query(title: str, artist: str) -> str:
    return f"release:{escape_lucene(title)} AND artist:{escape_lucene(artist)}"


class MusicBrainzResolver:
    """``IdentityResolver`` backed by the MusicBrainz release search.

    Every failure mode (network, timeout, HTTP status, malformed payload, no
    acceptable candidate) collapses to ``None``.
    """

    def __init__(
        self,
        client: MusicBrainzClient,
        *,
        threshold: int = MATCH_THRESHOLD,
    ) -> None:
        self._client = client
        self._threshold = threshold

    async def resolve(self, title: str, artist: str) -> ResolvedAlbum | None:
        query = build_release_query(title, artist)
        try:
            search = await self._client.search_releases(query=query)
        except (httpx.HTTPError, json.JSONDecodeError, ValidationError, MusicBrainzAPIError) as exc:
            log.debug("MusicBrainz lookup for %r failed: %s", query, exc)
            return None

        best = select_best_match(
            search.releases,
            title=title,
            artist=artist,
            threshold=self._threshold,
        )
        if best is None:
            log.debug("No acceptable MusicBrainz candidate for %r", query)
            return None

        release = best.candidate
        primary_artist = release.primary_artist
        if release.release_group is None or primary_artist is None:
            return None
        if not primary_artist.id or not release.release_group.id:
            return None

        log.debug(
            "Matched %r by %r to release %s (score %s)",
            title,
            artist,
            release.id,
            best.score,
        )
        return ResolvedAlbum(
            artist_id=primary_artist.id,
            release_group_id=release.release_group.id,
            artist_name=primary_artist.name,
        )
