"""MusicBrainz identity resolution adapter."""

from __future__ import annotations

from .client import MusicBrainzAPIError, MusicBrainzClient
from .resolver import MusicBrainzResolver, build_release_query, escape_lucene

__all__ = [
    "MusicBrainzAPIError",
    "MusicBrainzClient",
    "MusicBrainzResolver",
    "build_release_query",
    "escape_lucene",
]
