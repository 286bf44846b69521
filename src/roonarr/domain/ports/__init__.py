"""Domain port definitions for adapters."""

from __future__ import annotations

from .browsing import BrowseItem, BrowseList, BrowseResult, LibraryBrowser
from .persistence import CacheRepository
from .resolution import IdentityResolver
from .target import AlbumStatistics, ArtistDefaults, TargetAlbum, TargetArtist, TargetSystem

__all__ = [
    "AlbumStatistics",
    "ArtistDefaults",
    "BrowseItem",
    "BrowseList",
    "BrowseResult",
    "CacheRepository",
    "IdentityResolver",
    "LibraryBrowser",
    "TargetAlbum",
    "TargetArtist",
    "TargetSystem",
]
