"""Port for the target management system (artists, albums, commands)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class ArtistDefaults:
    """Settings applied to artists the reconciler adds to the target system."""

    root_folder_path: str
    quality_profile_id: int
    metadata_profile_id: int
    monitored: bool = True
    search_for_missing_albums: bool = False


@dataclass(slots=True, frozen=True)
class TargetArtist:
    id: int
    foreign_artist_id: str
    name: str | None = None


@dataclass(slots=True, frozen=True)
class AlbumStatistics:
    track_file_count: int | None = None
    track_count: int | None = None
    percent_of_tracks: float | None = None


@dataclass(slots=True, frozen=True)
class TargetAlbum:
    id: int
    foreign_album_id: str
    monitored: bool
    title: str | None = None
    track_count: int | None = None
    statistics: AlbumStatistics | None = None
    track_has_file: tuple[bool, ...] = field(default_factory=tuple)


@runtime_checkable
class TargetSystem(Protocol):
    """Operations the reconciler needs; adapters raise ``TargetSystemError`` on failure."""

    async def ping(self) -> None: ...

    async def find_artist(self, foreign_artist_id: str) -> TargetArtist | None: ...

    async def add_artist(
        self,
        *,
        foreign_artist_id: str,
        artist_name: str,
        defaults: ArtistDefaults,
    ) -> TargetArtist | None: ...

    async def find_album(self, *, artist_id: int, foreign_album_id: str) -> TargetAlbum | None: ...

    async def set_album_monitored(self, album_id: int, monitored: bool) -> None: ...

    async def refresh_artist(self, artist_id: int) -> None: ...

    async def search_album(self, album_id: int) -> None: ...


__all__ = [
    "AlbumStatistics",
    "ArtistDefaults",
    "TargetAlbum",
    "TargetArtist",
    "TargetSystem",
]
