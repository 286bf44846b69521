"""Translate Lidarr payloads into target-system domain types."""

from __future__ import annotations

from typing import TYPE_CHECKING

from roonarr.domain.ports.target import AlbumStatistics, TargetAlbum, TargetArtist

if TYPE_CHECKING:
    from roonarr.domain.ports.target import ArtistDefaults

    from .schema import LidarrAlbum, LidarrAlbumStatistics, LidarrArtist


def translate_artist(artist: LidarrArtist) -> TargetArtist:
    return TargetArtist(
        id=artist.id,
        foreign_artist_id=artist.foreign_artist_id,
        name=artist.artist_name,
    )


def translate_album(album: LidarrAlbum) -> TargetAlbum:
    return TargetAlbum(
        id=album.id,
        foreign_album_id=album.foreign_album_id,
        monitored=album.monitored,
        title=album.title,
        track_count=album.track_count,
        statistics=_translate_statistics(album.statistics),
        track_has_file=tuple(track.has_file for track in album.tracks),
    )


def _translate_statistics(statistics: LidarrAlbumStatistics | None) -> AlbumStatistics | None:
    if statistics is None:
        return None
    return AlbumStatistics(
        track_file_count=statistics.track_file_count,
        track_count=statistics.track_count,
        percent_of_tracks=statistics.percent_of_tracks,
    )


def build_artist_payload(
    *,
    foreign_artist_id: str,
    artist_name: str,
    defaults: ArtistDefaults,
) -> dict[str, object]:
    return {
        "foreignArtistId": foreign_artist_id,
        "artistName": artist_name,
        "monitored": defaults.monitored,
        "rootFolderPath": defaults.root_folder_path,
        "qualityProfileId": defaults.quality_profile_id,
        "metadataProfileId": defaults.metadata_profile_id,
        "addOptions": {"searchForMissingAlbums": defaults.search_for_missing_albums},
    }
