"""Minimal Pydantic models for the Lidarr v1 API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LidarrBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LidarrStatus(LidarrBaseModel):
    version: str | None = None
    app_name: str | None = Field(default=None, alias="appName")


class LidarrArtist(LidarrBaseModel):
    id: int
    foreign_artist_id: str = Field(alias="foreignArtistId")
    artist_name: str | None = Field(default=None, alias="artistName")
    monitored: bool | None = None


class LidarrAlbumStatistics(LidarrBaseModel):
    track_file_count: int | None = Field(default=None, alias="trackFileCount")
    track_count: int | None = Field(default=None, alias="trackCount")
    total_track_count: int | None = Field(default=None, alias="totalTrackCount")
    percent_of_tracks: float | None = Field(default=None, alias="percentOfTracks")


class LidarrTrack(LidarrBaseModel):
    id: int | None = None
    title: str | None = None
    has_file: bool = Field(default=False, alias="hasFile")


class LidarrAlbum(LidarrBaseModel):
    id: int
    foreign_album_id: str = Field(alias="foreignAlbumId")
    title: str | None = None
    monitored: bool = False
    artist_id: int | None = Field(default=None, alias="artistId")
    track_count: int | None = Field(default=None, alias="trackCount")
    statistics: LidarrAlbumStatistics | None = None
    tracks: list[LidarrTrack] = Field(default_factory=list["LidarrTrack"])


class LidarrCommand(LidarrBaseModel):
    id: int | None = None
    name: str | None = None
    status: str | None = None
