"""JSON file persistence for the album cache."""

from __future__ import annotations

import os
import tempfile
from datetime import UTC, date, datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from roonarr.domain.model import AlbumCache, TrackingRecord

if TYPE_CHECKING:
    from roonarr.domain.model import TrackedItemKey

log = getLogger(__name__)

DOCUMENT_VERSION = 1
LEGACY_DATE_FORMAT = "%a %b %d %Y"


class CacheRecordModel(BaseModel):
    """Serialized ``TrackingRecord``; also accepts the legacy field names."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    resolved_album_id: str | None = Field(
        default=None,
        alias="resolvedAlbumId",
        validation_alias=AliasChoices("resolvedAlbumId", "musicBrainzId"),
    )
    resolved_artist_id: str | None = Field(
        default=None,
        alias="resolvedArtistId",
        validation_alias=AliasChoices("resolvedArtistId", "artistId"),
    )
    discovered_at: datetime = Field(
        alias="discoveredAt",
        validation_alias=AliasChoices("discoveredAt", "dateFound"),
    )
    is_baseline_entry: bool = Field(
        default=False,
        alias="isBaselineEntry",
        validation_alias=AliasChoices("isBaselineEntry", "initialCacheEntry"),
    )
    target_synced: bool | None = Field(
        default=None,
        alias="targetSystemSynced",
        validation_alias=AliasChoices("targetSystemSynced", "lidarrProcessed"),
    )
    last_retry_at: datetime | None = Field(
        default=None,
        alias="lastRetryAt",
        validation_alias=AliasChoices("lastRetryAt", "lastRetry"),
    )

    @field_validator("discovered_at", "last_retry_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @classmethod
    def from_record(cls, record: TrackingRecord) -> CacheRecordModel:
        return cls(
            resolved_album_id=record.resolved_album_id,
            resolved_artist_id=record.resolved_artist_id,
            discovered_at=record.discovered_at,
            is_baseline_entry=record.is_baseline_entry,
            target_synced=record.target_synced,
            last_retry_at=record.last_retry_at,
        )

    def to_record(self) -> TrackingRecord:
        album_id, artist_id = self.resolved_album_id, self.resolved_artist_id
        if not album_id or not artist_id:
            # half-resolved entries go back through identity lookup
            album_id = artist_id = None
        return TrackingRecord(
            discovered_at=self.discovered_at,
            is_baseline_entry=self.is_baseline_entry,
            resolved_album_id=album_id,
            resolved_artist_id=artist_id,
            target_synced=self.target_synced,
            last_retry_at=self.last_retry_at,
        )


class CacheDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: int = DOCUMENT_VERSION
    last_scan_date: date | None = Field(
        default=None,
        alias="lastScanDate",
        validation_alias=AliasChoices("lastScanDate", "lastCacheDate"),
    )
    albums: list[tuple[str, CacheRecordModel]] = Field(
        default_factory=list[tuple[str, CacheRecordModel]]
    )

    @field_validator("last_scan_date", mode="before")
    @classmethod
    def _parse_legacy_date(cls, value: object) -> object:
        if not isinstance(value, str) or not value:
            return value or None
        try:
            return date.fromisoformat(value)
        except ValueError:
            return datetime.strptime(value, LEGACY_DATE_FORMAT).date()  # noqa: DTZ007

    @classmethod
    def from_cache(cls, cache: AlbumCache) -> CacheDocument:
        return cls(
            last_scan_date=cache.last_scan_date,
            albums=[(key, CacheRecordModel.from_record(record)) for key, record in cache.items()],
        )

    def to_cache(self) -> AlbumCache:
        records: dict[TrackedItemKey, TrackingRecord] = {
            key: model.to_record() for key, model in self.albums
        }
        return AlbumCache(records, last_scan_date=self.last_scan_date)


class JsonCacheRepository:
    """``CacheRepository`` storing the whole cache as one JSON document."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AlbumCache:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.info("No existing cache file found at %s, starting fresh", self._path)
            return AlbumCache()
        except OSError as exc:
            log.warning("Could not read cache file %s: %s; starting fresh", self._path, exc)
            return AlbumCache()

        try:
            cache = CacheDocument.model_validate_json(raw).to_cache()
        except ValueError as exc:
            log.warning("Cache file %s is unreadable: %s; starting fresh", self._path, exc)
            return AlbumCache()

        log.info("Loaded cache with %s albums", len(cache))
        log.info("Last scan: %s", cache.last_scan_date or "Never")
        return cache

    def save(self, cache: AlbumCache) -> bool:
        try:
            payload = CacheDocument.from_cache(cache).model_dump_json(by_alias=True, indent=2)
            self._write_atomic(payload)
        except (OSError, ValueError) as exc:
            log.error("Error saving cache to %s: %s", self._path, exc)
            return False
        log.info("Cache saved (%s albums)", len(cache))
        return True

    def _write_atomic(self, payload: str) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=directory,
            prefix=f".{self._path.stem}.",
            suffix=".tmp",
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
