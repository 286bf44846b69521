"""Tracking state for albums discovered in the source library."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from datetime import date, datetime

type TrackedItemKey = str

UNKNOWN_ARTIST = "Unknown"
KEY_SEPARATOR = "|"


def make_item_key(artist: str | None, title: str) -> TrackedItemKey:
    """Build the ``artist|title`` key used to track an album across scans."""

    return f"{artist or UNKNOWN_ARTIST}{KEY_SEPARATOR}{title}"


def split_item_key(key: TrackedItemKey) -> tuple[str, str]:
    """Split a tracked item key back into ``(artist, title)``.

    Only the first separator is significant: titles may contain ``|`` themselves.
    """

    artist, _, title = key.partition(KEY_SEPARATOR)
    return artist, title


class ReconcileOutcome(StrEnum):
    SYNCED = "synced"
    PENDING = "pending"


@dataclass(slots=True, frozen=True)
class DiscoveredAlbum:
    """An album seen in the source listing that the cache does not know yet."""

    key: TrackedItemKey
    title: str
    artist: str

    @classmethod
    def from_listing(cls, *, title: str, subtitle: str | None) -> DiscoveredAlbum:
        artist = subtitle or UNKNOWN_ARTIST
        return cls(key=make_item_key(artist, title), title=title, artist=artist)


@dataclass(slots=True, frozen=True)
class ResolvedAlbum:
    """Canonical identifiers for an album, as returned by the identity resolver."""

    artist_id: str
    release_group_id: str
    artist_name: str


@dataclass(slots=True, kw_only=True)
class TrackingRecord:
    discovered_at: datetime
    is_baseline_entry: bool = False
    resolved_album_id: str | None = None
    resolved_artist_id: str | None = None
    target_synced: bool | None = None
    last_retry_at: datetime | None = None

    def __post_init__(self) -> None:
        if (self.resolved_album_id is None) != (self.resolved_artist_id is None):
            raise ValueError("resolved album and artist ids must be set together")

    @classmethod
    def baseline(cls, discovered_at: datetime) -> TrackingRecord:
        return cls(discovered_at=discovered_at, is_baseline_entry=True)

    @classmethod
    def discovered(cls, discovered_at: datetime) -> TrackingRecord:
        return cls(discovered_at=discovered_at, target_synced=False)

    @property
    def is_resolved(self) -> bool:
        return self.resolved_album_id is not None and self.resolved_artist_id is not None

    @property
    def is_pending(self) -> bool:
        return not self.is_baseline_entry and self.target_synced is False

    def resolve(self, album: ResolvedAlbum) -> None:
        self.resolved_album_id = album.release_group_id
        self.resolved_artist_id = album.artist_id

    def clear_resolution(self) -> None:
        self.resolved_album_id = None
        self.resolved_artist_id = None


@dataclass(slots=True, frozen=True)
class CacheSummary:
    total: int
    baseline: int
    synced: int
    pending: int
    unresolved: int
    last_scan_date: date | None


class AlbumCache:
    """In-memory, authoritative key -> record table plus the scan cursor.

    The cache has exactly one owner (the scheduler loop) and is handed to each
    component explicitly; persistence goes through a ``CacheRepository``.
    """

    def __init__(
        self,
        records: Mapping[TrackedItemKey, TrackingRecord] | None = None,
        *,
        last_scan_date: date | None = None,
    ) -> None:
        self._records: dict[TrackedItemKey, TrackingRecord] = dict(records or {})
        self.last_scan_date = last_scan_date

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[TrackedItemKey]:
        return iter(self._records)

    def is_empty(self) -> bool:
        return not self._records

    def get(self, key: TrackedItemKey) -> TrackingRecord | None:
        return self._records.get(key)

    def put(self, key: TrackedItemKey, record: TrackingRecord) -> None:
        self._records[key] = record

    def add_baseline(self, key: TrackedItemKey, discovered_at: datetime) -> bool:
        """Seed ``key`` as a baseline entry; returns ``False`` if it is already tracked."""

        if key in self._records:
            return False
        self._records[key] = TrackingRecord.baseline(discovered_at)
        return True

    def items(self) -> list[tuple[TrackedItemKey, TrackingRecord]]:
        return list(self._records.items())

    def pending_records(self) -> list[tuple[TrackedItemKey, TrackingRecord]]:
        return [(key, record) for key, record in self._records.items() if record.is_pending]

    def summary(self) -> CacheSummary:
        records = self._records.values()
        return CacheSummary(
            total=len(self._records),
            baseline=sum(1 for record in records if record.is_baseline_entry),
            synced=sum(1 for record in records if record.target_synced is True),
            pending=sum(1 for record in records if record.is_pending),
            unresolved=sum(
                1 for record in records if not record.is_baseline_entry and not record.is_resolved
            ),
            last_scan_date=self.last_scan_date,
        )
