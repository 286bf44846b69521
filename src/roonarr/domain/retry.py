"""Time gates deciding when scans and per-album retries may run."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from roonarr.config.sync import DEFAULT_RETRY_COOLDOWN
from roonarr.domain.model import split_item_key

if TYPE_CHECKING:
    from datetime import date, datetime, timedelta

    from roonarr.domain.model import AlbumCache, TrackedItemKey, TrackingRecord

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(slots=True, frozen=True)
class RetryCandidate:
    key: TrackedItemKey
    title: str
    artist: str
    record: TrackingRecord

    @property
    def needs_lookup(self) -> bool:
        return not self.record.is_resolved


def is_new_day(last_scan_date: date | None, today: date) -> bool:
    return last_scan_date is None or last_scan_date != today


def days_since(moment: datetime | None, now: datetime) -> float:
    """Fractional days between ``moment`` and ``now``; infinite when never set."""

    if moment is None:
        return math.inf
    return (now - moment).total_seconds() / _SECONDS_PER_DAY


def is_retry_due(
    record: TrackingRecord,
    now: datetime,
    *,
    cooldown: timedelta = DEFAULT_RETRY_COOLDOWN,
) -> bool:
    if not record.is_pending:
        return False
    return days_since(record.last_retry_at, now) >= cooldown.total_seconds() / _SECONDS_PER_DAY


def select_retry_candidates(
    cache: AlbumCache,
    now: datetime,
    *,
    cooldown: timedelta = DEFAULT_RETRY_COOLDOWN,
    force: bool = False,
) -> list[RetryCandidate]:
    """Pending, non-baseline records whose cool-down elapsed (all pending ones with ``force``)."""

    candidates: list[RetryCandidate] = []
    for key, record in cache.pending_records():
        if not force and not is_retry_due(record, now, cooldown=cooldown):
            continue
        artist, title = split_item_key(key)
        candidates.append(RetryCandidate(key=key, title=title, artist=artist, record=record))
    return candidates
