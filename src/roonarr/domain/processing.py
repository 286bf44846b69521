"""Resolve and reconcile albums one at a time, recording the outcome in the cache."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from roonarr.config.sync import DEFAULT_ITEM_DELAY_SECONDS, DEFAULT_RETRY_COOLDOWN
from roonarr.domain.clock import asyncio_sleep, utcnow
from roonarr.domain.model import ReconcileOutcome, ResolvedAlbum, TrackingRecord
from roonarr.domain.retry import select_retry_candidates

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import timedelta

    from roonarr.domain.clock import Clock, Sleeper
    from roonarr.domain.model import AlbumCache, DiscoveredAlbum
    from roonarr.domain.ports.resolution import IdentityResolver
    from roonarr.domain.reconciliation import TargetReconciler
    from roonarr.domain.retry import RetryCandidate

log = getLogger(__name__)


@dataclass(slots=True)
class ProcessingSummary:
    attempted: int = 0
    synced: int = 0
    pending: int = 0
    unresolved: int = 0
    failed: int = 0

    def merge(self, other: ProcessingSummary) -> ProcessingSummary:
        return ProcessingSummary(
            attempted=self.attempted + other.attempted,
            synced=self.synced + other.synced,
            pending=self.pending + other.pending,
            unresolved=self.unresolved + other.unresolved,
            failed=self.failed + other.failed,
        )


class AlbumProcessor:
    """Per-album pipeline shared by newly discovered albums and retries.

    Failures are contained per album: nothing raised while handling one album
    stops the rest of the batch.
    """

    def __init__(
        self,
        *,
        resolver: IdentityResolver,
        reconciler: TargetReconciler,
        clock: Clock = utcnow,
        sleep: Sleeper = asyncio_sleep,
        item_delay_seconds: float = DEFAULT_ITEM_DELAY_SECONDS,
        retry_cooldown: timedelta = DEFAULT_RETRY_COOLDOWN,
    ) -> None:
        self._resolver = resolver
        self._reconciler = reconciler
        self._clock = clock
        self._sleep = sleep
        self._item_delay = item_delay_seconds
        self._retry_cooldown = retry_cooldown

    async def process_new_albums(
        self,
        cache: AlbumCache,
        albums: Sequence[DiscoveredAlbum],
    ) -> ProcessingSummary:
        summary = ProcessingSummary()
        if not albums:
            return summary

        log.info("=== Processing %s new albums ===", len(albums))
        for index, album in enumerate(albums, start=1):
            log.info('[%s/%s] "%s" by %s', index, len(albums), album.title, album.artist)
            summary.attempted += 1
            try:
                await self._process_new_album(cache, album, summary)
            except Exception as exc:  # noqa: BLE001
                # assumed non-transient: park the album instead of retrying it forever
                log.error("  Error: %s", exc)
                cache.put(
                    album.key,
                    TrackingRecord(discovered_at=self._clock(), target_synced=True),
                )
                summary.failed += 1
            await self._sleep(self._item_delay)
        return summary

    async def retry_pending_albums(
        self,
        cache: AlbumCache,
        *,
        force: bool = False,
    ) -> ProcessingSummary:
        summary = ProcessingSummary()
        candidates = select_retry_candidates(
            cache, self._clock(), cooldown=self._retry_cooldown, force=force
        )
        if not candidates:
            return summary

        log.info("=== Retrying %s albums that failed processing ===", len(candidates))
        for candidate in candidates:
            log.info('Retrying: "%s" by %s', candidate.title, candidate.artist)
            summary.attempted += 1
            try:
                await self._retry_album(candidate, summary)
            except Exception as exc:  # noqa: BLE001
                log.error("  Retry failed: %s", exc)
                summary.failed += 1
            finally:
                candidate.record.last_retry_at = self._clock()
            await self._sleep(self._item_delay)
        return summary

    async def _process_new_album(
        self,
        cache: AlbumCache,
        album: DiscoveredAlbum,
        summary: ProcessingSummary,
    ) -> None:
        resolved = await self._resolver.resolve(album.title, album.artist)

        record = TrackingRecord.discovered(self._clock())
        cache.put(album.key, record)

        if resolved is None:
            log.info("  Identity lookup: not found - will retry in %s days", self._cooldown_days)
            record.last_retry_at = self._clock()
            summary.unresolved += 1
            return

        record.resolve(resolved)
        log.info(
            "  Identity lookup: artist %s, album %s",
            resolved.artist_id,
            resolved.release_group_id,
        )
        outcome = await self._reconciler.reconcile(resolved)
        self._apply_outcome(record, outcome, summary)
        if outcome is ReconcileOutcome.PENDING:
            record.last_retry_at = self._clock()

    async def _retry_album(self, candidate: RetryCandidate, summary: ProcessingSummary) -> None:
        record = candidate.record
        if candidate.needs_lookup:
            log.info("  Re-attempting identity lookup...")
            resolved = await self._resolver.resolve(candidate.title, candidate.artist)
            if resolved is None:
                log.info(
                    "  Identity lookup: still not found - will retry in %s days",
                    self._cooldown_days,
                )
                summary.unresolved += 1
                return
            log.info(
                "  Identity lookup: now found! artist %s, album %s",
                resolved.artist_id,
                resolved.release_group_id,
            )
            record.resolve(resolved)
        else:
            resolved = _resolved_from_record(record, artist_name=candidate.artist)

        outcome = await self._reconciler.reconcile(resolved)
        self._apply_outcome(record, outcome, summary)

    @staticmethod
    def _apply_outcome(
        record: TrackingRecord,
        outcome: ReconcileOutcome,
        summary: ProcessingSummary,
    ) -> None:
        record.target_synced = outcome is ReconcileOutcome.SYNCED
        if record.target_synced:
            summary.synced += 1
        else:
            summary.pending += 1

    @property
    def _cooldown_days(self) -> int:
        return self._retry_cooldown.days


def _resolved_from_record(record: TrackingRecord, *, artist_name: str) -> ResolvedAlbum:
    if record.resolved_artist_id is None or record.resolved_album_id is None:
        raise ValueError("record has no canonical ids to reconcile")
    return ResolvedAlbum(
        artist_id=record.resolved_artist_id,
        release_group_id=record.resolved_album_id,
        artist_name=artist_name,
    )
