"""Drive the target system towards "monitored and searched, or already complete"."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from roonarr.config.sync import DEFAULT_SETTLE_DELAY_SECONDS
from roonarr.domain.clock import asyncio_sleep
from roonarr.domain.errors import TargetSystemError
from roonarr.domain.model import ReconcileOutcome

if TYPE_CHECKING:
    from roonarr.domain.clock import Sleeper
    from roonarr.domain.model import ResolvedAlbum
    from roonarr.domain.ports.target import ArtistDefaults, TargetAlbum, TargetSystem

log = getLogger(__name__)


def album_has_files(album: TargetAlbum) -> bool:
    """Return whether the target system already holds downloaded tracks for ``album``.

    Per-track flags win when the album carries tracks; otherwise the reported
    track-file count, and as a last resort a complete track percentage.
    """

    if album.track_has_file:
        return any(album.track_has_file)

    statistics = album.statistics
    if statistics is not None and (statistics.track_file_count or 0) > 0:
        return True

    track_count = album.track_count
    if track_count is None and statistics is not None:
        track_count = statistics.track_count
    percent = statistics.percent_of_tracks if statistics is not None else None
    return (track_count or 0) > 0 and percent is not None and percent >= 100


class TargetReconciler:
    def __init__(
        self,
        target: TargetSystem,
        *,
        defaults: ArtistDefaults,
        settle_delay_seconds: float = DEFAULT_SETTLE_DELAY_SECONDS,
        sleep: Sleeper = asyncio_sleep,
    ) -> None:
        self._target = target
        self._defaults = defaults
        self._settle_delay = settle_delay_seconds
        self._sleep = sleep

    async def is_available(self) -> bool:
        try:
            await self._target.ping()
        except TargetSystemError as exc:
            log.error("Target system connection test failed: %s", exc)
            return False
        return True

    async def reconcile(self, album: ResolvedAlbum) -> ReconcileOutcome:
        """Reconcile one resolved album. Never raises; failures come back as ``PENDING``."""

        if not await self.is_available():
            log.info("  Target system unavailable, will retry later")
            return ReconcileOutcome.PENDING

        try:
            return await self._reconcile(album)
        except Exception as exc:  # noqa: BLE001
            log.error("  Target system integration failed: %s", exc)
            log.info("  Will retry this album later")
            return ReconcileOutcome.PENDING

    async def _reconcile(self, album: ResolvedAlbum) -> ReconcileOutcome:
        artist = await self._target.find_artist(album.artist_id)
        if artist is None:
            log.info("  Adding artist to target system: %s", album.artist_name)
            artist = await self._target.add_artist(
                foreign_artist_id=album.artist_id,
                artist_name=album.artist_name,
                defaults=self._defaults,
            )
            if artist is None:
                raise TargetSystemError(f"Failed to add artist {album.artist_name}")

        existing = await self._target.find_album(
            artist_id=artist.id, foreign_album_id=album.release_group_id
        )
        if existing is not None:
            has_files = album_has_files(existing)
            log.info(
                "  Album exists in target system: monitored=%s, hasFiles=%s",
                existing.monitored,
                has_files,
            )
            if has_files:
                log.info("  Album already has files, marking as complete")
                return ReconcileOutcome.SYNCED
            if existing.monitored:
                log.info("  Album already monitored but no files, triggering search")
            else:
                log.info("  Setting album to monitored and searching")
                await self._target.set_album_monitored(existing.id, True)
            await self._target.search_album(existing.id)
            return ReconcileOutcome.SYNCED

        log.info("  Refreshing artist to discover album")
        await self._target.refresh_artist(artist.id)
        await self._sleep(self._settle_delay)

        discovered = await self._target.find_album(
            artist_id=artist.id, foreign_album_id=album.release_group_id
        )
        if discovered is None:
            log.info("  Album not found after refresh, will retry later")
            return ReconcileOutcome.PENDING
        if album_has_files(discovered):
            log.info("  Discovered album already has files, marking as complete")
            return ReconcileOutcome.SYNCED

        log.info("  Setting discovered album to monitored and searching")
        await self._target.set_album_monitored(discovered.id, True)
        await self._target.search_album(discovered.id)
        return ReconcileOutcome.SYNCED
