"""Daily scan gate and the hourly loop that drives discovery and retries."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from roonarr.config.sync import SyncConfig
from roonarr.domain.clock import asyncio_sleep, local_date, utcnow
from roonarr.domain.discovery import ScanResult, scan_library
from roonarr.domain.errors import BrowseSessionExpiredError
from roonarr.domain.processing import ProcessingSummary
from roonarr.domain.retry import is_new_day

if TYPE_CHECKING:
    from roonarr.domain.clock import Clock, Sleeper
    from roonarr.domain.model import AlbumCache
    from roonarr.domain.ports.browsing import LibraryBrowser
    from roonarr.domain.ports.persistence import CacheRepository
    from roonarr.domain.processing import AlbumProcessor
    from roonarr.domain.reconciliation import TargetReconciler

log = getLogger(__name__)


class CycleStatus(StrEnum):
    SKIPPED_NO_SOURCE = "skipped-no-source"
    SKIPPED_ALREADY_SCANNED = "skipped-already-scanned"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class CycleResult:
    status: CycleStatus
    scan: ScanResult | None = None
    processing: ProcessingSummary = field(default_factory=ProcessingSummary)
    saved: bool = False
    error: Exception | None = None


class ScanScheduler:
    """Owns the album cache for the lifetime of the process.

    A full discovery pass runs at most once per local calendar day. The scan
    date only advances (and the cache is only persisted) when a pass completes,
    so an aborted pass is retried on the next hourly check.
    """

    def __init__(
        self,
        *,
        cache: AlbumCache,
        repository: CacheRepository,
        processor: AlbumProcessor,
        reconciler: TargetReconciler,
        config: SyncConfig | None = None,
        clock: Clock = utcnow,
        sleep: Sleeper = asyncio_sleep,
    ) -> None:
        self.cache = cache
        self._repository = repository
        self._processor = processor
        self._reconciler = reconciler
        self._config = config or SyncConfig()
        self._clock = clock
        self._sleep = sleep
        self._browser: LibraryBrowser | None = None

    @property
    def browser(self) -> LibraryBrowser | None:
        return self._browser

    def attach_browser(self, browser: LibraryBrowser) -> None:
        self._browser = browser

    def detach_browser(self) -> None:
        self._browser = None

    async def check_for_new_albums(self) -> CycleResult:
        browser = self._browser
        if browser is None:
            log.info("No source library connected - waiting for connection...")
            return CycleResult(status=CycleStatus.SKIPPED_NO_SOURCE)

        today = local_date(self._clock())
        if not is_new_day(self.cache.last_scan_date, today):
            log.info("Already scanned today, skipping...")
            return CycleResult(status=CycleStatus.SKIPPED_ALREADY_SCANNED)

        log.info("=== Scanning for new albums ===")
        try:
            scan = await scan_library(
                browser,
                self.cache,
                config=self._config,
                clock=self._clock,
                sleep=self._sleep,
            )
        except BrowseSessionExpiredError as exc:
            log.warning("Browse session expired - will retry on next scan: %s", exc)
            return CycleResult(status=CycleStatus.FAILED, error=exc)
        except Exception as exc:  # noqa: BLE001
            log.error("Scan failed: %s", str(exc) or type(exc).__name__)
            log.info("Will retry on next hourly check")
            return CycleResult(status=CycleStatus.FAILED, error=exc)

        processing = ProcessingSummary()
        if not scan.first_run:
            if scan.new_albums and not await self._reconciler.is_available():
                log.warning("Target system not available - new albums will stay pending")
            processing = await self._processor.process_new_albums(self.cache, scan.new_albums)
            processing = processing.merge(await self._processor.retry_pending_albums(self.cache))

        self.cache.last_scan_date = today
        saved = self._repository.save(self.cache)
        log.info("Scan completed successfully")
        return CycleResult(
            status=CycleStatus.COMPLETED,
            scan=scan,
            processing=processing,
            saved=saved,
        )

    async def run_forever(self, stop_event: asyncio.Event) -> None:
        """Check immediately, then once per interval, until ``stop_event`` is set.

        Setting ``stop_event`` abandons a running check: nothing is saved and
        the scan date is left untouched.
        """

        while not stop_event.is_set():
            await self._run_cycle(stop_event)
            if stop_event.is_set():
                break
            try:
                await asyncio.wait_for(
                    stop_event.wait(), timeout=self._config.check_interval_seconds
                )
            except TimeoutError:
                continue
        log.info("Scheduler stopped")

    async def _run_cycle(self, stop_event: asyncio.Event) -> None:
        cycle = asyncio.create_task(self.check_for_new_albums())
        stopper = asyncio.create_task(stop_event.wait())
        try:
            await asyncio.wait({cycle, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stopper.cancel()
            if not cycle.done():
                log.info("Stop requested - abandoning the running scan")
                cycle.cancel()
        await asyncio.wait({cycle})
        if cycle.cancelled():
            return
        exc = cycle.exception()
        if exc is not None:
            log.error("Unexpected error during scan cycle", exc_info=exc)
