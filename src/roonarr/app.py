"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import signal
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from roonarr.adapters.json_store import JsonCacheRepository
from roonarr.adapters.lidarr import LidarrAPIError, LidarrClient
from roonarr.adapters.musicbrainz import MusicBrainzClient, MusicBrainzResolver
from roonarr.config import (
    get_lidarr_config,
    get_musicbrainz_config,
    get_storage_config,
    get_sync_config,
)
from roonarr.domain.clock import asyncio_sleep, utcnow
from roonarr.domain.ports.target import ArtistDefaults
from roonarr.domain.processing import AlbumProcessor
from roonarr.domain.reconciliation import TargetReconciler
from roonarr.domain.scheduler import ScanScheduler

if TYPE_CHECKING:
    from collections.abc import Sequence

    from roonarr.adapters.lidarr.schema import LidarrStatus
    from roonarr.config import LidarrConfig, StorageConfig, SyncConfig
    from roonarr.domain.clock import Clock, Sleeper
    from roonarr.domain.model import AlbumCache, CacheSummary, ResolvedAlbum
    from roonarr.domain.ports import CacheRepository, IdentityResolver, LibraryBrowser, TargetSystem
    from roonarr.domain.processing import ProcessingSummary
    from roonarr.domain.scheduler import CycleResult

log = getLogger(__name__)


class AsyncCloseable(Protocol):
    async def aclose(self) -> None: ...


def build_cache_repository(storage: StorageConfig | None = None) -> JsonCacheRepository:
    settings = storage or get_storage_config()
    return JsonCacheRepository(settings.cache_path())


def build_musicbrainz_client() -> MusicBrainzClient:
    return MusicBrainzClient(config=get_musicbrainz_config())


def build_lidarr_client(config: LidarrConfig | None = None) -> LidarrClient:
    return LidarrClient(config=config or get_lidarr_config())


def artist_defaults_from(config: LidarrConfig) -> ArtistDefaults:
    return ArtistDefaults(
        root_folder_path=config.root_folder_path,
        quality_profile_id=config.quality_profile_id,
        metadata_profile_id=config.metadata_profile_id,
    )


class ReconciliationService:
    """Long-running orchestrator tying the cache, resolver and target together.

    A pairing layer for the source library calls ``attach_browser`` once a
    browse session is available and ``detach_browser`` when it goes away; the
    hourly loop in ``run_forever`` skips scans while no browser is attached.
    """

    def __init__(
        self,
        *,
        repository: CacheRepository,
        resolver: IdentityResolver,
        target: TargetSystem,
        defaults: ArtistDefaults,
        config: SyncConfig | None = None,
        clock: Clock = utcnow,
        sleep: Sleeper = asyncio_sleep,
        resources: Sequence[AsyncCloseable] = (),
    ) -> None:
        settings = config or get_sync_config()
        self._repository = repository
        self._resources = tuple(resources)
        self.cache: AlbumCache = repository.load()

        self.reconciler = TargetReconciler(
            target,
            defaults=defaults,
            settle_delay_seconds=settings.settle_delay_seconds,
            sleep=sleep,
        )
        self.processor = AlbumProcessor(
            resolver=resolver,
            reconciler=self.reconciler,
            clock=clock,
            sleep=sleep,
            item_delay_seconds=settings.item_delay_seconds,
            retry_cooldown=settings.retry_cooldown,
        )
        self.scheduler = ScanScheduler(
            cache=self.cache,
            repository=repository,
            processor=self.processor,
            reconciler=self.reconciler,
            config=settings,
            clock=clock,
            sleep=sleep,
        )

    @classmethod
    def from_environment(cls) -> ReconciliationService:
        lidarr_config = get_lidarr_config()
        musicbrainz = build_musicbrainz_client()
        lidarr = build_lidarr_client(lidarr_config)
        log.info("Lidarr: %s", lidarr_config.base_url)
        log.info("Root Folder: %s", lidarr_config.root_folder_path)
        return cls(
            repository=build_cache_repository(),
            resolver=MusicBrainzResolver(musicbrainz),
            target=lidarr,
            defaults=artist_defaults_from(lidarr_config),
            config=get_sync_config(),
            resources=(musicbrainz, lidarr),
        )

    def attach_browser(self, browser: LibraryBrowser) -> None:
        log.info("Source library connected")
        self.scheduler.attach_browser(browser)

    def detach_browser(self) -> None:
        log.info("Source library disconnected")
        self.scheduler.detach_browser()

    async def check_for_new_albums(self) -> CycleResult:
        return await self.scheduler.check_for_new_albums()

    async def retry_pending_albums(self, *, force: bool = False) -> ProcessingSummary:
        summary = await self.processor.retry_pending_albums(self.cache, force=force)
        if summary.attempted:
            self._repository.save(self.cache)
        return summary

    async def run_forever(self, stop_event: asyncio.Event | None = None) -> None:
        """Run the hourly check loop until SIGINT/SIGTERM or ``stop_event`` is set."""

        stop = stop_event or asyncio.Event()
        _install_stop_handlers(stop)
        log.info("Starting reconciliation loop")
        try:
            await self.scheduler.run_forever(stop)
        finally:
            log.info("Shutting down...")

    async def close(self) -> None:
        for resource in self._resources:
            await resource.aclose()

    async def __aenter__(self) -> ReconciliationService:
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()


def _install_stop_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop.set)
        except (NotImplementedError, RuntimeError):
            log.debug("Cannot install handler for %s on this platform", signum)


def cache_summary(repository: CacheRepository | None = None) -> CacheSummary:
    """Load the persisted cache and return its counters."""

    summary = (repository or build_cache_repository()).load().summary()
    log.info(
        "Cache: %s records (baseline=%s, synced=%s, pending=%s, unresolved=%s)",
        summary.total,
        summary.baseline,
        summary.synced,
        summary.pending,
        summary.unresolved,
    )
    log.info("Last scan: %s", summary.last_scan_date or "Never")
    return summary


def retry_pending_albums(
    *,
    force: bool = False,
    service: ReconciliationService | None = None,
) -> ProcessingSummary:
    """Run one retry pass over pending albums and persist the cache."""

    async def run() -> ProcessingSummary:
        async with service or ReconciliationService.from_environment() as active:
            return await active.retry_pending_albums(force=force)

    summary = asyncio.run(run())
    log.info(
        "Retry finished: attempted=%s, synced=%s, pending=%s, unresolved=%s, failed=%s",
        summary.attempted,
        summary.synced,
        summary.pending,
        summary.unresolved,
        summary.failed,
    )
    return summary


def run_service(
    service: ReconciliationService | None = None,
    *,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Run the hourly reconciliation loop until interrupted.

    Scans are skipped until a library browser is attached to the service.
    """

    async def run() -> None:
        async with service or ReconciliationService.from_environment() as active:
            await active.run_forever(stop_event)

    asyncio.run(run())


def check_target(client: LidarrClient | None = None) -> LidarrStatus | None:
    """Probe the target system; returns its status or ``None`` when unreachable."""

    async def run() -> LidarrStatus | None:
        async with client or build_lidarr_client() as active:
            try:
                return await active.fetch_status()
            except LidarrAPIError as exc:
                log.error("Lidarr connection test failed: %s", exc)
                return None

    status = asyncio.run(run())
    if status is not None:
        log.info("Lidarr reachable (version %s)", status.version or "unknown")
    return status


def resolve_album(
    title: str,
    artist: str,
    *,
    client: MusicBrainzClient | None = None,
) -> ResolvedAlbum | None:
    """Run a single identity lookup."""

    async def run() -> ResolvedAlbum | None:
        async with client or build_musicbrainz_client() as active:
            return await MusicBrainzResolver(active).resolve(title, artist)

    resolved = asyncio.run(run())
    if resolved is None:
        log.info('No MusicBrainz match for "%s" by %s', title, artist)
    else:
        log.info(
            'Matched "%s" by %s: artist %s (%s), release group %s',
            title,
            artist,
            resolved.artist_name,
            resolved.artist_id,
            resolved.release_group_id,
        )
    return resolved
