from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from roonarr.app import ReconciliationService, cache_summary, run_service
from roonarr.config.sync import SyncConfig
from roonarr.domain.model import AlbumCache, ResolvedAlbum, TrackingRecord
from roonarr.domain.ports.target import ArtistDefaults, TargetAlbum
from roonarr.domain.scheduler import CycleStatus
from tests.support.fakes import (
    FakeLibraryBrowser,
    FakeResolver,
    FakeTargetSystem,
    InMemoryCacheRepository,
)

if TYPE_CHECKING:
    from tests.support.fakes import FakeClock, RecordingSleeper

DEFAULTS = ArtistDefaults(root_folder_path="/music", quality_profile_id=1, metadata_profile_id=1)


class ClosingResource:
    def __init__(self) -> None:
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True


def _service(
    repository: InMemoryCacheRepository,
    *,
    resolver: FakeResolver | None = None,
    target: FakeTargetSystem | None = None,
    clock: FakeClock,
    sleeper: RecordingSleeper,
    resources: tuple[ClosingResource, ...] = (),
) -> ReconciliationService:
    return ReconciliationService(
        repository=repository,
        resolver=resolver or FakeResolver(),
        target=target or FakeTargetSystem(),
        defaults=DEFAULTS,
        config=SyncConfig(item_delay_seconds=0.0),
        clock=clock,
        sleep=sleeper,
        resources=resources,
    )


@pytest.mark.asyncio
async def test_service_scans_once_browser_attached(
    clock: FakeClock,
    sleeper: RecordingSleeper,
) -> None:
    repository = InMemoryCacheRepository()
    service = _service(repository, clock=clock, sleeper=sleeper)

    skipped = await service.check_for_new_albums()
    service.attach_browser(FakeLibraryBrowser([("Kid A", "Radiohead")]))
    completed = await service.check_for_new_albums()

    assert skipped.status is CycleStatus.SKIPPED_NO_SOURCE
    assert completed.status is CycleStatus.COMPLETED
    assert "Radiohead|Kid A" in service.cache
    assert repository.saved == [1]


@pytest.mark.asyncio
async def test_retry_pending_albums_persists_results(
    clock: FakeClock,
    sleeper: RecordingSleeper,
) -> None:
    record = TrackingRecord.discovered(clock.now - timedelta(days=1))
    record.last_retry_at = clock.now - timedelta(days=1)
    repository = InMemoryCacheRepository(AlbumCache({"Radiohead|Kid A": record}))
    resolved = ResolvedAlbum(artist_id="radiohead", release_group_id="kid-a", artist_name="Radiohead")
    target = FakeTargetSystem()
    target.add_existing_artist("radiohead", "Radiohead")
    target.add_album("radiohead", TargetAlbum(id=3, foreign_album_id="kid-a", monitored=True))
    service = _service(
        repository,
        resolver=FakeResolver({("Kid A", "Radiohead"): resolved}),
        target=target,
        clock=clock,
        sleeper=sleeper,
    )

    not_due = await service.retry_pending_albums()
    forced = await service.retry_pending_albums(force=True)

    assert not_due.attempted == 0
    assert forced.synced == 1
    assert record.target_synced is True
    assert repository.saved == [1]


@pytest.mark.asyncio
async def test_close_releases_resources(clock: FakeClock, sleeper: RecordingSleeper) -> None:
    resource = ClosingResource()

    async with _service(
        InMemoryCacheRepository(), clock=clock, sleeper=sleeper, resources=(resource,)
    ):
        pass

    assert resource.closed


def test_cache_summary_uses_repository(clock: FakeClock) -> None:
    cache = AlbumCache({"A|B": TrackingRecord.discovered(clock.now)})

    summary = cache_summary(InMemoryCacheRepository(cache))

    assert summary.total == 1
    assert summary.pending == 1


def test_run_service_scans_and_closes_once_stopped(
    clock: FakeClock,
    sleeper: RecordingSleeper,
) -> None:
    stop = asyncio.Event()
    resource = ClosingResource()
    repository = InMemoryCacheRepository(on_save=lambda _cache: stop.set())
    service = _service(repository, clock=clock, sleeper=sleeper, resources=(resource,))
    service.attach_browser(FakeLibraryBrowser([("Kid A", "Radiohead")]))

    run_service(service, stop_event=stop)

    assert repository.saved == [1]
    assert resource.closed
