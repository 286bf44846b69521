"""Discovery pass over the source library's album listing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from roonarr.config.sync import SyncConfig
from roonarr.domain.clock import asyncio_sleep, utcnow
from roonarr.domain.errors import CatalogStructureError
from roonarr.domain.model import DiscoveredAlbum

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from roonarr.domain.clock import Clock, Sleeper
    from roonarr.domain.model import AlbumCache, TrackedItemKey
    from roonarr.domain.ports.browsing import BrowseItem, BrowseList, BrowseResult, LibraryBrowser

log = getLogger(__name__)

LIBRARY_MARKER = "library"
ALBUMS_TITLE = "Albums"


@dataclass(slots=True)
class ScanResult:
    first_run: bool
    total: int
    baseline_added: int = 0
    new_albums: list[DiscoveredAlbum] = field(default_factory=list["DiscoveredAlbum"])


async def scan_library(
    browser: LibraryBrowser,
    cache: AlbumCache,
    *,
    config: SyncConfig | None = None,
    clock: Clock = utcnow,
    sleep: Sleeper = asyncio_sleep,
) -> ScanResult:
    """Page through every album in the library and diff it against ``cache``.

    On the very first scan (empty cache) every album is seeded as a baseline
    entry; the seeds are only written once the whole listing was read, so an
    aborted first scan leaves the cache empty. Later scans return the albums
    whose keys the cache does not know, in listing order, without touching the
    cache. Errors from the browser (including ``BrowseSessionExpiredError``)
    propagate and abort the pass.
    """

    settings = config or SyncConfig()
    first_run = cache.is_empty()

    albums = await _open_album_list(browser, settings)
    log.info("Processing %s albums...", albums.count)

    seen: set[TrackedItemKey] = set()
    baseline_keys: list[TrackedItemKey] = []
    new_albums: list[DiscoveredAlbum] = []

    for offset in range(0, albums.count, settings.page_size):
        remaining = min(settings.page_size, albums.count - offset)
        log.debug(
            "Batch %s: %s-%s of %s",
            offset // settings.page_size + 1,
            offset + 1,
            offset + remaining,
            albums.count,
        )
        items = await _bounded(
            browser.load(level=albums.level, offset=offset, count=remaining), settings
        )

        for item in items:
            album = DiscoveredAlbum.from_listing(title=item.title, subtitle=item.subtitle)
            if album.key in seen:
                continue
            seen.add(album.key)
            if first_run:
                baseline_keys.append(album.key)
            elif album.key not in cache:
                new_albums.append(album)

        await sleep(settings.page_delay_seconds)

    result = ScanResult(first_run=first_run, total=albums.count, new_albums=new_albums)
    if first_run:
        discovered_at = clock()
        result.baseline_added = sum(
            1 for key in baseline_keys if cache.add_baseline(key, discovered_at)
        )
        log.info("Initial scan: cached %s albums", result.baseline_added)
    elif new_albums:
        log.info("Found %s new albums", len(new_albums))
    else:
        log.info("No new albums found")
    return result


async def _bounded[T](call: Awaitable[T], settings: SyncConfig) -> T:
    return await asyncio.wait_for(call, timeout=settings.browse_timeout_seconds)


async def _open_album_list(browser: LibraryBrowser, settings: SyncConfig) -> BrowseList:
    root = await _bounded(browser.browse(pop_all=True), settings)
    root_items = await _list_items(browser, root, settings)
    library = next(
        (item for item in root_items if LIBRARY_MARKER in item.title.lower()),
        None,
    )
    if library is None or library.item_key is None:
        raise CatalogStructureError("Library not found")

    library_result = await _bounded(browser.browse(item_key=library.item_key), settings)
    library_items = await _list_items(browser, library_result, settings)
    albums_item = next((item for item in library_items if item.title == ALBUMS_TITLE), None)
    if albums_item is None or albums_item.item_key is None:
        raise CatalogStructureError("Albums section not found")

    albums_result = await _bounded(browser.browse(item_key=albums_item.item_key), settings)
    if not albums_result.is_list or albums_result.listing is None:
        raise CatalogStructureError("Expected album list")
    return albums_result.listing


async def _list_items(
    browser: LibraryBrowser,
    result: BrowseResult,
    settings: SyncConfig,
) -> Sequence[BrowseItem]:
    if result.items is not None:
        return result.items
    if result.is_list and result.listing is not None:
        return await _bounded(
            browser.load(level=result.listing.level, offset=0, count=settings.page_size),
            settings,
        )
    raise CatalogStructureError("Unexpected browse result structure")
