"""Port for persisting the album cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from roonarr.domain.model import AlbumCache


@runtime_checkable
class CacheRepository(Protocol):
    def load(self) -> AlbumCache:
        """Return the persisted cache, or an empty one if nothing usable is stored."""
        ...

    def save(self, cache: AlbumCache) -> bool:
        """Persist a full snapshot; failures are logged and reported as ``False``."""
        ...


__all__ = ["CacheRepository"]
