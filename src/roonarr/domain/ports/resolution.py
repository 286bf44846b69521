"""Port for resolving source albums to canonical identifiers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from roonarr.domain.model import ResolvedAlbum


@runtime_checkable
class IdentityResolver(Protocol):
    """Resolve an album to canonical ids; ``None`` means "not found yet", never an error."""

    async def resolve(self, title: str, artist: str) -> ResolvedAlbum | None: ...


__all__ = ["IdentityResolver"]
