"""Port for the source catalog's stateful browse hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

LIST_ACTION = "list"


@dataclass(slots=True, frozen=True)
class BrowseItem:
    title: str
    subtitle: str | None = None
    item_key: str | None = None


@dataclass(slots=True, frozen=True)
class BrowseList:
    """Descriptor of the list a browse call navigated into."""

    title: str
    count: int
    level: int


@dataclass(slots=True, frozen=True)
class BrowseResult:
    action: str
    listing: BrowseList | None = None
    items: Sequence[BrowseItem] | None = field(default=None)

    @property
    def is_list(self) -> bool:
        return self.action == LIST_ACTION and self.listing is not None


@runtime_checkable
class LibraryBrowser(Protocol):
    """Stateful browse session over the source library.

    Implementations raise ``BrowseSessionExpiredError`` when the service reports
    that an item key or level no longer belongs to the current session.
    """

    async def browse(self, *, item_key: str | None = None, pop_all: bool = False) -> BrowseResult:
        ...

    async def load(self, *, level: int, offset: int, count: int) -> Sequence[BrowseItem]: ...


__all__ = ["BrowseItem", "BrowseList", "BrowseResult", "LibraryBrowser"]
