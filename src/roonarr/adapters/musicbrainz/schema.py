"""MusicBrainz response schemas for release search."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

type MBId = str


class MusicBrainzBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "MusicBrainz %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class MusicBrainzArtist(MusicBrainzBaseModel):
    id: MBId
    name: str
    sort_name: str | None = Field(default=None, alias="sort-name")
    disambiguation: str | None = None


class MusicBrainzArtistCredit(MusicBrainzBaseModel):
    artist: MusicBrainzArtist
    name: str | None = None
    join_phrase: str | None = Field(default=None, alias="joinphrase")


class MusicBrainzReleaseGroup(MusicBrainzBaseModel):
    id: MBId
    title: str | None = None
    primary_type: str | None = Field(default=None, alias="primary-type")


class MusicBrainzRelease(MusicBrainzBaseModel):
    id: MBId
    title: str
    score: int | None = None
    status: str | None = None
    date: str | None = None
    country: str | None = None
    artist_credit: list[MusicBrainzArtistCredit] = Field(
        default_factory=list[MusicBrainzArtistCredit], alias="artist-credit"
    )
    release_group: MusicBrainzReleaseGroup | None = Field(default=None, alias="release-group")

    @property
    def primary_artist(self) -> MusicBrainzArtist | None:
        if not self.artist_credit:
            return None
        return self.artist_credit[0].artist

    @property
    def match_title(self) -> str:
        return self.title

    @property
    def match_artist(self) -> str:
        artist = self.primary_artist
        return artist.name if artist is not None else ""


class MusicBrainzReleaseSearch(MusicBrainzBaseModel):
    created: str | None = None
    count: int | None = None
    offset: int | None = None
    releases: list[MusicBrainzRelease] = Field(default_factory=list[MusicBrainzRelease])
