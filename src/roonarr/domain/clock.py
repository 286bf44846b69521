"""Time sources used by the scheduler and the retry gates."""

from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


class Sleeper(Protocol):
    async def __call__(self, delay: float, /) -> None: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def local_date(moment: datetime) -> date:
    """Return the calendar date of ``moment`` in the host's local timezone."""

    return moment.astimezone().date()


async def asyncio_sleep(delay: float, /) -> None:
    await asyncio.sleep(delay)


__all__ = ["Clock", "Sleeper", "asyncio_sleep", "local_date", "utcnow"]
