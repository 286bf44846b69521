from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from tests.support.fakes import FakeClock, RecordingSleeper


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 18, 12, 0, tzinfo=UTC))


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def backoff_sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record the waits taken between HTTP retries instead of sleeping."""

    delays: list[float] = []

    async def record(delay: float, result: object = None) -> object:
        delays.append(delay)
        return result

    monkeypatch.setattr(asyncio, "sleep", record)
    return delays
