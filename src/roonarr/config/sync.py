"""Scheduling defaults for the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

DEFAULT_PAGE_SIZE = 100
DEFAULT_PAGE_DELAY_SECONDS = 0.1
DEFAULT_ITEM_DELAY_SECONDS = 1.2
DEFAULT_SETTLE_DELAY_SECONDS = 3.0
DEFAULT_BROWSE_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRY_COOLDOWN = timedelta(days=7)
DEFAULT_CHECK_INTERVAL_SECONDS = 60 * 60


@dataclass(frozen=True, slots=True)
class SyncConfig:
    page_size: int = DEFAULT_PAGE_SIZE
    page_delay_seconds: float = DEFAULT_PAGE_DELAY_SECONDS
    item_delay_seconds: float = DEFAULT_ITEM_DELAY_SECONDS
    settle_delay_seconds: float = DEFAULT_SETTLE_DELAY_SECONDS
    browse_timeout_seconds: float = DEFAULT_BROWSE_TIMEOUT_SECONDS
    retry_cooldown: timedelta = DEFAULT_RETRY_COOLDOWN
    check_interval_seconds: float = DEFAULT_CHECK_INTERVAL_SECONDS


def get_sync_config() -> SyncConfig:
    return SyncConfig()
