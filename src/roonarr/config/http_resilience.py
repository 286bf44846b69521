"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx
from httpx_retries import Retry

if TYPE_CHECKING:
    from collections.abc import Mapping

ERROR_STATUS_CODES = frozenset(code for code in range(100, 600) if not 200 <= code < 300)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Request-level retry behaviour.

    ``total`` counts retries after the first try. With ``retry_on_error_status``
    every non-2xx response is retried, otherwise only ``status_forcelist``.
    """

    total: int = 2
    backoff_factor: float = 1.0
    max_backoff_wait: float = 10.0
    backoff_jitter: float = 0.0
    respect_retry_after_header: bool = True
    retry_on_error_status: bool = False
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS", "POST", "PUT"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )

    @property
    def attempts(self) -> int:
        return self.total + 1

    def build(self) -> Retry:
        statuses = ERROR_STATUS_CODES if self.retry_on_error_status else self.status_forcelist
        return Retry(
            total=self.total,
            backoff_factor=self.backoff_factor,
            max_backoff_wait=self.max_backoff_wait,
            respect_retry_after_header=self.respect_retry_after_header,
            allowed_methods=tuple(self.allowed_methods),
            status_forcelist=tuple(statuses),
            retry_on_exceptions=self.retry_on_exceptions,
            backoff_jitter=self.backoff_jitter,
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None
