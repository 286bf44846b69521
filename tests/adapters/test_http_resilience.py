from __future__ import annotations

from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from roonarr.adapters.http_resilience import ResilientClient
from roonarr.config.http_resilience import ERROR_STATUS_CODES, ResilienceConfig, RetryPolicy


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    retry: RetryPolicy,
) -> ResilientClient:
    config = ResilienceConfig(name="test", base_url="https://example.test/api/", retry=retry)
    return ResilientClient(config, transport=httpx.MockTransport(handler))


def test_build_retries_every_error_status_when_requested() -> None:
    strict = RetryPolicy().build()
    lenient = RetryPolicy(retry_on_error_status=True).build()

    assert strict.is_retryable_status_code(503)
    assert not strict.is_retryable_status_code(404)
    assert lenient.is_retryable_status_code(404)
    assert not lenient.is_retryable_status_code(201)
    assert 302 in ERROR_STATUS_CODES


def test_attempts_include_first_try() -> None:
    assert RetryPolicy(total=2).attempts == 3
    assert RetryPolicy(total=0).attempts == 1


@pytest.mark.asyncio
async def test_retries_error_status_with_backoff(backoff_sleeps: list[float]) -> None:
    statuses = iter([503, 500, 200])
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(next(statuses), json={"ok": True})

    async with _client(handler, retry=RetryPolicy(total=2, retry_on_error_status=True)) as client:
        response = await client.get("status")

    assert response.status_code == 200
    assert seen == ["https://example.test/api/status"] * 3
    assert backoff_sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_returns_last_response_when_retries_exhausted(backoff_sleeps: list[float]) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502)

    async with _client(handler, retry=RetryPolicy(total=2, retry_on_error_status=True)) as client:
        response = await client.post("command", json={"name": "Ping"})

    assert response.status_code == 502
    assert len(calls) == 3
    assert backoff_sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_reraises_transport_error_after_last_attempt(backoff_sleeps: list[float]) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler, retry=RetryPolicy(total=2)) as client:
        with pytest.raises(httpx.ConnectError):
            await client.get("status")

    assert calls == 3
    assert backoff_sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_non_retryable_status_returns_immediately(backoff_sleeps: list[float]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    async with _client(handler, retry=RetryPolicy(total=2)) as client:
        response = await client.get("missing")

    assert response.status_code == 404
    assert backoff_sleeps == []


@pytest.mark.asyncio
async def test_zero_retries_never_sleeps(backoff_sleeps: list[float]) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503)

    async with _client(handler, retry=RetryPolicy(total=0)) as client:
        response = await client.get("status")

    assert response.status_code == 503
    assert calls == 1
    assert backoff_sleeps == []
