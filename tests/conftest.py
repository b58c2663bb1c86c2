"""Shared test fixtures for SDK tests."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from crunchyroll_sdk.executor import Executor, ExecutorDetails
from crunchyroll_sdk.http import HTTPClient

BASE_URL = "https://cr.test"


@pytest.fixture
def mock_transport():
    """Returns an httpx mock transport that records requests.

    Set ``transport.response`` for a fixed reply, or ``transport.handler`` to
    compute one per request.
    """
    calls: list[dict[str, Any]] = []
    default_response = httpx.Response(200, json={})

    class RecordingTransport(httpx.AsyncBaseTransport):
        def __init__(self):
            self.response = default_response
            self.handler: Callable[[httpx.Request], httpx.Response] | None = None

        async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
            calls.append({
                "method": request.method,
                "url": str(request.url),
                "path": request.url.path,
                "params": list(request.url.params.multi_items()),
                "headers": dict(request.headers),
            })
            if self.handler is not None:
                return self.handler(request)
            return self.response

    transport = RecordingTransport()
    return transport, calls


@pytest.fixture
def http_client(mock_transport):
    """HTTPClient with a mock transport."""
    transport, calls = mock_transport
    client = HTTPClient(BASE_URL, token="test-token")
    # Replace the inner httpx client with one using our mock transport
    client._client = httpx.AsyncClient(
        base_url=BASE_URL,
        transport=transport,
    )
    return client, transport, calls


@pytest.fixture
def details():
    return ExecutorDetails(
        locale="de-DE",
        account_id="acc-1",
        bucket="DE/M3/crunchyroll",
        policy="pol",
        signature="sig",
        key_pair_id="kp",
    )


@pytest.fixture
def executor(http_client, details):
    """Executor on top of the mocked HTTPClient."""
    client, transport, calls = http_client
    return Executor(client, details), transport, calls
