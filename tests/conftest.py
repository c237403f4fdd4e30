"""Pytest configuration and shared fixtures.

Tests talk to an in-process fake server built on httpx.MockTransport, so
the real RestTransport code paths run without any network access.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from upstash_rest import ClientConfig, RestTransport, TransportConfig, UpstashClient, no_backoff

BASE_URL = "https://test-db.upstash.io"
EDGE_URL = "https://test-edge.upstash.io"
TOKEN = "test-token"


class MockServer:
    """Scripted responder for httpx.MockTransport.

    Queued replies are served in order. Each may be an httpx.Response, an
    exception to raise (network failure) or a callable taking the request.
    Once the queue is empty every request gets {"result": "OK"}.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._replies: list[Any] = []

    def reply(self, *replies: Any) -> MockServer:
        self._replies.extend(replies)
        return self

    def reply_json(self, *payloads: Any, status_code: int = 200) -> MockServer:
        return self.reply(*(httpx.Response(status_code, json=p) for p in payloads))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._replies:
            return httpx.Response(200, json={"result": "OK"})
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> Any:
        """JSON body of a recorded request."""
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real Upstash credentials out of the tests."""
    for name in (
        "UPSTASH_REDIS_REST_URL",
        "UPSTASH_REDIS_REST_TOKEN",
        "UPSTASH_REDIS_EDGE_URL",
        "UPSTASH_DISABLE_TELEMETRY",
        "VERCEL",
        "AWS_REGION",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def server() -> MockServer:
    return MockServer()


@pytest.fixture
def make_transport(server: MockServer) -> Callable[..., RestTransport]:
    """Factory for a RestTransport wired to the mock server."""

    def factory(**overrides: Any) -> RestTransport:
        fields = {"url": BASE_URL, "token": TOKEN, "backoff": no_backoff, **overrides}
        return RestTransport(TransportConfig(**fields), http_client=server.http_client())

    return factory


@pytest.fixture
def make_client(server: MockServer) -> Callable[..., UpstashClient]:
    """Factory for an UpstashClient wired to the mock server."""

    def factory(**overrides: Any) -> UpstashClient:
        fields = {
            "url": BASE_URL,
            "token": TOKEN,
            "backoff": no_backoff,
            "http_client": server.http_client(),
            **overrides,
        }
        return UpstashClient(ClientConfig(**fields))

    return factory
