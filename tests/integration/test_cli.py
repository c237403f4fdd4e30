"""Integration tests for the upstash-rest CLI."""

from __future__ import annotations

from dataclasses import replace

import httpx
import pytest
from click.testing import CliRunner

from upstash_rest import cli
from upstash_rest.cli import main
from upstash_rest.client import UpstashClient

ARGS = ["--url", "https://test-db.upstash.io", "--token", "test-token"]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def wired_client(server, monkeypatch):
    """Build CLI clients against the mock server with a single attempt."""

    def build(config):
        return UpstashClient(replace(config, http_client=server.http_client(), max_attempts=1))

    monkeypatch.setattr(cli, "UpstashClient", build)


@pytest.fixture
def invoke(runner):
    def run(*args: str):
        return runner.invoke(main, [*ARGS, *args])

    return run


class TestSend:
    """Tests for `upstash-rest send`."""

    def test_prints_string_result(self, server, invoke) -> None:
        server.reply_json({"result": "bar"})

        result = invoke("send", "get", "foo")

        assert result.exit_code == 0
        assert result.output.strip() == "bar"
        assert server.body() == ["GET", "foo"]

    def test_prints_structured_result_as_json(self, server, invoke) -> None:
        server.reply_json({"result": ["a", 1, None]})

        result = invoke("send", "LRANGE", "q", "0", "-1")

        assert result.exit_code == 0
        assert '"a"' in result.output
        assert "null" in result.output
        assert server.body() == ["LRANGE", "q", "0", "-1"]

    def test_negative_arguments_are_not_options(self, server, invoke) -> None:
        server.reply_json({"result": -3})

        result = invoke("send", "INCRBY", "counter", "-3")

        assert result.exit_code == 0
        assert result.output.strip() == "-3"
        assert server.body() == ["INCRBY", "counter", "-3"]

    def test_logical_error_exits_nonzero(self, server, invoke) -> None:
        server.reply_json({"error": "ERR unknown command"})

        result = invoke("send", "NOPE")

        assert result.exit_code == 1
        assert "Error: ERR unknown command" in result.output

    def test_network_error_exits_nonzero(self, server, invoke) -> None:
        server.reply(httpx.ConnectError("down"))

        result = invoke("send", "PING")

        assert result.exit_code == 1
        assert "unable to perform request after 1 attempts" in result.output


class TestPing:
    def test_ping(self, server, invoke) -> None:
        server.reply_json({"result": "PONG"})

        result = invoke("ping")

        assert result.exit_code == 0
        assert "PONG" in result.output

    def test_missing_credentials(self, runner) -> None:
        result = runner.invoke(main, ["ping"])

        assert result.exit_code == 1
        assert "Missing endpoint or token" in result.output

    def test_credentials_from_environment(self, server, runner, monkeypatch) -> None:
        monkeypatch.setenv("UPSTASH_REDIS_REST_URL", "https://env-db.upstash.io")
        monkeypatch.setenv("UPSTASH_REDIS_REST_TOKEN", "env-token")

        result = runner.invoke(main, ["ping"])

        assert result.exit_code == 0
        assert server.last_request.url.host == "env-db.upstash.io"
        assert server.last_request.headers["Authorization"] == "Bearer env-token"


class TestStreams:
    """Tests for `upstash-rest subscribe` and `upstash-rest monitor`."""

    def test_subscribe_prints_messages(self, server, invoke) -> None:
        server.reply(httpx.Response(200, text="data: subscribe,news,1\n\ndata: message,news,hi\n\n"))

        result = invoke("subscribe", "news")

        assert result.exit_code == 0
        assert "message,news,hi" in result.output
        assert server.last_request.url.path == "/subscribe/news"

    def test_monitor_prints_messages(self, server, invoke) -> None:
        server.reply(httpx.Response(200, text='data: "OK"\n\n'))

        result = invoke("monitor")

        assert result.exit_code == 0
        assert "OK" in result.output
        assert server.last_request.url.path == "/monitor"

    def test_subscribe_rejected(self, server, invoke) -> None:
        server.reply(httpx.Response(401, json={"error": "Unauthorized"}))

        result = invoke("subscribe", "news")

        assert result.exit_code == 1
        assert "stream request returned status code 401" in result.output
