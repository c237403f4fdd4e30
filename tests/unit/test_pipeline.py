"""Unit tests for Pipeline, Multi and AutoPipeliner."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from upstash_rest.errors import MarshalError, ResponseError, TransportError, TypeMismatchError
from upstash_rest.pipeline import AutoPipeliner, Multi, Pipeline, unwrap_item

# =============================================================================
# Pipeline / Multi
# =============================================================================


class TestPipeline:
    """Tests for explicit command batches."""

    @pytest.mark.asyncio
    async def test_push_is_chainable(self, make_transport) -> None:
        pipe = Pipeline(make_transport()).push("SET", "k", "v").push("GET", "k")
        assert len(pipe) == 2
        assert pipe.commands == [["SET", "k", "v"], ["GET", "k"]]

    @pytest.mark.asyncio
    async def test_exec_posts_all_commands(self, server, make_transport) -> None:
        server.reply_json([{"result": "OK"}, {"result": "v"}])
        pipe = Pipeline(make_transport()).push("SET", "k", "v").push("GET", "k")

        results = await pipe.exec()

        assert results == [{"result": "OK"}, {"result": "v"}]
        assert server.last_request.url.path == "/pipeline"
        assert server.body() == [["SET", "k", "v"], ["GET", "k"]]

    @pytest.mark.asyncio
    async def test_exec_keeps_per_command_errors(self, server, make_transport) -> None:
        server.reply_json([{"result": 1}, {"error": "ERR value is not an integer"}])
        pipe = Pipeline(make_transport()).push("INCR", "a").push("INCR", "b")

        results = await pipe.exec()

        assert results[1] == {"error": "ERR value is not an integer"}

    @pytest.mark.asyncio
    async def test_empty_exec_sends_nothing(self, server, make_transport) -> None:
        assert await Pipeline(make_transport()).exec() == []
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_buffer_cleared_after_exec(self, server, make_transport) -> None:
        server.reply_json([{"result": "PONG"}])
        pipe = Pipeline(make_transport()).push("PING")
        await pipe.exec()
        assert len(pipe) == 0

    @pytest.mark.asyncio
    async def test_buffer_kept_when_request_fails(self, server, make_transport) -> None:
        server.reply(httpx.ConnectError("down"))
        pipe = Pipeline(make_transport(max_attempts=1)).push("PING")

        with pytest.raises(TransportError):
            await pipe.exec()
        assert len(pipe) == 1

    @pytest.mark.asyncio
    async def test_null_result_is_empty(self, server, make_transport) -> None:
        server.reply_json({"result": None})
        assert await Pipeline(make_transport()).push("PING").exec() == []

    @pytest.mark.asyncio
    async def test_unexpected_shape(self, server, make_transport) -> None:
        server.reply_json({"result": "OK"})

        with pytest.raises(TypeMismatchError, match="unexpected return type for pipeline"):
            await Pipeline(make_transport()).push("PING").exec()

    @pytest.mark.asyncio
    async def test_multi_posts_to_multi_exec(self, server, make_transport) -> None:
        server.reply_json([{"result": "OK"}])
        await Multi(make_transport()).push("SET", "k", "v").exec()
        assert server.last_request.url.path == "/multi-exec"

    @pytest.mark.asyncio
    async def test_multi_discard(self, server, make_transport) -> None:
        tx = Multi(make_transport()).push("SET", "k", "v")
        tx.discard()
        assert await tx.exec() == []
        assert server.requests == []


class TestUnwrapItem:
    def test_result(self) -> None:
        assert unwrap_item({"result": 3}) == 3

    def test_error(self) -> None:
        with pytest.raises(ResponseError, match="ERR boom"):
            unwrap_item({"error": "ERR boom"})


# =============================================================================
# AutoPipeliner
# =============================================================================


class TestAutoPipeliner:
    """Tests for transparent coalescing of concurrent commands."""

    @pytest.mark.asyncio
    async def test_concurrent_sends_share_one_request(self, server, make_transport) -> None:
        server.reply_json([{"result": "OK"}, {"result": 5}, {"result": "v"}])
        pipeliner = AutoPipeliner(make_transport(), window=0.01)

        results = await asyncio.gather(
            pipeliner.send("SET", "k", "v"),
            pipeliner.send("INCR", "n"),
            pipeliner.send("GET", "k"),
        )

        assert results == ["OK", 5, "v"]
        assert len(server.requests) == 1
        assert server.last_request.url.path == "/pipeline"
        assert server.body() == [["SET", "k", "v"], ["INCR", "n"], ["GET", "k"]]

    @pytest.mark.asyncio
    async def test_error_element_fails_only_its_caller(self, server, make_transport) -> None:
        server.reply_json([{"result": 1}, {"error": "WRONGTYPE bad"}])
        pipeliner = AutoPipeliner(make_transport(), window=0.01)

        ok, failed = await asyncio.gather(
            pipeliner.send("INCR", "a"),
            pipeliner.send("INCR", "b"),
            return_exceptions=True,
        )

        assert ok == 1
        assert isinstance(failed, ResponseError)
        assert str(failed) == "WRONGTYPE bad"

    @pytest.mark.asyncio
    async def test_transport_failure_fails_every_caller(self, server, make_transport) -> None:
        server.reply(httpx.ConnectError("down"))
        pipeliner = AutoPipeliner(make_transport(max_attempts=1), window=0.01)

        results = await asyncio.gather(
            pipeliner.send("PING"),
            pipeliner.send("PING"),
            return_exceptions=True,
        )

        assert all(isinstance(r, TransportError) for r in results)

    @pytest.mark.asyncio
    async def test_length_mismatch_fails_batch(self, server, make_transport) -> None:
        server.reply_json([{"result": 1}])
        pipeliner = AutoPipeliner(make_transport(), window=0.01)

        results = await asyncio.gather(
            pipeliner.send("INCR", "a"),
            pipeliner.send("INCR", "b"),
            return_exceptions=True,
        )

        assert all(isinstance(r, TypeMismatchError) for r in results)

    @pytest.mark.asyncio
    async def test_marshal_error_raised_to_caller_only(self, server, make_transport) -> None:
        pipeliner = AutoPipeliner(make_transport(), window=0.01)

        with pytest.raises(MarshalError):
            await pipeliner.send("SET", "k", object())
        assert pipeliner.pending == 0

    @pytest.mark.asyncio
    async def test_separate_windows_use_separate_requests(self, server, make_transport) -> None:
        server.reply_json([{"result": "a"}], [{"result": "b"}])
        pipeliner = AutoPipeliner(make_transport(), window=0.01)

        assert await pipeliner.send("GET", "a") == "a"
        assert await pipeliner.send("GET", "b") == "b"
        assert len(server.requests) == 2

    @pytest.mark.asyncio
    async def test_flush_sends_immediately(self, server, make_transport) -> None:
        server.reply_json([{"result": "PONG"}])
        pipeliner = AutoPipeliner(make_transport(), window=60)

        pending = asyncio.create_task(pipeliner.send("PING"))
        await asyncio.sleep(0)
        assert pipeliner.pending == 1

        await pipeliner.flush()

        assert await pending == "PONG"
        assert pipeliner.pending == 0

    @pytest.mark.asyncio
    async def test_aclose_with_nothing_pending(self, server, make_transport) -> None:
        pipeliner = AutoPipeliner(make_transport())
        await pipeliner.aclose()
        assert server.requests == []
