"""Unit tests for the event stream reader behind SUBSCRIBE and MONITOR."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import httpx
import pytest

from upstash_rest.transport import MessageStream, parse_data_line


async def lines_then_block(*lines: str) -> AsyncIterator[bytes]:
    """Stream body that sends some lines and then stays open."""
    for line in lines:
        yield f"{line}\n".encode()
    await asyncio.Event().wait()


async def lines_then_fail(*lines: str) -> AsyncIterator[bytes]:
    for line in lines:
        yield f"{line}\n".encode()
    raise httpx.ReadError("connection reset")


async def collect(stream: MessageStream) -> list[str]:
    return [message async for message in stream]


# =============================================================================
# Line parsing
# =============================================================================


class TestParseDataLine:
    """Tests for parse_data_line."""

    def test_plain_payload(self) -> None:
        assert parse_data_line("data: message,news,hello") == "message,news,hello"

    def test_one_layer_of_quotes_stripped(self) -> None:
        assert parse_data_line('data: "hello"') == "hello"
        assert parse_data_line('data: ""x""') == '"x"'

    def test_single_quote_char_kept(self) -> None:
        assert parse_data_line('data: "') == '"'

    def test_empty_payload(self) -> None:
        assert parse_data_line("data: ") == ""

    @pytest.mark.parametrize("line", ["", ": keepalive", "event: message", "id: 1", "data:nospace"])
    def test_non_data_lines_ignored(self, line: str) -> None:
        assert parse_data_line(line) is None


# =============================================================================
# MessageStream
# =============================================================================


class TestMessageStream:
    """Tests for MessageStream delivery and shutdown."""

    def test_max_pending_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            MessageStream(httpx.Response(200), max_pending=0)

    @pytest.mark.asyncio
    async def test_messages_in_wire_order(self) -> None:
        body = "data: subscribe,news,1\n\ndata: message,news,a\n\n: ping\n\ndata: message,news,b\n\n"
        stream = MessageStream(httpx.Response(200, text=body)).start()

        assert await collect(stream) == ["subscribe,news,1", "message,news,a", "message,news,b"]

    @pytest.mark.asyncio
    async def test_backpressure_keeps_all_messages(self) -> None:
        lines = "".join(f"data: {i}\n" for i in range(20))
        stream = MessageStream(httpx.Response(200, text=lines), max_pending=1).start()

        assert await collect(stream) == [str(i) for i in range(20)]

    @pytest.mark.asyncio
    async def test_mid_stream_error_ends_iteration(self) -> None:
        response = httpx.Response(200, content=lines_then_fail("data: first", "data: second"))
        stream = MessageStream(response).start()

        assert await collect(stream) == ["first", "second"]
        assert response.is_closed

    @pytest.mark.asyncio
    async def test_close_wakes_blocked_consumer(self) -> None:
        response = httpx.Response(200, content=lines_then_block("data: first"))
        stream = MessageStream(response).start()
        consumer = asyncio.create_task(collect(stream))
        await asyncio.sleep(0.01)

        await stream.close()

        assert await asyncio.wait_for(consumer, timeout=1) == ["first"]
        assert stream.closed
        assert response.is_closed

    @pytest.mark.asyncio
    async def test_cancelled_consumer_closes_stream(self) -> None:
        """Cancelling a task blocked on the next message releases the connection."""
        response = httpx.Response(200, content=lines_then_block("data: first"))
        stream = MessageStream(response).start()
        consumer = asyncio.create_task(collect(stream))
        await asyncio.sleep(0.01)

        consumer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await consumer

        assert stream.closed
        assert response.is_closed
        assert stream._task is not None and stream._task.done()

    @pytest.mark.asyncio
    async def test_close_stops_producer_blocked_on_full_queue(self) -> None:
        response = httpx.Response(200, content=lines_then_block("data: 1", "data: 2", "data: 3"))
        stream = MessageStream(response, max_pending=1).start()
        await asyncio.sleep(0.01)

        await asyncio.wait_for(stream.close(), timeout=1)

        assert response.is_closed
        assert await collect(stream) == []

    @pytest.mark.asyncio
    async def test_close_twice_is_harmless(self) -> None:
        stream = MessageStream(httpx.Response(200, text="data: x\n")).start()
        await stream.close()
        await stream.close()
        assert stream.closed

    @pytest.mark.asyncio
    async def test_close_before_reader_runs(self) -> None:
        response = httpx.Response(200, content=lines_then_block("data: x"))
        stream = MessageStream(response).start()
        await stream.close()
        assert response.is_closed

    @pytest.mark.asyncio
    async def test_context_manager_closes(self) -> None:
        response = httpx.Response(200, content=lines_then_block("data: hello"))

        async with MessageStream(response) as stream:
            first = await stream.__anext__()

        assert first == "hello"
        assert stream.closed
        assert response.is_closed

    @pytest.mark.asyncio
    async def test_iteration_starts_reader_lazily(self) -> None:
        stream = MessageStream(httpx.Response(200, text="data: lazy\n"))
        assert await collect(stream) == ["lazy"]
