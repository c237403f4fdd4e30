"""Server-Sent Events stream reader.

Used for SUBSCRIBE and MONITOR. A producer task reads the response line by
line and hands `data:` payloads to the consumer through a bounded queue.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "

# Marks the end of the stream on the queue
_END = object()


def parse_data_line(line: str) -> str | None:
    """Extract the payload of an SSE ``data:`` line.

    Returns None for comments, other fields and blank separator lines. A
    payload the server JSON-encoded as a string has exactly one layer of
    double quotes stripped.
    """
    if not line.startswith(DATA_PREFIX):
        return None
    message = line[len(DATA_PREFIX) :]
    if len(message) >= 2 and message.startswith('"') and message.endswith('"'):
        message = message[1:-1]
    return message


class MessageStream:
    """Async iterator over the messages of an open event stream.

    Usage:
        async with await client.subscribe("news") as messages:
            async for message in messages:
                print(message)

    Iteration ends when the server closes the connection, a network error
    occurs mid-stream, or close() is called. Closing cancels the producer,
    which also interrupts a put blocked on a consumer that stopped reading.
    Cancelling a task that is waiting for the next message closes the
    stream as well.
    """

    def __init__(self, response: httpx.Response, max_pending: int = 1) -> None:
        """Initialize the stream.

        Args:
            response: Open streaming response; the stream takes ownership
            max_pending: Messages buffered before the reader waits for the consumer
        """
        if max_pending < 1:
            raise ValueError("max_pending must be at least 1")
        self._response = response
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=max_pending)
        self._task: asyncio.Task[None] | None = None
        self._finished = False
        self._closed = False

    def start(self) -> MessageStream:
        """Start the reader task. Must be called from a running event loop."""
        if self._task is None:
            self._task = asyncio.create_task(self._read_loop())
        return self

    @property
    def closed(self) -> bool:
        return self._closed

    async def _read_loop(self) -> None:
        try:
            async for line in self._response.aiter_lines():
                message = parse_data_line(line)
                if message is None:
                    continue
                await self._queue.put(message)
        except httpx.HTTPError as e:
            logger.warning(f"Event stream ended with error: {e!r}")
        finally:
            self._finished = True
            await self._response.aclose()
            # Wake a waiting consumer. If the queue is full the consumer is
            # not waiting and will see _finished once it drains.
            with contextlib.suppress(asyncio.QueueFull):
                self._queue.put_nowait(_END)

    def __aiter__(self) -> AsyncIterator[str]:
        return self

    async def __anext__(self) -> str:
        if self._task is None:
            self.start()
        if self._closed or (self._finished and self._queue.empty()):
            raise StopAsyncIteration
        try:
            item = await self._queue.get()
        except asyncio.CancelledError:
            # A cancelled consumer releases the connection before unwinding
            await self.close()
            raise
        if item is _END or self._closed:
            raise StopAsyncIteration
        return item

    async def close(self) -> None:
        """Stop reading, close the connection and end iteration."""
        if self._closed:
            return
        self._closed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        # The task may have been cancelled before it ever ran its finally block
        await self._response.aclose()
        with contextlib.suppress(asyncio.QueueFull):
            self._queue.put_nowait(_END)

    async def __aenter__(self) -> MessageStream:
        return self.start()

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
