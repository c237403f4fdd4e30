"""Batched command execution.

Pipeline and Multi buffer commands client-side and send them in a single
request, to /pipeline and /multi-exec respectively. The server answers
with one envelope per command, in push order.

AutoPipeliner does the same transparently: send() calls issued within a
short window are coalesced into one /pipeline request.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .envelope import is_error_envelope
from .errors import ResponseError, TypeMismatchError
from .transport.base import Request, Transport
from .transport.rest import marshal_body
from .values import Value

logger = logging.getLogger(__name__)

PIPELINE_PATH = "pipeline"
MULTI_EXEC_PATH = "multi-exec"


class _CommandBatch:
    """Append-only command buffer sent with exec()."""

    endpoint: str = PIPELINE_PATH

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._commands: list[list[Any]] = []

    def push(self, command: str, *args: Any) -> _CommandBatch:
        """Queue a command. Returns self so calls can be chained."""
        self._commands.append([command, *args])
        return self

    @property
    def commands(self) -> list[list[Any]]:
        """Copy of the queued commands."""
        return [list(cmd) for cmd in self._commands]

    def __len__(self) -> int:
        return len(self._commands)

    async def exec(self) -> list[Any]:
        """Send the queued commands and return one envelope per command.

        Each element is a {"result": ...} or {"error": ...} dict left for
        the caller to interpret. An empty batch returns [] without any
        request. The buffer is cleared once the server has answered.
        """
        if not self._commands:
            return []

        result = await self._transport.write(Request(path=(self.endpoint,), body=self._commands))
        self._commands = []
        if result is None:
            return []
        if not isinstance(result, list):
            raise TypeMismatchError("list", result, f"unexpected return type for {self.endpoint}")
        return result


class Pipeline(_CommandBatch):
    """Commands executed in order, without atomicity."""

    endpoint = PIPELINE_PATH


class Multi(_CommandBatch):
    """Commands executed atomically as a transaction."""

    endpoint = MULTI_EXEC_PATH

    def discard(self) -> None:
        """Drop all queued commands."""
        self._commands = []


def unwrap_item(item: Any) -> Value:
    """Return the result of one batch envelope, raising on an error element."""
    if is_error_envelope(item):
        raise ResponseError(item["error"])
    if isinstance(item, dict) and "result" in item:
        return item["result"]
    return item


class AutoPipeliner:
    """Coalesce independent commands into /pipeline requests.

    The first command queued after a flush arms a timer; when it fires,
    everything queued so far goes out as one pipeline. Each caller gets
    its own element's result, or the error for its element.
    """

    def __init__(self, transport: Transport, window: float = 0.05) -> None:
        """Initialize the pipeliner.

        Args:
            transport: Transport used for the batched writes
            window: Seconds to wait for more commands before flushing
        """
        self._transport = transport
        self._window = window
        self._pending: list[tuple[list[Any], asyncio.Future[Value]]] = []
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of commands waiting for the next flush."""
        return len(self._pending)

    async def send(self, command: str, *args: Any) -> Value:
        """Queue a command and wait for its result."""
        cmd = [command, *args]
        # Fail only the offending caller, not the whole batch
        marshal_body(cmd)

        loop = asyncio.get_running_loop()
        future: asyncio.Future[Value] = loop.create_future()
        self._pending.append((cmd, future))
        if self._timer is None:
            self._timer = loop.call_later(self._window, self._start_flush)
        return await future

    def _start_flush(self) -> None:
        self._timer = None
        batch, self._pending = self._pending, []
        if not batch:
            return
        task = asyncio.create_task(self._execute(batch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _execute(self, batch: list[tuple[list[Any], asyncio.Future[Value]]]) -> None:
        logger.debug(f"Auto-pipelining {len(batch)} commands")
        try:
            results = await self._transport.write(
                Request(path=(PIPELINE_PATH,), body=[cmd for cmd, _ in batch])
            )
            if not isinstance(results, list) or len(results) != len(batch):
                raise TypeMismatchError(
                    f"list of {len(batch)} envelopes", results, "unexpected return type for pipeline"
                )
        except asyncio.CancelledError:
            for _, future in batch:
                future.cancel()
            raise
        except Exception as e:
            for _, future in batch:
                if not future.done():
                    future.set_exception(e)
            return

        for (_, future), item in zip(batch, results, strict=True):
            if future.done():
                # Caller gave up while the batch was in flight
                continue
            try:
                future.set_result(unwrap_item(item))
            except ResponseError as e:
                future.set_exception(e)

    async def flush(self) -> None:
        """Send queued commands now and wait for every in-flight batch."""
        if self._timer is not None:
            self._timer.cancel()
        self._start_flush()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def aclose(self) -> None:
        await self.flush()
