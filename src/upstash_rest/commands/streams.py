"""Stream commands (XADD, XRANGE, consumer groups...)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import TypeMismatchError
from ..types import StreamMessage
from ..values import Data, Value, as_data, as_int, as_list, as_str, pairs_to_dict
from .base import CommandAPI


def parse_stream_messages(reply: Value) -> list[StreamMessage]:
    """Parse [[id, [field, value, ...]], ...] into StreamMessage models."""
    if reply is None:
        return []
    messages = []
    for entry in as_list(reply, "stream entry"):
        entry = as_list(entry, "stream entry")
        if len(entry) != 2:
            raise TypeMismatchError("[id, fields] pair", entry, "stream entry")
        messages.append(
            StreamMessage(id=as_str(entry[0], "stream id"), values=pairs_to_dict(entry[1], "stream fields"))
        )
    return messages


class StreamAPI(CommandAPI):
    async def xadd(self, key: str, fields: Mapping[str, Any], id: str = "*") -> str:
        """Append an entry; returns its ID."""
        if not fields:
            raise ValueError("xadd requires at least one field")
        args: list[Any] = [key, id]
        for field, value in fields.items():
            args += [field, value]
        return as_str(await self._send("XADD", *args), "XADD")

    async def xlen(self, key: str) -> int:
        return as_int(await self._send("XLEN", key), "XLEN")

    async def xrange(
        self, key: str, start: str = "-", end: str = "+", count: int | None = None
    ) -> list[StreamMessage]:
        args: list[Any] = [key, start, end]
        if count is not None:
            args += ["COUNT", count]
        return parse_stream_messages(await self._send("XRANGE", *args))

    async def xrevrange(
        self, key: str, end: str = "+", start: str = "-", count: int | None = None
    ) -> list[StreamMessage]:
        args: list[Any] = [key, end, start]
        if count is not None:
            args += ["COUNT", count]
        return parse_stream_messages(await self._send("XREVRANGE", *args))

    async def xdel(self, key: str, *ids: str) -> int:
        return as_int(await self._send("XDEL", key, *ids), "XDEL")

    async def xtrim(self, key: str, maxlen: int, approximate: bool = False) -> int:
        args: list[Any] = [key, "MAXLEN"]
        if approximate:
            args.append("~")
        args.append(maxlen)
        return as_int(await self._send("XTRIM", *args), "XTRIM")

    async def xack(self, key: str, group: str, *ids: str) -> int:
        return as_int(await self._send("XACK", key, group, *ids), "XACK")

    async def xgroup(self, subcommand: str, key: str, group: str, *args: Any) -> Value:
        """Raw XGROUP, e.g. xgroup("CREATE", "events", "workers", "$", "MKSTREAM")."""
        return await self._send("XGROUP", subcommand, key, group, *args)

    async def xread(
        self, streams: Mapping[str, str], count: int | None = None, block: int | None = None
    ) -> dict[Data, list[StreamMessage]]:
        """Read from one or more streams starting after the given IDs.

        Returns stream key -> messages; streams without data are omitted.
        """
        args: list[Any] = []
        if count is not None:
            args += ["COUNT", count]
        if block is not None:
            args += ["BLOCK", block]
        args.append("STREAMS")
        args += list(streams.keys())
        args += list(streams.values())

        reply = await self._send("XREAD", *args)
        if reply is None:
            return {}
        result: dict[Data, list[StreamMessage]] = {}
        for item in as_list(reply, "XREAD"):
            item = as_list(item, "XREAD")
            if len(item) != 2:
                raise TypeMismatchError("[stream, messages] pair", item, "XREAD")
            result[as_data(item[0], "XREAD")] = parse_stream_messages(item[1])
        return result
