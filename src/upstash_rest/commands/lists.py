"""List commands."""

from __future__ import annotations

from typing import Any, Literal

from ..values import Data, as_data_list, as_int, as_optional_data, as_str
from .base import CommandAPI


class ListAPI(CommandAPI):
    """Commands on list values."""

    async def lpush(self, key: str, *values: Any) -> int:
        """Prepend values; returns the new length."""
        return as_int(await self._send("LPUSH", key, *values), "LPUSH")

    async def rpush(self, key: str, *values: Any) -> int:
        """Append values; returns the new length."""
        return as_int(await self._send("RPUSH", key, *values), "RPUSH")

    async def lpop(self, key: str) -> Data | None:
        return as_optional_data(await self._send("LPOP", key), "LPOP")

    async def rpop(self, key: str) -> Data | None:
        return as_optional_data(await self._send("RPOP", key), "RPOP")

    async def llen(self, key: str) -> int:
        return as_int(await self._send("LLEN", key), "LLEN")

    async def lrange(self, key: str, start: int, stop: int) -> list[Data]:
        return as_data_list(await self._send("LRANGE", key, start, stop), "LRANGE")

    async def lindex(self, key: str, index: int) -> Data | None:
        return as_optional_data(await self._send("LINDEX", key, index), "LINDEX")

    async def lset(self, key: str, index: int, value: Any) -> str:
        return as_str(await self._send("LSET", key, index, value), "LSET")

    async def lrem(self, key: str, count: int, value: Any) -> int:
        return as_int(await self._send("LREM", key, count, value), "LREM")

    async def ltrim(self, key: str, start: int, stop: int) -> str:
        return as_str(await self._send("LTRIM", key, start, stop), "LTRIM")

    async def linsert(
        self, key: str, where: Literal["BEFORE", "AFTER"], pivot: Any, value: Any
    ) -> int:
        """Insert next to pivot; -1 if the pivot was not found."""
        return as_int(await self._send("LINSERT", key, where, pivot, value), "LINSERT")

    async def lmove(
        self,
        source: str,
        destination: str,
        wherefrom: Literal["LEFT", "RIGHT"] = "LEFT",
        whereto: Literal["LEFT", "RIGHT"] = "RIGHT",
    ) -> Data | None:
        reply = await self._send("LMOVE", source, destination, wherefrom, whereto)
        return as_optional_data(reply, "LMOVE")
