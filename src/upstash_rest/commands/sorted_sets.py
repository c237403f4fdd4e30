"""Sorted set commands."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..types import ScanOptions, ScanResult
from ..values import Data, as_data, as_data_list, as_float, as_int, as_list, as_optional_float
from .base import CommandAPI


class SortedSetAPI(CommandAPI):
    """Commands on sorted set values."""

    async def zadd(self, key: str, members: Mapping[str, float], *flags: str) -> int:
        """Add members with scores.

        Args:
            key: Sorted set key
            members: member -> score
            flags: Optional modifiers such as "NX", "XX", "GT", "LT", "CH"
        """
        if not members:
            raise ValueError("zadd requires at least one member")
        args: list[Any] = [key, *flags]
        for member, score in members.items():
            args += [score, member]
        return as_int(await self._send("ZADD", *args), "ZADD")

    async def zrem(self, key: str, *members: str) -> int:
        return as_int(await self._send("ZREM", key, *members), "ZREM")

    async def zcard(self, key: str) -> int:
        return as_int(await self._send("ZCARD", key), "ZCARD")

    async def zcount(self, key: str, minimum: float | str, maximum: float | str) -> int:
        return as_int(await self._send("ZCOUNT", key, minimum, maximum), "ZCOUNT")

    async def zscore(self, key: str, member: str) -> float | None:
        return as_optional_float(await self._send("ZSCORE", key, member), "ZSCORE")

    async def zincrby(self, key: str, increment: float, member: str) -> float:
        return as_float(await self._send("ZINCRBY", key, increment, member), "ZINCRBY")

    async def zrank(self, key: str, member: str) -> int | None:
        reply = await self._send("ZRANK", key, member)
        return None if reply is None else as_int(reply, "ZRANK")

    async def zrange(self, key: str, start: int, stop: int) -> list[Data]:
        return as_data_list(await self._send("ZRANGE", key, start, stop), "ZRANGE")

    async def zrange_withscores(self, key: str, start: int, stop: int) -> list[tuple[Data, float]]:
        """ZRANGE ... WITHSCORES as (member, score) tuples."""
        reply = as_list(await self._send("ZRANGE", key, start, stop, "WITHSCORES"), "ZRANGE")
        return [
            (as_data(reply[i], "ZRANGE"), as_float(reply[i + 1], "ZRANGE"))
            for i in range(0, len(reply) - 1, 2)
        ]

    async def zscan(
        self, key: str, cursor: str | int = "0", options: ScanOptions | None = None
    ) -> ScanResult:
        """Fetch one page; items alternate member, score."""
        return await self._scan("ZSCAN", key, cursor, options)
