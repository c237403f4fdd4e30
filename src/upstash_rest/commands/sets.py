"""Set commands."""

from __future__ import annotations

from typing import Any

from ..types import ScanOptions, ScanResult
from ..values import Data, as_data_list, as_int, as_list, as_optional_data
from .base import CommandAPI


class SetAPI(CommandAPI):
    """Commands on set values."""

    async def sadd(self, key: str, *members: Any) -> int:
        return as_int(await self._send("SADD", key, *members), "SADD")

    async def srem(self, key: str, *members: Any) -> int:
        return as_int(await self._send("SREM", key, *members), "SREM")

    async def sismember(self, key: str, member: Any) -> bool:
        return as_int(await self._send("SISMEMBER", key, member), "SISMEMBER") == 1

    async def smismember(self, key: str, *members: Any) -> list[bool]:
        reply = as_list(await self._send("SMISMEMBER", key, *members), "SMISMEMBER")
        return [as_int(flag, "SMISMEMBER") == 1 for flag in reply]

    async def smembers(self, key: str) -> list[Data]:
        return as_data_list(await self._send("SMEMBERS", key), "SMEMBERS")

    async def scard(self, key: str) -> int:
        return as_int(await self._send("SCARD", key), "SCARD")

    async def spop(self, key: str) -> Data | None:
        return as_optional_data(await self._send("SPOP", key), "SPOP")

    async def srandmember(self, key: str) -> Data | None:
        return as_optional_data(await self._send("SRANDMEMBER", key), "SRANDMEMBER")

    async def smove(self, source: str, destination: str, member: Any) -> bool:
        return as_int(await self._send("SMOVE", source, destination, member), "SMOVE") == 1

    async def sinter(self, *keys: str) -> list[Data]:
        return as_data_list(await self._send("SINTER", *keys), "SINTER")

    async def sunion(self, *keys: str) -> list[Data]:
        return as_data_list(await self._send("SUNION", *keys), "SUNION")

    async def sdiff(self, *keys: str) -> list[Data]:
        return as_data_list(await self._send("SDIFF", *keys), "SDIFF")

    async def sscan(
        self, key: str, cursor: str | int = "0", options: ScanOptions | None = None
    ) -> ScanResult:
        return await self._scan("SSCAN", key, cursor, options)
