"""Server and database administration commands."""

from __future__ import annotations

from ..values import Value, as_int, as_int_list, as_str
from .base import CommandAPI


class ServerAPI(CommandAPI):
    async def dbsize(self) -> int:
        return as_int(await self._send("DBSIZE"), "DBSIZE")

    async def info(self, section: str | None = None) -> str:
        args = [] if section is None else [section]
        return as_str(await self._send("INFO", *args), "INFO")

    async def time(self) -> tuple[int, int]:
        """Server time as (unix seconds, microseconds)."""
        seconds, micros = as_int_list(await self._send("TIME"), "TIME")
        return seconds, micros

    async def flushall(self, asynchronous: bool = False) -> str:
        args = ["ASYNC"] if asynchronous else []
        return as_str(await self._send("FLUSHALL", *args), "FLUSHALL")

    async def flushdb(self, asynchronous: bool = False) -> str:
        args = ["ASYNC"] if asynchronous else []
        return as_str(await self._send("FLUSHDB", *args), "FLUSHDB")

    async def lastsave(self) -> int:
        return as_int(await self._send("LASTSAVE"), "LASTSAVE")

    async def role(self) -> Value:
        return await self._send("ROLE")
