"""Bitmap commands."""

from __future__ import annotations

from typing import Any, Literal

from ..values import as_int, as_list
from .base import CommandAPI


class BitmapAPI(CommandAPI):
    async def setbit(self, key: str, offset: int, value: Literal[0, 1]) -> int:
        """Set a bit; returns the previous bit value."""
        return as_int(await self._send("SETBIT", key, offset, value), "SETBIT")

    async def getbit(self, key: str, offset: int) -> int:
        return as_int(await self._send("GETBIT", key, offset), "GETBIT")

    async def bitcount(self, key: str, start: int | None = None, end: int | None = None) -> int:
        args: list[Any] = [key]
        if start is not None and end is not None:
            args += [start, end]
        return as_int(await self._send("BITCOUNT", *args), "BITCOUNT")

    async def bitpos(
        self, key: str, bit: Literal[0, 1], start: int | None = None, end: int | None = None
    ) -> int:
        args: list[Any] = [key, bit]
        if start is not None:
            args.append(start)
            if end is not None:
                args.append(end)
        return as_int(await self._send("BITPOS", *args), "BITPOS")

    async def bitop(
        self, operation: Literal["AND", "OR", "XOR", "NOT"], destination: str, *keys: str
    ) -> int:
        """Combine bitmaps into destination; returns its length in bytes."""
        return as_int(await self._send("BITOP", operation, destination, *keys), "BITOP")

    async def bitfield(self, key: str, *operations: Any) -> list[int | None]:
        """Run raw BITFIELD sub-commands, e.g. ("INCRBY", "u8", 0, 1)."""
        reply = as_list(await self._send("BITFIELD", key, *operations), "BITFIELD")
        return [None if item is None else as_int(item, "BITFIELD") for item in reply]
