"""HyperLogLog commands."""

from __future__ import annotations

from typing import Any

from ..values import as_int, as_str
from .base import CommandAPI


class HyperLogLogAPI(CommandAPI):
    async def pfadd(self, key: str, *elements: Any) -> bool:
        """Add elements; True if the estimated cardinality changed."""
        return as_int(await self._send("PFADD", key, *elements), "PFADD") == 1

    async def pfcount(self, *keys: str) -> int:
        return as_int(await self._send("PFCOUNT", *keys), "PFCOUNT")

    async def pfmerge(self, destination: str, *sources: str) -> str:
        return as_str(await self._send("PFMERGE", destination, *sources), "PFMERGE")
