"""Hash commands."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..types import ScanOptions, ScanResult
from ..values import (
    Data,
    as_data_list,
    as_float,
    as_int,
    as_list,
    as_optional_data,
    pairs_to_dict,
)
from .base import CommandAPI


class HashAPI(CommandAPI):
    """Commands on hash values."""

    async def hset(self, key: str, mapping: Mapping[str, Any]) -> int:
        """Set fields; returns the number of fields that were added."""
        if not mapping:
            raise ValueError("hset requires at least one field")
        args: list[Any] = [key]
        for field, value in mapping.items():
            args += [field, value]
        return as_int(await self._send("HSET", *args), "HSET")

    async def hsetnx(self, key: str, field: str, value: Any) -> bool:
        return as_int(await self._send("HSETNX", key, field, value), "HSETNX") == 1

    async def hget(self, key: str, field: str) -> Data | None:
        return as_optional_data(await self._send("HGET", key, field), "HGET")

    async def hmget(self, key: str, *fields: str) -> list[Data | None]:
        reply = as_list(await self._send("HMGET", key, *fields), "HMGET")
        return [as_optional_data(value, "HMGET") for value in reply]

    async def hgetall(self, key: str) -> dict[Data, Data]:
        """Return every field and value; empty dict for a missing key."""
        return pairs_to_dict(await self._send("HGETALL", key), "HGETALL")

    async def hdel(self, key: str, *fields: str) -> int:
        return as_int(await self._send("HDEL", key, *fields), "HDEL")

    async def hexists(self, key: str, field: str) -> bool:
        return as_int(await self._send("HEXISTS", key, field), "HEXISTS") == 1

    async def hlen(self, key: str) -> int:
        return as_int(await self._send("HLEN", key), "HLEN")

    async def hkeys(self, key: str) -> list[Data]:
        return as_data_list(await self._send("HKEYS", key), "HKEYS")

    async def hvals(self, key: str) -> list[Data]:
        return as_data_list(await self._send("HVALS", key), "HVALS")

    async def hstrlen(self, key: str, field: str) -> int:
        return as_int(await self._send("HSTRLEN", key, field), "HSTRLEN")

    async def hincrby(self, key: str, field: str, increment: int) -> int:
        return as_int(await self._send("HINCRBY", key, field, increment), "HINCRBY")

    async def hincrbyfloat(self, key: str, field: str, increment: float) -> float:
        return as_float(await self._send("HINCRBYFLOAT", key, field, increment), "HINCRBYFLOAT")

    async def hscan(
        self, key: str, cursor: str | int = "0", options: ScanOptions | None = None
    ) -> ScanResult:
        """Fetch one page of fields; items alternate field, value."""
        return await self._scan("HSCAN", key, cursor, options)
