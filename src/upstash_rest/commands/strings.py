"""String commands.

GET, GETRANGE, STRLEN and MGET are issued as path-segment reads so they
can be served by the edge endpoint; everything else is a write.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..types import KV, GetExOptions, SetOptions
from ..values import (
    Data,
    as_data,
    as_float,
    as_int,
    as_list,
    as_optional_data,
    as_str,
)
from .base import CommandAPI


def _flatten_pairs(pairs: Mapping[str, str] | Iterable[KV]) -> list[str]:
    if isinstance(pairs, Mapping):
        items = list(pairs.items())
    else:
        items = [(kv.key, kv.value) for kv in pairs]
    if not items:
        raise ValueError("at least one key/value pair is required")
    return [part for pair in items for part in pair]


class StringAPI(CommandAPI):
    """String value commands."""

    async def get(self, key: str) -> Data | None:
        """Get the value of a key; None if it does not exist."""
        return as_optional_data(await self._read("get", key), "GET")

    async def set(self, key: str, value: str, options: SetOptions | None = None) -> Data | None:
        """Set a key.

        Returns "OK", None when an NX/XX condition was not met, or the old
        value when ``options.get`` is set.
        """
        args = [key, value]
        if options is not None:
            args += options.to_args()
        return as_optional_data(await self._send("SET", *args), "SET")

    async def setex(self, key: str, seconds: int, value: str) -> str:
        return as_str(await self._send("SETEX", key, seconds, value), "SETEX")

    async def psetex(self, key: str, milliseconds: int, value: str) -> str:
        return as_str(await self._send("PSETEX", key, milliseconds, value), "PSETEX")

    async def setnx(self, key: str, value: str) -> bool:
        return as_int(await self._send("SETNX", key, value), "SETNX") == 1

    async def getex(self, key: str, options: GetExOptions | None = None) -> Data | None:
        args = [key] + (options.to_args() if options else [])
        return as_optional_data(await self._send("GETEX", *args), "GETEX")

    async def getdel(self, key: str) -> Data | None:
        return as_optional_data(await self._send("GETDEL", key), "GETDEL")

    async def getset(self, key: str, value: str) -> Data | None:
        return as_optional_data(await self._send("GETSET", key, value), "GETSET")

    async def getrange(self, key: str, start: int, end: int) -> Data:
        return as_data(await self._read("getrange", key, start, end), "GETRANGE")

    async def setrange(self, key: str, offset: int, value: str) -> int:
        return as_int(await self._send("SETRANGE", key, offset, value), "SETRANGE")

    async def strlen(self, key: str) -> int:
        return as_int(await self._read("strlen", key), "STRLEN")

    async def append(self, key: str, value: str) -> int:
        """Append to a key, creating it if needed. Returns the new length."""
        return as_int(await self._send("APPEND", key, value), "APPEND")

    async def incr(self, key: str) -> int:
        return as_int(await self._send("INCR", key), "INCR")

    async def incrby(self, key: str, increment: int) -> int:
        return as_int(await self._send("INCRBY", key, increment), "INCRBY")

    async def incrbyfloat(self, key: str, increment: float) -> float:
        return as_float(await self._send("INCRBYFLOAT", key, increment), "INCRBYFLOAT")

    async def decr(self, key: str) -> int:
        return as_int(await self._send("DECR", key), "DECR")

    async def decrby(self, key: str, decrement: int) -> int:
        return as_int(await self._send("DECRBY", key, decrement), "DECRBY")

    async def mget(self, *keys: str) -> list[Data | None]:
        """Get several keys at once; missing keys come back as None."""
        reply = as_list(await self._read("mget", *keys), "MGET")
        return [as_optional_data(value, "MGET") for value in reply]

    async def mset(self, pairs: Mapping[str, str] | Iterable[KV]) -> str:
        return as_str(await self._send("MSET", *_flatten_pairs(pairs)), "MSET")

    async def msetnx(self, pairs: Mapping[str, str] | Iterable[KV]) -> bool:
        """Set several keys only if none of them exists."""
        return as_int(await self._send("MSETNX", *_flatten_pairs(pairs)), "MSETNX") == 1
