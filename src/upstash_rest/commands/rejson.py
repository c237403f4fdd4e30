"""RedisJSON commands (JSON.SET, JSON.GET, ...).

Values passed to set/merge/arrappend are serialized with json.dumps unless
they are already strings holding JSON text. JSON.GET replies are parsed
back into Python objects.
"""

from __future__ import annotations

import json
from typing import Any

from ..errors import DecodeError
from ..values import Value, as_int, as_list, as_optional_str, as_str, as_str_list
from .base import CommandAPI


def _dump(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _load(reply: Value, command: str) -> Any:
    text = as_optional_str(reply, command)
    if text is None:
        return None
    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeError(f"{command}: reply is not valid JSON: {e}") from e


class JsonAPI(CommandAPI):
    async def set(self, key: str, path: str, value: Any, nx: bool = False, xx: bool = False) -> str | None:
        """Set the JSON value at path. Returns "OK", or None when NX/XX blocked the write."""
        args: list[Any] = [key, path, _dump(value)]
        if nx:
            args.append("NX")
        elif xx:
            args.append("XX")
        return as_optional_str(await self._send("JSON.SET", *args), "JSON.SET")

    async def get(self, key: str, *paths: str) -> Any:
        return _load(await self._send("JSON.GET", key, *paths), "JSON.GET")

    async def mget(self, keys: list[str], path: str) -> list[Any]:
        reply = as_list(await self._send("JSON.MGET", *keys, path), "JSON.MGET")
        return [_load(item, "JSON.MGET") for item in reply]

    async def delete(self, key: str, path: str = "$") -> int:
        return as_int(await self._send("JSON.DEL", key, path), "JSON.DEL")

    async def forget(self, key: str, path: str = "$") -> int:
        """Alias of delete()."""
        return as_int(await self._send("JSON.FORGET", key, path), "JSON.FORGET")

    async def type(self, key: str, path: str = "$") -> list[str]:
        return as_str_list(await self._send("JSON.TYPE", key, path), "JSON.TYPE")

    async def arrappend(self, key: str, path: str, *values: Any) -> list[int | None]:
        reply = await self._send("JSON.ARRAPPEND", key, path, *(_dump(v) for v in values))
        return _int_or_none_list(reply, "JSON.ARRAPPEND")

    async def arrlen(self, key: str, path: str = "$") -> list[int | None]:
        return _int_or_none_list(await self._send("JSON.ARRLEN", key, path), "JSON.ARRLEN")

    async def arrindex(
        self, key: str, path: str, value: Any, start: int | None = None, stop: int | None = None
    ) -> list[int | None]:
        """Index of the first occurrence of value in each matched array, or -1."""
        args: list[Any] = [key, path, _dump(value)]
        if start is not None:
            args.append(start)
            if stop is not None:
                args.append(stop)
        return _int_or_none_list(await self._send("JSON.ARRINDEX", *args), "JSON.ARRINDEX")

    async def arrinsert(self, key: str, path: str, index: int, *values: Any) -> list[int | None]:
        reply = await self._send("JSON.ARRINSERT", key, path, index, *(_dump(v) for v in values))
        return _int_or_none_list(reply, "JSON.ARRINSERT")

    async def arrpop(self, key: str, path: str = "$", index: int | None = None) -> list[Any]:
        """Remove and return an element of each matched array (the last one by default)."""
        args: list[Any] = [key, path]
        if index is not None:
            args.append(index)
        reply = await self._send("JSON.ARRPOP", *args)
        # Legacy paths reply with a single JSON text
        if not isinstance(reply, list):
            return [_load(reply, "JSON.ARRPOP")]
        return [_load(item, "JSON.ARRPOP") for item in reply]

    async def arrtrim(self, key: str, path: str, start: int, stop: int) -> list[int | None]:
        return _int_or_none_list(await self._send("JSON.ARRTRIM", key, path, start, stop), "JSON.ARRTRIM")

    async def numincrby(self, key: str, path: str, value: float) -> Any:
        return _load(await self._send("JSON.NUMINCRBY", key, path, value), "JSON.NUMINCRBY")

    async def nummultby(self, key: str, path: str, value: float) -> Any:
        return _load(await self._send("JSON.NUMMULTBY", key, path, value), "JSON.NUMMULTBY")

    async def objkeys(self, key: str, path: str = "$") -> list[list[str] | None]:
        reply = as_list(await self._send("JSON.OBJKEYS", key, path), "JSON.OBJKEYS")
        return [None if item is None else as_str_list(item, "JSON.OBJKEYS") for item in reply]

    async def objlen(self, key: str, path: str = "$") -> list[int | None]:
        return _int_or_none_list(await self._send("JSON.OBJLEN", key, path), "JSON.OBJLEN")

    async def strlen(self, key: str, path: str = "$") -> list[int | None]:
        return _int_or_none_list(await self._send("JSON.STRLEN", key, path), "JSON.STRLEN")

    async def strappend(self, key: str, path: str, value: str) -> list[int | None]:
        reply = await self._send("JSON.STRAPPEND", key, path, json.dumps(value))
        return _int_or_none_list(reply, "JSON.STRAPPEND")

    async def toggle(self, key: str, path: str) -> list[int | None]:
        return _int_or_none_list(await self._send("JSON.TOGGLE", key, path), "JSON.TOGGLE")

    async def clear(self, key: str, path: str = "$") -> int:
        return as_int(await self._send("JSON.CLEAR", key, path), "JSON.CLEAR")

    async def merge(self, key: str, path: str, value: Any) -> str:
        return as_str(await self._send("JSON.MERGE", key, path, _dump(value)), "JSON.MERGE")


def _int_or_none_list(reply: Value, command: str) -> list[int | None]:
    # Legacy paths reply with a bare integer
    if not isinstance(reply, list):
        return [None if reply is None else as_int(reply, command)]
    return [None if item is None else as_int(item, command) for item in reply]
