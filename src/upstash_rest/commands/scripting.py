"""Lua scripting and function commands.

Script results are returned undecoded; their shape depends on the script.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..values import Value, as_int, as_list, as_str
from .base import CommandAPI


class ScriptAPI(CommandAPI):
    async def eval(self, script: str, keys: Sequence[str] = (), args: Sequence[Any] = ()) -> Value:
        return await self._send("EVAL", script, len(keys), *keys, *args)

    async def evalsha(self, sha1: str, keys: Sequence[str] = (), args: Sequence[Any] = ()) -> Value:
        return await self._send("EVALSHA", sha1, len(keys), *keys, *args)

    async def eval_ro(self, script: str, keys: Sequence[str] = (), args: Sequence[Any] = ()) -> Value:
        return await self._send("EVAL_RO", script, len(keys), *keys, *args)

    async def script_load(self, script: str) -> str:
        """Cache a script server-side; returns its SHA1."""
        return as_str(await self._send("SCRIPT", "LOAD", script), "SCRIPT LOAD")

    async def script_exists(self, *sha1s: str) -> list[bool]:
        reply = as_list(await self._send("SCRIPT", "EXISTS", *sha1s), "SCRIPT EXISTS")
        return [as_int(flag, "SCRIPT EXISTS") == 1 for flag in reply]

    async def script_flush(self) -> str:
        return as_str(await self._send("SCRIPT", "FLUSH"), "SCRIPT FLUSH")

    async def fcall(self, function: str, keys: Sequence[str] = (), args: Sequence[Any] = ()) -> Value:
        return await self._send("FCALL", function, len(keys), *keys, *args)

    async def fcall_ro(self, function: str, keys: Sequence[str] = (), args: Sequence[Any] = ()) -> Value:
        return await self._send("FCALL_RO", function, len(keys), *keys, *args)

    async def function_load(self, code: str, replace: bool = False) -> str:
        """Load a function library; returns the library name."""
        args = ["LOAD"] + (["REPLACE"] if replace else []) + [code]
        return as_str(await self._send("FUNCTION", *args), "FUNCTION LOAD")

    async def function_delete(self, library: str) -> str:
        return as_str(await self._send("FUNCTION", "DELETE", library), "FUNCTION DELETE")

    async def function_list(self) -> list[Any]:
        return as_list(await self._send("FUNCTION", "LIST"), "FUNCTION LIST")
