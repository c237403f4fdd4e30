"""Generic key space commands."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from ..types import ScanOptions, ScanResult
from ..values import Data, Value, as_data_list, as_int, as_optional_data, as_str
from .base import CommandAPI


class KeyAPI(CommandAPI):
    """Commands that work on keys regardless of their type."""

    async def keys(self, pattern: str) -> list[Data]:
        """List keys matching a glob pattern. Prefer scan() on large databases."""
        return as_data_list(await self._read("keys", pattern), "KEYS")

    async def delete(self, *keys: str) -> int:
        """Delete keys; returns how many existed."""
        return as_int(await self._send("DEL", *keys), "DEL")

    async def unlink(self, *keys: str) -> int:
        return as_int(await self._send("UNLINK", *keys), "UNLINK")

    async def exists(self, *keys: str) -> int:
        """Count how many of the given keys exist."""
        return as_int(await self._send("EXISTS", *keys), "EXISTS")

    async def touch(self, *keys: str) -> int:
        return as_int(await self._send("TOUCH", *keys), "TOUCH")

    async def type(self, key: str) -> str:
        return as_str(await self._send("TYPE", key), "TYPE")

    async def expire(self, key: str, seconds: int) -> bool:
        return as_int(await self._send("EXPIRE", key, seconds), "EXPIRE") == 1

    async def pexpire(self, key: str, milliseconds: int) -> bool:
        return as_int(await self._send("PEXPIRE", key, milliseconds), "PEXPIRE") == 1

    async def expireat(self, key: str, timestamp: int) -> bool:
        return as_int(await self._send("EXPIREAT", key, timestamp), "EXPIREAT") == 1

    async def persist(self, key: str) -> bool:
        return as_int(await self._send("PERSIST", key), "PERSIST") == 1

    async def ttl(self, key: str) -> int:
        """Seconds to live; -1 without expiry, -2 if the key does not exist."""
        return as_int(await self._send("TTL", key), "TTL")

    async def pttl(self, key: str) -> int:
        return as_int(await self._send("PTTL", key), "PTTL")

    async def expiretime(self, key: str) -> int:
        return as_int(await self._send("EXPIRETIME", key), "EXPIRETIME")

    async def pexpiretime(self, key: str) -> int:
        return as_int(await self._send("PEXPIRETIME", key), "PEXPIRETIME")

    async def rename(self, source: str, destination: str) -> str:
        return as_str(await self._send("RENAME", source, destination), "RENAME")

    async def renamenx(self, source: str, destination: str) -> bool:
        return as_int(await self._send("RENAMENX", source, destination), "RENAMENX") == 1

    async def copy(self, source: str, destination: str, replace: bool = False) -> bool:
        args = [source, destination] + (["REPLACE"] if replace else [])
        return as_int(await self._send("COPY", *args), "COPY") == 1

    async def move(self, key: str, db: int) -> bool:
        return as_int(await self._send("MOVE", key, db), "MOVE") == 1

    async def object(self, subcommand: str, key: str) -> Value:
        """Raw OBJECT, e.g. object("ENCODING", "k")."""
        return await self._send("OBJECT", subcommand, key)

    async def sort(self, key: str, *args: Any) -> Value:
        """SORT with raw modifiers such as "ALPHA", "LIMIT", 0, 10 or "STORE", "dest".

        Returns the sorted elements, or the stored count when STORE is given.
        """
        return await self._send("SORT", key, *args)

    async def sort_ro(self, key: str, *args: Any) -> Value:
        return await self._send("SORT_RO", key, *args)

    async def restore(self, key: str, ttl: int, serialized: str, replace: bool = False) -> str:
        """Recreate a key from a dump() payload; ttl 0 means no expiry."""
        args: list[Any] = [key, ttl, serialized]
        if replace:
            args.append("REPLACE")
        return as_str(await self._send("RESTORE", *args), "RESTORE")

    async def migrate(
        self,
        host: str,
        port: int,
        key: str,
        destination_db: int,
        timeout: int,
        copy: bool = False,
        replace: bool = False,
        keys: list[str] | None = None,
    ) -> str:
        """Move keys to another instance. Pass key="" together with keys for several keys."""
        args: list[Any] = [host, port, key, destination_db, timeout]
        if copy:
            args.append("COPY")
        if replace:
            args.append("REPLACE")
        if keys:
            args += ["KEYS", *keys]
        return as_str(await self._send("MIGRATE", *args), "MIGRATE")

    async def wait(self, replicas: int, timeout: int) -> int:
        """Block until previous writes reach replicas; returns how many acknowledged."""
        return as_int(await self._send("WAIT", replicas, timeout), "WAIT")

    async def randomkey(self) -> Data | None:
        return as_optional_data(await self._send("RANDOMKEY"), "RANDOMKEY")

    async def dump(self, key: str) -> Data | None:
        return as_optional_data(await self._send("DUMP", key), "DUMP")

    async def scan(self, cursor: str | int = "0", options: ScanOptions | None = None) -> ScanResult:
        """Fetch one page of keys."""
        return await self._scan("SCAN", None, cursor, options)

    async def scan_iter(self, options: ScanOptions | None = None) -> AsyncIterator[Data]:
        """Iterate over all matching keys, following the cursor to the end.

        Usage:
            async for key in client.keys.scan_iter(ScanOptions(match="user:*")):
                ...
        """
        cursor = "0"
        while True:
            page = await self.scan(cursor, options)
            for key in page.items:
                yield key
            if page.done:
                return
            cursor = page.cursor
