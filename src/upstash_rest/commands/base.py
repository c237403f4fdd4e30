"""Shared plumbing for the grouped command APIs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..errors import TypeMismatchError
from ..types import ScanOptions, ScanResult
from ..values import Value, as_data_list, as_list

if TYPE_CHECKING:
    from ..client import UpstashClient


@dataclass
class CommandAPI:
    """Base for a group of commands bound to a client."""

    _client: UpstashClient

    async def _send(self, command: str, *args: Any) -> Value:
        return await self._client.send(command, *args)

    async def _read(self, *path: Any) -> Value:
        return await self._client.read(*path)

    async def _scan(
        self,
        command: str,
        key: str | None,
        cursor: str | int,
        options: ScanOptions | None,
    ) -> ScanResult:
        args: list[Any] = [] if key is None else [key]
        args.append(str(cursor))
        args += (options or ScanOptions()).to_args(include_type=command == "SCAN")

        reply = as_list(await self._send(command, *args), command)
        if len(reply) != 2:
            raise TypeMismatchError("[cursor, items] pair", reply, command)
        return ScanResult(cursor=str(reply[0]), items=as_data_list(reply[1], command))
