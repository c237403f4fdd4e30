"""Transport abstraction base classes.

Defines the request shape, the transport configuration and the protocol
that the command facade talks to. RestTransport is the only production
implementation; tests may substitute anything satisfying Transport.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

import httpx

from ..backoff import DEFAULT_MAX_ATTEMPTS, BackoffFn, default_backoff
from ..values import Value

LatencyLogger = Callable[[str, float], None]


@dataclass(frozen=True)
class Request:
    """A single outbound call.

    Attributes:
        path: URL path segments, joined with "/" after the base URL.
        body: JSON-serializable body (writes only).
    """

    path: tuple[str, ...] = ()
    body: Any = None

    @classmethod
    def command(cls, command: str, *args: Any) -> Request:
        """Build a POST-body request of the form [command, arg1, ...]."""
        return cls(body=[command, *args])

    @classmethod
    def segments(cls, *path: Any) -> Request:
        """Build a path-only request; segments are stringified."""
        return cls(path=tuple(str(p) for p in path))

    @property
    def command_name(self) -> str:
        """Best-effort name of the command, used for logging and latency."""
        if isinstance(self.body, list) and self.body and isinstance(self.body[0], str):
            return self.body[0]
        if self.path:
            return self.path[0]
        return ""


@dataclass(frozen=True)
class TransportConfig:
    """Immutable transport configuration."""

    # Endpoints
    url: str = ""
    edge_url: str | None = None
    token: str = ""

    # Ask the server to base64-encode strings and decode them client-side
    enable_base64: bool = False

    # Retry settings, applied to network failures on read/write only
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff: BackoffFn = default_backoff

    timeout: float = 30.0
    disable_telemetry: bool = False
    latency_logger: LatencyLogger | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    @property
    def read_url(self) -> str:
        """Base URL for reads: the edge endpoint when one is configured."""
        return self.edge_url or self.url


@runtime_checkable
class Transport(Protocol):
    """Protocol for issuing commands against the REST API."""

    async def read(self, request: Request) -> Value:
        """GET a path; may be served by the edge endpoint."""
        ...

    async def write(self, request: Request) -> Value:
        """POST a body to the main endpoint."""
        ...

    async def stream(self, request: Request) -> httpx.Response:
        """Open a text/event-stream response on the main endpoint."""
        ...

    async def aclose(self) -> None:
        """Release the underlying HTTP resources."""
        ...


def join_url(base_url: str, path: Sequence[str]) -> str:
    """Build ``{base}/{seg1}/{seg2}...`` with each segment percent-encoded."""
    segments = "/".join(quote(segment, safe="") for segment in path)
    return f"{base_url.rstrip('/')}/{segments}"
