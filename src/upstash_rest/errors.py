"""Exception hierarchy for the REST client.

Every failure raised by the transport or the command facade derives from
UpstashError and carries a human-readable message. Caller cancellation is
never wrapped: asyncio.CancelledError and TimeoutError propagate as-is.
"""

from __future__ import annotations

from typing import Any


class UpstashError(Exception):
    """Base class for all client errors."""

    pass


class MarshalError(UpstashError):
    """Request body could not be serialized to JSON."""

    pass


class RequestBuildError(UpstashError):
    """HTTP request could not be constructed (bad URL, bad header...)."""

    pass


class TransportError(UpstashError):
    """No HTTP response was obtained.

    Raised after the retry budget is exhausted for reads and writes, or
    immediately when opening a stream fails at the network level.
    """

    def __init__(self, message: str, attempts: int = 1) -> None:
        super().__init__(message)
        self.attempts = attempts


class ResponseStatusError(UpstashError):
    """The server answered with a non-2xx status code."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Any = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.path = path


class ResponseError(UpstashError):
    """A 2xx envelope carried an ``error`` field.

    The message is the server's error string, verbatim.
    """

    pass


class DecodeError(UpstashError):
    """Response body was not valid JSON."""

    pass


class TypeMismatchError(UpstashError):
    """A decoded result did not have the shape a command expects."""

    def __init__(self, expected: str, value: Any, context: str | None = None) -> None:
        prefix = f"{context}: " if context else ""
        super().__init__(f"{prefix}expected {expected}, got {type(value).__name__}")
        self.expected = expected
        self.value = value
