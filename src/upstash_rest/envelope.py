"""Response envelope interpretation.

The REST API wraps every command result in an envelope:

    {"result": <value>}     logical success
    {"error": "<message>"}  logical failure
    [{...}, {...}]          pipeline / transaction batch, one envelope per command

With base64 encoding requested, the server encodes every string in the
result so binary values survive JSON; decode_base64 undoes that.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from .errors import ResponseError
from .values import Value

# Status token the server never encodes.
OK = "OK"


def decode_base64(value: Value) -> Value:
    """Return a copy of ``value`` with every base64 string leaf decoded.

    "OK" is passed through. Strings that are not valid base64 are kept
    unchanged, since mixed responses may contain plain status tokens.
    Decoded payloads become ``str`` when they are valid UTF-8 and ``bytes``
    otherwise. Never raises.
    """
    if isinstance(value, str):
        return _decode_string(value)
    if isinstance(value, list):
        return [decode_base64(item) for item in value]
    if isinstance(value, dict):
        return {key: decode_base64(item) for key, item in value.items()}
    return value


def _decode_string(value: str) -> str | bytes:
    if value == OK:
        return value
    try:
        raw = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return value
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw


def unwrap(payload: Value, enable_base64: bool = False) -> Value:
    """Extract the command result from a decoded 2xx response body.

    Raises:
        ResponseError: if the envelope carries a non-empty ``error`` string.
    """
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error:
            raise ResponseError(error)
        if "result" in payload:
            payload = payload["result"]
    # Arrays are batch responses; each element stays an envelope for the caller.
    if enable_base64:
        return decode_base64(payload)
    return payload


def is_error_envelope(item: Any) -> bool:
    """Check whether a batch element reports a per-command failure."""
    return isinstance(item, dict) and isinstance(item.get("error"), str) and bool(item["error"])
