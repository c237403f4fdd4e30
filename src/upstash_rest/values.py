"""Decoded result values and narrowing helpers.

Results come back as plain JSON values. Command wrappers narrow them to
the concrete type they promise with the helpers below, which raise
TypeMismatchError instead of failing with an opaque TypeError later.
"""

from __future__ import annotations

from typing import Any

from .errors import TypeMismatchError

Value = str | int | float | bool | bytes | list[Any] | dict[str, Any] | None

# Stored payloads: text, or bytes when a base64 reply is not valid UTF-8
Data = str | bytes


def as_str(value: Value, context: str | None = None) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError("str", value, context)
    return value


def as_optional_str(value: Value, context: str | None = None) -> str | None:
    """Like as_str, but a missing value (nil reply) maps to None."""
    if value is None:
        return None
    return as_str(value, context)


def as_data(value: Value, context: str | None = None) -> Data:
    """Narrow a stored payload. Binary values are returned untouched."""
    if not isinstance(value, (str, bytes)):
        raise TypeMismatchError("str or bytes", value, context)
    return value


def as_optional_data(value: Value, context: str | None = None) -> Data | None:
    if value is None:
        return None
    return as_data(value, context)


def as_int(value: Value, context: str | None = None) -> int:
    """Narrow to int.

    Integral floats and numeric strings are accepted, since some commands
    reply with numbers encoded as strings.
    """
    if isinstance(value, bool):
        raise TypeMismatchError("int", value, context)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise TypeMismatchError("int", value, context)


def as_float(value: Value, context: str | None = None) -> float:
    if isinstance(value, bool):
        raise TypeMismatchError("float", value, context)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (str, bytes)):
        try:
            return float(value)
        except ValueError:
            pass
    raise TypeMismatchError("float", value, context)


def as_optional_float(value: Value, context: str | None = None) -> float | None:
    if value is None:
        return None
    return as_float(value, context)


def as_list(value: Value, context: str | None = None) -> list[Any]:
    if not isinstance(value, list):
        raise TypeMismatchError("list", value, context)
    return value


def as_str_list(value: Value, context: str | None = None) -> list[str]:
    """Narrow to a list of strings; a nil reply is an empty list."""
    if value is None:
        return []
    return [as_str(item, context) for item in as_list(value, context)]


def as_data_list(value: Value, context: str | None = None) -> list[Data]:
    """Narrow to a list of payloads; a nil reply is an empty list."""
    if value is None:
        return []
    result: list[Data] = []
    for item in as_list(value, context):
        # Numbers show up in mixed replies such as SCAN cursors
        if isinstance(item, (int, float)) and not isinstance(item, bool):
            result.append(str(item))
        else:
            result.append(as_data(item, context))
    return result


def as_int_list(value: Value, context: str | None = None) -> list[int]:
    return [as_int(item, context) for item in as_list(value, context)]


def pairs_to_dict(value: Value, context: str | None = None) -> dict[Data, Data]:
    """Turn a flat [k1, v1, k2, v2, ...] reply into a dict."""
    items = as_data_list(value, context)
    if len(items) % 2:
        raise TypeMismatchError("even-length list", value, context)
    return dict(zip(items[0::2], items[1::2], strict=True))
