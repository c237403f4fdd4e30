"""Option and result models used by the command APIs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator


class KV(BaseModel):
    """A key/value pair for MSET-style commands."""

    key: str
    value: str


class SetOptions(BaseModel):
    """Options for SET. Only one of ex/px and one of nx/xx may be given."""

    ex: int | None = None  # expire after N seconds
    px: int | None = None  # expire after N milliseconds
    nx: bool = False  # only set if the key does not exist
    xx: bool = False  # only set if the key already exists
    get: bool = False  # return the previous value

    @model_validator(mode="after")
    def _check_exclusive(self) -> SetOptions:
        if self.ex is not None and self.px is not None:
            raise ValueError("ex and px are mutually exclusive")
        if self.nx and self.xx:
            raise ValueError("nx and xx are mutually exclusive")
        return self

    def to_args(self) -> list[Any]:
        args: list[Any] = []
        if self.ex is not None:
            args += ["EX", self.ex]
        elif self.px is not None:
            args += ["PX", self.px]
        if self.nx:
            args.append("NX")
        elif self.xx:
            args.append("XX")
        if self.get:
            args.append("GET")
        return args


class GetExOptions(BaseModel):
    """Options for GETEX. The first option set wins, in field order."""

    ex: int | None = None
    px: int | None = None
    exat: int | None = None
    pxat: int | None = None
    persist: bool = False

    def to_args(self) -> list[Any]:
        for name in ("ex", "px", "exat", "pxat"):
            value = getattr(self, name)
            if value is not None:
                return [name.upper(), value]
        if self.persist:
            return ["PERSIST"]
        return []


class ScanOptions(BaseModel):
    """Options shared by SCAN, HSCAN, SSCAN and ZSCAN."""

    match: str | None = None
    count: int | None = None
    type: str | None = None  # SCAN only

    def to_args(self, include_type: bool = False) -> list[Any]:
        args: list[Any] = []
        if self.match:
            args += ["MATCH", self.match]
        if self.count:
            args += ["COUNT", self.count]
        if include_type and self.type:
            args += ["TYPE", self.type]
        return args


class ScanResult(BaseModel):
    """One page of a cursor-based scan. A cursor of "0" means done."""

    cursor: str
    items: list[str | bytes] = Field(default_factory=list)

    @property
    def done(self) -> bool:
        return self.cursor == "0"


class StreamMessage(BaseModel):
    """An entry of a Redis stream."""

    id: str
    values: dict[str | bytes, str | bytes] = Field(default_factory=dict)


class GeoLocation(BaseModel):
    """A named point for GEOADD."""

    longitude: float
    latitude: float
    member: str
