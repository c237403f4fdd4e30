"""Geospatial commands."""

from __future__ import annotations

from typing import Any, Literal

from ..types import GeoLocation
from ..values import as_float, as_int, as_list, as_optional_float, as_optional_str
from .base import CommandAPI

GeoUnit = Literal["m", "km", "mi", "ft"]


class GeoAPI(CommandAPI):
    async def geoadd(self, key: str, *locations: GeoLocation, nx: bool = False, xx: bool = False) -> int:
        if not locations:
            raise ValueError("geoadd requires at least one location")
        args: list[Any] = [key]
        if nx:
            args.append("NX")
        elif xx:
            args.append("XX")
        for loc in locations:
            args += [loc.longitude, loc.latitude, loc.member]
        return as_int(await self._send("GEOADD", *args), "GEOADD")

    async def geodist(self, key: str, member1: str, member2: str, unit: GeoUnit = "m") -> float | None:
        return as_optional_float(await self._send("GEODIST", key, member1, member2, unit), "GEODIST")

    async def geopos(self, key: str, *members: str) -> list[tuple[float, float] | None]:
        """Positions as (longitude, latitude); None for unknown members."""
        reply = as_list(await self._send("GEOPOS", key, *members), "GEOPOS")
        positions: list[tuple[float, float] | None] = []
        for item in reply:
            if item is None:
                positions.append(None)
                continue
            lon, lat = as_list(item, "GEOPOS")
            positions.append((as_float(lon, "GEOPOS"), as_float(lat, "GEOPOS")))
        return positions

    async def geohash(self, key: str, *members: str) -> list[str | None]:
        reply = as_list(await self._send("GEOHASH", key, *members), "GEOHASH")
        return [as_optional_str(item, "GEOHASH") for item in reply]
