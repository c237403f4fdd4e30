"""Grouped command APIs exposed as UpstashClient properties."""

from .base import CommandAPI
from .bitmaps import BitmapAPI
from .geo import GeoAPI
from .hashes import HashAPI
from .hyperloglog import HyperLogLogAPI
from .keys import KeyAPI
from .lists import ListAPI
from .rejson import JsonAPI
from .scripting import ScriptAPI
from .server import ServerAPI
from .sets import SetAPI
from .sorted_sets import SortedSetAPI
from .streams import StreamAPI
from .strings import StringAPI

__all__ = [
    "CommandAPI",
    # Data types
    "StringAPI",
    "KeyAPI",
    "HashAPI",
    "ListAPI",
    "SetAPI",
    "SortedSetAPI",
    "HyperLogLogAPI",
    "BitmapAPI",
    "StreamAPI",
    "JsonAPI",
    "GeoAPI",
    # Server-side
    "ScriptAPI",
    "ServerAPI",
]
