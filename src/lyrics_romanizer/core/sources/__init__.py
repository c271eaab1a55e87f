"""External song catalogs and ordered fallback across them."""

from .base import SongSource
from .genius import GeniusSource
from .lrclib import LRCLibSource
from .netease import NetEaseSource
from .registry import DEFAULT_PRIORITIES, FallbackResolver, SourceRegistry


def default_sources() -> SourceRegistry:
    return SourceRegistry([NetEaseSource(), LRCLibSource(), GeniusSource()])


__all__ = [
    "SongSource",
    "NetEaseSource",
    "LRCLibSource",
    "GeniusSource",
    "SourceRegistry",
    "FallbackResolver",
    "DEFAULT_PRIORITIES",
    "default_sources",
]
