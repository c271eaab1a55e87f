"""Script -> ranked song sources, and ordered fallback across them."""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ...exceptions import (
    LyricsNotFoundError,
    NoSourceForScriptError,
    PlatformUnavailableError,
    SongNotFoundError,
)
from ...utils.logging import get_logger
from ..models import LyricsDocument, Song
from .base import SongSource

logger = get_logger(__name__)

# Cheaper / better-matching sources first
DEFAULT_PRIORITIES: Dict[str, Tuple[str, ...]] = {
    "zh": ("netease", "lrclib"),
    "yue": ("netease", "lrclib"),
    "ja": ("lrclib",),
    "ko": ("lrclib",),
    "ru": ("lrclib", "genius"),
    "en": ("lrclib", "genius"),
}


class SourceRegistry:
    """Named sources plus the per-script priority table."""

    def __init__(
        self,
        sources: Sequence[SongSource] = (),
        priorities: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        self._sources: Dict[str, SongSource] = {}
        for source in sources:
            self.register(source)
        table = DEFAULT_PRIORITIES if priorities is None else priorities
        self._priorities: Dict[str, List[str]] = {
            script: list(names) for script, names in table.items()
        }

    def register(self, source: SongSource) -> None:
        self._sources[source.name] = source

    def get(self, name: str) -> Optional[SongSource]:
        return self._sources.get(name)

    def names(self) -> List[str]:
        return list(self._sources)

    def set_priority(self, script: str, names: Sequence[str]) -> None:
        self._priorities[script] = list(names)

    def scripts(self) -> List[str]:
        return [script for script in self._priorities if self.ranked(script)]

    def ranked(self, script: str) -> List[SongSource]:
        """Registered sources for ``script`` in priority order."""
        ranked = []
        for name in self._priorities.get(script, ()):
            source = self._sources.get(name)
            if source is not None and source.supports_script(script):
                ranked.append(source)
        return ranked

    def resolve(self, script: str, platform: Optional[str] = None) -> List[SongSource]:
        """Ordered sources to try for ``script``.

        An explicit ``platform`` narrows the list to that one source, which
        must exist and declare support for the script.
        """
        if platform:
            source = self._sources.get(platform)
            if source is None or not source.supports_script(script):
                supported = [
                    s.name for s in self._sources.values() if s.supports_script(script)
                ]
                raise PlatformUnavailableError(platform, script, supported)
            return [source]

        ranked = self.ranked(script)
        if not ranked:
            raise NoSourceForScriptError(script, self.scripts())
        return ranked


class FallbackResolver:
    """Tries ranked sources one at a time; the first match wins.

    With ``lyrics_fallback`` off (the default) the lyrics must come from the
    source that matched the song. With it on, a source whose lyrics are
    missing is skipped and the search continues down the list.
    """

    def __init__(self, registry: SourceRegistry, lyrics_fallback: bool = False):
        self.registry = registry
        self.lyrics_fallback = lyrics_fallback

    def _search(self, source: SongSource, artist: str, title: str) -> Optional[Song]:
        try:
            return source.search_song(artist, title)
        except Exception as e:
            logger.warning(f"{source.name} search failed: {e}")
            return None

    def _lyrics(self, source: SongSource, song: Song) -> Optional[LyricsDocument]:
        try:
            document = source.get_lyrics(song.id)
        except Exception as e:
            logger.warning(f"{source.name} lyrics lookup failed for {song.id}: {e}")
            return None
        if document is None or not len(document):
            return None
        return document

    def find_song(
        self, sources: Sequence[SongSource], artist: str, title: str
    ) -> Tuple[Song, SongSource]:
        """Return the first match and the source that produced it."""
        attempted: List[str] = []
        for source in sources:
            attempted.append(source.name)
            song = self._search(source, artist, title)
            if song is not None:
                logger.info(f"Found '{song.artist} - {song.title}' on {source.name}")
                return song, source
            logger.debug(f"No match on {source.name}")
        raise SongNotFoundError(artist, title, attempted)

    def resolve(
        self, sources: Sequence[SongSource], artist: str, title: str
    ) -> Tuple[Song, LyricsDocument]:
        """Find the song and fetch its lyrics from the same source."""
        if not self.lyrics_fallback:
            song, source = self.find_song(sources, artist, title)
            document = self._lyrics(source, song)
            if document is None:
                raise LyricsNotFoundError(source.name)
            return song, document

        attempted: List[str] = []
        matched: List[str] = []
        for source in sources:
            attempted.append(source.name)
            song = self._search(source, artist, title)
            if song is None:
                continue
            matched.append(source.name)
            document = self._lyrics(source, song)
            if document is not None:
                return song, document
            logger.info(f"No lyrics on {source.name}, trying next source")

        if matched:
            raise LyricsNotFoundError(matched[-1], attempted)
        raise SongNotFoundError(artist, title, attempted)
