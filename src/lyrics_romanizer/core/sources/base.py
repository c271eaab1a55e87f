"""Common interface for external song catalogs."""

from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

from ..models import LyricsDocument, Song


class SongSource(ABC):
    """One external catalog that can find a song and return its lyrics.

    ``search_song`` and ``get_lyrics`` return None when the catalog has no
    match; transport problems raise :class:`~lyrics_romanizer.exceptions.UpstreamError`.
    """

    name: str = ""
    supported_scripts: Tuple[str, ...] = ()

    def supports_script(self, script: str) -> bool:
        return script in self.supported_scripts

    @abstractmethod
    def search_song(self, artist: str, title: str) -> Optional[Song]:
        """Return the catalog's best match for ``artist`` / ``title``."""

    @abstractmethod
    def get_lyrics(self, song_id: Union[str, int]) -> Optional[LyricsDocument]:
        """Return lyrics for an id previously produced by :meth:`search_song`."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
