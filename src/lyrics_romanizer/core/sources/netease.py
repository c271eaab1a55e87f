"""NetEase Cloud Music (via a public API mirror)."""

from typing import Optional, Union

from ... import config
from ...utils.logging import get_logger
from ..lrc import parse_lrc
from ..models import LyricsDocument, Song
from .base import SongSource
from .http import fetch_json

logger = get_logger(__name__)


class NetEaseSource(SongSource):
    name = "netease"
    supported_scripts = ("zh", "yue", "en")

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or config.NETEASE_API_URL).rstrip("/")

    def search_song(self, artist: str, title: str) -> Optional[Song]:
        data = fetch_json(
            f"{self.base_url}/search", params={"keywords": f"{artist} {title}"}
        )
        if not data or data.get("code") != 200:
            return None

        songs = (data.get("result") or {}).get("songs") or []
        if not songs:
            return None

        song = songs[0]
        artists = song.get("artists") or []
        duration = song.get("duration")
        logger.debug(f"NetEase match: {song.get('name')} (id {song.get('id')})")
        return Song(
            id=song["id"],
            title=song.get("name") or title,
            artist=(artists[0].get("name") if artists else None) or artist,
            source=self.name,
            album=(song.get("album") or {}).get("name"),
            # milliseconds
            duration=duration // 1000 if duration else None,
        )

    def get_lyrics(self, song_id: Union[str, int]) -> Optional[LyricsDocument]:
        data = fetch_json(f"{self.base_url}/lyric", params={"id": song_id})
        if not data or data.get("code") != 200:
            return None

        raw = (data.get("lrc") or {}).get("lyric")
        if not raw:
            return None

        lines = parse_lrc(raw)
        if not lines:
            return None
        return LyricsDocument(lines=lines, source=self.name, song_id=song_id)
