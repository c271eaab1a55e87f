"""LRCLIB, an open database of synchronized lyrics."""

from typing import Any, Dict, List, Optional, Union

from ... import config
from ...utils.logging import get_logger
from ..lrc import parse_lrc, parse_plain
from ..models import LyricsDocument, Song
from .base import SongSource
from .http import fetch_json

logger = get_logger(__name__)


def _track_name(record: Dict[str, Any]) -> str:
    return record.get("trackName") or record.get("name") or ""


def find_best_match(
    records: List[Dict[str, Any]], artist: str, title: str
) -> Optional[Dict[str, Any]]:
    """Pick a search result.

    Exact containment of "artist title" wins, then a record whose artist and
    title both contain the query parts, then the first result.
    """
    if not records:
        return None

    query = f"{artist} {title}".lower()
    for record in records:
        candidate = f"{record.get('artistName', '')} {_track_name(record)}".lower()
        if query in candidate or candidate in query:
            return record

    for record in records:
        artist_match = artist.lower() in (record.get("artistName") or "").lower()
        title_match = title.lower() in _track_name(record).lower()
        if artist_match and title_match:
            return record

    return records[0]


def lyrics_from_record(record: Dict[str, Any], source: str) -> Optional[LyricsDocument]:
    """Build a document from a record's synced lyrics, else its plain lyrics."""
    if record.get("syncedLyrics"):
        lines = parse_lrc(record["syncedLyrics"])
    elif record.get("plainLyrics"):
        lines = parse_plain(record["plainLyrics"])
    else:
        return None
    if not lines:
        return None
    return LyricsDocument(lines=lines, source=source, song_id=record.get("id"))


class LRCLibSource(SongSource):
    name = "lrclib"
    supported_scripts = ("zh", "yue", "ja", "ko", "ru", "en")

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or config.LRCLIB_API_URL).rstrip("/")

    def search_song(self, artist: str, title: str) -> Optional[Song]:
        records = fetch_json(
            f"{self.base_url}/search", params={"q": f"{artist} {title}"}
        )
        if not records or not isinstance(records, list):
            return None

        logger.debug(f"LRCLIB returned {len(records)} results")
        best = find_best_match(records, artist, title)
        if best is None:
            return None

        return Song(
            id=best["id"],
            title=_track_name(best) or title,
            artist=best.get("artistName") or artist,
            source=self.name,
            album=best.get("albumName"),
            duration=best.get("duration"),
        )

    def get_lyrics(self, song_id: Union[str, int]) -> Optional[LyricsDocument]:
        record = fetch_json(f"{self.base_url}/get/{song_id}")
        if not record:
            return None
        document = lyrics_from_record(record, self.name)
        if document is not None:
            document.song_id = song_id
        return document
