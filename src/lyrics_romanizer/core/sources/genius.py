"""Genius: search API plus lyrics scraped from the song page."""

import re
from typing import Any, Dict, List, Optional, Union

from bs4 import BeautifulSoup

from ... import config
from ...utils.logging import get_logger
from ..lrc import is_metadata_line
from ..models import LyricLine, LyricsDocument, Song
from .base import SongSource
from .http import fetch_html, fetch_json

logger = get_logger(__name__)

_SECTION_RE = re.compile(r"^\[([^\]]+)\]$")

# Page furniture that ends up inside the lyrics containers
_STRUCTURAL_CLASSES = ("LyricsHeader", "SongBioPreview", "ContributorsCredit")

_DESCRIPTION_PATTERNS = (
    "is a song by",
    "was released as",
    "Read More",
    "studio album",
    "music video featuring",
)


def _is_genius_metadata(line: str) -> bool:
    """Check if a line is Genius page metadata rather than lyrics."""
    if re.match(r"^\d+\s*Contributor", line):
        return True
    if line.endswith("Lyrics") and "Translations" in line:
        return True
    if any(pattern in line for pattern in _DESCRIPTION_PATTERNS):
        return True
    # Concatenated page text
    return len(line) > 300


def _has_structural_class(classes: Any) -> bool:
    if not classes:
        return False
    joined = classes if isinstance(classes, str) else " ".join(classes)
    return any(name in joined for name in _STRUCTURAL_CLASSES)


def parse_lyrics_page(html: str) -> List[LyricLine]:
    """Extract lyric lines from a Genius song page.

    Section headers like ``[Chorus]`` are dropped; when the page has any,
    text before the first header is treated as page furniture.
    """
    soup = BeautifulSoup(html, "html.parser")
    containers = soup.find_all("div", {"data-lyrics-container": "true"})

    before_first_section: List[str] = []
    lines: List[str] = []
    seen_section = False

    for container in containers:
        furniture = container.find_all(
            ["div", "span", "a"], class_=_has_structural_class
        )
        for elem in furniture:
            elem.decompose()
        for br in container.find_all("br"):
            br.replace_with("\n")

        for line in container.get_text().split("\n"):
            line = line.strip()
            if not line:
                continue
            if _SECTION_RE.match(line):
                seen_section = True
                continue
            if _is_genius_metadata(line) or is_metadata_line(line):
                continue
            (lines if seen_section else before_first_section).append(line)

    if not seen_section:
        lines = before_first_section
    return [LyricLine(text=line) for line in lines]


def _first_song_hit(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    sections = (data.get("response") or {}).get("sections") or []
    for section in sections:
        if section.get("type") != "song":
            continue
        for hit in section.get("hits") or []:
            result = hit.get("result") or {}
            url = result.get("url") or ""
            if result.get("id") and url.endswith("-lyrics") and "/artists/" not in url:
                return result
    return None


class GeniusSource(SongSource):
    name = "genius"
    supported_scripts = ("ru", "en")

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or config.GENIUS_BASE_URL).rstrip("/")

    def search_song(self, artist: str, title: str) -> Optional[Song]:
        data = fetch_json(
            f"{self.base_url}/api/search/song",
            params={"per_page": 5, "q": f"{artist} {title}"},
        )
        if not data:
            return None

        result = _first_song_hit(data)
        if result is None:
            return None

        primary = result.get("primary_artist") or {}
        return Song(
            id=result["id"],
            title=result.get("title") or title,
            artist=primary.get("name") or result.get("artist_names") or artist,
            source=self.name,
        )

    def get_lyrics(self, song_id: Union[str, int]) -> Optional[LyricsDocument]:
        html = fetch_html(f"{self.base_url}/songs/{song_id}")
        if not html:
            return None

        lines = parse_lyrics_page(html)
        if not lines:
            logger.debug(f"No lyrics containers on Genius page for song {song_id}")
            return None
        return LyricsDocument(lines=lines, source=self.name, song_id=song_id)
