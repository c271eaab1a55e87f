"""Test configuration and fixtures.

Provides reusable fixtures for:
- Temporary directories
- In-memory cache stores
- Fake song sources with canned songs and lyrics
- Pipelines wired to the fakes
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from lyrics_romanizer.core.models import LyricLine, LyricsDocument, Song
from lyrics_romanizer.core.pipeline import (
    MusicRomanizationPipeline,
    RomanizationPipeline,
)
from lyrics_romanizer.core.sources import FallbackResolver, SongSource, SourceRegistry
from lyrics_romanizer.utils.cache import MemoryCacheStore


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    run_network = config.getoption("--run-network") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_network:
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords or "integration" in item.keywords:
            item.add_marker(skip_network)


# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def memory_cache():
    return MemoryCacheStore()


# =============================================================================
# Fake song sources
# =============================================================================


class FakeSource(SongSource):
    """Song source serving canned data and recording every call."""

    def __init__(
        self,
        name: str,
        scripts: Tuple[str, ...] = ("zh", "yue", "ja", "ko", "ru", "en"),
        song: Optional[Song] = None,
        lines: Optional[List[LyricLine]] = None,
        search_error: Optional[Exception] = None,
    ):
        self.name = name
        self.supported_scripts = scripts
        self.song = song
        self.lines = lines
        self.search_error = search_error
        self.searches: List[Tuple[str, str]] = []
        self.lyric_requests: List[object] = []

    def search_song(self, artist, title):
        self.searches.append((artist, title))
        if self.search_error is not None:
            raise self.search_error
        return self.song

    def get_lyrics(self, song_id):
        self.lyric_requests.append(song_id)
        if self.lines is None:
            return None
        return LyricsDocument(lines=list(self.lines), source=self.name, song_id=song_id)


@pytest.fixture
def make_source():
    """Factory for :class:`FakeSource` instances."""

    def _make(name, song=None, lines=None, **kwargs):
        return FakeSource(name, song=song, lines=lines, **kwargs)

    return _make


@pytest.fixture
def chinese_song():
    return Song(id=186016, title="晴天", artist="周杰伦", source="netease")


@pytest.fixture
def chinese_lines():
    return [
        LyricLine("故事的小黄花", 12.5),
        LyricLine("   ", 14.0),
        LyricLine("从出生那年就飘着", 15.2),
    ]


@pytest.fixture
def song_sources(make_source, chinese_song, chinese_lines):
    """Registry whose NetEase stand-in knows one Mandarin song."""
    netease = make_source("netease", song=chinese_song, lines=chinese_lines)
    lrclib = make_source("lrclib")
    genius = make_source("genius", scripts=("ru", "en"))
    return SourceRegistry([netease, lrclib, genius])


@pytest.fixture
def text_pipeline(memory_cache):
    return RomanizationPipeline(cache=memory_cache)


@pytest.fixture
def music_pipeline(text_pipeline, song_sources, memory_cache):
    return MusicRomanizationPipeline(
        text_pipeline,
        sources=song_sources,
        resolver=FallbackResolver(song_sources),
        cache=memory_cache,
        max_workers=4,
    )


@pytest.fixture
def lrc_text() -> str:
    return "\n".join(
        [
            "[ar:周杰伦]",
            "[ti:晴天]",
            "[00:00.00] 作词 : 周杰伦",
            "[00:01.00] 作曲 : 周杰伦",
            "[00:12.50]故事的小黄花",
            "[00:15.20]从出生那年就飘着",
            "[01:02.345][02:10.00]刮风这天",
            "[03:00.00]",
        ]
    )


@pytest.fixture
def genius_html() -> str:
    return (
        '<html><body>'
        '<div data-lyrics-container="true">'
        '<div class="LyricsHeader__Container-sc-1">3 Contributors</div>'
        'Some song description<br/>'
        '[Verse 1]<br/>Я помню чудное мгновенье<br/>Передо мной явилась ты<br/>'
        '[Chorus]<br/>Как мимолётное виденье'
        '</div>'
        '</body></html>'
    )


@pytest.fixture
def netease_responses() -> Dict[str, dict]:
    return {
        "search": {
            "code": 200,
            "result": {
                "songs": [
                    {
                        "id": 186016,
                        "name": "晴天",
                        "artists": [{"name": "周杰伦"}],
                        "album": {"name": "叶惠美"},
                        "duration": 269000,
                    }
                ]
            },
        },
        "lyric": {
            "code": 200,
            "lrc": {
                "lyric": "[00:00.00] 作词 : 周杰伦\n[00:12.50]故事的小黄花\n"
                "[00:15.20]从出生那年就飘着\n[04:20.00]Mixed by 某人\n"
            },
        },
    }
