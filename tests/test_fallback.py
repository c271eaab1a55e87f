"""Test source ranking and the ordered fallback across song sources."""

import pytest

from lyrics_romanizer.core.models import LyricLine, Song
from lyrics_romanizer.core.sources import (
    DEFAULT_PRIORITIES,
    FallbackResolver,
    SourceRegistry,
    default_sources,
)
from lyrics_romanizer.exceptions import (
    LyricsNotFoundError,
    NoSourceForScriptError,
    PlatformUnavailableError,
    SongNotFoundError,
    UpstreamError,
)


def _song(source, song_id=1):
    return Song(id=song_id, title="Title", artist="Artist", source=source)


LINES = [LyricLine("first line", 1.0), LyricLine("second line", 2.0)]


class TestSourceRegistry:
    def test_default_sources_cover_every_script(self):
        registry = default_sources()
        assert set(registry.names()) == {"netease", "lrclib", "genius"}
        for script, names in DEFAULT_PRIORITIES.items():
            assert [s.name for s in registry.ranked(script)] == list(names)

    def test_ranked_skips_sources_without_script_support(self, make_source):
        registry = SourceRegistry(
            [make_source("lrclib"), make_source("genius", scripts=("en",))]
        )
        assert [s.name for s in registry.ranked("ru")] == ["lrclib"]
        assert [s.name for s in registry.ranked("en")] == ["lrclib", "genius"]

    def test_resolve_with_platform(self, song_sources):
        assert [s.name for s in song_sources.resolve("zh", "lrclib")] == ["lrclib"]

    def test_unknown_platform(self, song_sources):
        with pytest.raises(PlatformUnavailableError) as exc_info:
            song_sources.resolve("zh", "spotify")
        assert exc_info.value.details["supported_platforms"] == ["lrclib", "netease"]

    def test_platform_without_script_support(self, song_sources):
        with pytest.raises(PlatformUnavailableError):
            song_sources.resolve("zh", "genius")

    def test_no_source_for_script(self, make_source):
        registry = SourceRegistry([make_source("netease", scripts=("zh",))])
        with pytest.raises(NoSourceForScriptError) as exc_info:
            registry.resolve("ko")
        assert exc_info.value.details["supported_scripts"] == ["zh"]

    def test_set_priority(self, song_sources):
        song_sources.set_priority("zh", ["lrclib", "netease"])
        assert [s.name for s in song_sources.ranked("zh")] == ["lrclib", "netease"]


class TestFallbackResolver:
    def test_first_match_short_circuits(self, make_source):
        first = make_source("netease", song=_song("netease"), lines=LINES)
        second = make_source("lrclib", song=_song("lrclib"), lines=LINES)
        resolver = FallbackResolver(SourceRegistry([first, second]))

        song, document = resolver.resolve([first, second], "Artist", "Title")

        assert song.source == "netease"
        assert document.source == "netease"
        assert second.searches == []

    def test_falls_through_to_next_source(self, make_source):
        first = make_source("netease")
        second = make_source("lrclib", song=_song("lrclib", 7), lines=LINES)
        resolver = FallbackResolver(SourceRegistry([first, second]))

        song, document = resolver.resolve([first, second], "Artist", "Title")

        assert song.source == "lrclib"
        assert second.lyric_requests == [7]
        assert first.lyric_requests == []

    def test_search_errors_are_treated_as_no_match(self, make_source):
        broken = make_source("netease", search_error=UpstreamError("timeout"))
        backup = make_source("lrclib", song=_song("lrclib"), lines=LINES)
        resolver = FallbackResolver(SourceRegistry([broken, backup]))

        song, _ = resolver.resolve([broken, backup], "Artist", "Title")
        assert song.source == "lrclib"

    def test_song_not_found_lists_every_attempt(self, make_source):
        sources = [
            make_source("netease"),
            make_source("lrclib", search_error=RuntimeError("boom")),
        ]
        resolver = FallbackResolver(SourceRegistry(sources))

        with pytest.raises(SongNotFoundError) as exc_info:
            resolver.resolve(sources, "Artist", "Title")

        assert exc_info.value.attempted == ["netease", "lrclib"]
        assert exc_info.value.details["attempted_sources"] == ["netease", "lrclib"]
        assert exc_info.value.status_code == 404

    def test_missing_lyrics_do_not_try_other_sources(self, make_source):
        first = make_source("netease", song=_song("netease"), lines=None)
        second = make_source("lrclib", song=_song("lrclib"), lines=LINES)
        resolver = FallbackResolver(SourceRegistry([first, second]))

        with pytest.raises(LyricsNotFoundError) as exc_info:
            resolver.resolve([first, second], "Artist", "Title")

        assert exc_info.value.source == "netease"
        assert second.searches == []

    def test_empty_lyrics_count_as_missing(self, make_source):
        source = make_source("netease", song=_song("netease"), lines=[])
        resolver = FallbackResolver(SourceRegistry([source]))
        with pytest.raises(LyricsNotFoundError):
            resolver.resolve([source], "Artist", "Title")

    def test_lyrics_fallback_continues(self, make_source):
        first = make_source("netease", song=_song("netease"), lines=None)
        second = make_source("lrclib", song=_song("lrclib"), lines=LINES)
        resolver = FallbackResolver(
            SourceRegistry([first, second]), lyrics_fallback=True
        )

        song, document = resolver.resolve([first, second], "Artist", "Title")

        assert song.source == "lrclib"
        assert len(document) == 2

    def test_lyrics_fallback_exhausted(self, make_source):
        first = make_source("netease", song=_song("netease"), lines=None)
        second = make_source("lrclib")
        resolver = FallbackResolver(
            SourceRegistry([first, second]), lyrics_fallback=True
        )

        with pytest.raises(LyricsNotFoundError) as exc_info:
            resolver.resolve([first, second], "Artist", "Title")

        assert exc_info.value.source == "netease"
        assert exc_info.value.details["attempted_sources"] == ["netease", "lrclib"]

    def test_lyrics_fallback_without_any_match(self, make_source):
        sources = [make_source("netease"), make_source("lrclib")]
        resolver = FallbackResolver(SourceRegistry(sources), lyrics_fallback=True)
        with pytest.raises(SongNotFoundError):
            resolver.resolve(sources, "Artist", "Title")

    def test_find_song_returns_source(self, song_sources, chinese_song):
        resolver = FallbackResolver(song_sources)
        song, source = resolver.find_song(song_sources.ranked("zh"), "周杰伦", "晴天")
        assert song == chinese_song
        assert source.name == "netease"
