"""Test the text and music romanization pipelines."""

import threading
import time

import pytest

from lyrics_romanizer.core.engines import EngineRegistry, TransliterationEngine
from lyrics_romanizer.core.engines.base import Piece
from lyrics_romanizer.core.languages import SCRIPT_CODES
from lyrics_romanizer.core.models import LyricLine, Song
from lyrics_romanizer.core.pipeline import (
    MusicRomanizationPipeline,
    RomanizationPipeline,
    build_pipelines,
)
from lyrics_romanizer.core.response import ResponseAssembler
from lyrics_romanizer.core.sources import FallbackResolver, SourceRegistry
from lyrics_romanizer.exceptions import (
    InternalError,
    InvalidInputError,
    InvalidOptionError,
    LyricsNotFoundError,
    PlatformUnavailableError,
    SongNotFoundError,
    UnsupportedScriptError,
    UnsupportedSystemError,
)
from lyrics_romanizer.utils.cache import CacheStore, MemoryCacheStore


class RecordingEngine(TransliterationEngine):
    """Lowercases its input; sleeps on texts listed in ``slow``."""

    script = "en"
    name = "RecordingEngine"
    systems = ("passthrough",)

    def __init__(self, slow=(), fail_on=None):
        self.slow = set(slow)
        self.fail_on = fail_on
        self.calls = []
        self._lock = threading.Lock()

    def transliterate(self, text, system, options):
        with self._lock:
            self.calls.append(text)
        if text == self.fail_on:
            raise ValueError(f"cannot romanize {text}")
        if text in self.slow:
            time.sleep(0.2)
        return [Piece(0, len(text), text)]


class BrokenStore(CacheStore):
    name = "broken"

    def _get(self, key):
        raise ConnectionError("cache down")

    def _set(self, key, value, ttl):
        raise ConnectionError("cache down")


def _fixed_clock():
    return "2024-01-01T00:00:00Z"


def _text_pipeline(engine, cache=None):
    return RomanizationPipeline(
        engines=EngineRegistry({"en": engine}),
        cache=cache if cache is not None else MemoryCacheStore(),
        assembler=ResponseAssembler(clock=_fixed_clock),
    )


def _music_pipeline(text_pipeline, sources, lyrics_fallback=False):
    return MusicRomanizationPipeline(
        text_pipeline,
        sources=sources,
        resolver=FallbackResolver(sources, lyrics_fallback=lyrics_fallback),
        cache=text_pipeline.cache,
        max_workers=4,
    )


class TestRomanizationPipeline:
    def test_mandarin_payload(self, text_pipeline):
        result = text_pipeline.romanize("你好")
        assert result["original"] == "你好"
        assert result["romanized"] == "nǐ hǎo"
        assert result["language"] == "zh"
        assert result["romanization_system"] == "pinyin"
        assert result["metadata"]["detected_script"] == "zh"
        assert result["metadata"]["processor"] == "MandarinEngine"
        assert result["metadata"]["processing_time"] >= 0
        assert 0.0 <= result["confidence"] <= 1.0
        assert result["spans"][0]["range"] == [0, 1]
        assert result["spans"][-1]["range"][1] == 2

    def test_options_are_applied(self, text_pipeline):
        result = text_pipeline.romanize(
            "你好", "zh", "pinyin", {"tone_style": "numbers", "case": "upper"}
        )
        assert result["romanized"] == "NI3 HAO3"

    def test_cache_hit_returns_identical_payload(self):
        engine = RecordingEngine()
        pipeline = _text_pipeline(engine)

        first = pipeline.romanize("Hello World", "en")
        second = pipeline.romanize("  Hello World  ", "en")

        assert first == second
        assert engine.calls == ["Hello World"]

    def test_option_order_shares_cache_entry(self):
        engine = RecordingEngine()
        pipeline = _text_pipeline(engine)
        pipeline.romanize("abc", "en", options={"case": "upper", "separator": "-"})
        pipeline.romanize("abc", "en", options={"separator": "-", "case": "upper"})
        assert len(engine.calls) == 1

    def test_cache_outage_gives_same_content(self):
        healthy = _text_pipeline(RecordingEngine()).romanize("Hello", "en")
        degraded = _text_pipeline(RecordingEngine(), cache=BrokenStore()).romanize(
            "Hello", "en"
        )
        for payload in (healthy, degraded):
            payload["metadata"] = {
                k: v for k, v in payload["metadata"].items() if k != "processing_time"
            }
        assert healthy == degraded

    def test_invalid_option_never_reaches_engine(self):
        engine = RecordingEngine()
        pipeline = _text_pipeline(engine)
        with pytest.raises(InvalidOptionError) as exc_info:
            pipeline.romanize("Hello", "en", options={"case": "shouty", "speed": 2})
        assert len(exc_info.value.errors) == 2
        assert engine.calls == []

    @pytest.mark.parametrize("script", SCRIPT_CODES)
    def test_bogus_case_rejected_for_every_script(self, script):
        engine = RecordingEngine()
        pipeline = _text_pipeline(engine)
        pipeline.engines = EngineRegistry({code: engine for code in SCRIPT_CODES})
        with pytest.raises(InvalidOptionError):
            pipeline.romanize("text", script, options={"case": "bogus"})
        assert engine.calls == []

    @pytest.mark.parametrize("text", [None, "", "   ", 123])
    def test_invalid_text(self, text_pipeline, text):
        with pytest.raises(InvalidInputError):
            text_pipeline.romanize(text)

    def test_unknown_script(self, text_pipeline):
        with pytest.raises(UnsupportedScriptError):
            text_pipeline.romanize("hello", "xx")

    def test_system_from_another_script(self, text_pipeline):
        with pytest.raises(UnsupportedSystemError) as exc_info:
            text_pipeline.romanize("你好", "zh", "hepburn")
        assert exc_info.value.details["supported_systems"] == ["pinyin"]

    def test_engine_failure_is_internal_error_and_not_cached(self):
        engine = RecordingEngine(fail_on="boom")
        pipeline = _text_pipeline(engine)
        for _ in range(2):
            with pytest.raises(InternalError):
                pipeline.romanize("boom", "en")
        assert engine.calls == ["boom", "boom"]


class TestMusicRomanizationPipeline:
    def test_payload_shape(self, music_pipeline):
        result = music_pipeline.romanize("周杰伦", "晴天")

        song = result["song"]
        assert song["title"]["original"] == "晴天"
        assert song["artist"]["original"] == "周杰伦"
        assert song["id"] == 186016
        assert song["language"] == "zh"
        assert song["romanization_system"] == "pinyin"
        assert song["title"]["romanized"] == "qíng tiān"

        assert [line["original"] for line in result["lines"]] == [
            "故事的小黄花",
            "从出生那年就飘着",
        ]
        assert [line["timestamp"] for line in result["lines"]] == [12.5, 15.2]
        assert all(line["romanized"] for line in result["lines"])
        assert result["quality"]["synced"] is True
        assert result["metadata"]["source"] == "netease"

    def test_lines_keep_input_order(self, make_source):
        engine = RecordingEngine(slow={"B"})
        lines = [LyricLine("A", 1.0), LyricLine("B", 2.0), LyricLine("C", 3.0)]
        source = make_source(
            "lrclib", song=Song(1, "Title", "Artist", "lrclib"), lines=lines
        )
        sources = SourceRegistry([source])
        pipeline = _music_pipeline(_text_pipeline(engine), sources)

        result = pipeline.romanize("Artist", "Title", "en")

        assert [line["romanized"] for line in result["lines"]] == ["a", "b", "c"]
        assert result["song"]["title"]["romanized"] == "title"
        assert result["song"]["artist"]["romanized"] == "artist"

    def test_line_failure_fails_request(self, make_source):
        engine = RecordingEngine(fail_on="B")
        lines = [LyricLine("A"), LyricLine("B"), LyricLine("C")]
        source = make_source(
            "lrclib", song=Song(1, "Title", "Artist", "lrclib"), lines=lines
        )
        sources = SourceRegistry([source])
        pipeline = _music_pipeline(_text_pipeline(engine), sources)

        with pytest.raises(InternalError):
            pipeline.romanize("Artist", "Title", "en")

    def test_cached_response_skips_sources(self, music_pipeline, song_sources):
        first = music_pipeline.romanize("周杰伦", "晴天")
        second = music_pipeline.romanize(" 周杰伦 ", "晴天 ")
        assert first == second
        assert song_sources.get("netease").searches == [("周杰伦", "晴天")]

    def test_artist_and_title_are_separate_key_fields(self, make_source):
        source = make_source(
            "lrclib",
            song=Song(1, "C", "A-B", "lrclib"),
            lines=[LyricLine("first song", 1.0)],
        )
        sources = SourceRegistry([source])
        pipeline = _music_pipeline(_text_pipeline(RecordingEngine()), sources)

        first = pipeline.romanize("A-B", "C", "en")
        source.song = Song(2, "B-C", "A", "lrclib")
        source.lines = [LyricLine("second song", 1.0)]
        second = pipeline.romanize("A", "B-C", "en")

        assert first["song"]["id"] == 1
        assert second["song"]["id"] == 2
        assert second["lines"][0]["original"] == "second song"
        assert source.searches == [("A-B", "C"), ("A", "B-C")]

    def test_platform_is_part_of_cache_key(self, music_pipeline, song_sources):
        music_pipeline.romanize("周杰伦", "晴天")
        music_pipeline.romanize("周杰伦", "晴天", platform="netease")
        assert len(song_sources.get("netease").searches) == 2

    def test_song_not_found(self, music_pipeline):
        with pytest.raises(SongNotFoundError) as exc_info:
            music_pipeline.romanize("Unknown", "Nothing", "ru")
        assert exc_info.value.details["attempted_sources"] == ["lrclib", "genius"]

    def test_lyrics_not_found(self, make_source):
        source = make_source("lrclib", song=Song(1, "Title", "Artist", "lrclib"))
        sources = SourceRegistry([source])
        pipeline = _music_pipeline(_text_pipeline(RecordingEngine()), sources)
        with pytest.raises(LyricsNotFoundError):
            pipeline.romanize("Artist", "Title", "en")

    def test_validation_happens_before_lookup(self, music_pipeline, song_sources):
        with pytest.raises(InvalidInputError):
            music_pipeline.romanize("周杰伦", "   ")
        with pytest.raises(UnsupportedSystemError):
            music_pipeline.romanize("周杰伦", "晴天", system="hepburn")
        with pytest.raises(PlatformUnavailableError):
            music_pipeline.romanize("周杰伦", "晴天", platform="genius")
        assert song_sources.get("netease").searches == []


def test_build_pipelines_share_cache(memory_cache):
    text_pipeline, music_pipeline = build_pipelines(memory_cache)
    assert text_pipeline.cache is memory_cache
    assert music_pipeline.cache is memory_cache
    assert music_pipeline.text is text_pipeline
