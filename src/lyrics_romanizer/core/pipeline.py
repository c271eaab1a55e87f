"""Romanization pipelines.

``RomanizationPipeline`` romanizes arbitrary text; ``MusicRomanizationPipeline``
resolves a song through the ranked sources and romanizes its title, artist
and every lyric line. Both validate input before any I/O and memoize full
response payloads in the injected cache store.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .. import config
from ..exceptions import InternalError, RomanizerError
from ..utils.cache import (
    MUSIC_NAMESPACE,
    ROMANIZE_NAMESPACE,
    CacheStore,
    NullCacheStore,
    create_cache_store,
    make_cache_key,
)
from ..utils.logging import get_logger
from ..utils.validation import validate_options, validate_script_code, validate_text
from .detection import ScriptDetector
from .engines import EngineRegistry, TransliterationEngine, default_registry
from .models import RomanizationOptions, RomanizationResult
from .response import ResponseAssembler
from .sources import FallbackResolver, SourceRegistry, default_sources

logger = get_logger(__name__)


class RomanizationPipeline:
    """Text romanization: detect, pick engine, cache, assemble."""

    def __init__(
        self,
        engines: Optional[EngineRegistry] = None,
        cache: Optional[CacheStore] = None,
        detector: Optional[ScriptDetector] = None,
        assembler: Optional[ResponseAssembler] = None,
    ):
        self.engines = engines or default_registry()
        self.cache = cache if cache is not None else NullCacheStore()
        self.detector = detector or ScriptDetector()
        self.assembler = assembler or ResponseAssembler()

    def resolve_script(self, text: str, script: Optional[str] = None) -> str:
        if script:
            return validate_script_code(script)
        return self.detector.detect(text)

    def resolve_engine(
        self, script: str, system: Optional[str] = None
    ) -> Tuple[TransliterationEngine, str]:
        return self.engines.resolve(script, system)

    def transliterate(
        self,
        text: str,
        script: str,
        system: str,
        options: RomanizationOptions,
    ) -> RomanizationResult:
        """Run the engine only; no cache and no envelope."""
        engine = self.engines.get(script)
        try:
            return engine.romanize(text, system, options)
        except RomanizerError:
            raise
        except Exception as e:
            raise InternalError(f"{engine.name} failed: {e}", processor=engine.name)

    def romanize(
        self,
        text: Any,
        script: Optional[str] = None,
        system: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        text = validate_text(text, "text")
        parsed = validate_options(options)
        script = self.resolve_script(text, script)
        engine, system = self.resolve_engine(script, system)

        key = make_cache_key(
            ROMANIZE_NAMESPACE, text, script, system, parsed.to_dict()
        )
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        start = time.perf_counter()
        result = self.transliterate(text, script, system, parsed)
        processing_time = round((time.perf_counter() - start) * 1000, 3)

        response = self.assembler.romanization(
            original=text,
            script=script,
            result=result,
            processor=engine.name,
            processing_time=processing_time,
            detected_script=script,
        )
        self.cache.set(key, response)
        return response


class MusicRomanizationPipeline:
    """Song lookup plus per-line romanization.

    Lines are romanized concurrently but reassembled by their original index.
    """

    def __init__(
        self,
        text_pipeline: Optional[RomanizationPipeline] = None,
        sources: Optional[SourceRegistry] = None,
        resolver: Optional[FallbackResolver] = None,
        cache: Optional[CacheStore] = None,
        max_workers: Optional[int] = None,
    ):
        self.text = text_pipeline or RomanizationPipeline(cache=cache)
        self.sources = sources or default_sources()
        self.resolver = resolver or FallbackResolver(
            self.sources, lyrics_fallback=config.LYRICS_FALLBACK
        )
        self.cache = cache if cache is not None else self.text.cache
        self.max_workers = max_workers or config.MAX_WORKERS

    @property
    def assembler(self) -> ResponseAssembler:
        return self.text.assembler

    def romanize(
        self,
        artist: Any,
        title: Any,
        script: Optional[str] = None,
        system: Optional[str] = None,
        platform: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        artist = validate_text(artist, "artist")
        title = validate_text(title, "title")
        parsed = validate_options(options)
        script = self.text.resolve_script(f"{artist} {title}", script)

        sources = self.sources.resolve(script, platform)
        _, system = self.text.resolve_engine(script, system)

        key = make_cache_key(
            MUSIC_NAMESPACE,
            title,
            script,
            system,
            parsed.to_dict(),
            artist=artist.strip(),
            platform=platform or None,
        )
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        song, document = self.resolver.resolve(sources, artist, title)
        logger.info(
            f"Romanizing {len(document)} lines of '{song.title}' from {song.source}"
        )

        lines = [line for line in document.lines if line.text and line.text.strip()]
        texts = [song.title, song.artist] + [line.text for line in lines]
        romanized = self.romanize_all(texts, script, system, parsed)

        response = self.assembler.music(
            song=song,
            script=script,
            system=system,
            title_romanized=romanized[0],
            artist_romanized=romanized[1],
            lines=[
                {
                    "original": line.text,
                    "romanized": value,
                    "timestamp": line.timestamp,
                }
                for line, value in zip(lines, romanized[2:])
            ],
            document=document,
        )
        self.cache.set(key, response)
        return response

    def romanize_all(
        self,
        texts: List[str],
        script: str,
        system: str,
        options: RomanizationOptions,
    ) -> List[str]:
        """Romanize ``texts`` concurrently, returning results in input order.

        Blank entries (an empty title, say) come back as empty strings. The
        first failure cancels the work that has not started yet.
        """
        results: List[str] = [""] * len(texts)
        pending = [(i, text) for i, text in enumerate(texts) if text and text.strip()]
        if not pending:
            return results

        workers = min(self.max_workers, len(pending))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                index: pool.submit(
                    self.text.transliterate, text, script, system, options
                )
                for index, text in pending
            }
            try:
                for index, future in futures.items():
                    results[index] = future.result().romanized
            except Exception:
                for future in futures.values():
                    future.cancel()
                raise
        return results


def build_pipelines(
    cache: Optional[CacheStore] = None,
) -> Tuple[RomanizationPipeline, MusicRomanizationPipeline]:
    """Default text and music pipelines sharing one cache store."""
    if cache is None:
        cache = create_cache_store()
    text_pipeline = RomanizationPipeline(cache=cache)
    return text_pipeline, MusicRomanizationPipeline(text_pipeline, cache=cache)
