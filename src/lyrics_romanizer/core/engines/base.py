"""Shared contract for per-script transliteration engines.

Every engine romanizes in the same fixed order:

1. variant normalization (when ``normalize_variants`` is set)
2. script-specific conversion to base Latin forms
3. system-specific post-rules on the converted units
4. separator join
5. case transform

Case runs last so digraphs and separators are never case-mangled, and
system rules see already segmented units.
"""

import re
import unicodedata
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

from ...exceptions import UnsupportedSystemError
from ..models import RomanizationOptions, RomanizationResult, Span

_WORD_RE = re.compile(r"\S+|\s+")
_TITLE_RE = re.compile(r"\b\w")


@dataclass
class Piece:
    """A slice ``[start, end)`` of the normalized text and its Latin form.

    ``converted`` is False for text outside the engine's script, which is
    passed through untouched by system rules.
    """

    start: int
    end: int
    text: str
    converted: bool = True


def apply_case(text: str, case: str) -> str:
    if case == "upper":
        return text.upper()
    if case == "title":
        return _TITLE_RE.sub(lambda m: m.group().upper(), text.lower())
    return text.lower()


def split_words(text: str) -> List[Tuple[int, int, str]]:
    """Split into alternating word and whitespace runs with their offsets."""
    return [(m.start(), m.end(), m.group()) for m in _WORD_RE.finditer(text)]


def split_runs(text: str, pattern: Pattern[str]) -> List[Tuple[int, int, str, bool]]:
    """Split into single script characters and runs of everything else."""
    runs: List[Tuple[int, int, str, bool]] = []
    run_start: Optional[int] = None
    for i, char in enumerate(text):
        if pattern.match(char):
            if run_start is not None:
                runs.append((run_start, i, text[run_start:i], False))
                run_start = None
            runs.append((i, i + 1, char, True))
        elif run_start is None:
            run_start = i
    if run_start is not None:
        runs.append((run_start, len(text), text[run_start:], False))
    return runs


def align_chunks(
    text: str, chunks: Sequence[Tuple[str, str, bool]]
) -> Optional[List[Piece]]:
    """Map ``(original, romanized, converted)`` chunks back onto ``text``.

    Returns None when the chunks do not reproduce the text exactly.
    """
    pieces: List[Piece] = []
    cursor = 0
    for original, romanized, converted in chunks:
        if not original or not text.startswith(original, cursor):
            return None
        pieces.append(Piece(cursor, cursor + len(original), romanized, converted))
        cursor += len(original)
    if cursor != len(text):
        return None
    return pieces


class TransliterationEngine(ABC):
    """Base class for one script's romanization engine.

    Subclasses set the class attributes and implement :meth:`transliterate`;
    :meth:`apply_system_rules` and :attr:`variants` are optional hooks.
    """

    script: str = ""
    name: str = "TransliterationEngine"
    systems: Tuple[str, ...] = ()
    # Fixed per-engine maturity hint, not a measured quality score
    confidence: float = 0.9
    system_confidence: Mapping[str, float] = {}
    # Single-character variant folding applied before conversion
    variants: Mapping[str, str] = {}

    def supports_system(self, system: str) -> bool:
        return system in self.systems

    def default_system(self) -> str:
        return self.systems[0]

    def confidence_for(self, system: str) -> float:
        return self.system_confidence.get(system, self.confidence)

    def romanize(
        self,
        text: str,
        system: Optional[str] = None,
        options: Optional[RomanizationOptions] = None,
    ) -> RomanizationResult:
        options = options or RomanizationOptions()
        system = system or self.default_system()
        if not self.supports_system(system):
            raise UnsupportedSystemError(system, self.script, self.systems)

        source = self.normalize_variants(text) if options.normalize_variants else text
        pieces = self.transliterate(source, system, options)
        for piece in pieces:
            if piece.converted:
                piece.text = self.apply_system_rules(piece.text, system, options)

        units = [piece.text.strip() for piece in pieces]
        romanized = options.separator.join(unit for unit in units if unit)
        romanized = apply_case(romanized, options.case)

        spans = [
            Span(
                start=piece.start,
                end=piece.end,
                script=self.script if piece.converted else None,
                romanized=apply_case(unit, options.case),
            )
            for piece, unit in zip(pieces, units)
        ]
        return RomanizationResult(
            romanized=romanized,
            system=system,
            confidence=self.confidence_for(system),
            spans=spans,
        )

    def normalize_variants(self, text: str) -> str:
        """Fold variant characters one-for-one so span offsets stay valid."""
        return "".join(self._normalize_char(char) for char in text)

    def _normalize_char(self, char: str) -> str:
        if char in self.variants:
            return self.variants[char]
        folded = unicodedata.normalize("NFKC", char)
        return folded if len(folded) == 1 else char

    @abstractmethod
    def transliterate(
        self, text: str, system: str, options: RomanizationOptions
    ) -> List[Piece]:
        """Convert ``text`` to base Latin pieces that cover it completely."""

    def apply_system_rules(
        self, unit: str, system: str, options: RomanizationOptions
    ) -> str:
        return unit

    def __repr__(self) -> str:
        return f"{self.name}(script={self.script!r}, systems={list(self.systems)!r})"


def translate_chars(text: str, table: Mapping[str, str]) -> str:
    return "".join(table.get(char, char) for char in text)


def with_uppercase(table: Dict[str, str]) -> Dict[str, str]:
    """Add capitalized entries for a lowercase transliteration table."""
    full = dict(table)
    for char, latin in table.items():
        upper = char.upper()
        if upper != char:
            full[upper] = latin[:1].upper() + latin[1:]
    return full


def words_as_pieces(
    text: str, convert: Callable[[str], str], pattern: Pattern[str]
) -> List[Piece]:
    """Word-level pieces for scripts written with spaces between words."""
    pieces: List[Piece] = []
    for start, end, chunk in split_words(text):
        if chunk.isspace():
            pieces.append(Piece(start, end, "", converted=False))
        elif pattern.search(chunk):
            pieces.append(Piece(start, end, convert(chunk)))
        else:
            pieces.append(Piece(start, end, chunk, converted=False))
    return pieces

