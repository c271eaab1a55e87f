"""Japanese romanization (Hepburn) via pykakasi."""

import re
import threading
from typing import List

from pykakasi import kakasi

from ..detection import HAN_RE, KANA_RE
from ..models import RomanizationOptions
from .base import Piece, TransliterationEngine, align_chunks

JAPANESE_RE = re.compile(f"[{KANA_RE}{HAN_RE}]")

# Doubled vowels -> long vowel spelling; Hepburn writes ii out in full
LONG_VOWEL_STYLES = {
    "macron": {"aa": "ā", "uu": "ū", "ee": "ē", "oo": "ō", "ou": "ō"},
    "circumflex": {"aa": "â", "uu": "û", "ee": "ê", "oo": "ô", "ou": "ô"},
    "double": {},
}


def apply_long_vowels(text: str, style: str) -> str:
    replacements = LONG_VOWEL_STYLES.get(style) or {}
    if not replacements:
        return text
    pattern = re.compile("|".join(replacements))
    return pattern.sub(lambda m: replacements[m.group()], text)


class JapaneseEngine(TransliterationEngine):
    """Kana and kanji to Hepburn romaji."""

    script = "ja"
    name = "JapaneseEngine"
    systems = ("hepburn",)
    confidence = 0.90

    def __init__(self):
        self._converter = None
        self._lock = threading.Lock()

    def _convert(self, text: str) -> List[dict]:
        # pykakasi's converter is built lazily and is not documented as thread-safe
        with self._lock:
            if self._converter is None:
                self._converter = kakasi()
            return self._converter.convert(text)

    def transliterate(
        self, text: str, system: str, options: RomanizationOptions
    ) -> List[Piece]:
        items = self._convert(text)
        chunks = [
            (item["orig"], item["hepburn"], bool(JAPANESE_RE.search(item["orig"])))
            for item in items
        ]
        pieces = align_chunks(text, chunks)
        if pieces is None:
            return [Piece(0, len(text), " ".join(item["hepburn"] for item in items))]
        return pieces

    def apply_system_rules(
        self, unit: str, system: str, options: RomanizationOptions
    ) -> str:
        return apply_long_vowels(unit, options.long_vowels)
