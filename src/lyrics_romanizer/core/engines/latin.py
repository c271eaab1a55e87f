"""Passthrough engine for text already written in Latin script."""

import re
from typing import List

from ..detection import LATIN_RE
from ..models import RomanizationOptions
from .base import Piece, TransliterationEngine, words_as_pieces

LATIN_CHAR_RE = re.compile(f"[{LATIN_RE}]")


class LatinEngine(TransliterationEngine):
    """No romanization needed; only separator and case options apply."""

    script = "en"
    name = "LatinEngine"
    systems = ("none",)
    confidence = 1.0

    def transliterate(
        self, text: str, system: str, options: RomanizationOptions
    ) -> List[Piece]:
        return words_as_pieces(text, lambda word: word, LATIN_CHAR_RE)
