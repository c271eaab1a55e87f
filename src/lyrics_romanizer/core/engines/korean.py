"""Korean romanization (Revised Romanization) via korean_romanizer."""

import re
from typing import List

from korean_romanizer.romanizer import Romanizer

from ..detection import HANGUL_RE
from ..models import RomanizationOptions
from .base import Piece, TransliterationEngine, words_as_pieces

HANGUL_CHAR_RE = re.compile(f"[{HANGUL_RE}]")


def romanize_korean(word: str) -> str:
    return Romanizer(word).romanize()


class KoreanEngine(TransliterationEngine):
    """Revised Romanization, converted word by word so spacing survives."""

    script = "ko"
    name = "KoreanEngine"
    systems = ("revised",)
    confidence = 0.90

    def transliterate(
        self, text: str, system: str, options: RomanizationOptions
    ) -> List[Piece]:
        return words_as_pieces(text, romanize_korean, HANGUL_CHAR_RE)
