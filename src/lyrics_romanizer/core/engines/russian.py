"""Russian romanization (ISO 9 and BGN/PCGN)."""

import re
from typing import Dict, List

from ..detection import CYRILLIC_RE
from ..models import RomanizationOptions
from .base import (
    Piece,
    TransliterationEngine,
    translate_chars,
    with_uppercase,
    words_as_pieces,
)

CYRILLIC_CHAR_RE = re.compile(f"[{CYRILLIC_RE}]")

# Letters both systems spell the same way
BASE_LATIN = with_uppercase({
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e",
    "з": "z", "и": "i", "к": "k", "л": "l", "м": "m", "н": "n",
    "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "ы": "y",
})

# Letters whose spelling depends on the system, applied after BASE_LATIN
SYSTEM_LETTERS: Dict[str, Dict[str, str]] = {
    "iso-9": with_uppercase({
        "ё": "ë", "ж": "ž", "й": "j", "х": "h", "ц": "c", "ч": "č",
        "ш": "š", "щ": "ŝ", "ъ": "ʺ", "ь": "ʹ", "э": "è", "ю": "û",
        "я": "â",
    }),
    "bgn-pcgn": with_uppercase({
        "ё": "yo", "ж": "zh", "й": "y", "х": "kh", "ц": "ts", "ч": "ch",
        "ш": "sh", "щ": "shch", "ъ": "", "ь": "'", "э": "e", "ю": "yu",
        "я": "ya",
    }),
}

# Pre-reform orthography folded to modern letters
PRE_REFORM = with_uppercase({"і": "и", "ѣ": "е", "ѳ": "ф", "ѵ": "и"})


class RussianEngine(TransliterationEngine):
    """Table-driven Cyrillic transliteration."""

    script = "ru"
    name = "RussianEngine"
    systems = ("iso-9", "bgn-pcgn")
    confidence = 0.90
    system_confidence = {"iso-9": 0.90, "bgn-pcgn": 0.85}
    variants = PRE_REFORM

    def transliterate(
        self, text: str, system: str, options: RomanizationOptions
    ) -> List[Piece]:
        return words_as_pieces(
            text, lambda word: translate_chars(word, BASE_LATIN), CYRILLIC_CHAR_RE
        )

    def apply_system_rules(
        self, unit: str, system: str, options: RomanizationOptions
    ) -> str:
        return translate_chars(unit, SYSTEM_LETTERS[system])
