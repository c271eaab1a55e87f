"""Mandarin Chinese romanization (Hanyu Pinyin) via pypinyin."""

import re
from typing import List, Optional

from pypinyin import Style, pinyin

from ..detection import HAN_RE
from ..models import RomanizationOptions
from .base import Piece, TransliterationEngine, align_chunks

HAN_CHAR_RE = re.compile(f"[{HAN_RE}]")

# Numbered syllables as produced by Style.TONE3 with neutral_tone_with_five
_SYLLABLE_RE = re.compile(r"([a-zü]+)([1-5])")

TONE_MARKS = {
    "a": "āáǎà",
    "e": "ēéěè",
    "i": "īíǐì",
    "o": "ōóǒò",
    "u": "ūúǔù",
    "ü": "ǖǘǚǜ",
}

# Traditional -> simplified for common lyric characters
TRADITIONAL_TO_SIMPLIFIED = {
    "體": "体", "簡": "简", "灣": "湾", "門": "门", "國": "国",
    "們": "们", "來": "来", "說": "说", "時": "时", "愛": "爱",
    "為": "为", "個": "个", "這": "这", "裡": "里", "見": "见",
    "風": "风", "夢": "梦", "聽": "听", "歡": "欢", "淚": "泪",
    "戀": "恋", "憶": "忆", "與": "与", "讓": "让", "對": "对",
    "還": "还", "沒": "没", "嗎": "吗", "會": "会", "過": "过",
    "記": "记", "長": "长", "無": "无", "開": "开", "聲": "声",
    "從": "从", "後": "后", "麼": "么", "樣": "样", "間": "间",
    "雲": "云", "遠": "远", "邊": "边", "燈": "灯", "溫": "温",
    "華": "华", "語": "语", "電": "电", "臉": "脸", "輕": "轻",
}


def mark_syllable(syllable: str, tone: int) -> str:
    """Put the tone mark on the vowel Pinyin orthography designates."""
    if tone == 5:
        return syllable
    if "a" in syllable:
        index = syllable.index("a")
    elif "e" in syllable:
        index = syllable.index("e")
    elif "ou" in syllable:
        index = syllable.index("o")
    else:
        vowels = [i for i, char in enumerate(syllable) if char in TONE_MARKS]
        if not vowels:
            return syllable
        index = vowels[-1]
    vowel = syllable[index]
    return syllable[:index] + TONE_MARKS[vowel][tone - 1] + syllable[index + 1:]


def format_tones(unit: str, tone_style: str) -> str:
    def replace(match: re.Match) -> str:
        syllable, tone = match.group(1), int(match.group(2))
        if tone_style == "marks":
            return mark_syllable(syllable, tone)
        if tone_style == "numbers":
            return syllable if tone == 5 else f"{syllable}{tone}"
        return syllable

    return _SYLLABLE_RE.sub(replace, unit)


class MandarinEngine(TransliterationEngine):
    """Hanyu Pinyin with configurable tone rendering."""

    script = "zh"
    name = "MandarinEngine"
    systems = ("pinyin",)
    confidence = 0.95
    variants = TRADITIONAL_TO_SIMPLIFIED

    def transliterate(
        self, text: str, system: str, options: RomanizationOptions
    ) -> List[Piece]:
        # Whole-text call so pypinyin can use phrase context for polyphones
        syllables = [
            item[0]
            for item in pinyin(
                text,
                style=Style.TONE3,
                errors="default",
                neutral_tone_with_five=True,
                v_to_u=True,
            )
        ]
        pieces = self._align(text, syllables)
        if pieces is None:
            return [Piece(0, len(text), " ".join(syllables))]
        return pieces

    def _align(self, text: str, syllables: List[str]) -> Optional[List[Piece]]:
        chunks = []
        cursor = 0
        for syllable in syllables:
            if text.startswith(syllable, cursor):
                # pypinyin hands back non-Han runs unchanged
                chunks.append((syllable, syllable, False))
                cursor += len(syllable)
            elif cursor < len(text) and HAN_CHAR_RE.match(text[cursor]):
                chunks.append((text[cursor], syllable, True))
                cursor += 1
            else:
                return None
        return align_chunks(text, chunks)

    def apply_system_rules(
        self, unit: str, system: str, options: RomanizationOptions
    ) -> str:
        return format_tones(unit, options.tone_style)
