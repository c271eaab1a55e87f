"""Script detection for romanization requests.

Detection runs in two stages:

1. Count the characters that fall in each script's Unicode ranges and pick
   the script whose share of all script-matched characters clears its
   confidence threshold (best share wins when none does).
2. Han characters are shared by Mandarin and Cantonese, so when the Han
   block wins a lexical pass looks for Cantonese-only particles.

Text with no script-matched characters at all goes through a keyword table
before falling back to ``en``.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from ..exceptions import InvalidInputError
from ..utils.logging import get_logger
from .languages import FALLBACK_SCRIPT

logger = get_logger(__name__)

# ----------------------
# Unicode ranges per script bucket
# ----------------------
HAN_RE = r"\u3400-\u4DBF\u4E00-\u9FFF\uF900-\uFAFF"
KANA_RE = r"\u3040-\u309F\u30A0-\u30FF\u31F0-\u31FF\uFF66-\uFF9F"
HANGUL_RE = r"\u1100-\u11FF\u3130-\u318F\uA960-\uA97F\uAC00-\uD7AF\uD7B0-\uD7FF"
CYRILLIC_RE = r"\u0400-\u04FF\u0500-\u052F"
LATIN_RE = r"A-Za-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u024F"

# Bucket name -> (character class, script code it votes for)
SCRIPT_PATTERNS: Dict[str, Tuple[Pattern[str], str]] = {
    "han": (re.compile(f"[{HAN_RE}]"), "zh"),
    "kana": (re.compile(f"[{KANA_RE}]"), "ja"),
    "hangul": (re.compile(f"[{HANGUL_RE}]"), "ko"),
    "cyrillic": (re.compile(f"[{CYRILLIC_RE}]"), "ru"),
    "latin": (re.compile(f"[{LATIN_RE}]"), "en"),
}

CONFIDENCE_THRESHOLDS: Dict[str, float] = {
    "han": 0.8,
    "kana": 0.9,
    "hangul": 0.9,
    "cyrillic": 0.9,
    "latin": 0.7,
}

# Cantonese-only particles, negation and pronouns
CANTONESE_MARKERS: Tuple[str, ...] = (
    "唔係",
    "佢哋",
    "嘅",
    "咗",
    "咁",
    "啲",
    "嘢",
    "冇",
    "喺",
    "乜",
    "嚟",
    "睇",
)

# Used only when no script-matched characters exist at all
KEYWORDS: List[Tuple[str, Pattern[str]]] = [
    ("zh", re.compile(r"(你好|谢谢|再见|中国|中文|不对|很好|一共有)")),
    ("yue", re.compile(r"(嘅|咗|咁|啲|嘢|唔係|佢哋)")),
    ("ja", re.compile(r"(こんにちは|ありがとう|さようなら|日本|日本語)")),
    ("ko", re.compile(r"(안녕하세요|감사합니다|안녕히|한국|한국어)")),
    ("ru", re.compile(r"(привет|спасибо|до свидания|русский|россия)", re.IGNORECASE)),
]


@dataclass(frozen=True)
class Detection:
    """Detected script code and the winning bucket's share of matched characters."""

    script: str
    confidence: float
    bucket: Optional[str] = None


class ScriptDetector:
    """Classify raw text into one of the supported script codes."""

    def __init__(
        self,
        thresholds: Optional[Dict[str, float]] = None,
        cantonese_markers: Tuple[str, ...] = CANTONESE_MARKERS,
    ):
        self.thresholds = dict(CONFIDENCE_THRESHOLDS)
        if thresholds:
            self.thresholds.update(thresholds)
        self.cantonese_markers = cantonese_markers

    def detect(self, text: str) -> str:
        return self.detect_with_confidence(text).script

    def detect_with_confidence(self, text: str) -> Detection:
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Invalid text input for language detection")

        counts = self.count_scripts(text)
        total = sum(counts.values())
        if total == 0:
            return Detection(self._detect_by_keywords(text), 0.0)

        shares = {bucket: count / total for bucket, count in counts.items() if count}
        bucket = self._pick_bucket(shares)
        script = SCRIPT_PATTERNS[bucket][1]

        if bucket == "han":
            # Kana never appears in Chinese text; mixed kanji/kana is Japanese
            if counts["kana"]:
                script = "ja"
            else:
                script = self.distinguish_chinese(text)

        logger.debug(f"Detected {script} ({bucket} share {shares[bucket]:.2f})")
        return Detection(script, shares[bucket], bucket)

    def count_scripts(self, text: str) -> Dict[str, int]:
        return {
            bucket: len(pattern.findall(text))
            for bucket, (pattern, _) in SCRIPT_PATTERNS.items()
        }

    def _pick_bucket(self, shares: Dict[str, float]) -> str:
        best: Optional[str] = None
        best_share = 0.0
        for bucket, share in shares.items():
            if share > best_share and share >= self.thresholds[bucket]:
                best, best_share = bucket, share
        if best is not None:
            return best
        # Nothing cleared its threshold: take the largest share anyway
        return max(shares.items(), key=lambda item: item[1])[0]

    def distinguish_chinese(self, text: str) -> str:
        """Return ``yue`` when Cantonese-only words are present, else ``zh``."""
        if any(marker in text for marker in self.cantonese_markers):
            return "yue"
        return "zh"

    def _detect_by_keywords(self, text: str) -> str:
        for script, pattern in KEYWORDS:
            if pattern.search(text):
                return script
        return FALLBACK_SCRIPT


_default_detector = ScriptDetector()


def detect_script(text: str) -> str:
    """Detect the script code of ``text`` with the default thresholds."""
    return _default_detector.detect(text)
