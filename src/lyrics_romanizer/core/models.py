"""Data models for romanization results and resolved songs."""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple, Union

CASES = ("lower", "upper", "title")
TONE_STYLES = ("marks", "numbers", "none")
LONG_VOWELS = ("macron", "circumflex", "double")


@dataclass(frozen=True)
class RomanizationOptions:
    """User-tunable rendering knobs shared by every engine.

    ``tone_style`` only affects Mandarin and ``long_vowels`` only affects
    Japanese; other engines ignore them.
    """

    case: str = "lower"
    separator: str = " "
    tone_style: str = "marks"
    long_vowels: str = "macron"
    normalize_variants: bool = True

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Span:
    """Maps ``original[start:end]`` to its romanized substring."""

    start: int
    end: int
    script: Optional[str]
    romanized: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "range": [self.start, self.end],
            "script": self.script,
            "romanized": self.romanized,
        }


@dataclass
class RomanizationResult:
    """Output of one engine invocation."""

    romanized: str
    system: str
    confidence: float
    spans: List[Span] = field(default_factory=list)

    def validate(self, original: str) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("Confidence must be within [0, 1]")
        cursor = 0
        for span in self.spans:
            if span.start != cursor or span.end < span.start:
                raise ValueError("Spans must be ordered, contiguous and non-overlapping")
            cursor = span.end
        if self.spans and cursor != len(original):
            raise ValueError("Spans must cover the full original text")


@dataclass
class Song:
    """A track resolved by one song source.

    ``id`` is opaque and only meaningful together with ``source``.
    """

    id: Union[str, int]
    title: str
    artist: str
    source: str
    album: Optional[str] = None
    duration: Optional[float] = None


@dataclass
class LyricLine:
    """One lyric line; ``timestamp`` is seconds for synchronized lyrics."""

    text: str
    timestamp: Optional[float] = None


@dataclass
class LyricsDocument:
    """Ordered lyric lines for one song, metadata lines already removed."""

    lines: List[LyricLine]
    source: str
    song_id: Union[str, int, None] = None

    @property
    def synced(self) -> bool:
        return any(line.timestamp is not None for line in self.lines)

    def __len__(self) -> int:
        return len(self.lines)
