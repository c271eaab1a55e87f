"""LRC and plain-text lyric parsing.

This module handles:
- LRC timestamp parsing (``[mm:ss]``, ``[mm:ss.xx]``, ``[mm:ss.xxx]``)
- Skipping ID tags such as ``[ar:Artist]``
- Filtering credit, copyright and other non-lyric lines
"""

import re
from typing import List, Optional

from .models import LyricLine

# ----------------------
# LRC timestamp regex
# ----------------------
_LRC_TS_RE = re.compile(
    r"""
    \[                      # opening bracket
    (?P<min>\d+)            # minutes
    :
    (?P<sec>[0-5]?\d)       # seconds
    (?:[.:](?P<frac>\d{1,3}))?  # optional fractional seconds
    \]                      # closing bracket
    """,
    re.VERBOSE,
)

# [ar:...], [ti:...], [offset:...] and friends
_ID_TAG_RE = re.compile(r"^\[[a-zA-Z#]+:[^\]]*\]$")

# ----------------------
# Metadata filtering
# ----------------------

# Prefixes that indicate credit lines
_METADATA_PREFIXES = (
    "artist:",
    "song:",
    "title:",
    "album:",
    "writer:",
    "composer:",
    "lyricist:",
    "lyrics by",
    "written by",
    "music by",
    "arranged by",
    "performed by",
    "music and lyrics",
    "words and music",
    # Chinese
    "作词",
    "作詞",
    "作曲",
    "编曲",
    "編曲",
    "制作人",
    "製作人",
    "监制",
    "監製",
    "演唱",
    "词:",
    "曲:",
    "词 :",
    "曲 :",
    # Japanese
    "作詞:",
    "作曲:",
    "編曲:",
    "歌:",
    # Korean
    "작사",
    "작곡",
    "편곡",
)

# Studio credits that NetEase in particular appends to its lyrics
_TECHNICAL_CREDITS_RE = re.compile(
    r"\b(produced|arranged|conducted|engineered|mixed|mastered|recorded)\s+(by|at)\b"
    r"|\bmusic publishing\b"
    r"|\bltd\b",
    re.IGNORECASE,
)

_COPYRIGHT_PATTERNS = (
    "all rights reserved",
    "copyright",
    "℗",
    "©",
)

# "label : name" credits, e.g. "Guitar : John Smith" or "吉他：张三"
_COLON_CREDIT_RE = re.compile(r"^\s*[^\s:：]{1,12}(?:\s+[^\s:：]+){0,2}\s*[:：]\s*\S")
_SENTENCE_RE = re.compile(r"[,.!?，。！？]")


def _is_empty_or_symbols(text: str) -> bool:
    if not text or not text.strip():
        return True
    return all(c in "♪🎵🎶♫♬-–—=_.·•" or c.isspace() for c in text)


def _is_colon_credit(text: str) -> bool:
    """Short label before a colon, with no sentence punctuation in the label."""
    match = _COLON_CREDIT_RE.match(text)
    if not match:
        return False
    label = re.split(r"[:：]", text, maxsplit=1)[0]
    return not _SENTENCE_RE.search(label)


def is_metadata_line(text: str) -> bool:
    """Return True when ``text`` is a credit or other non-lyric line."""
    if _is_empty_or_symbols(text):
        return True

    lowered = text.lower().strip()
    if lowered.startswith(_METADATA_PREFIXES):
        return True
    if any(pattern in lowered for pattern in _COPYRIGHT_PATTERNS):
        return True
    if _TECHNICAL_CREDITS_RE.search(text):
        return True
    return _is_colon_credit(text)


# ----------------------
# Parsing
# ----------------------
def parse_lrc_timestamp(ts: str) -> Optional[float]:
    """Parse a single LRC timestamp like [01:23.45] to seconds."""
    if not ts:
        return None
    match = _LRC_TS_RE.match(ts.strip())
    if not match:
        return None
    minutes = int(match.group("min"))
    seconds = int(match.group("sec"))
    frac = match.group("frac")
    frac_seconds = int(frac) / (10 ** len(frac)) if frac else 0.0
    return minutes * 60 + seconds + frac_seconds


def parse_lrc(lrc_text: str, filter_metadata: bool = True) -> List[LyricLine]:
    """Parse LRC text into timed lines.

    The first timestamp of a line is kept; any further timestamps on the same
    line are stripped from the text. Lines without a timestamp keep
    ``timestamp=None``.
    """
    if not lrc_text:
        return []

    lines: List[LyricLine] = []
    for raw in lrc_text.splitlines():
        raw = raw.strip()
        if not raw or _ID_TAG_RE.match(raw):
            continue

        match = _LRC_TS_RE.search(raw)
        timestamp = parse_lrc_timestamp(match.group(0)) if match else None
        text = _LRC_TS_RE.sub("", raw).strip()

        if not text:
            continue
        if filter_metadata and is_metadata_line(text):
            continue
        lines.append(LyricLine(text=text, timestamp=timestamp))

    return lines


def parse_plain(text: str, filter_metadata: bool = True) -> List[LyricLine]:
    """Untimed lyrics, one line per non-blank input line."""
    if not text:
        return []
    lines = []
    for raw in text.splitlines():
        raw = raw.strip()
        if not raw:
            continue
        if filter_metadata and is_metadata_line(raw):
            continue
        lines.append(LyricLine(text=raw))
    return lines
