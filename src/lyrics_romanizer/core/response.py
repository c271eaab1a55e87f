"""Stable JSON envelopes for both pipelines and for errors."""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .. import config
from ..exceptions import RomanizerError
from .models import LyricsDocument, RomanizationResult, Song


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ResponseAssembler:
    """Builds response payloads; the clock is injectable for tests."""

    def __init__(
        self,
        version: str = config.API_VERSION,
        clock: Callable[[], str] = utc_timestamp,
    ):
        self.version = version
        self.clock = clock

    def romanization(
        self,
        original: str,
        script: str,
        result: RomanizationResult,
        processor: str,
        processing_time: float,
        detected_script: Optional[str] = None,
    ) -> Dict[str, Any]:
        return {
            "original": original,
            "romanized": result.romanized,
            "language": script,
            "romanization_system": result.system,
            "confidence": result.confidence,
            "spans": [span.to_dict() for span in result.spans],
            "metadata": {
                "timestamp": self.clock(),
                "version": self.version,
                "detected_script": detected_script or script,
                "processing_time": processing_time,
                "processor": processor,
            },
        }

    def music(
        self,
        song: Song,
        script: str,
        system: str,
        title_romanized: str,
        artist_romanized: str,
        lines: List[Dict[str, Any]],
        document: Optional[LyricsDocument] = None,
    ) -> Dict[str, Any]:
        return {
            "song": {
                "title": {"original": song.title, "romanized": title_romanized},
                "artist": {"original": song.artist, "romanized": artist_romanized},
                "id": song.id,
                "language": script,
                "romanization_system": system,
            },
            "lines": lines,
            "quality": {
                "synced": any(line.get("timestamp") is not None for line in lines)
            },
            "metadata": {
                "timestamp": self.clock(),
                "version": self.version,
                "source": song.source or (document.source if document else "unknown"),
            },
        }

    def error(self, error: RomanizerError) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "message": error.message,
            "type": error.kind,
            "code": error.status_code,
            "timestamp": self.clock(),
            "version": self.version,
        }
        body.update(error.details)
        return {"error": body}
