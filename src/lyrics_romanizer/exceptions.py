"""Custom exceptions for Lyrics Romanizer."""

from typing import Any, Dict, Iterable, List, Optional


class RomanizerError(Exception):
    """Base exception for Lyrics Romanizer.

    Carries the HTTP status the error maps to and any extra detail fields
    that help a client recover (supported scripts, attempted sources, ...).
    """

    status_code = 500
    kind = "InternalError"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details


class ConfigError(RomanizerError):
    """Invalid configuration value."""
    kind = "ConfigError"


class InvalidInputError(RomanizerError):
    """Missing or malformed request fields."""
    status_code = 400
    kind = "InvalidInput"


class InvalidOptionError(InvalidInputError):
    """One or more romanization options have an invalid value."""
    kind = "InvalidOption"

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors), errors=list(errors))
        self.errors = list(errors)


class UnsupportedScriptError(RomanizerError):
    """No engine is registered for the requested script."""
    status_code = 400
    kind = "UnsupportedScript"

    def __init__(self, script: Optional[str], supported: Iterable[str]):
        super().__init__(
            f"Script '{script}' is not supported",
            supported_scripts=sorted(supported),
        )
        self.script = script


class UnsupportedSystemError(RomanizerError):
    """The engine does not implement the requested romanization system."""
    status_code = 400
    kind = "UnsupportedSystem"

    def __init__(self, system: str, script: Optional[str], supported: Iterable[str]):
        super().__init__(
            f"Romanization system '{system}' is not supported for script '{script}'",
            supported_systems=list(supported),
        )
        self.system = system


class PlatformUnavailableError(RomanizerError):
    """The explicitly requested music platform cannot serve the script."""
    status_code = 400
    kind = "PlatformUnavailable"

    def __init__(self, platform: str, script: str, supported: Iterable[str]):
        super().__init__(
            f"No music API available for script '{script}' and platform '{platform}'",
            supported_platforms=sorted(supported),
        )
        self.platform = platform


class NoSourceForScriptError(RomanizerError):
    """No song source is configured for the script."""
    status_code = 400
    kind = "NoSourceForScript"

    def __init__(self, script: str, supported_scripts: Iterable[str]):
        super().__init__(
            f"No music API available for script '{script}'",
            supported_scripts=sorted(supported_scripts),
        )
        self.script = script


class SongNotFoundError(RomanizerError):
    """Every ranked source was tried and none matched the song."""
    status_code = 404
    kind = "SongNotFound"

    def __init__(self, artist: str, title: str, attempted: List[str]):
        tried = ", ".join(attempted) if attempted else "none"
        super().__init__(
            f"Song not found: '{artist} - {title}' (attempted sources: {tried})",
            attempted_sources=list(attempted),
        )
        self.attempted = list(attempted)


class LyricsNotFoundError(RomanizerError):
    """The matched song has no lyrics on its source."""
    status_code = 404
    kind = "LyricsNotFound"

    def __init__(self, source: str, attempted: Optional[List[str]] = None):
        attempted = list(attempted or [source])
        super().__init__(
            f"Lyrics not found on {source} (attempted sources: {', '.join(attempted)})",
            source=source,
            attempted_sources=attempted,
        )
        self.source = source


class UpstreamError(RomanizerError):
    """Transport failure talking to a song source or cache backend."""
    status_code = 502
    kind = "UpstreamFailure"


class CacheError(RomanizerError):
    """Error with cache operations."""
    kind = "CacheError"


class InternalError(RomanizerError):
    """Unexpected failure."""
    status_code = 500
    kind = "InternalError"
