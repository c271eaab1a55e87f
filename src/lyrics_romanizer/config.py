"""Configuration settings for Lyrics Romanizer."""

import os
from pathlib import Path
from typing import Optional

from . import __version__
from .exceptions import ConfigError

API_VERSION = __version__

# Directories
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "lyrics-romanizer"

# Cache backend: auto | upstash | file | memory | none
CACHE_BACKEND = os.getenv("LYRICS_ROMANIZER_CACHE", "auto").lower()
CACHE_BACKENDS = ("auto", "upstash", "file", "memory", "none")

# Upstash Redis REST credentials (same variable names the hosted deployment uses)
KV_REST_API_URL = os.getenv("KV_REST_API_URL", "")
KV_REST_API_TOKEN = os.getenv("KV_REST_API_TOKEN", "")


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


# Seconds; None means entries never expire
CACHE_TTL = _optional_int("LYRICS_ROMANIZER_CACHE_TTL")


class CacheTTL:
    SHORT = 300  # 5 minutes
    MEDIUM = 3600  # 1 hour
    LONG = 86400  # 24 hours
    PERMANENT = None


# Upstream music catalogs
NETEASE_API_URL = os.getenv(
    "NETEASE_API_URL", "https://netease-cloud-music-api-gules-mu.vercel.app"
)
LRCLIB_API_URL = os.getenv("LRCLIB_API_URL", "https://lrclib.net/api")
GENIUS_BASE_URL = os.getenv("GENIUS_BASE_URL", "https://genius.com")

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/143.0.0.0 Safari/537.36"
)

# Upstream call behaviour
UPSTREAM_TIMEOUT = float(os.getenv("LYRICS_ROMANIZER_UPSTREAM_TIMEOUT", "10"))
UPSTREAM_MAX_RETRIES = int(os.getenv("LYRICS_ROMANIZER_UPSTREAM_RETRIES", "2"))

# Lyric line fan-out
MAX_WORKERS = int(os.getenv("LYRICS_ROMANIZER_MAX_WORKERS", "8"))

# Retry the next ranked source when the winning source has no lyrics
LYRICS_FALLBACK = os.getenv("LYRICS_ROMANIZER_LYRICS_FALLBACK", "0").lower() in (
    "1",
    "true",
    "yes",
)

# HTTP server
DEFAULT_HOST = os.getenv("LYRICS_ROMANIZER_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.getenv("LYRICS_ROMANIZER_PORT", "8000"))


def validate_config() -> None:
    """Validate configuration values."""
    if CACHE_BACKEND not in CACHE_BACKENDS:
        raise ConfigError(
            f"Invalid cache backend {CACHE_BACKEND!r}; "
            f"expected one of: {', '.join(CACHE_BACKENDS)}"
        )

    if CACHE_TTL is not None and CACHE_TTL <= 0:
        raise ConfigError("Cache TTL must be positive")

    if UPSTREAM_TIMEOUT <= 0:
        raise ConfigError("Invalid upstream timeout")

    if UPSTREAM_MAX_RETRIES < 0:
        raise ConfigError("Invalid upstream retry count")

    if MAX_WORKERS <= 0:
        raise ConfigError("Invalid worker count")


def get_cache_dir() -> Path:
    """Get cache directory from environment or default."""
    cache_dir = os.getenv("LYRICS_ROMANIZER_CACHE_DIR")
    if cache_dir:
        return Path(cache_dir)
    return DEFAULT_CACHE_DIR


def has_upstash_credentials() -> bool:
    return bool(KV_REST_API_URL and KV_REST_API_TOKEN)


# Validate config on import
validate_config()
