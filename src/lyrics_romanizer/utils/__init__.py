"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    validate_text,
    validate_options,
    validate_script_code,
    validate_system_name,
)
from .cache import (
    CacheStore,
    FileCacheStore,
    MemoryCacheStore,
    NullCacheStore,
    UpstashCacheStore,
    create_cache_store,
    make_cache_key,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_text",
    "validate_options",
    "validate_script_code",
    "validate_system_name",
    "CacheStore",
    "FileCacheStore",
    "MemoryCacheStore",
    "NullCacheStore",
    "UpstashCacheStore",
    "create_cache_store",
    "make_cache_key",
]
