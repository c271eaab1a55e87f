"""Per-script transliteration engines."""

from .base import Piece, TransliterationEngine, apply_case
from .registry import EngineRegistry, default_registry

__all__ = [
    "Piece",
    "TransliterationEngine",
    "apply_case",
    "EngineRegistry",
    "default_registry",
]
