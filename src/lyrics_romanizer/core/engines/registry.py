"""Script code -> transliteration engine mapping."""

from typing import Dict, List, Mapping, Optional, Tuple

from ...exceptions import UnsupportedScriptError, UnsupportedSystemError
from ...utils.logging import get_logger
from ...utils.validation import validate_system_name
from .base import TransliterationEngine

logger = get_logger(__name__)


class EngineRegistry:
    """Holds one engine per script; adding a script is a registration."""

    def __init__(self, engines: Optional[Mapping[str, TransliterationEngine]] = None):
        self._engines: Dict[str, TransliterationEngine] = dict(engines or {})

    def register(self, script: str, engine: TransliterationEngine) -> None:
        if script in self._engines:
            logger.debug(f"Overriding engine for {script} with {engine.name}")
        self._engines[script] = engine

    def unregister(self, script: str) -> None:
        self._engines.pop(script, None)

    def has(self, script: str) -> bool:
        return script in self._engines

    def scripts(self) -> List[str]:
        return list(self._engines)

    def get(self, script: str) -> TransliterationEngine:
        engine = self._engines.get(script)
        if engine is None:
            raise UnsupportedScriptError(script, self.scripts())
        return engine

    def resolve(
        self, script: str, system: Optional[str] = None
    ) -> Tuple[TransliterationEngine, str]:
        """Return the engine for ``script`` and the system it should run.

        An omitted system becomes the engine's default; an explicit one must
        be a known system name the engine implements.
        """
        engine = self.get(script)
        if system is None or system == "":
            return engine, engine.default_system()
        validate_system_name(system, script)
        if not engine.supports_system(system):
            raise UnsupportedSystemError(system, script, engine.systems)
        return engine, system


def default_registry() -> EngineRegistry:
    from .cantonese import CantoneseEngine
    from .chinese import MandarinEngine
    from .japanese import JapaneseEngine
    from .korean import KoreanEngine
    from .latin import LatinEngine
    from .russian import RussianEngine

    return EngineRegistry(
        {
            "zh": MandarinEngine(),
            "yue": CantoneseEngine(),
            "ja": JapaneseEngine(),
            "ko": KoreanEngine(),
            "ru": RussianEngine(),
            "en": LatinEngine(),
        }
    )
