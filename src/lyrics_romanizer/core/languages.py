"""Script codes and the romanization systems each script supports."""

from typing import Dict, List, Tuple

# Closed set of script codes the service understands
SCRIPT_CODES: Tuple[str, ...] = ("zh", "yue", "ja", "ko", "ru", "en")

SCRIPT_NAMES: Dict[str, str] = {
    "zh": "Mandarin Chinese",
    "yue": "Cantonese",
    "ja": "Japanese",
    "ko": "Korean",
    "ru": "Russian",
    "en": "English",
}

# First entry is the script's default system
SCRIPT_SYSTEMS: Dict[str, List[str]] = {
    "zh": ["pinyin"],
    "yue": ["jyutping"],
    "ja": ["hepburn"],
    "ko": ["revised"],
    "ru": ["iso-9", "bgn-pcgn"],
    "en": ["none"],
}

ROMANIZATION_SYSTEMS: Tuple[str, ...] = (
    "pinyin",
    "jyutping",
    "hepburn",
    "revised",
    "iso-9",
    "bgn-pcgn",
    "none",
)

FALLBACK_SCRIPT = "en"


def is_script_code(code: str) -> bool:
    return code in SCRIPT_CODES


def is_romanization_system(system: str) -> bool:
    return system in ROMANIZATION_SYSTEMS


def get_romanization_systems(script: str) -> List[str]:
    return list(SCRIPT_SYSTEMS.get(script, []))


def get_default_system(script: str) -> str:
    systems = SCRIPT_SYSTEMS.get(script)
    return systems[0] if systems else "none"
