"""Validation utilities for romanization requests."""

from typing import Any, List, Mapping, Optional

from ..core.languages import ROMANIZATION_SYSTEMS, SCRIPT_CODES
from ..core.models import CASES, LONG_VOWELS, TONE_STYLES, RomanizationOptions
from ..exceptions import (
    InvalidInputError,
    InvalidOptionError,
    UnsupportedScriptError,
    UnsupportedSystemError,
)


def validate_text(value: Any, name: str = "text") -> str:
    """Require a non-blank string parameter."""
    if value is None or value == "":
        raise InvalidInputError(f"Missing '{name}' parameter")
    if not isinstance(value, str):
        raise InvalidInputError(f"'{name}' must be a string")
    if not value.strip():
        raise InvalidInputError(f"'{name}' cannot be blank")
    return value


def _option_errors(options: Mapping[str, Any]) -> List[str]:
    errors: List[str] = []

    unknown = sorted(set(options) - set(RomanizationOptions.field_names()))
    if unknown:
        errors.append(f"unknown option(s): {', '.join(unknown)}")

    if "case" in options and options["case"] not in CASES:
        errors.append("case must be 'lower', 'upper', or 'title'")

    if "separator" in options and not isinstance(options["separator"], str):
        errors.append("separator must be a string")

    if "tone_style" in options and options["tone_style"] not in TONE_STYLES:
        errors.append("tone_style must be 'marks', 'numbers', or 'none'")

    if "long_vowels" in options and options["long_vowels"] not in LONG_VOWELS:
        errors.append("long_vowels must be 'macron', 'circumflex', or 'double'")

    if "normalize_variants" in options and not isinstance(
        options["normalize_variants"], bool
    ):
        errors.append("normalize_variants must be a boolean")

    return errors


def validate_options(options: Optional[Mapping[str, Any]]) -> RomanizationOptions:
    """Validate raw request options and fill in defaults.

    Every problem is collected so the client sees them all at once.
    """
    if options is None:
        return RomanizationOptions()
    if not isinstance(options, Mapping):
        raise InvalidOptionError(["options must be an object"])

    errors = _option_errors(options)
    if errors:
        raise InvalidOptionError(errors)

    return RomanizationOptions(**dict(options))


def validate_script_code(code: Any) -> str:
    """Reject script codes outside the closed enumeration."""
    if not isinstance(code, str) or code not in SCRIPT_CODES:
        raise UnsupportedScriptError(code, SCRIPT_CODES)
    return code


def validate_system_name(system: Any, script: Optional[str] = None) -> str:
    """Reject romanization system names nobody implements."""
    if not isinstance(system, str) or system not in ROMANIZATION_SYSTEMS:
        raise UnsupportedSystemError(str(system), script, ROMANIZATION_SYSTEMS)
    return system
