"""Test request validation."""

import pytest

from lyrics_romanizer.core.models import RomanizationOptions
from lyrics_romanizer.exceptions import (
    InvalidInputError,
    InvalidOptionError,
    UnsupportedScriptError,
    UnsupportedSystemError,
)
from lyrics_romanizer.utils.validation import (
    validate_options,
    validate_script_code,
    validate_system_name,
    validate_text,
)


class TestValidateText:
    def test_valid_text(self):
        assert validate_text("你好") == "你好"

    @pytest.mark.parametrize("value", [None, "", "   \n", 123, ["a"]])
    def test_invalid_text(self, value):
        with pytest.raises(InvalidInputError):
            validate_text(value)

    def test_message_names_the_field(self):
        with pytest.raises(InvalidInputError, match="artist"):
            validate_text(None, "artist")


class TestValidateOptions:
    def test_none_gives_defaults(self):
        assert validate_options(None) == RomanizationOptions()

    def test_valid_options(self):
        options = validate_options(
            {"case": "title", "separator": "-", "tone_style": "numbers"}
        )
        assert options.case == "title"
        assert options.separator == "-"
        assert options.tone_style == "numbers"
        assert options.long_vowels == "macron"

    def test_bogus_case_rejected(self):
        with pytest.raises(InvalidOptionError) as exc:
            validate_options({"case": "bogus"})
        assert exc.value.errors == ["case must be 'lower', 'upper', or 'title'"]

    def test_all_errors_reported_together(self):
        with pytest.raises(InvalidOptionError) as exc:
            validate_options(
                {
                    "case": "bogus",
                    "separator": 1,
                    "tone_style": "x",
                    "long_vowels": "y",
                    "normalize_variants": "yes",
                    "colour": "red",
                }
            )
        assert len(exc.value.errors) == 6
        assert "colour" in exc.value.errors[0]

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidOptionError):
            validate_options(["case"])

    def test_invalid_option_is_a_400(self):
        with pytest.raises(InvalidInputError) as exc:
            validate_options({"case": "bogus"})
        assert exc.value.status_code == 400
        assert exc.value.kind == "InvalidOption"


def test_validate_script_code():
    assert validate_script_code("yue") == "yue"
    with pytest.raises(UnsupportedScriptError) as exc:
        validate_script_code("xx")
    assert "zh" in exc.value.details["supported_scripts"]


def test_validate_system_name():
    assert validate_system_name("bgn-pcgn") == "bgn-pcgn"
    with pytest.raises(UnsupportedSystemError):
        validate_system_name("wade-giles", "zh")
