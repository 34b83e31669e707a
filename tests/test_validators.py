"""Tests for promptly.utils.validators and the ValidationResult helpers."""

import pytest

from promptly.errors import TopicConfigError
from promptly.state import invalid, is_valid, valid
from promptly.utils.validators import choice_validator, int_validator, text_validator, yes_no_validator


class TestValidationResult:
    def test_valid_result(self):
        assert is_valid(valid(0)) is True

    def test_valid_none_value_is_still_valid(self):
        assert is_valid(valid(None)) is True

    def test_invalid_result(self):
        assert is_valid(invalid("nope")) is False

    def test_empty_reason_rejected(self):
        with pytest.raises(ValueError):
            invalid("")

    def test_both_fields_rejected(self):
        with pytest.raises(ValueError):
            is_valid({"value": 1, "reason": "x"})

    def test_neither_field_rejected(self):
        with pytest.raises(ValueError):
            is_valid({})


class TestTextValidator:
    def test_strips(self):
        assert text_validator("  Ada  ") == {"value": "Ada"}

    def test_blank(self):
        assert text_validator("  ") == {"reason": "emptytext"}


class TestIntValidator:
    def test_parses(self):
        assert int_validator(" 7 ") == {"value": 7}

    def test_zero_is_a_value(self):
        assert int_validator("0") == {"value": 0}

    def test_not_a_number(self):
        assert int_validator("seven") == {"reason": "notanumber"}

    def test_float_rejected(self):
        assert int_validator("7.5") == {"reason": "notanumber"}


class TestYesNoValidator:
    @pytest.mark.parametrize("text,expected", [("yes", True), ("no", False)])
    def test_literals(self, text, expected):
        assert yes_no_validator(text) == {"value": expected}

    @pytest.mark.parametrize("text", ["maybe", "Yes", "y", ""])
    def test_anything_else(self, text):
        assert yes_no_validator(text) == {"reason": "notyesorno"}


class TestChoiceValidator:
    def test_case_insensitive_index(self):
        validate = choice_validator(["Wake up", "Lunch"])
        assert validate("WAKE UP") == {"value": 0}

    def test_not_found(self):
        validate = choice_validator(["Wake up"])
        assert validate("dinner") == {"reason": "indexnotfound"}

    def test_deterministic(self):
        validate = choice_validator(["a", "b"])
        assert validate("b") == validate("b")

    def test_empty_choices_rejected(self):
        with pytest.raises(TopicConfigError):
            choice_validator([])

    def test_choices_captured_at_build_time(self):
        choices = ["a"]
        validate = choice_validator(choices)
        choices.append("b")
        assert validate("b") == {"reason": "indexnotfound"}
