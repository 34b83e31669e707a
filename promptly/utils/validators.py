"""Stock validators — pure functions from turn text to a ValidationResult.

A validator never touches topic state. Anything it needs (e.g. a list of
choices) is captured when it is built.
"""

from typing import Callable

from promptly.errors import TopicConfigError
from promptly.state import ValidationResult, invalid, valid

Validator = Callable[[str], ValidationResult]


def text_validator(text: str) -> ValidationResult:
    """Accept any non-blank text, stripped."""
    if not isinstance(text, str) or not text.strip():
        return invalid("emptytext")
    return valid(text.strip())


def int_validator(text: str) -> ValidationResult:
    """Accept a base-10 integer, surrounding whitespace allowed."""
    try:
        return valid(int(text.strip()))
    except (ValueError, AttributeError):
        return invalid("notanumber")


def yes_no_validator(text: str) -> ValidationResult:
    """Accept exactly 'yes' or 'no'."""
    if text == "yes":
        return valid(True)
    if text == "no":
        return valid(False)
    return invalid("notyesorno")


def choice_validator(choices: list[str]) -> Validator:
    """Return a validator resolving text to the index of a matching choice.

    Matching is case-insensitive on the whole string. An empty ``choices``
    list could never validate, so it is rejected up front.
    """
    if not choices:
        raise TopicConfigError("choice_validator needs at least one choice.")
    lowered = [c.lower() for c in choices]

    def _validate(text: str) -> ValidationResult:
        if isinstance(text, str) and text.strip().lower() in lowered:
            return valid(lowered.index(text.strip().lower()))
        return invalid("indexnotfound")

    return _validate
