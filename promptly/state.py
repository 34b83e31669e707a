"""Topic state records — plain data that round-trips across turns.

Every record is a ``total=False`` TypedDict so that an absent key stays
distinguishable from a zero/empty/false value after serialization.
"""

from typing import Any, Literal, TypedDict

TOO_MANY_ATTEMPTS = "too-many-attempts"


class TopicState(TypedDict, total=False):
    outcome: Literal["succeeded", "failed"]  # Set once the topic is terminal.


class ParentTopicState(TopicState, total=False):
    active_topic_name: str  # Must be a key of the parent's child mapping.
    topic_states: dict[str, dict]  # Persisted state of each activated child, by name.


class PromptState(TopicState, total=False):
    turn_count: int  # Absent until the initial prompt is sent. Never decremented.


class ValidationResult(TypedDict, total=False):
    value: Any
    reason: str


class TurnOutcome(TypedDict, total=False):
    status: Literal["in_progress", "succeeded", "failed"]
    value: Any
    reason: str


def valid(value: Any) -> ValidationResult:
    """Build a successful ValidationResult."""
    return {"value": value}


def invalid(reason: str) -> ValidationResult:
    """Build a failed ValidationResult. ``reason`` must be non-empty."""
    if not isinstance(reason, str) or not reason:
        raise ValueError("Validation failure reason must be a non-empty string.")
    return {"reason": reason}


def is_valid(result: ValidationResult) -> bool:
    """Return True for a success result, False for a failure result.

    Raises ValueError if the result carries both fields or neither.
    """
    has_value = "value" in result
    has_reason = "reason" in result
    if has_value == has_reason:
        raise ValueError(
            f"ValidationResult must carry exactly one of 'value' or 'reason', got {sorted(result)}."
        )
    if has_reason and not result["reason"]:
        raise ValueError("ValidationResult 'reason' must be non-empty.")
    return has_value


def in_progress() -> TurnOutcome:
    return {"status": "in_progress"}


def succeeded(value: Any) -> TurnOutcome:
    return {"status": "succeeded", "value": value}


def failed(reason: str) -> TurnOutcome:
    return {"status": "failed", "reason": reason}


def is_terminal(outcome: TurnOutcome) -> bool:
    """Return True if the outcome ends the topic that produced it."""
    return outcome["status"] != "in_progress"
