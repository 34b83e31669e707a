"""Prompt — the ask / validate / retry / give-up topic.

State machine (PromptState.turn_count):

    absent  --turn-->  0, render(context, None)              in_progress
    n       --turn, valid-->                                 succeeded(value)
    n       --turn, invalid, n + 1 <  max_turns--> n + 1,
                render(context, reason)                      in_progress
    n       --turn, invalid, n + 1 >= max_turns--> n + 1     failed("too-many-attempts")

The turn that sends the initial prompt is never validated. Rendering and
validation are both caller-supplied, so the retry policy here is the only
thing the Prompt owns.
"""

from typing import Any, Callable, TypedDict

from promptly.config import get_config
from promptly.context import TurnContext
from promptly.errors import TopicConfigError
from promptly.state import TOO_MANY_ATTEMPTS, PromptState, TurnOutcome, in_progress, is_valid
from promptly.topics.topic import FailureHandler, SuccessHandler, Topic
from promptly.utils.trace import trace
from promptly.utils.validators import (
    Validator,
    choice_validator,
    int_validator,
    text_validator,
    yes_no_validator,
)

Renderer = Callable[[TurnContext, str | None], None]


class PromptConfig(TypedDict, total=False):
    renderer: Renderer  # Sends the prompt. Receives the last failure reason, or None.
    validator: Validator  # Parses the turn's text into a ValidationResult.
    max_turns: int | None  # None means unbounded. Defaults to config default_max_turns.
    on_success: SuccessHandler
    on_failure: FailureHandler


def send_lines(*lines: str) -> Renderer:
    """Return a renderer that sends the same fixed lines on every attempt."""

    def _render(context: TurnContext, last_reason: str | None) -> None:
        context.send(*lines)

    return _render


class Prompt(Topic):
    """Topic that asks a question until its validator accepts the answer."""

    def __init__(self, config: PromptConfig, state: PromptState | None = None):
        super().__init__(
            state,
            on_success=config.get("on_success"),
            on_failure=config.get("on_failure"),
        )
        self._renderer = config.get("renderer")
        self._validator = config.get("validator")
        self._max_turns = config.get("max_turns", get_config().get("default_max_turns"))

        if self._max_turns is not None and (
            not isinstance(self._max_turns, int) or self._max_turns < 1
        ):
            raise TopicConfigError(f"max_turns must be a positive integer or None, got {self._max_turns!r}.")

    @property
    def max_turns(self) -> int | None:
        return self._max_turns

    @property
    def turn_count(self) -> int | None:
        return self.state.get("turn_count")

    def _on_receive_turn(self, context: TurnContext) -> TurnOutcome:
        if self._renderer is None:
            raise TopicConfigError(f"{self.name} has no renderer configured.")
        if self._validator is None:
            raise TopicConfigError(f"{self.name} has no validator configured.")

        # Initial turn: ask, don't validate.
        if "turn_count" not in self.state:
            self.state["turn_count"] = 0
            trace(f"{self.name} sending initial prompt.")
            self._renderer(context, None)
            return in_progress()

        result = self._validator(context.text)
        if is_valid(result):
            return self.succeed(context, result["value"])

        self.state["turn_count"] += 1
        if self._max_turns is not None and self.state["turn_count"] >= self._max_turns:
            return self.fail(context, TOO_MANY_ATTEMPTS)

        trace(
            f"{self.name} re-prompting (attempt {self.state['turn_count'] + 1}"
            f"/{self._max_turns or 'unbounded'}): {result['reason']}."
        )
        self._renderer(context, result["reason"])
        return in_progress()


# --- Stock prompts ---


def _stock_prompt(validator: Validator, renderer: Renderer, state: PromptState | None, **config: Any) -> Prompt:
    return Prompt({"renderer": renderer, "validator": validator, **config}, state=state)


def text_prompt(renderer: Renderer, state: PromptState | None = None, **config: Any) -> Prompt:
    """Prompt accepting any non-blank text, stripped."""
    return _stock_prompt(text_validator, renderer, state, **config)


def int_prompt(renderer: Renderer, state: PromptState | None = None, **config: Any) -> Prompt:
    """Prompt accepting an integer."""
    return _stock_prompt(int_validator, renderer, state, **config)


def confirm_prompt(renderer: Renderer, state: PromptState | None = None, **config: Any) -> Prompt:
    """Prompt accepting exactly 'yes' or 'no'."""
    return _stock_prompt(yes_no_validator, renderer, state, **config)


def choice_prompt(
    choices: list[str], renderer: Renderer, state: PromptState | None = None, **config: Any
) -> Prompt:
    """Prompt resolving to the index of one of ``choices``.

    Build it when ``choices`` is known (e.g. from a child factory), never
    ahead of time from a list that is filled in later.
    """
    return _stock_prompt(choice_validator(choices), renderer, state, **config)
