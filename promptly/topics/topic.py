"""Topic — base unit of conversational state and behavior.

A Topic owns a plain-data state record that the host persists between
turns, handles one turn at a time through ``on_receive_turn`` and reports a
TurnOutcome. Terminal outcomes fire the optional ``on_success`` /
``on_failure`` continuations supplied by whoever created the topic, exactly
once, and the terminal status is recorded in the state itself so a
rehydrated topic stays terminal.
"""

from typing import Any, Callable

from promptly.context import TurnContext
from promptly.state import TopicState, TurnOutcome, failed, succeeded
from promptly.utils.trace import trace

SuccessHandler = Callable[[TurnContext, Any], None]
FailureHandler = Callable[[TurnContext, str], None]


class Topic:
    """Base class for every topic kind."""

    def __init__(
        self,
        state: TopicState | None = None,
        on_success: SuccessHandler | None = None,
        on_failure: FailureHandler | None = None,
    ):
        self.state = state if state is not None else self.initial_state()
        self._on_success = on_success
        self._on_failure = on_failure

    def initial_state(self) -> TopicState:
        """Return the state a freshly activated topic starts with."""
        return {}

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def is_done(self) -> bool:
        return "outcome" in self.state

    def on_receive_turn(self, context: TurnContext) -> TurnOutcome:
        """Handle one turn. Subclasses implement ``_on_receive_turn``.

        A topic that already reached a terminal outcome reports that outcome
        again without firing its continuations a second time.
        """
        if self.is_done:
            trace(f"{self.name} is already {self.state['outcome']}; ignoring turn.")
            return {"status": self.state["outcome"]}
        return self._on_receive_turn(context)

    def _on_receive_turn(self, context: TurnContext) -> TurnOutcome:
        raise NotImplementedError

    def succeed(self, context: TurnContext, value: Any = None) -> TurnOutcome:
        """Mark the topic succeeded and fire ``on_success`` once."""
        self.state["outcome"] = "succeeded"
        trace(f"{self.name} succeeded.")
        if self._on_success is not None:
            self._on_success(context, value)
        return succeeded(value)

    def fail(self, context: TurnContext, reason: str) -> TurnOutcome:
        """Mark the topic failed and fire ``on_failure`` once."""
        self.state["outcome"] = "failed"
        trace(f"{self.name} failed: {reason}.")
        if self._on_failure is not None:
            self._on_failure(context, reason)
        return failed(reason)
