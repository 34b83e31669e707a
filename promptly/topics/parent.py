"""ParentTopic — a topic that delegates turns to named child topics.

Children are registered once, at construction, as factories taking the
child's persisted state (or None for a fresh start). A child instance is
rebuilt from its factory on every turn it handles, so anything the child
closes over (choices for a validator, the parent's state) is read at that
moment rather than frozen when the tree was first built.

The parent owns its ``active_topic_name`` pointer. When a child reports a
terminal outcome the parent clears the pointer and the child's state, then
hands the result to ``on_child_succeeded`` / ``on_child_failed`` within the
same turn.
"""

from typing import Any, Callable, Iterable, Mapping

from promptly.context import TurnContext
from promptly.errors import TopicConfigError
from promptly.state import ParentTopicState, TurnOutcome, in_progress, is_terminal
from promptly.topics.topic import FailureHandler, SuccessHandler, Topic
from promptly.utils.trace import trace, warn

ChildFactory = Callable[[dict | None], Topic]


class ParentTopic(Topic):
    """Base class for topics composed of named child topics.

    Subclasses provide ``create_children`` and ``decide``; they may override
    ``on_child_succeeded`` and ``on_child_failed``.
    """

    def __init__(
        self,
        state: ParentTopicState | None = None,
        on_success: SuccessHandler | None = None,
        on_failure: FailureHandler | None = None,
    ):
        super().__init__(state, on_success=on_success, on_failure=on_failure)
        declared = self.create_children()
        pairs = declared.items() if isinstance(declared, Mapping) else declared
        children: dict[str, ChildFactory] = {}
        for child_name, factory in pairs:
            if not isinstance(child_name, str) or not child_name:
                raise TopicConfigError(f"{self.name} has an invalid child topic name {child_name!r}.")
            if child_name in children:
                raise TopicConfigError(f"{self.name} declares child topic '{child_name}' more than once.")
            children[child_name] = factory
        self._children: Mapping[str, ChildFactory] = children

    def create_children(self) -> Mapping[str, ChildFactory] | Iterable[tuple[str, ChildFactory]]:
        """Return the child mapping, or (name, factory) pairs. Called once per instance."""
        return {}

    def decide(self, context: TurnContext) -> TurnOutcome:
        """Parent's own logic for a turn with no active child."""
        raise NotImplementedError

    # --- Active topic ---

    @property
    def child_names(self) -> list[str]:
        return list(self._children)

    @property
    def active_topic_name(self) -> str | None:
        return self.state.get("active_topic_name")

    @property
    def has_active_topic(self) -> bool:
        return "active_topic_name" in self.state

    def activate(self, context: TurnContext, child_name: str) -> TurnOutcome:
        """Make ``child_name`` active with fresh state and forward this turn to it."""
        if child_name not in self._children:
            raise TopicConfigError(f"{self.name} has no child topic named '{child_name}'.")
        if self.has_active_topic:
            warn(
                f"{self.name} activating '{child_name}' while "
                f"'{self.active_topic_name}' is still active; discarding it."
            )
            self.clear_active_topic()

        self.state["active_topic_name"] = child_name
        self.state.setdefault("topic_states", {}).pop(child_name, None)
        trace(f"{self.name} activated '{child_name}'.")
        return self._delegate(context, child_name)

    def clear_active_topic(self) -> None:
        """Forget the active child and its state."""
        child_name = self.state.pop("active_topic_name", None)
        if child_name is not None:
            self.state.get("topic_states", {}).pop(child_name, None)
            trace(f"{self.name} cleared '{child_name}'.")

    # --- Turn handling ---

    def _on_receive_turn(self, context: TurnContext) -> TurnOutcome:
        if self.has_active_topic:
            return self._delegate(context, self.state["active_topic_name"])
        return self.decide(context)

    def _delegate(self, context: TurnContext, child_name: str) -> TurnOutcome:
        child = self._load_child(child_name)
        # Terminal children are cleared in the turn they finish.
        if child.is_done:
            raise TopicConfigError(
                f"{self.name} active topic '{child_name}' is already {child.state['outcome']}."
            )
        outcome = child.on_receive_turn(context)
        self.state.setdefault("topic_states", {})[child_name] = child.state

        if not is_terminal(outcome):
            return outcome

        self.clear_active_topic()
        if outcome["status"] == "succeeded":
            return self.on_child_succeeded(context, child_name, outcome.get("value"))
        return self.on_child_failed(context, child_name, outcome["reason"])

    def _load_child(self, child_name: str) -> Topic:
        factory = self._children.get(child_name)
        if factory is None:
            raise TopicConfigError(
                f"{self.name} active topic '{child_name}' is not one of its children: {self.child_names}."
            )
        persisted = self.state.get("topic_states", {}).get(child_name)
        return factory(persisted)

    def on_child_succeeded(self, context: TurnContext, child_name: str, value: Any) -> TurnOutcome:
        """Default: continue the parent's own flow in the same turn."""
        return self.decide(context)

    def on_child_failed(self, context: TurnContext, child_name: str, reason: str) -> TurnOutcome:
        """Default: go idle and wait for the next turn."""
        return in_progress()
