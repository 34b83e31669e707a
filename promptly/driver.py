"""Conversation driver — host-side loop around a root topic.

Per turn: load the conversation record, rebuild the root topic from its
persisted state, feed it the turn, then save the updated state. Turns for
the same conversation id are serialized with a per-id lock; different
conversations run independently.
"""

import threading
from contextlib import contextmanager
from typing import Callable

from promptly.context import TurnContext
from promptly.state import TurnOutcome, is_terminal
from promptly.topics.topic import Topic
from promptly.utils.trace import trace

RootFactory = Callable[[dict | None], Topic]


class ConversationDriver:
    def __init__(self, root_factory: RootFactory, store):
        self._root_factory = root_factory
        self._store = store
        # conversation id -> [lock, number of callers holding or waiting on it]
        self._locks: dict[str, list] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _conversation_lock(self, conversation_id: str):
        """Hold the conversation's lock. The entry is dropped once no caller needs it."""
        with self._locks_guard:
            entry = self._locks.setdefault(conversation_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[conversation_id]

    def handle_turn(self, conversation_id: str, text: str) -> list[str]:
        """Run one turn and return the messages it sent, in order."""
        context, _ = self.run_turn(conversation_id, text)
        return context.sent

    def run_turn(self, conversation_id: str, text: str) -> tuple[TurnContext, TurnOutcome]:
        """Run one turn and return the turn context and the root's outcome.

        Exceptions from the topic tree (including TopicConfigError) propagate
        and the stored record is left as it was before the turn.
        """
        with self._conversation_lock(conversation_id):
            record = self._store.load(conversation_id) or {}
            context = TurnContext(text, conversation_data=record.get("conversation_data", {}))

            root = self._root_factory(record.get("topic_state"))
            outcome = root.on_receive_turn(context)

            # A finished root starts over on the next turn.
            topic_state = None if is_terminal(outcome) else root.state
            if topic_state is None:
                trace(f"Conversation '{conversation_id}' root topic {outcome['status']}; resetting.")

            new_record = {"conversation_data": context.conversation_data}
            if topic_state is not None:
                new_record["topic_state"] = topic_state
            self._store.save(conversation_id, new_record)
            return context, outcome

    def reset(self, conversation_id: str) -> None:
        """Discard all stored state for a conversation."""
        with self._conversation_lock(conversation_id):
            self._store.delete(conversation_id)
