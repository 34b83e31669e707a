"""Shared fixtures for the promptly test suite."""

import pytest
from unittest.mock import patch

from promptly.context import TurnContext
from promptly.state import invalid, valid


@pytest.fixture
def mock_config():
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "default_max_turns": None,
        "trace_turns": False,
        "state_dir": "./.promptly/test-state",
        "store_max_retries": 2,
        "sample": "alarms",
    }
    with patch("promptly.config._config", test_config):
        yield test_config


@pytest.fixture
def make_context():
    """Factory for a fresh TurnContext."""
    def _make(text: str = "", conversation_data: dict | None = None) -> TurnContext:
        return TurnContext(text, conversation_data=conversation_data)
    return _make


@pytest.fixture
def yes_no():
    """Validator accepting only the literal 'yes' / 'no'."""
    def _validate(text):
        if text == "yes":
            return valid(True)
        if text == "no":
            return valid(False)
        return invalid("notyesorno")
    return _validate


@pytest.fixture
def recorder():
    """Collects renderer and continuation calls in order."""
    class Recorder:
        def __init__(self):
            self.renders = []
            self.successes = []
            self.failures = []

        def render(self, context, last_reason):
            self.renders.append(last_reason)
            context.send(f"prompt ({last_reason})")

        def on_success(self, context, value):
            self.successes.append(value)

        def on_failure(self, context, reason):
            self.failures.append(reason)

    return Recorder()
