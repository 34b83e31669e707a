"""Tests for the greeting sample run through the ConversationDriver."""

import pytest

from promptly.driver import ConversationDriver
from promptly.samples.greeting import GreetingTopic, age_validator
from promptly.utils.store import MemoryStateStore


@pytest.fixture
def driver(mock_config):
    return ConversationDriver(lambda state: GreetingTopic(state), MemoryStateStore())


class TestAgeValidator:
    def test_zero_is_valid(self):
        assert age_validator("0") == {"value": 0}

    def test_out_of_range(self):
        assert age_validator("400") == {"reason": "outofrange"}

    def test_not_a_number(self):
        assert age_validator("old") == {"reason": "notanumber"}


class TestGreetingFlow:
    def test_full_conversation(self, driver):
        assert driver.handle_turn("c1", "hi") == ["What is your name?"]
        assert driver.handle_turn("c1", "Ada") == ["How old are you?"]
        assert driver.handle_turn("c1", "36") == ["Hello Ada! You are 36 years old."]
        assert driver.handle_turn("c1", "hi again") == ["Hello Ada! You are 36 years old."]

    def test_retry_message_on_bad_age(self, driver):
        driver.handle_turn("c1", "hi")
        driver.handle_turn("c1", "Ada")
        assert driver.handle_turn("c1", "old") == [
            "Sorry, I need your age as a number.",
            "How old are you?",
        ]

    def test_age_zero_is_not_asked_again(self, driver):
        for text in ("hi", "Newborn"):
            driver.handle_turn("c1", text)
        assert driver.handle_turn("c1", "0") == ["Hello Newborn! You are 0 years old."]

    def test_conversations_are_independent(self, driver):
        driver.handle_turn("c1", "hi")
        driver.handle_turn("c1", "Ada")
        assert driver.handle_turn("c2", "hi") == ["What is your name?"]
        assert driver.handle_turn("c1", "36") == ["Hello Ada! You are 36 years old."]
