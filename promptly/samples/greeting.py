"""Greeting sample — asks for a name and an age, then greets the user."""

from promptly.context import TurnContext
from promptly.state import ParentTopicState, ValidationResult, in_progress, invalid
from promptly.topics.parent import ParentTopic
from promptly.topics.prompt import Prompt, send_lines, text_prompt
from promptly.utils.validators import int_validator

MAX_AGE = 150


class GreetingState(ParentTopicState, total=False):
    name: str
    age: int


def age_validator(text: str) -> ValidationResult:
    result = int_validator(text)
    if "value" in result and not 0 <= result["value"] <= MAX_AGE:
        return invalid("outofrange")
    return result


def _render_age_prompt(context: TurnContext, last_reason: str | None) -> None:
    if last_reason == "notanumber":
        context.send("Sorry, I need your age as a number.")
    elif last_reason == "outofrange":
        context.send(f"Sorry, that doesn't look like an age between 0 and {MAX_AGE}.")
    context.send("How old are you?")


class GreetingTopic(ParentTopic):
    def create_children(self):
        return {
            "name_prompt": lambda state: text_prompt(
                send_lines("What is your name?"),
                state=state,
                on_success=lambda c, v: self.state.update(name=v),
            ),
            "age_prompt": lambda state: Prompt(
                {
                    "renderer": _render_age_prompt,
                    "validator": age_validator,
                    "on_success": lambda c, v: self.state.update(age=v),
                },
                state=state,
            ),
        }

    def decide(self, context: TurnContext):
        if "name" not in self.state:
            return self.activate(context, "name_prompt")
        if "age" not in self.state:
            return self.activate(context, "age_prompt")

        context.send(f"Hello {self.state['name']}! You are {self.state['age']} years old.")
        return in_progress()
