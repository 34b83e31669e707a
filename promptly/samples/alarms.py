"""Alarm bot sample — add, delete and list alarms.

Commands are matched literally ('add alarm', 'delete alarm', 'show alarms',
'help'). The alarm list lives in the conversation data owned by the host;
the delete dialog takes a snapshot of it when it starts.
"""

import re
from typing import TypedDict

from promptly.context import TurnContext
from promptly.state import TOO_MANY_ATTEMPTS, ParentTopicState, ValidationResult, in_progress, invalid, valid
from promptly.topics.parent import ParentTopic
from promptly.topics.prompt import Prompt, choice_prompt, confirm_prompt, send_lines, text_prompt

_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")

HELP_TEXT = "Say 'add alarm', 'delete alarm' or 'show alarms'."
GIVE_UP_TEXT = "I'm sorry I'm having issues understanding you. Let's try something else. Say 'help'."


class Alarm(TypedDict):
    title: str
    time: str


class AddAlarmState(ParentTopicState, total=False):
    title: str
    time: str


class DeleteAlarmState(ParentTopicState, total=False):
    alarms: list[Alarm]  # Snapshot taken when the dialog starts.
    alarm_index: int
    delete_confirmed: bool


def show_alarms(context: TurnContext, alarms: list[Alarm]) -> None:
    if not alarms:
        context.send("You have no alarms.")
        return
    lines = [f"{i}. {a['title']} at {a['time']}" for i, a in enumerate(alarms, 1)]
    context.send("Here are your alarms:", *lines)


def time_validator(text: str) -> ValidationResult:
    """Accept H:MM or HH:MM (24h), normalized to HH:MM."""
    match = _TIME_RE.match(text.strip()) if isinstance(text, str) else None
    if not match:
        return invalid("badtime")
    return valid(f"{int(match.group(1)):02d}:{match.group(2)}")


def _send_give_up(context: TurnContext, reason: str) -> None:
    if reason == TOO_MANY_ATTEMPTS:
        context.send(GIVE_UP_TEXT)


class AddAlarmTopic(ParentTopic):
    def create_children(self):
        return {
            "title_prompt": lambda state: text_prompt(
                send_lines("What would you like to call your alarm?"),
                state=state,
                on_success=lambda c, v: self.state.update(title=v),
            ),
            "time_prompt": lambda state: Prompt(
                {
                    "renderer": self._render_time_prompt,
                    "validator": time_validator,
                    "max_turns": 3,
                    "on_success": lambda c, v: self.state.update(time=v),
                    "on_failure": _send_give_up,
                },
                state=state,
            ),
        }

    def _render_time_prompt(self, context: TurnContext, last_reason: str | None) -> None:
        if last_reason == "badtime":
            context.send("Sorry, I need a time like 07:30.")
        context.send(f"What time would you like to set the '{self.state['title']}' alarm for?")

    def decide(self, context: TurnContext):
        if "title" not in self.state:
            return self.activate(context, "title_prompt")
        if "time" not in self.state:
            return self.activate(context, "time_prompt")
        return self.succeed(context, {"title": self.state["title"], "time": self.state["time"]})

    def on_child_failed(self, context, child_name, reason):
        return self.fail(context, reason)


class DeleteAlarmTopic(ParentTopic):
    def create_children(self):
        return {
            # Built per turn from the current snapshot, never from an empty list.
            "which_alarm_prompt": lambda state: choice_prompt(
                [a["title"] for a in self.state["alarms"]],
                self._render_which_alarm,
                state=state,
                max_turns=2,
                on_success=lambda c, v: self.state.update(alarm_index=v),
                on_failure=_send_give_up,
            ),
            "confirm_delete_prompt": lambda state: confirm_prompt(
                self._render_confirm,
                state=state,
                max_turns=2,
                on_success=lambda c, v: self.state.update(delete_confirmed=v),
                on_failure=_send_give_up,
            ),
        }

    def _render_which_alarm(self, context: TurnContext, last_reason: str | None) -> None:
        if last_reason == "indexnotfound":
            context.send(f"Sorry, I couldn't find an alarm named '{context.text}'.", "Let's try again.")
        show_alarms(context, self.state["alarms"])
        context.send("Which alarm would you like to delete?")

    def _render_confirm(self, context: TurnContext, last_reason: str | None) -> None:
        if last_reason == "notyesorno":
            context.send("Sorry, I was expecting 'yes' or 'no'.", "Let's try again.")
        title = self.state["alarms"][self.state["alarm_index"]]["title"]
        context.send(f"Are you sure you want to delete alarm '{title}' ('yes' or 'no')?")

    def decide(self, context: TurnContext):
        if "alarms" not in self.state:
            self.state["alarms"] = list(context.conversation_data.get("alarms", []))

        if not self.state["alarms"]:
            context.send("There are no alarms to delete.")
            return self.fail(context, "noalarms")

        if "alarm_index" not in self.state:
            # Only one candidate, no need to ask.
            if len(self.state["alarms"]) == 1:
                show_alarms(context, self.state["alarms"])
                self.state["alarm_index"] = 0
            else:
                return self.activate(context, "which_alarm_prompt")

        if "delete_confirmed" not in self.state:
            return self.activate(context, "confirm_delete_prompt")

        alarm = self.state["alarms"][self.state["alarm_index"]]
        return self.succeed(context, {"alarm": alarm, "confirmed": self.state["delete_confirmed"]})

    def on_child_failed(self, context, child_name, reason):
        return self.fail(context, reason)


class AlarmBotTopic(ParentTopic):
    """Root topic: routes commands to the add/delete dialogs."""

    def create_children(self):
        return {
            "add_alarm": lambda state: AddAlarmTopic(state),
            "delete_alarm": lambda state: DeleteAlarmTopic(state),
        }

    def decide(self, context: TurnContext):
        command = context.text.strip().lower()
        if command == "add alarm":
            return self.activate(context, "add_alarm")
        if command == "delete alarm":
            return self.activate(context, "delete_alarm")
        if command == "show alarms":
            show_alarms(context, context.conversation_data.get("alarms", []))
            return in_progress()

        context.send(HELP_TEXT)
        return in_progress()

    def on_child_succeeded(self, context, child_name, value):
        alarms = context.conversation_data.setdefault("alarms", [])
        if child_name == "add_alarm":
            alarms.append(value)
            context.send(f"Added alarm '{value['title']}' at {value['time']}.")
        elif value["confirmed"]:
            if value["alarm"] in alarms:
                alarms.remove(value["alarm"])
            context.send(f"Deleted alarm '{value['alarm']['title']}'.")
        else:
            context.send(f"OK, I won't delete alarm '{value['alarm']['title']}'.")
        return in_progress()
