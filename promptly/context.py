"""Turn context — the host-supplied view of one incoming message."""


class TurnContext:
    """Input, ordered output and conversation data for a single turn.

    ``conversation_data`` belongs to the host and is only passed through
    to business logic; the topic core never interprets it.
    """

    def __init__(self, text: str, conversation_data: dict | None = None):
        self.text = text
        self.conversation_data = conversation_data if conversation_data is not None else {}
        self.sent: list[str] = []

    def send(self, *messages: str) -> "TurnContext":
        """Queue outgoing messages in the order given."""
        self.sent.extend(messages)
        return self
