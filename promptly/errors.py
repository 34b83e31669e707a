"""Errors raised by the topic core."""


class TopicConfigError(RuntimeError):
    """The topic tree is wired incorrectly.

    Raised for programmer errors (an active-topic pointer to a missing child,
    a Prompt with no validator or renderer) so the turn aborts instead of
    leaving the conversation stuck.
    """
