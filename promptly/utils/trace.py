"""Stderr diagnostics for topic transitions."""

import sys

from promptly.config import get_config


def warn(message: str) -> None:
    """Print a warning line to stderr unconditionally."""
    print(f"[promptly] Warning: {message}", file=sys.stderr)


def trace(message: str) -> None:
    """Print a transition line to stderr when trace_turns is enabled."""
    if get_config().get("trace_turns", False):
        print(f"[promptly] {message}", file=sys.stderr)
