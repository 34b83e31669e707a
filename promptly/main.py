"""Entry point: runs a sample bot in the terminal, one line per turn."""

import sys

from promptly.config import get_config
from promptly.driver import ConversationDriver
from promptly.samples.alarms import AlarmBotTopic
from promptly.samples.greeting import GreetingTopic
from promptly.utils.store import JsonFileStateStore, MemoryStateStore

SAMPLES = {
    "alarms": AlarmBotTopic,
    "greeting": GreetingTopic,
}


def build_driver(sample: str, in_memory: bool = False) -> ConversationDriver:
    """Wire the named sample's root topic to a state store."""
    if sample not in SAMPLES:
        raise ValueError(f"Unknown sample '{sample}'. Must be one of: {sorted(SAMPLES)}")
    root_cls = SAMPLES[sample]
    store = MemoryStateStore() if in_memory else JsonFileStateStore()
    return ConversationDriver(lambda state: root_cls(state), store)


def run(sample: str, conversation_id: str = "console", in_memory: bool = False, reset: bool = False) -> None:
    """Read turns from stdin until EOF, printing each turn's replies."""
    driver = build_driver(sample, in_memory=in_memory)
    if reset:
        driver.reset(conversation_id)

    print(f"[promptly] Sample '{sample}', conversation '{conversation_id}'. Ctrl+D / Ctrl+Z to quit.")
    for line in sys.stdin:
        for message in driver.handle_turn(conversation_id, line.rstrip("\n")):
            print(f"bot> {message}")


def main() -> None:
    """CLI entry point — [--sample NAME] [--conversation ID] [--memory] [--reset]."""
    config = get_config()
    sample = config.get("sample", "alarms")
    conversation_id = "console"
    args = sys.argv[1:]

    in_memory = "--memory" in args
    if in_memory:
        args.remove("--memory")
    reset = "--reset" in args
    if reset:
        args.remove("--reset")

    while args:
        flag = args.pop(0)
        if flag in ("--sample", "--conversation") and args:
            value = args.pop(0)
            if flag == "--sample":
                sample = value
            else:
                conversation_id = value
        else:
            print(f"[promptly] Unknown argument: {flag}", file=sys.stderr)
            sys.exit(2)

    run(sample, conversation_id=conversation_id, in_memory=in_memory, reset=reset)


if __name__ == "__main__":
    main()
