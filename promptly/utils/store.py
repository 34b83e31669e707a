"""Conversation state stores used by the driver.

A stored record is ``{"topic_state": {...}, "conversation_data": {...}}``
keyed by conversation id. Records are JSON; TypedDict states keep absent
keys absent, so optional-vs-zero survives a round-trip.
"""

import copy
import hashlib
import json
import re
from pathlib import Path

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from promptly.config import get_config
from promptly.utils.trace import warn

_SAFE_ID_RE = re.compile(r"[^A-Za-z0-9_.-]")


class MemoryStateStore:
    """Process-local store. Records are deep-copied in and out."""

    def __init__(self):
        self._records: dict[str, dict] = {}

    def load(self, conversation_id: str) -> dict | None:
        record = self._records.get(conversation_id)
        return copy.deepcopy(record) if record is not None else None

    def save(self, conversation_id: str, record: dict) -> None:
        self._records[conversation_id] = copy.deepcopy(record)

    def delete(self, conversation_id: str) -> None:
        self._records.pop(conversation_id, None)


class JsonFileStateStore:
    """One JSON file per conversation under ``directory``.

    Transient I/O errors (OSError) are retried with exponential backoff;
    a file that is not valid JSON raises ValueError immediately.
    """

    def __init__(self, directory: str | Path | None = None, max_retries: int | None = None):
        config = get_config()
        self.directory = Path(directory or config.get("state_dir", "./.promptly/state"))
        self.max_retries = max_retries if max_retries is not None else config.get("store_max_retries", 3)

    def path_for(self, conversation_id: str) -> Path:
        if not conversation_id:
            raise ValueError("Conversation id must be a non-empty string.")
        # Sanitizing alone can map distinct ids to one name; the digest keeps them apart.
        digest = hashlib.sha256(conversation_id.encode("utf-8")).hexdigest()[:16]
        return self.directory / f"{_SAFE_ID_RE.sub('_', conversation_id)[:64]}-{digest}.json"

    def _with_retry(self, fn, *args):
        retries = self.max_retries

        @retry(
            stop=stop_after_attempt(retries + 1),  # +1 because first attempt counts
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
            before_sleep=lambda state: warn(
                f"State store error: {state.outcome.exception()!r}. "
                f"Retrying in {state.next_action.sleep:.1f}s "
                f"(attempt {state.attempt_number}/{retries})..."
            ),
        )
        def _call():
            return fn(*args)

        return _call()

    def load(self, conversation_id: str) -> dict | None:
        path = self.path_for(conversation_id)
        if not path.exists():
            return None
        text = self._with_retry(path.read_text, "utf-8")
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"State file {path} is not valid JSON: {exc}") from exc

    def save(self, conversation_id: str, record: dict) -> None:
        path = self.path_for(conversation_id)
        content = json.dumps(record, indent=2, sort_keys=True)

        def _write():
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_text(content, encoding="utf-8")
            tmp_path.replace(path)

        self._with_retry(_write)

    def delete(self, conversation_id: str) -> None:
        path = self.path_for(conversation_id)
        self._with_retry(path.unlink, True)  # missing_ok
