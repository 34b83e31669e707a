"""Centralized config loading — read once at import time."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env from project root (parent of promptly/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

_config = yaml.safe_load(CONFIG_PATH.read_text())

# Environment overrides
if os.environ.get("PROMPTLY_STATE_DIR"):
    _config["state_dir"] = os.environ["PROMPTLY_STATE_DIR"]
if os.environ.get("PROMPTLY_TRACE"):
    _config["trace_turns"] = os.environ["PROMPTLY_TRACE"].lower() in ("1", "true", "yes")


def get_config() -> dict:
    """Return the loaded config dictionary."""
    return _config
