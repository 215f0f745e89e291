"""Centralized path constants for Precision Lens."""

from __future__ import annotations

from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]

CONFIG_PATH = PROJECT_ROOT / "config.txt"
LOGS_DIR = PROJECT_ROOT / "logs"
MASTER_LOG_FILE = LOGS_DIR / "precision_lens.log"
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_STORAGE_PATH = DATA_DIR / "plain_storage.json"


def ensure_directories() -> None:
    """Create the runtime directories used for logs and plain storage."""
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    DATA_DIR.mkdir(parents=True, exist_ok=True)
