"""
Append-only usage log.

Writes are best effort: ``record_usage`` never lets a storage failure
reach the caller.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

import pendulum

logger = logging.getLogger(__name__)


class UsageLogStore(Protocol):
    """Protocol describing a usage log backend."""

    def log_usage(self, timezone: str, prompt: str) -> None:
        """Persist one usage record."""


class JsonlUsageLogStore:
    """Stores one JSON object per line: timezone, prompt and creation time."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def log_usage(self, timezone: str, prompt: str) -> None:
        record = {
            "timezone": timezone,
            "prompt": prompt,
            "created_at": pendulum.now("UTC").to_iso8601_string(),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as file_handle:
            file_handle.write(json.dumps(record, ensure_ascii=False) + "\n")


class NullUsageLogStore:
    """Used when usage logging is disabled."""

    def log_usage(self, timezone: str, prompt: str) -> None:
        return None


def record_usage(store: UsageLogStore, timezone: str, prompt: str) -> None:
    """Write a usage record, logging and discarding any failure."""
    try:
        store.log_usage(timezone=timezone, prompt=prompt)
    except Exception as exc:
        logger.warning("Could not write usage log: %s", exc)
