"""Offset store: persists per-file read sizes so restarts resume where they left off.

The state document is a JSON object::

    {
      "files": {"ADSI.20251111.log": {"size": 50, "date": "20251111"}},
      "lastUpdate": "2025-11-11T10:00:00.000000+00:00"
    }

Loading never fails: a missing or unreadable document yields an empty state,
and malformed entries are coerced rather than rejected.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

from log_consolidator.dates import is_within_retention

logger = logging.getLogger(__name__)


def _coerce_size(value) -> int:
    try:
        size = int(value)
    except (TypeError, ValueError):
        try:
            size = int(float(value))
        except (TypeError, ValueError):
            return 0
    return max(size, 0)


@dataclass
class TrackedFile:
    name: str
    last_size: int = 0
    date: str = ""

    def to_dict(self) -> dict:
        return {"size": self.last_size, "date": self.date}

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "TrackedFile":
        date = data.get("date")
        return cls(
            name=name,
            last_size=_coerce_size(data.get("size", 0)),
            date="" if date is None else str(date),
        )


@dataclass
class State:
    files: dict[str, TrackedFile] = field(default_factory=dict)
    last_update: str | None = None

    def get_size(self, name: str) -> int:
        entry = self.files.get(name)
        return entry.last_size if entry else 0

    def track(self, name: str, size: int, date: str) -> None:
        self.files[name] = TrackedFile(name=name, last_size=size, date=date)


class StateStore:
    def __init__(self, path: str):
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> State:
        """Read the state document. Any failure yields a fresh, empty state."""
        if not os.path.exists(self._path):
            logger.info("No state file at %s, starting fresh", self._path)
            return State()
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Failed to load state %s: %s", self._path, e)
            return State()

        if not isinstance(data, dict):
            logger.warning("Ignoring state %s: top level is not an object", self._path)
            return State()

        raw_files = data.get("files") or {}
        if not isinstance(raw_files, dict):
            logger.warning("Ignoring 'files' in %s: not an object", self._path)
            raw_files = {}

        files: dict[str, TrackedFile] = {}
        for name, entry in raw_files.items():
            if not isinstance(entry, dict):
                logger.warning("Dropping malformed state entry for %s", name)
                continue
            files[name] = TrackedFile.from_dict(name, entry)

        last_update = data.get("lastUpdate")
        state = State(files=files, last_update=None if last_update is None else str(last_update))
        logger.info("Loaded state from %s (%d tracked files)", self._path, len(files))
        return state

    def save(self, state: State) -> None:
        """Atomic write: write to tmp file then replace."""
        state.last_update = datetime.now(timezone.utc).isoformat()
        data = {
            "files": {name: entry.to_dict() for name, entry in state.files.items()},
            "lastUpdate": state.last_update,
        }
        os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
        tmp_path = self._path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self._path)


def prune_expired(state: State, retention_days: int, date_format: str, now=None) -> None:
    """Drop every tracked file whose date falls outside the retention window."""
    expired = [
        name for name, entry in state.files.items()
        if not is_within_retention(entry.date, retention_days, date_format, now)
    ]
    for name in expired:
        del state.files[name]
        logger.info("Pruned expired state entry: %s", name)
