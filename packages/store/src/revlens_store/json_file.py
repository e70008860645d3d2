"""JsonFileStore — the default store: one JSON file holding the whole history.

Data format: a JSON array of ``{"timestamp": <epoch ms>, "config": {...}}``
objects, newest first, capped at max_entries. The whole file is rewritten on
every append; with at most ten small entries that is cheaper than anything
incremental.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from revlens_store.base import MAX_HISTORY_ENTRIES, BaseStore
from revlens_store.models import ConfigSnapshot

logger = logging.getLogger(__name__)

HISTORY_FILENAME = "config_history.json"


def _is_valid_record(record) -> bool:
    if not isinstance(record, dict):
        return False
    timestamp = record.get("timestamp")
    # bool is an int subclass but never a valid timestamp.
    if not isinstance(timestamp, int) or isinstance(timestamp, bool):
        return False
    return isinstance(record.get("config"), dict)


class JsonFileStore(BaseStore):
    """Stores config history in a single JSON file.

    The file and its parent directory are created on first append. A missing
    or unreadable file reads as "no history" so a corrupt file never blocks
    a review.
    """

    def __init__(self, path: str | Path, max_entries: int = MAX_HISTORY_ENTRIES):
        super().__init__(max_entries)
        self.path = Path(path)

    def load(self) -> list[ConfigSnapshot] | None:
        records = self._read_records()
        if records is None:
            return None
        snapshots = []
        for record in records:
            if not _is_valid_record(record):
                logger.warning("Skipping malformed config history entry in %s: %r", self.path, record)
                continue
            snapshots.append(ConfigSnapshot.from_dict(record))
        return snapshots or None

    def append(self, snapshot: ConfigSnapshot) -> None:
        """Prepend a snapshot and rewrite the file."""
        existing = self._read_records() or []
        updated = [snapshot.to_dict(), *existing][: self.max_entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(updated, indent=2))
        except OSError as e:
            # Settings are still applied for this run; only the history is lost.
            logger.warning("JsonFileStore.append() failed (%s): %s", type(e).__name__, e)
            print(f"Warning: could not save config history to {self.path} ({type(e).__name__}: {e})")

    def _read_records(self) -> list[dict] | None:
        """Read the current JSON array, or return None if there is none."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load config history from %s: %s", self.path, e)
            return None
        return data if isinstance(data, list) else None
