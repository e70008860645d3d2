"""SQLiteStore — config history in a local SQLite database.

Useful when several tools share one settings database or when the history
file should live next to other SQLite state.

Schema:
  snapshots — one row per saved config; rows beyond max_entries are pruned
              on every append so the table mirrors the capped history.
"""

from __future__ import annotations

import json
import logging
import sqlite3

from revlens_store.base import MAX_HISTORY_ENTRIES, BaseStore
from revlens_store.models import ConfigSnapshot

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS snapshots (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp   INTEGER NOT NULL,
    config_json TEXT NOT NULL DEFAULT '{}'
);
"""


class SQLiteStore(BaseStore):
    """Stores config history in a SQLite database file.

    Configure via .revlens.yml: ``store: sqlite`` and ``store_path: /path/to/revlens.db``.
    """

    def __init__(self, db_path: str = ".revlens.db", max_entries: int = MAX_HISTORY_ENTRIES):
        super().__init__(max_entries)
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def load(self) -> list[ConfigSnapshot] | None:
        rows = self._conn.execute(
            "SELECT * FROM snapshots ORDER BY id DESC LIMIT ?",
            (self.max_entries,),
        ).fetchall()
        if not rows:
            return None
        return [self._row_to_snapshot(r) for r in rows]

    def append(self, snapshot: ConfigSnapshot) -> None:
        self._conn.execute(
            "INSERT INTO snapshots (timestamp, config_json) VALUES (?, ?)",
            (snapshot.timestamp, json.dumps(snapshot.config)),
        )
        self._conn.execute(
            """
            DELETE FROM snapshots WHERE id NOT IN (
                SELECT id FROM snapshots ORDER BY id DESC LIMIT ?
            )
            """,
            (self.max_entries,),
        )
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_snapshot(row: sqlite3.Row) -> ConfigSnapshot:
        return ConfigSnapshot(config=json.loads(row["config_json"] or "{}"), timestamp=row["timestamp"])
