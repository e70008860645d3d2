"""Abstract store interface.

Any storage backend for config history (JSON file, SQLite) implements this
interface. The CLI depends on BaseStore — not on a concrete backend — so
backends are swappable without touching CLI code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revlens_store.models import ConfigSnapshot

MAX_HISTORY_ENTRIES = 10


class BaseStore(ABC):
    """Pluggable persistence for config snapshot history.

    History is ordered newest-first and never holds more than ``max_entries``
    snapshots; appending beyond that evicts the oldest.
    """

    def __init__(self, max_entries: int = MAX_HISTORY_ENTRIES):
        self.max_entries = max_entries

    @abstractmethod
    def load(self) -> list[ConfigSnapshot] | None:
        """Return the history newest-first, or None if nothing was ever saved."""

    @abstractmethod
    def append(self, snapshot: ConfigSnapshot) -> None:
        """Prepend a snapshot, evicting the oldest entries beyond max_entries."""

    def latest(self) -> ConfigSnapshot | None:
        """Return the current (newest) snapshot, if any."""
        history = self.load()
        return history[0] if history else None

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional — subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
