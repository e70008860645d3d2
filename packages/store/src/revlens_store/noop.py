"""No-op store — used when persistence is switched off (store: noop).

Using a NoOpStore rather than None lets the CLI always call store.append()
without conditional checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from revlens_store.base import BaseStore

if TYPE_CHECKING:
    from revlens_store.models import ConfigSnapshot


class NoOpStore(BaseStore):
    """Silently discards all snapshots — settings then only live in .revlens.yml."""

    def load(self) -> list[ConfigSnapshot] | None:
        return None

    def append(self, snapshot: ConfigSnapshot) -> None:
        pass
