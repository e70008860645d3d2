"""Config history data models.

Decoupled from revlens_core so the store layer can be used independently:
a snapshot holds the settings as a plain dict, and the CLI maps it to and
from core types.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


def now_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ConfigSnapshot:
    """An immutable, timestamped copy of user settings.

    Created by the CLI every time settings are saved. The newest snapshot is
    the current configuration.
    """

    config: dict
    timestamp: int = field(default_factory=now_millis)  # epoch milliseconds

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "config": self.config}

    @classmethod
    def from_dict(cls, d: dict) -> ConfigSnapshot:
        return cls(config=d.get("config") or {}, timestamp=int(d.get("timestamp", 0)))
