"""Event-handle cursor for the Aptos poll loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class EventCursor:
    """Next sequence number to fetch from the event handle.

    0 means no baseline yet: the next poll asks for the latest event only
    and seeds the cursor from it. The cursor lives in memory, so a
    restarted watcher re-bootstraps and skips any backlog.
    """

    next_sequence: int = 0

    @property
    def bootstrapping(self) -> bool:
        return self.next_sequence == 0

    def query_params(self) -> dict[str, Any]:
        if self.bootstrapping:
            return {"limit": 1}
        return {"start": self.next_sequence}

    def advance(self, sequence_number: int) -> None:
        self.next_sequence = sequence_number + 1


__all__ = ["EventCursor"]
