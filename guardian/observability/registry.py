"""In-process readiness and heartbeat registries.

Both are owned by the entrypoint and shared between the watcher (writer)
and the status server (reader). Everything runs on one event loop, so
there is no locking.
"""

from __future__ import annotations

import bittensor as bt

from guardian.common.chains import ChainID
from guardian.observability.sinks import HeartbeatNetwork

# Readiness component names
READINESS_APTOS_SYNCING = "aptos_syncing"


class ReadinessRegistry:
    """Tracks which required components have reported ready."""

    def __init__(self, required: list[str] | None = None):
        self.required = list(required or [])
        self._ready: set[str] = set()

    def set_ready(self, component: str) -> None:
        if component not in self._ready:
            bt.logging.info({"readiness": {"component": component, "status": "ready"}})
        self._ready.add(component)

    def is_ready(self, component: str | None = None) -> bool:
        """Check one component, or every required one when none is given."""
        if component is not None:
            return component in self._ready
        return all(c in self._ready for c in self.required)

    def snapshot(self) -> dict[str, bool]:
        names = sorted(set(self.required) | self._ready)
        return {name: name in self._ready for name in names}


class NetworkStatsRegistry:
    """Latest heartbeat stats per chain.

    Error counts accumulate independently of stats updates, which replace
    height and contract address but keep the running count.
    """

    def __init__(self):
        self._stats: dict[ChainID, HeartbeatNetwork] = {}

    def set_network_stats(self, chain: ChainID, stats: HeartbeatNetwork) -> None:
        previous = self._stats.get(chain)
        error_count = previous.error_count if previous else 0
        self._stats[chain] = stats.model_copy(update={"error_count": error_count})

    def add_error_count(self, chain: ChainID, delta: int) -> None:
        current = self._stats.get(chain) or HeartbeatNetwork()
        self._stats[chain] = current.model_copy(
            update={"error_count": current.error_count + delta}
        )

    def get(self, chain: ChainID) -> HeartbeatNetwork | None:
        return self._stats.get(chain)

    def snapshot(self) -> dict[str, dict]:
        return {
            str(chain): stats.model_dump(mode="json")
            for chain, stats in sorted(self._stats.items())
        }


__all__ = ["NetworkStatsRegistry", "READINESS_APTOS_SYNCING", "ReadinessRegistry"]
