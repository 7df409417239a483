"""Collaborator protocols a watcher reports into.

Implementations: PrometheusWatcherMetrics, ReadinessRegistry and
NetworkStatsRegistry in this package; tests pass mocks.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from guardian.common.chains import ChainID


class HeartbeatNetwork(BaseModel):
    """Per-chain stats gossiped in guardian heartbeats."""

    height: int = 0
    contract_address: str = ""
    error_count: int = 0


@runtime_checkable
class MetricsSink(Protocol):
    """Counters and gauges for one chain."""

    def inc_messages_confirmed(self) -> None:
        """Count one emitted publication."""
        ...

    def set_current_height(self, height: int) -> None:
        """Record the node's latest block height."""
        ...


@runtime_checkable
class ReadinessSink(Protocol):

    def set_ready(self, component: str) -> None:
        """Mark a component ready."""
        ...


@runtime_checkable
class NetworkStats(Protocol):
    """Latest per-chain heartbeat state."""

    def set_network_stats(self, chain: ChainID, stats: HeartbeatNetwork) -> None:
        ...

    def add_error_count(self, chain: ChainID, delta: int) -> None:
        ...


__all__ = ["HeartbeatNetwork", "MetricsSink", "NetworkStats", "ReadinessSink"]
