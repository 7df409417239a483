"""Metrics, readiness and heartbeat reporting for watchers.

Watchers only see the protocols in ``sinks``; the concrete registries and
the status server are wired together by the entrypoint.
"""

from .metrics import PrometheusWatcherMetrics
from .registry import READINESS_APTOS_SYNCING, NetworkStatsRegistry, ReadinessRegistry
from .sinks import HeartbeatNetwork, MetricsSink, NetworkStats, ReadinessSink

__all__ = [
    "HeartbeatNetwork",
    "MetricsSink",
    "NetworkStats",
    "NetworkStatsRegistry",
    "PrometheusWatcherMetrics",
    "READINESS_APTOS_SYNCING",
    "ReadinessRegistry",
    "ReadinessSink",
]
