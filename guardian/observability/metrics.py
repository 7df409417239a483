"""Prometheus metrics for chain watchers.

Each instance owns its CollectorRegistry so several watchers (and tests)
never collide on metric names.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

from guardian.common.chains import ChainID

# Content type for the /metrics endpoint
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


class PrometheusWatcherMetrics:
    """MetricsSink backed by prometheus_client."""

    def __init__(self, chain: ChainID, registry: CollectorRegistry | None = None) -> None:
        self.chain = chain
        self._registry = registry or CollectorRegistry()

        self.observations_confirmed_total = Counter(
            name="guardian_observations_confirmed_total",
            documentation="Total number of verified observations found",
            labelnames=["chain"],
            registry=self._registry,
        )
        self.current_height = Gauge(
            name="guardian_current_height",
            documentation="Current block height reported by the chain node",
            labelnames=["chain"],
            registry=self._registry,
        )

    def inc_messages_confirmed(self) -> None:
        self.observations_confirmed_total.labels(chain=str(self.chain)).inc()

    def set_current_height(self, height: int) -> None:
        self.current_height.labels(chain=str(self.chain)).set(float(height))

    def get_registry(self) -> CollectorRegistry:
        return self._registry

    def generate(self) -> bytes:
        """Render the registry in Prometheus exposition format."""
        return generate_latest(self._registry)


__all__ = ["METRICS_CONTENT_TYPE", "PrometheusWatcherMetrics"]
