"""HTTP status surface for a running watcher.

Runs as an async task next to the watcher. Routes:
  GET  /metrics   - Prometheus exposition
  GET  /readyz    - 200 once every required component is ready, else 503
  GET  /heartbeat - per-chain network stats
  POST /reobserve - {"sequence": N} queues a reobservation request
"""

from __future__ import annotations

import asyncio

import bittensor as bt
from aiohttp import web

from guardian.common.chains import ChainID
from guardian.common.publication import MAX_UINT64, ObservationRequest
from guardian.observability.metrics import METRICS_CONTENT_TYPE, PrometheusWatcherMetrics
from guardian.observability.registry import NetworkStatsRegistry, ReadinessRegistry


class StatusHTTPServer:
    """Lightweight async HTTP server exposing watcher state."""

    def __init__(
        self,
        metrics: PrometheusWatcherMetrics,
        readiness: ReadinessRegistry,
        network_stats: NetworkStatsRegistry,
        obsv_req_queue: asyncio.Queue[ObservationRequest] | None = None,
        chain: ChainID = ChainID.APTOS,
        host: str = "127.0.0.1",
        port: int = 6060,
    ):
        self.metrics = metrics
        self.readiness = readiness
        self.network_stats = network_stats
        self.obsv_req_queue = obsv_req_queue
        self.chain = chain
        self.host = host
        self.port = port
        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None

    def _build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/metrics", self._handle_metrics)
        app.router.add_get("/readyz", self._handle_readyz)
        app.router.add_get("/heartbeat", self._handle_heartbeat)
        app.router.add_post("/reobserve", self._handle_reobserve)
        return app

    async def start(self) -> None:
        """Start the HTTP server."""
        self._app = self._build_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        bt.logging.info({"status_http": {"status": "started", "host": self.host, "port": self.port}})

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            bt.logging.info({"status_http": "stopped"})

    # -- Routes --

    async def _handle_metrics(self, request: web.Request) -> web.Response:
        return web.Response(
            body=self.metrics.generate(),
            headers={"Content-Type": METRICS_CONTENT_TYPE},
        )

    async def _handle_readyz(self, request: web.Request) -> web.Response:
        ready = self.readiness.is_ready()
        return web.json_response(
            {"ready": ready, "components": self.readiness.snapshot()},
            status=200 if ready else 503,
        )

    async def _handle_heartbeat(self, request: web.Request) -> web.Response:
        return web.json_response({"networks": self.network_stats.snapshot()})

    async def _handle_reobserve(self, request: web.Request) -> web.Response:
        if self.obsv_req_queue is None:
            return web.json_response({"error": "reobservation_disabled"}, status=404)

        try:
            body = await request.json()
            sequence = body["sequence"]
        except (ValueError, TypeError, KeyError):
            bt.logging.warning({"status_request": {"endpoint": "reobserve", "status": 400, "error": "invalid_body"}})
            return web.json_response({"error": "invalid_body"}, status=400)

        # bool is an int subclass; floats and strings are not truncated
        if isinstance(sequence, bool) or not isinstance(sequence, int):
            return web.json_response({"error": "sequence_not_integer"}, status=400)
        if not 0 <= sequence <= MAX_UINT64:
            return web.json_response({"error": "sequence_out_of_range"}, status=400)

        await self.obsv_req_queue.put(ObservationRequest.for_sequence(self.chain, sequence))
        bt.logging.info({"status_request": {"endpoint": "reobserve", "sequence": sequence, "status": 202}})
        return web.json_response({"queued": sequence}, status=202)


__all__ = ["StatusHTTPServer"]
