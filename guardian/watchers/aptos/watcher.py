"""Aptos core-bridge watcher.

Polls the core bridge's message event handle, turns each new event into a
Publication and hands it to the signing pipeline. Also answers
reobservation requests for single sequence numbers and reports node height
for readiness and heartbeats.

Everything runs in one coroutine: a tick (poll events, then check health)
and a reobservation never overlap, so the cursor needs no locking.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable

import bittensor as bt

from guardian.common.chains import ChainID
from guardian.common.errors import (
    DecodeError,
    MalformedResponseError,
    SequenceMismatchError,
    TransportError,
)
from guardian.common.publication import ObservationRequest, Publication
from guardian.observability.registry import READINESS_APTOS_SYNCING
from guardian.observability.sinks import (
    HeartbeatNetwork,
    MetricsSink,
    NetworkStats,
    ReadinessSink,
)

from .client import AptosClient
from .cursor import EventCursor
from .decoder import decode_event_data, envelope_sequence, parse_uint


def _parse_json(url: str, body: bytes) -> Any:
    try:
        return json.loads(body)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedResponseError(url, body) from e


def _parse_records(url: str, body: bytes) -> list[Any]:
    """Event pages are JSON arrays; anything else holds no usable records.

    The node reports errors (an unknown handle, a bad start) as JSON objects.
    """
    parsed = _parse_json(url, body)
    if not isinstance(parsed, list):
        bt.logging.warning({"aptos_watcher": {"non_array_page": url, "body": parsed}})
        return []
    return parsed


class AptosWatcher:
    """Single-account, single-handle event watcher."""

    chain = ChainID.APTOS

    def __init__(
        self,
        client: AptosClient,
        msg_queue: asyncio.Queue[Publication],
        obsv_req_queue: asyncio.Queue[ObservationRequest],
        metrics: MetricsSink,
        readiness: ReadinessSink,
        network_stats: NetworkStats,
        poll_interval: float = 1.0,
    ):
        self.client = client
        self.msg_queue = msg_queue
        self.obsv_req_queue = obsv_req_queue
        self.metrics = metrics
        self.readiness = readiness
        self.network_stats = network_stats
        self.poll_interval = poll_interval

        self.cursor = EventCursor()

    # -- Main loop --

    async def run(self) -> None:
        """Serve ticks and reobservation requests until cancelled.

        Raises:
            TransportError: the node could not be reached; the watcher stops.
            asyncio.CancelledError: the surrounding task was cancelled.
        """
        self.network_stats.set_network_stats(
            self.chain, HeartbeatNetwork(contract_address=self.client.account),
        )
        bt.logging.info({
            "aptos_watcher": {
                "status": "starting",
                "rpc": self.client.rpc_url,
                "account": self.client.account,
                "handle": self.client.handle,
                "poll_interval": self.poll_interval,
            }
        })

        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.poll_interval
        pending_request: asyncio.Future[ObservationRequest] | None = None

        try:
            while True:
                if pending_request is None:
                    pending_request = asyncio.ensure_future(self.obsv_req_queue.get())

                timeout = max(0.0, next_tick - loop.time())
                done, _ = await asyncio.wait({pending_request}, timeout=timeout)

                if pending_request in done:
                    request = pending_request.result()
                    pending_request = None
                    await self.handle_reobservation(request)
                    continue

                # Ticker semantics: a slow tick drops the ticks it overran
                now = loop.time()
                while next_tick <= now:
                    next_tick += self.poll_interval
                await self.tick()
        finally:
            if pending_request is not None:
                # Hand back a request that arrived as we were cancelled
                if pending_request.done() and not pending_request.cancelled():
                    self.obsv_req_queue.put_nowait(pending_request.result())
                else:
                    pending_request.cancel()
            bt.logging.info({"aptos_watcher": "stopped"})

    async def tick(self) -> None:
        """Poll new events, then node health."""
        try:
            await self.poll_events()
        except MalformedResponseError as e:
            self._record_malformed("events", e)
            return
        await self.check_health()

    # -- Poll loop --

    async def poll_events(self) -> int:
        """Fetch events past the cursor and publish them.

        Returns the number of publications emitted.
        """
        bootstrapping = self.cursor.bootstrapping
        body = await self._fetch("events", self.client.fetch_events(**self.cursor.query_params()))
        records = _parse_records(self.client.events_url, body)

        emitted = 0
        for record in records:
            seq = envelope_sequence(record)
            if seq is None:
                bt.logging.warning({"aptos_watcher": {"skipped": "missing sequence_number"}})
                continue

            # The cursor moves past a record even when its data fails to decode
            self.cursor.advance(seq)

            if bootstrapping:
                bt.logging.info({"aptos_watcher": {"bootstrap": seq, "next_sequence": self.cursor.next_sequence}})
                break

            if "data" not in record:
                bt.logging.warning({"aptos_watcher": {"skipped": "missing data", "sequence_number": seq}})
                continue

            if await self._observe(record["data"], seq):
                emitted += 1

        bt.logging.debug({
            "aptos_watcher": {
                "records": len(records),
                "emitted": emitted,
                "next_sequence": self.cursor.next_sequence,
            }
        })
        return emitted

    # -- Reobservation --

    async def handle_reobservation(self, request: ObservationRequest) -> int:
        """Fetch one event by sequence number and publish it again.

        Never touches the cursor. Returns the number of publications emitted.
        """
        if request.chain_id != int(self.chain):
            bt.logging.error({"aptos_reobservation": {"dropped": "invalid chain id", "chain_id": request.chain_id}})
            return 0
        try:
            seq = request.sequence
        except ValueError as e:
            bt.logging.error({"aptos_reobservation": {"dropped": str(e)}})
            return 0

        bt.logging.info({"aptos_reobservation": {"received": seq}})

        body = await self._fetch("reobservation", self.client.fetch_events(start=seq, limit=1))
        try:
            records = _parse_records(self.client.events_url, body)
        except MalformedResponseError as e:
            self._record_malformed("reobservation", e)
            return 0

        emitted = 0
        for record in records:
            received = envelope_sequence(record)
            if received is None:
                break
            if received != seq:
                bt.logging.error({"aptos_reobservation": {"dropped": str(SequenceMismatchError(seq, received))}})
                break
            if "data" not in record:
                break
            if await self._observe(record["data"], seq):
                emitted += 1
        return emitted

    # -- Health --

    async def check_health(self) -> int | None:
        """Report the node's block height. Returns it when known."""
        body = await self._fetch("health", self.client.fetch_health())
        try:
            health = _parse_json(self.client.health_url, body)
        except MalformedResponseError as e:
            self._record_malformed("health", e)
            return None

        if not isinstance(health, dict) or "block_height" not in health:
            bt.logging.debug({"aptos_health": "no block_height"})
            return None
        try:
            height = parse_uint(health["block_height"], "block_height")
        except DecodeError as e:
            bt.logging.warning({"aptos_health": {"error": str(e)}})
            return None

        self.metrics.set_current_height(height)
        self.network_stats.set_network_stats(
            self.chain,
            HeartbeatNetwork(height=height, contract_address=self.client.account),
        )
        self.readiness.set_ready(READINESS_APTOS_SYNCING)
        bt.logging.debug({"aptos_health": {"block_height": height}})
        return height

    # -- Helpers --

    async def _fetch(self, what: str, request: Awaitable[bytes]) -> bytes:
        try:
            return await request
        except TransportError as e:
            bt.logging.error({"aptos_watcher": {"fetch": what, "error": str(e)}})
            self.network_stats.add_error_count(self.chain, 1)
            raise

    def _record_malformed(self, what: str, e: MalformedResponseError) -> None:
        bt.logging.error({"aptos_watcher": {"fetch": what, "error": str(e)}})
        self.network_stats.add_error_count(self.chain, 1)

    async def _observe(self, data: Any, seq: int) -> bool:
        try:
            publication = decode_event_data(data, seq, self.chain)
        except DecodeError as e:
            bt.logging.warning({"aptos_watcher": {"decode_failed": seq, "error": str(e)}})
            return False

        self.metrics.inc_messages_confirmed()
        bt.logging.info({"aptos_message_observed": publication.log_fields()})
        await self.msg_queue.put(publication)
        return True


__all__ = ["AptosWatcher"]
