"""Entrypoint wiring test: the watcher stops on an unreachable node.

Runs the real status server on a free localhost port and points the
client at a port nothing listens on.
"""

from __future__ import annotations

import asyncio
import socket

import pytest

from guardian.entrypoints.aptos_watcher import run_watcher
from guardian.watchers.aptos.config import WatcherConfig


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.mark.integration
@pytest.mark.asyncio
class TestRunWatcher:

    async def test_unreachable_node_exits_nonzero_and_reaps_tasks(self):
        config = WatcherConfig(
            rpc_url=f"http://127.0.0.1:{_free_port()}",
            account="0xde00",
            handle="0xde00::state::WormholeMessageHandle",
            poll_interval_seconds=0.01,
            status_port=_free_port(),
        )

        code = await asyncio.wait_for(run_watcher(config), timeout=10)

        assert code == 1
        pending = [t.get_coro().__name__ for t in asyncio.all_tasks()]
        assert "drain_publications" not in pending
