"""Aptos watcher entrypoint.

Follows one core-bridge event handle on an Aptos fullnode and publishes
observed messages. Restarts are left to the process supervisor: the
process exits non-zero as soon as the node becomes unreachable.
"""

import argparse
import asyncio
import os
import signal
import sys

import bittensor as bt
from dotenv import load_dotenv
from pydantic import ValidationError

from guardian.common.chains import ChainID
from guardian.common.errors import TransportError
from guardian.common.publication import ObservationRequest, Publication


def _env_or_arg(env_name: str, args: argparse.Namespace, attr: str, default=None):
    """Environment variables take precedence over CLI flags."""
    value = os.environ.get(env_name)
    if value:
        return value
    value = getattr(args, attr, None)
    return default if value is None else value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Guardian Aptos Watcher")
    bt.logging.add_args(parser)
    parser.add_argument("--aptos.rpc", type=str, required=False)
    parser.add_argument("--aptos.account", type=str, required=False)
    parser.add_argument("--aptos.handle", type=str, required=False)
    parser.add_argument("--aptos.poll_interval", type=float, default=1.0)
    parser.add_argument("--status.host", type=str, default="127.0.0.1")
    parser.add_argument("--status.port", type=int, default=6060)
    return parser


def load_config(args: argparse.Namespace):
    from guardian.watchers.aptos.config import WatcherConfig

    return WatcherConfig(
        rpc_url=_env_or_arg("GUARDIAN_APTOS__RPC_URL", args, "aptos.rpc", ""),
        account=_env_or_arg("GUARDIAN_APTOS__ACCOUNT", args, "aptos.account", ""),
        handle=_env_or_arg("GUARDIAN_APTOS__HANDLE", args, "aptos.handle", ""),
        poll_interval_seconds=float(_env_or_arg(
            "GUARDIAN_APTOS__POLL_INTERVAL_SECONDS", args, "aptos.poll_interval", 1.0,
        )),
        status_host=_env_or_arg("GUARDIAN_STATUS__HOST", args, "status.host", "127.0.0.1"),
        status_port=int(_env_or_arg("GUARDIAN_STATUS__PORT", args, "status.port", 6060)),
    )


async def drain_publications(msg_queue: "asyncio.Queue[Publication]") -> None:
    """Stand-in for the signing pipeline: log every publication."""
    while True:
        publication = await msg_queue.get()
        bt.logging.info({"publication": {"message_id": publication.message_id}})
        msg_queue.task_done()


async def run_watcher(config) -> int:
    """Wire collaborators, run until cancelled or fatal. Returns an exit code."""
    from guardian.observability.metrics import PrometheusWatcherMetrics
    from guardian.observability.registry import (
        READINESS_APTOS_SYNCING,
        NetworkStatsRegistry,
        ReadinessRegistry,
    )
    from guardian.observability.server import StatusHTTPServer
    from guardian.watchers.aptos.client import AptosClient
    from guardian.watchers.aptos.watcher import AptosWatcher

    msg_queue: asyncio.Queue[Publication] = asyncio.Queue()
    obsv_req_queue: asyncio.Queue[ObservationRequest] = asyncio.Queue()

    metrics = PrometheusWatcherMetrics(ChainID.APTOS)
    readiness = ReadinessRegistry(required=[READINESS_APTOS_SYNCING])
    network_stats = NetworkStatsRegistry()

    client = AptosClient(config.rpc_url, config.account, config.handle)
    watcher = AptosWatcher(
        client=client,
        msg_queue=msg_queue,
        obsv_req_queue=obsv_req_queue,
        metrics=metrics,
        readiness=readiness,
        network_stats=network_stats,
        poll_interval=config.poll_interval_seconds,
    )
    server = StatusHTTPServer(
        metrics=metrics,
        readiness=readiness,
        network_stats=network_stats,
        obsv_req_queue=obsv_req_queue,
        chain=ChainID.APTOS,
        host=config.status_host,
        port=config.status_port,
    )

    await server.start()
    watcher_task = asyncio.create_task(watcher.run())
    drain_task = asyncio.create_task(drain_publications(msg_queue))

    # Graceful shutdown
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, watcher_task.cancel)

    try:
        await watcher_task
        return 0
    except asyncio.CancelledError:
        bt.logging.info({"aptos_watcher_main": "shutdown_signal_received"})
        return 0
    except TransportError as e:
        bt.logging.error({"aptos_watcher_main": {"fatal": str(e)}})
        return 1
    finally:
        drain_task.cancel()
        await asyncio.gather(drain_task, return_exceptions=True)
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await server.stop()
        await client.close()


def main() -> None:
    # Load .env if not in test mode
    if os.environ.get("GUARDIAN_TEST_MODE") != "true":
        load_dotenv()

    args = build_parser().parse_args()

    try:
        config = load_config(args)
    except (ValidationError, ValueError) as e:
        bt.logging.error(
            "GUARDIAN_APTOS__RPC_URL, GUARDIAN_APTOS__ACCOUNT and GUARDIAN_APTOS__HANDLE are required: "
            f"{e}"
        )
        sys.exit(1)

    bt.logging.info({"aptos_watcher_config": config.model_dump()})
    sys.exit(asyncio.run(run_watcher(config)))


if __name__ == "__main__":
    main()
