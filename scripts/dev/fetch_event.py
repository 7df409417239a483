"""Fetch and decode a single core-bridge event from an Aptos node.

Handy for checking what a reobservation of a given sequence would emit.

Usage:
    uv run python scripts/dev/fetch_event.py \
      --rpc http://127.0.0.1:8080 \
      --account 0xde0036a9600559e295d5f6802ef6f3f802f510366e0c23912b0655d972166017 \
      --handle 0xde0036a9600559e295d5f6802ef6f3f802f510366e0c23912b0655d972166017::state::WormholeMessageHandle \
      --sequence 7
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys

# Ensure project root on sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))


async def fetch(rpc: str, account: str, handle: str, sequence: int) -> int:
    from guardian.common.errors import DecodeError, TransportError
    from guardian.watchers.aptos.client import AptosClient
    from guardian.watchers.aptos.decoder import decode_event_data, envelope_sequence

    client = AptosClient(rpc, account, handle)
    try:
        body = await client.fetch_events(start=sequence, limit=1)
    except TransportError as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        await client.close()

    try:
        records = json.loads(body)
    except ValueError:
        print(f"ERROR: invalid json: {body[:256]!r}")
        return 1
    if not isinstance(records, list) or not records:
        print(f"ERROR: no event at sequence {sequence}: {records}")
        return 1

    record = records[0]
    seq = envelope_sequence(record)
    if seq != sequence:
        print(f"ERROR: node returned sequence {seq}, expected {sequence}")
        return 1

    try:
        publication = decode_event_data(record.get("data"), seq)
    except DecodeError as e:
        print(f"ERROR: undecodable event: {e}")
        return 1

    print(json.dumps({"message_id": publication.message_id, **publication.log_fields()}, indent=2))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch and decode one Aptos core-bridge event")
    parser.add_argument("--rpc", type=str, default=os.environ.get("GUARDIAN_APTOS__RPC_URL"))
    parser.add_argument("--account", type=str, default=os.environ.get("GUARDIAN_APTOS__ACCOUNT"))
    parser.add_argument("--handle", type=str, default=os.environ.get("GUARDIAN_APTOS__HANDLE"))
    parser.add_argument("--sequence", type=int, required=True)
    args = parser.parse_args()

    if not (args.rpc and args.account and args.handle):
        print("ERROR: --rpc, --account and --handle are required")
        sys.exit(1)

    sys.exit(asyncio.run(fetch(args.rpc, args.account, args.handle, args.sequence)))


if __name__ == "__main__":
    main()
