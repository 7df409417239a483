"""Decoding of Aptos core-bridge message events.

A message event from the REST API looks like::

    {
      "sequence_number": "7",
      "data": {
        "sender": "0x01",
        "payload": "0x...",
        "ts": "1664400000",
        "nonce": "0",
        "sequence": "7",
        "consistency_level": 0
      },
      ...
    }

The REST API renders u64 values as decimal strings, so integer fields
accept either strings or JSON numbers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from guardian.common.chains import ChainID
from guardian.common.errors import DecodeError
from guardian.common.publication import (
    MAX_UINT8,
    MAX_UINT32,
    MAX_UINT64,
    Publication,
    to_address,
    tx_hash_from_sequence,
)

_HEX_PREFIX = "0x"


def parse_uint(value: Any, field: str, max_value: int = MAX_UINT64) -> int:
    """Parse an unsigned integer field given as a JSON number or decimal string."""
    # bool is an int subclass; a JSON true is never a valid counter
    if isinstance(value, bool):
        raise DecodeError(field, "expected unsigned integer, got boolean")
    if isinstance(value, int):
        n = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        n = int(value)
    else:
        raise DecodeError(field, f"expected unsigned integer, got {value!r}")

    if n < 0 or n > max_value:
        raise DecodeError(field, f"{n} out of range [0, {max_value}]")
    return n


def parse_hex(value: Any, field: str) -> bytes:
    """Parse a 0x-prefixed hex string."""
    if not isinstance(value, str) or not value.startswith(_HEX_PREFIX):
        raise DecodeError(field, f"expected 0x-prefixed hex string, got {value!r}")
    try:
        return bytes.fromhex(value[len(_HEX_PREFIX):])
    except ValueError as e:
        raise DecodeError(field, f"invalid hex: {e}") from e


def _require(data: dict[str, Any], field: str) -> Any:
    if field not in data or data[field] is None:
        raise DecodeError(field, "missing")
    return data[field]


def envelope_sequence(record: Any) -> int | None:
    """Sequence number of an event envelope, or None when absent or unusable."""
    if not isinstance(record, dict) or "sequence_number" not in record:
        return None
    try:
        return parse_uint(record["sequence_number"], "sequence_number")
    except DecodeError:
        return None


def decode_event_data(
    data: Any,
    sequence_number: int,
    emitter_chain: ChainID = ChainID.APTOS,
) -> Publication:
    """Build a Publication from an event's ``data`` object.

    Fields are checked in wire order and the first failure wins. The
    synthetic tx hash comes from the envelope ``sequence_number``, the
    publication sequence from the data's own ``sequence`` field.

    Raises:
        DecodeError: a field is missing or unparsable.
    """
    if not isinstance(data, dict):
        raise DecodeError("data", f"expected object, got {type(data).__name__}")

    emitter = parse_hex(_require(data, "sender"), "sender")
    payload = parse_hex(_require(data, "payload"), "payload")
    ts = parse_uint(_require(data, "ts"), "ts")
    nonce = parse_uint(_require(data, "nonce"), "nonce", MAX_UINT32)
    sequence = parse_uint(_require(data, "sequence"), "sequence")
    consistency_level = parse_uint(
        _require(data, "consistency_level"), "consistency_level", MAX_UINT8,
    )

    try:
        timestamp = datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise DecodeError("ts", f"{ts} is not a representable time: {e}") from e

    return Publication(
        tx_hash=tx_hash_from_sequence(sequence_number),
        timestamp=timestamp,
        nonce=nonce,
        sequence=sequence,
        emitter_chain=emitter_chain,
        emitter_address=to_address(emitter),
        payload=payload,
        consistency_level=consistency_level,
    )


__all__ = ["decode_event_data", "envelope_sequence", "parse_hex", "parse_uint"]
