"""Pydantic models for observed cross-chain messages.

- Publication: a message reconstructed from an on-chain event, handed to
  the signing pipeline.
- ObservationRequest: an external ask to look at one event again.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from guardian.common.chains import ChainID


# ---------------------------------------------------------------------------
# Wire widths
# ---------------------------------------------------------------------------

TX_HASH_LENGTH = 32
ADDRESS_LENGTH = 32
SEQUENCE_ENCODING_LENGTH = 8

MAX_UINT8 = 2**8 - 1
MAX_UINT32 = 2**32 - 1
MAX_UINT64 = 2**64 - 1


def encode_sequence(sequence: int) -> bytes:
    """Big-endian 8-byte encoding of a sequence number."""
    return sequence.to_bytes(SEQUENCE_ENCODING_LENGTH, "big")


def tx_hash_from_sequence(sequence: int) -> bytes:
    """Synthetic transaction hash for an event sequence number.

    Event streams carry no transaction hash we can cheaply look up, so the
    sequence is right-aligned into 32 bytes instead.
    """
    return encode_sequence(sequence).rjust(TX_HASH_LENGTH, b"\x00")


def to_address(raw: bytes) -> bytes:
    """Copy raw emitter bytes into a zeroed 32-byte address from the left."""
    return raw[:ADDRESS_LENGTH].ljust(ADDRESS_LENGTH, b"\x00")


# ---------------------------------------------------------------------------
# Publication
# ---------------------------------------------------------------------------


class Publication(BaseModel):
    """A cross-chain message observed on the source chain."""

    model_config = ConfigDict(frozen=True)

    tx_hash: bytes = Field(min_length=TX_HASH_LENGTH, max_length=TX_HASH_LENGTH)
    timestamp: datetime
    nonce: int = Field(ge=0, le=MAX_UINT32)
    sequence: int = Field(ge=0, le=MAX_UINT64)
    emitter_chain: ChainID
    emitter_address: bytes = Field(min_length=ADDRESS_LENGTH, max_length=ADDRESS_LENGTH)
    payload: bytes
    consistency_level: int = Field(ge=0, le=MAX_UINT8)

    @property
    def message_id(self) -> str:
        """chain/emitter/sequence triple identifying the message."""
        return f"{int(self.emitter_chain)}/{self.emitter_address.hex()}/{self.sequence}"

    def log_fields(self) -> dict[str, Any]:
        return {
            "tx_hash": self.tx_hash.hex(),
            "timestamp": self.timestamp.isoformat(),
            "nonce": self.nonce,
            "sequence": self.sequence,
            "emitter_chain": str(self.emitter_chain),
            "emitter_address": self.emitter_address.hex(),
            "payload": self.payload.hex(),
            "consistency_level": self.consistency_level,
        }


# ---------------------------------------------------------------------------
# Reobservation
# ---------------------------------------------------------------------------


class ObservationRequest(BaseModel):
    """Request to re-observe one event.

    ``tx_hash`` carries the big-endian encoded sequence number rather than
    a real transaction hash.
    """

    model_config = ConfigDict(frozen=True)

    chain_id: int
    tx_hash: bytes

    @classmethod
    def for_sequence(cls, chain_id: ChainID, sequence: int) -> ObservationRequest:
        return cls(chain_id=int(chain_id), tx_hash=encode_sequence(sequence))

    @property
    def sequence(self) -> int:
        if len(self.tx_hash) != SEQUENCE_ENCODING_LENGTH:
            raise ValueError(
                f"encoded sequence must be {SEQUENCE_ENCODING_LENGTH} bytes, got {len(self.tx_hash)}"
            )
        return int.from_bytes(self.tx_hash, "big")


__all__ = [
    "ADDRESS_LENGTH",
    "MAX_UINT32",
    "MAX_UINT64",
    "MAX_UINT8",
    "ObservationRequest",
    "Publication",
    "TX_HASH_LENGTH",
    "encode_sequence",
    "to_address",
    "tx_hash_from_sequence",
]
