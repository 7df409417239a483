"""Types shared by every watcher: chain ids, publications, errors."""

from .chains import ChainID
from .errors import (
    DecodeError,
    MalformedResponseError,
    SequenceMismatchError,
    TransportError,
    WatcherError,
)
from .publication import ObservationRequest, Publication, tx_hash_from_sequence

__all__ = [
    "ChainID",
    "DecodeError",
    "MalformedResponseError",
    "ObservationRequest",
    "Publication",
    "SequenceMismatchError",
    "TransportError",
    "WatcherError",
    "tx_hash_from_sequence",
]
