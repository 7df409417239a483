"""Aptos core-bridge watcher.

Polls one account's message event handle over the fullnode REST API and
publishes each new message for signing:

- client: GETs against the event-log and health endpoints
- decoder: event JSON -> Publication
- cursor: next sequence number to fetch
- watcher: poll loop, reobservation and health reporting
"""

from .client import AptosClient
from .config import WatcherConfig
from .cursor import EventCursor
from .decoder import decode_event_data, envelope_sequence
from .watcher import AptosWatcher

__all__ = [
    "AptosClient",
    "AptosWatcher",
    "EventCursor",
    "WatcherConfig",
    "decode_event_data",
    "envelope_sequence",
]
