"""Watcher error taxonomy.

Only TransportError is fatal to a watcher; the others are handled where
they are raised and the watcher carries on.
"""

from __future__ import annotations


class WatcherError(Exception):
    """Base class for watcher failures."""


class TransportError(WatcherError):
    """The node could not be reached or its response could not be read."""

    def __init__(self, url: str, cause: BaseException | None = None):
        self.url = url
        self.cause = cause
        super().__init__(f"request to {url} failed: {cause}")


class MalformedResponseError(WatcherError):
    """The node answered with a body that is not valid JSON."""

    def __init__(self, url: str, body: bytes | str, reason: str = "invalid json"):
        self.url = url
        self.reason = reason
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        self.body_preview = body[:256]
        super().__init__(f"{reason} from {url}: {self.body_preview!r}")


class DecodeError(WatcherError):
    """An event record is missing a field or a field cannot be parsed."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class SequenceMismatchError(WatcherError):
    """A reobservation answer carried a different sequence than requested."""

    def __init__(self, requested: int, received: int):
        self.requested = requested
        self.received = received
        super().__init__(f"requested sequence {requested}, node returned {received}")


__all__ = [
    "DecodeError",
    "MalformedResponseError",
    "SequenceMismatchError",
    "TransportError",
    "WatcherError",
]
