"""Static configuration for the Aptos watcher."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class WatcherConfig(BaseModel):
    """Where to watch and how often.

    ``account`` is the core bridge account and ``handle`` the event handle
    under it, e.g. ``0x1::...::WormholeMessageHandle/event``.
    """

    rpc_url: str = Field(min_length=1)
    account: str = Field(min_length=1)
    handle: str = Field(min_length=1)
    poll_interval_seconds: float = Field(default=1.0, gt=0)

    # Status server
    status_host: str = "127.0.0.1"
    status_port: int = Field(default=6060, ge=0, le=65535)

    @field_validator("rpc_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


__all__ = ["WatcherConfig"]
