"""HTTP client for an Aptos fullnode REST API.

One GET per call: no timeout, no retry. Retrying is the supervisor's
business, so every network failure surfaces as a TransportError.
"""

from __future__ import annotations

from typing import Any

import bittensor as bt
import httpx

from guardian.common.errors import TransportError


class AptosClient:
    """Fetches event-log and health payloads from one node."""

    def __init__(
        self,
        rpc_url: str,
        account: str,
        handle: str,
        client: httpx.AsyncClient | None = None,
    ):
        self.rpc_url = rpc_url.rstrip("/")
        self.account = account
        self.handle = handle
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)

    @property
    def events_url(self) -> str:
        return f"{self.rpc_url}/v1/accounts/{self.account}/events/{self.handle}/event"

    @property
    def health_url(self) -> str:
        return f"{self.rpc_url}/v1"

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, url: str, params: dict[str, Any] | None = None) -> bytes:
        """GET ``url`` and return the raw body, whatever the status code."""
        try:
            resp = await self._client.get(url, params=params)
            body = resp.content
        except httpx.RequestError as e:
            raise TransportError(url, e) from e

        bt.logging.debug({"aptos_client": {"url": url, "params": params, "status": resp.status_code, "bytes": len(body)}})
        return body

    async def fetch_events(self, start: int | None = None, limit: int | None = None) -> bytes:
        params: dict[str, Any] = {}
        if start is not None:
            params["start"] = start
        if limit is not None:
            params["limit"] = limit
        return await self.fetch(self.events_url, params=params or None)

    async def fetch_health(self) -> bytes:
        return await self.fetch(self.health_url)


__all__ = ["AptosClient"]
