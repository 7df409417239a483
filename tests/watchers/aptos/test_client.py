"""Tests for the Aptos REST client."""

from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from guardian.common.errors import TransportError
from guardian.watchers.aptos.client import AptosClient

ACCOUNT = "0xde00"
HANDLE = "0xde00::state::WormholeMessageHandle"


@pytest_asyncio.fixture
async def make_client():
    """Builds clients over a mock transport and closes them on teardown."""
    opened: list[httpx.AsyncClient] = []

    def _make(handler) -> AptosClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        opened.append(http)
        return AptosClient("http://node.test/", ACCOUNT, HANDLE, client=http)

    yield _make
    for http in opened:
        await http.aclose()


@pytest.mark.asyncio
class TestUrls:

    async def test_events_url(self, make_client):
        client = make_client(lambda r: httpx.Response(200))
        assert client.events_url == f"http://node.test/v1/accounts/{ACCOUNT}/events/{HANDLE}/event"

    async def test_health_url(self, make_client):
        client = make_client(lambda r: httpx.Response(200))
        assert client.health_url == "http://node.test/v1"


@pytest.mark.asyncio
class TestFetch:

    async def test_returns_raw_body(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b'[{"sequence_number":"1"}]')

        client = make_client(handler)
        body = await client.fetch_events(start=3)
        assert body == b'[{"sequence_number":"1"}]'
        assert seen[0].url.params.get("start") == "3"
        assert "limit" not in seen[0].url.params

    async def test_bootstrap_query_has_limit_only(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        client = make_client(handler)
        await client.fetch_events(limit=1)
        assert dict(seen[0].url.params) == {"limit": "1"}

    async def test_error_status_is_not_a_transport_error(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "not found", "error_code": "resource_not_found"})

        client = make_client(handler)
        body = await client.fetch_health()
        assert b"resource_not_found" in body

    async def test_connection_failure_raises_transport_error(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError) as exc:
            await client.fetch_health()
        assert exc.value.url == "http://node.test/v1"
        assert isinstance(exc.value.cause, httpx.ConnectError)

    async def test_read_failure_raises_transport_error(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadError("connection reset", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError):
            await client.fetch_events(start=1)

    async def test_close_leaves_injected_client_open(self):
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        client = AptosClient("http://node.test", ACCOUNT, HANDLE, client=http)
        await client.close()
        assert not http.is_closed
        await http.aclose()

    async def test_close_closes_owned_client(self):
        client = AptosClient("http://node.test", ACCOUNT, HANDLE)
        await client.close()
        assert client._client.is_closed
