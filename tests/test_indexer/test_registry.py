"""Tests for RegistryPager."""

import json
from unittest.mock import AsyncMock, call

import httpx
import pytest
import respx
from httpx import Response

from ens_index.indexer.errors import RegistryError
from ens_index.indexer.registry import RegistryPager
from tests.helpers import domain, ipfs_content_hash

REGISTRY_URL = "https://registry.test/subgraphs/name/ensdomains/ens"


def page(*domains: dict) -> dict:
    return {"data": {"domains": list(domains)}}


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.mark.asyncio
async def test_fetch_page_sends_cursor_and_page_size(sleep: AsyncMock) -> None:
    """The query asks for names strictly after the cursor, ascending."""
    with respx.mock:
        route = respx.post(REGISTRY_URL).mock(
            return_value=Response(
                200, json=page(domain("a.eth", ipfs_content_hash()), domain("b.eth"))
            )
        )
        async with httpx.AsyncClient() as client:
            pager = RegistryPager(client, REGISTRY_URL, page_size=1000, sleep=sleep)
            records = await pager.fetch_page("")

    body = json.loads(route.calls.last.request.content)
    assert body["variables"] == {"lastId": "", "first": 1000}
    assert "name_gt: $lastId" in body["query"]
    assert "orderBy: name" in body["query"]
    assert "orderDirection: asc" in body["query"]
    assert [r.name for r in records] == ["a.eth", "b.eth"]
    assert records[0].content_hash == ipfs_content_hash()
    assert records[1].content_hash is None


@pytest.mark.asyncio
async def test_fetch_page_empty_signals_exhaustion(sleep: AsyncMock) -> None:
    with respx.mock:
        respx.post(REGISTRY_URL).mock(return_value=Response(200, json=page()))
        async with httpx.AsyncClient() as client:
            pager = RegistryPager(client, REGISTRY_URL, sleep=sleep)
            assert await pager.fetch_page("zzz.eth") == []


@pytest.mark.asyncio
async def test_rate_limit_is_retried_with_linear_backoff(sleep: AsyncMock) -> None:
    with respx.mock:
        route = respx.post(REGISTRY_URL).mock(
            side_effect=[
                Response(429),
                Response(429),
                Response(429),
                Response(200, json=page(domain("a.eth"))),
            ]
        )
        async with httpx.AsyncClient() as client:
            pager = RegistryPager(
                client, REGISTRY_URL, retry_base_delay=2.0, sleep=sleep
            )
            records = await pager.fetch_page("")

    assert route.call_count == 4
    assert sleep.await_args_list == [call(2.0), call(4.0), call(6.0)]
    assert [r.name for r in records] == ["a.eth"]
    for request_call in route.calls:
        assert json.loads(request_call.request.content)["variables"]["lastId"] == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 500, 502, 503])
async def test_other_http_errors_are_fatal(sleep: AsyncMock, status_code: int) -> None:
    with respx.mock:
        route = respx.post(REGISTRY_URL).mock(return_value=Response(status_code))
        async with httpx.AsyncClient() as client:
            pager = RegistryPager(client, REGISTRY_URL, sleep=sleep)
            with pytest.raises(RegistryError):
                await pager.fetch_page("")

    assert route.call_count == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_transport_errors_are_fatal(sleep: AsyncMock) -> None:
    with respx.mock:
        route = respx.post(REGISTRY_URL).mock(
            side_effect=httpx.ConnectError("connection refused")
        )
        async with httpx.AsyncClient() as client:
            pager = RegistryPager(client, REGISTRY_URL, sleep=sleep)
            with pytest.raises(RegistryError, match="connection refused"):
                await pager.fetch_page("")

    assert route.call_count == 1


@pytest.mark.asyncio
async def test_graphql_errors_are_fatal(sleep: AsyncMock) -> None:
    with respx.mock:
        respx.post(REGISTRY_URL).mock(
            return_value=Response(200, json={"errors": [{"message": "bad query"}]})
        )
        async with httpx.AsyncClient() as client:
            pager = RegistryPager(client, REGISTRY_URL, sleep=sleep)
            with pytest.raises(RegistryError, match="bad query"):
                await pager.fetch_page("")


@pytest.mark.asyncio
async def test_invalid_json_is_fatal(sleep: AsyncMock) -> None:
    with respx.mock:
        respx.post(REGISTRY_URL).mock(return_value=Response(200, text="<html>"))
        async with httpx.AsyncClient() as client:
            pager = RegistryPager(client, REGISTRY_URL, sleep=sleep)
            with pytest.raises(RegistryError):
                await pager.fetch_page("")


@pytest.mark.asyncio
async def test_missing_domains_is_fatal(sleep: AsyncMock) -> None:
    with respx.mock:
        respx.post(REGISTRY_URL).mock(return_value=Response(200, json={"data": {}}))
        async with httpx.AsyncClient() as client:
            pager = RegistryPager(client, REGISTRY_URL, sleep=sleep)
            with pytest.raises(RegistryError):
                await pager.fetch_page("")
