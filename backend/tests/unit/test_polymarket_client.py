"""Unit Tests: Polymarket data API client (HTTP mocked with httpx.MockTransport)."""

import asyncio

import httpx
import pytest

from squadboard.services.polymarket import (
    PolymarketAPIError,
    PolymarketAuthError,
    PolymarketClient,
    PolymarketConfig,
    PolymarketNotFoundError,
    PolymarketRateLimitError,
    PositionValue,
)


def make_client(handler, api_key="secret-key"):
    return PolymarketClient(
        PolymarketConfig(api_key=api_key),
        transport=httpx.MockTransport(handler),
    )


def test_fetches_closed_positions_with_bearer_auth():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"realizedPnl": 12.5, "timestamp": 1700000000, "title": "Will it rain?"},
                {"realizedPnl": -2, "timestamp": "1700000100"},
            ],
        )

    async def run():
        async with make_client(handler) as client:
            return await client.get_closed_positions("0xpm")

    result = asyncio.run(run())

    assert [p.realized_pnl for p in result] == [12.5, -2.0]
    assert result[1].timestamp == 1700000100
    request = seen[0]
    assert request.url.path == "/closed-positions"
    assert request.url.params["user"] == "0xpm"
    assert request.url.params["limit"] == "50"
    assert request.url.params["sortBy"] == "REALIZEDPNL"
    assert "start" not in request.url.params
    assert request.headers["Authorization"] == "Bearer secret-key"


def test_start_param_sent_when_window_given():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    async def run():
        async with make_client(handler) as client:
            await client.get_closed_positions("0xpm", start=1699999999)

    asyncio.run(run())
    assert seen[0].url.params["start"] == "1699999999"


def test_api_key_override_leaves_shared_config_alone():
    shared = PolymarketConfig(api_key="")
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    client = PolymarketClient(
        shared, api_key="override", transport=httpx.MockTransport(handler)
    )

    async def run():
        async with client:
            await client.get_closed_positions("0xpm")

    asyncio.run(run())
    assert seen[0].headers["Authorization"] == "Bearer override"
    assert shared.api_key == ""


def test_no_auth_header_without_key():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    async def run():
        async with make_client(handler, api_key="") as client:
            await client.get_closed_positions("0xpm")

    asyncio.run(run())
    assert "Authorization" not in seen[0].headers


@pytest.mark.parametrize(
    "payload, expected",
    [
        ([{"user": "0xpm", "value": 42.5}], 42.5),
        ({"user": "0xpm", "value": 7}, 7.0),
        ([], 0.0),
        ([{"user": "0xpm", "value": None}], 0.0),
    ],
)
def test_positions_value_shapes(payload, expected):
    def handler(request):
        assert request.url.path == "/value"
        return httpx.Response(200, json=payload)

    async def run():
        async with make_client(handler) as client:
            return await client.get_positions_value("0xpm")

    value = asyncio.run(run())
    assert isinstance(value, PositionValue)
    assert value.value == expected


@pytest.mark.parametrize(
    "status, error",
    [
        (401, PolymarketAuthError),
        (404, PolymarketNotFoundError),
        (429, PolymarketRateLimitError),
        (500, PolymarketAPIError),
        (502, PolymarketAPIError),
    ],
)
def test_non_success_status_raises_without_retry(status, error):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(status, json={"error": "nope"})

    async def run():
        async with make_client(handler) as client:
            await client.get_positions_value("0xpm")

    with pytest.raises(error) as exc:
        asyncio.run(run())
    assert exc.value.status_code == status
    assert len(calls) == 1


def test_network_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with make_client(handler) as client:
            await client.get_closed_positions("0xpm")

    with pytest.raises(PolymarketAPIError):
        asyncio.run(run())


def test_fetch_user_data_issues_both_calls():
    paths = []

    def handler(request):
        paths.append(request.url.path)
        if request.url.path == "/value":
            return httpx.Response(200, json=[{"user": "0xpm", "value": 30.0}])
        return httpx.Response(200, json=[{"realizedPnl": 120.5}])

    async def run():
        async with make_client(handler) as client:
            return await client.fetch_user_data("0xpm")

    closed, value = asyncio.run(run())
    assert sorted(paths) == ["/closed-positions", "/value"]
    assert closed[0].realized_pnl == 120.5
    assert value.value == 30.0


def test_client_requires_context():
    client = PolymarketClient()
    with pytest.raises(RuntimeError):
        _ = client.client
