"""
End-to-end tests of the REST pipeline over a mocked HTTP transport.
"""

import asyncio
import json
import time

import httpx
import pytest

from mixcord.rest.client import RestClient
from mixcord.rest.ratelimit import RateLimiter
from mixcord.rest.result import Err, Ok
from mixcord.rest.transport import HttpTransport
from mixcord.shared.config import get_config
from mixcord.shared.errors import ApiError


BASE_URL = "https://discord.test/api"


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


def make_client(handler, ratelimiter=None) -> RestClient:
    config = get_config(token="secret-token", api_base_url=BASE_URL, _env_file=None)
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    transport = HttpTransport(BASE_URL, client=http_client)
    return RestClient(config, transport=transport, ratelimiter=ratelimiter)


def ratelimit_headers(remaining, reset, limit=5):
    return {
        "X-RateLimit-Limit": str(limit),
        "X-RateLimit-Remaining": str(remaining),
        "X-RateLimit-Reset": str(reset)
    }


@pytest.mark.asyncio
async def test_message_lifecycle():
    """Test create, edit and delete against one channel."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append((request.method, request.url.path))
        assert request.headers["Authorization"] == "Bot secret-token"
        if request.method == "POST":
            payload = json.loads(request.content)
            return httpx.Response(200, json={"id": "42", "channel_id": "7", "content": payload["content"]})
        if request.method == "PATCH":
            payload = json.loads(request.content)
            return httpx.Response(200, json={"id": "42", "channel_id": "7", "content": payload["content"]})
        return httpx.Response(204)

    async with make_client(handler) as client:
        created = await client.create_message("7", "hi")
        edited = await client.edit_message_or_raise("7", "42", "hello")
        deleted = await client.delete_message("7", "42")

    assert isinstance(created, Ok)
    assert created.value.content == "hi"
    assert edited.content == "hello"
    assert deleted == Ok(None)
    assert requests == [
        ("POST", "/api/channels/7/messages"),
        ("PATCH", "/api/channels/7/messages/42"),
        ("DELETE", "/api/channels/7/messages/42")
    ]


@pytest.mark.asyncio
async def test_exhausted_route_waits_for_reset():
    """Test a call on an exhausted route is held until the reported reset."""
    clock = FakeClock()
    sent_at = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent_at.append(clock.now)
        return httpx.Response(
            200,
            json={"id": "1", "content": "ok"},
            headers=ratelimit_headers(remaining=0, reset=clock.now + 5)
        )

    client = make_client(handler, ratelimiter=RateLimiter(clock=clock, sleep=clock.sleep))

    await client.create_message("7", "first")
    await client.create_message("7", "second")

    assert clock.sleeps == [5.0]
    assert sent_at == [1000.0, 1005.0]
    await client.close()


@pytest.mark.asyncio
async def test_rate_limited_by_server():
    """Test a 429 reply surfaces as Err, and as ApiError for the raising variant."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            429,
            json={"message": "rate limited", "retry_after": 1000},
            headers=ratelimit_headers(remaining=1, reset=time.time() + 1)
        )

    client = make_client(handler)

    result = await client.create_message("7", "hi")
    assert isinstance(result, Err)
    assert result.status_code == 429
    assert b"rate limited" in result.message

    with pytest.raises(ApiError) as exc_info:
        await client.create_message_or_raise("7", "hi")
    assert exc_info.value.status_code == 429
    await client.close()


@pytest.mark.asyncio
async def test_timeout_surfaces_as_err_without_status():

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(handler)

    result = await client.delete_message("7", "42")

    assert result == Err(status_code=None, message="timed out")
    await client.close()


@pytest.mark.asyncio
async def test_concurrent_calls_on_same_route():
    """Test two in-flight calls that both saw remaining=1 finish cleanly."""
    clock = FakeClock()
    ratelimiter = RateLimiter(clock=clock, sleep=clock.sleep)
    remaining = iter(["0", "1"])

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0)
        return httpx.Response(
            200,
            json={"id": "1", "content": "ok"},
            headers={
                "X-RateLimit-Limit": "5",
                "X-RateLimit-Remaining": next(remaining),
                "X-RateLimit-Reset": "1010"
            }
        )

    client = make_client(handler, ratelimiter=ratelimiter)
    await ratelimiter.record_headers("/channels/7/messages", ratelimit_headers(remaining=1, reset=1010))

    results = await asyncio.gather(
        client.create_message("7", "a"),
        client.create_message("7", "b")
    )

    assert all(isinstance(result, Ok) for result in results)
    assert clock.sleeps == []
    assert ratelimiter.get_bucket("/channels/7/messages").remaining in (0, 1)
    await client.close()


@pytest.mark.asyncio
async def test_throttled_route_does_not_stall_other_routes():
    """Test a call sleeping on one route leaves other routes usable."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "1", "content": "ok"})

    client = make_client(handler)
    await client.ratelimiter.record_headers("/channels/1/messages", ratelimit_headers(remaining=0, reset=time.time() + 30))

    blocked = asyncio.ensure_future(client.create_message("1", "held back"))
    await asyncio.sleep(0.01)

    try:
        result = await asyncio.wait_for(client.create_message("2", "goes through"), timeout=1.0)
        assert isinstance(result, Ok)
        assert not blocked.done()
    finally:
        blocked.cancel()
        with pytest.raises(asyncio.CancelledError):
            await blocked
        await client.close()

    assert client.metrics.registry.get_sample_value(
        "mixcord_ratelimit_waits_total",
        {"route": "/channels/{id}/messages"}
    ) == 1.0
