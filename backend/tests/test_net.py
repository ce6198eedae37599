import asyncio

import httpx
import pytest

from conftest import FakeUpstream
from sunpulse.core.errors import FetchTimeout, TransportError
from sunpulse.services.net import BoundedFetcher

URL = "https://example.test/feed.json"


def test_http_error_status_is_returned_not_raised():
    upstream = FakeUpstream({URL: (503, {"error": "down"})})
    response = asyncio.run(upstream.fetcher().fetch(URL))
    assert response.status_code == 503


def test_deadline_raises_fetch_timeout():
    async def slow(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json=[])

    upstream = FakeUpstream({URL: slow})
    with pytest.raises(FetchTimeout) as excinfo:
        asyncio.run(upstream.fetcher().fetch(URL, timeout=0.05))
    assert excinfo.value.url == URL


def test_connection_failure_raises_transport_error():
    upstream = FakeUpstream({URL: httpx.ConnectError("connection refused")})
    with pytest.raises(TransportError) as excinfo:
        asyncio.run(upstream.fetcher().fetch(URL))
    assert "connection refused" in excinfo.value.reason


def test_head_probe_uses_method():
    upstream = FakeUpstream({URL: (200, "")})
    asyncio.run(upstream.fetcher().fetch(URL, method="HEAD", read_body=False))
    assert upstream.requests == [("HEAD", URL)]


def test_try_json_decodes_success():
    upstream = FakeUpstream({URL: (200, [{"kp": 3}])})
    assert asyncio.run(upstream.fetcher().try_json(URL)) == [{"kp": 3}]


@pytest.mark.parametrize("route", [
    (500, {"error": "boom"}),
    (200, "<html>not json</html>"),
    httpx.ReadTimeout("slow"),
    httpx.ConnectError("dns"),
])
def test_try_json_turns_failures_into_none(route):
    upstream = FakeUpstream({URL: route})
    assert asyncio.run(upstream.fetcher().try_json(URL)) is None


def test_try_text():
    upstream = FakeUpstream({URL: (200, "3664 N07E112")})
    fetcher = upstream.fetcher()
    assert asyncio.run(fetcher.try_text(URL)) == "3664 N07E112"
    assert asyncio.run(fetcher.try_text("https://example.test/missing")) is None


def _serve_after(delay):
    async def handle(reader, writer):
        await reader.readuntil(b"\r\n\r\n")
        await asyncio.sleep(delay)
        writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\nContent-Length: 2\r\nConnection: close\r\n\r\n[]")
        await writer.drain()
        writer.close()

    return handle


async def _fetch_from_loopback(delay, timeout):
    server = await asyncio.start_server(_serve_after(delay), "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        return await BoundedFetcher().fetch(f"http://127.0.0.1:{port}/slow.json", timeout=timeout)
    finally:
        server.close()
        await server.wait_closed()


def test_slow_server_within_deadline_is_not_cut_short():
    # Slower than httpx's 5s default, faster than the 8s fetch deadline.
    response = asyncio.run(_fetch_from_loopback(delay=5.5, timeout=8.0))
    assert response.status_code == 200
    assert response.json() == []


def test_slow_server_past_deadline_times_out():
    with pytest.raises(FetchTimeout) as excinfo:
        asyncio.run(_fetch_from_loopback(delay=1.0, timeout=0.3))
    assert excinfo.value.timeout == 0.3
