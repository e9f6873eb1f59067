"""
Tests for the httpx origin client using httpx's mock transport.
"""

import httpx
import pytest

from profile_mirror.errors import OriginUnavailableError
from profile_mirror.repositories import HttpxOriginClient


def make_client(handler) -> HttpxOriginClient:
    return HttpxOriginClient(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_fetch_buffers_response():
    """Status, lower-cased headers and body are captured."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["origin_header"] = request.headers.get("access-control-allow-origin")
        return httpx.Response(200, headers={"Content-Type": "text/css"}, content=b"a{}")

    origin = make_client(handler)
    response = await origin.fetch("https://bento.me/a.css", headers={"Access-Control-Allow-Origin": "*"})
    await origin.close()

    assert response.ok
    assert response.content == b"a{}"
    assert response.content_type == "text/css"
    assert seen == {"method": "GET", "origin_header": "*"}


@pytest.mark.asyncio
async def test_fetch_forwards_method_and_body():
    """POST bodies reach the upstream."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, content=request.method.encode() + b" " + request.content)

    origin = make_client(handler)
    response = await origin.fetch("https://api.bento.me/v1/e", headers={}, method="POST", content=b"{}")

    assert response.status_code == 201
    assert response.content == b"POST {}"


@pytest.mark.asyncio
async def test_non_success_is_returned_not_raised():
    """Upstream error statuses are data, not exceptions."""
    origin = make_client(lambda request: httpx.Response(404, content=b"missing"))
    response = await origin.fetch("https://bento.me/x.png", headers={})

    assert not response.ok
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_connect_error_is_bad_gateway():
    """Transport failures become OriginUnavailableError with 502."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    origin = make_client(handler)
    with pytest.raises(OriginUnavailableError) as exc_info:
        await origin.fetch("https://bento.me/", headers={})

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_timeout_is_gateway_timeout():
    """Timeouts become OriginUnavailableError with 504."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    origin = make_client(handler)
    with pytest.raises(OriginUnavailableError) as exc_info:
        await origin.fetch("https://bento.me/", headers={})

    assert exc_info.value.status_code == 504
    assert exc_info.value.detail == "Gateway timeout"
