import logging

import httpx
import pytest

from tulip_edge.engine.runtime.http import HTTPRuntime, is_success_status
from tulip_edge.errors import ResponseParseError, TransportError


def test_success_statuses():
    assert is_success_status(200)
    assert is_success_status(204)
    assert is_success_status(302)
    assert not is_success_status(199)
    assert not is_success_status(404)
    assert not is_success_status(500)


def test_resolve_proxy():
    assert HTTPRuntime.resolve_proxy(None) is None
    proxy = HTTPRuntime.resolve_proxy("http://proxy.local:3128")
    assert proxy.url.host == "proxy.local"
    assert proxy.url.port == 3128


def test_malformed_proxy_falls_back_to_direct(caplog):
    with caplog.at_level(logging.ERROR):
        assert HTTPRuntime.resolve_proxy("not a proxy") is None
    assert "could not create proxy" in caplog.text.lower()


def _pool(transport):
    return transport._pool


@pytest.mark.asyncio
async def test_keep_alive_disabled():
    async with HTTPRuntime.build_client(keep_alive=False) as client:
        assert client._mounts == {}
        assert _pool(client._transport)._max_keepalive_connections == 0


@pytest.mark.asyncio
async def test_keep_alive_msecs_is_idle_expiry():
    async with HTTPRuntime.build_client(keep_alive=True, keep_alive_msecs=2000) as client:
        pool = _pool(client._transport)
        assert pool._keepalive_expiry == 2.0
        assert pool._max_keepalive_connections > 0


@pytest.mark.asyncio
async def test_proxy_is_mounted_with_default_limits():
    async with HTTPRuntime.build_client(
        keep_alive=False, proxy_url="http://proxy.local:3128"
    ) as client:
        (proxy_transport,) = client._mounts.values()
        pool = _pool(proxy_transport)
        assert type(pool).__name__ == "AsyncHTTPProxy"
        assert pool._max_keepalive_connections == 20


@pytest.mark.asyncio
async def test_malformed_proxy_is_not_mounted():
    async with HTTPRuntime.build_client(proxy_url="not a proxy") as client:
        assert client._mounts == {}

def test_body_forces_json_content_type():
    headers = HTTPRuntime.prepare_headers({"X-Trace": "abc"}, has_body=True)
    assert headers["content-type"] == "application/json"
    assert headers["x-trace"] == "abc"


def test_conflicting_content_type_is_overridden_with_warning():
    warnings = []
    headers = HTTPRuntime.prepare_headers(
        {"Content-Type": "text/plain"}, has_body=True, warn=warnings.append
    )
    assert headers["content-type"] == "application/json"
    assert len(warnings) == 1
    assert "text/plain" in warnings[0]


def test_json_content_type_variant_is_kept():
    warnings = []
    headers = HTTPRuntime.prepare_headers(
        {"content-type": "application/json; charset=utf-8"}, has_body=True, warn=warnings.append
    )
    assert headers["content-type"] == "application/json; charset=utf-8"
    assert warnings == []


def test_no_body_no_content_type():
    headers = HTTPRuntime.prepare_headers(None, has_body=False)
    assert "content-type" not in headers


def _response(content_type, content):
    request = httpx.Request("GET", "https://acme.tulip.co/api/v3/tables")
    return httpx.Response(200, headers={"content-type": content_type}, content=content, request=request)


def test_parse_body_json():
    response = _response("application/json; charset=utf-8", b'[{"id": "T1"}]')
    assert HTTPRuntime.parse_body(response) == [{"id": "T1"}]


def test_parse_body_text():
    response = _response("text/plain", b'{"id": "T1"}')
    assert HTTPRuntime.parse_body(response) == '{"id": "T1"}'


def test_parse_body_invalid_json():
    response = _response("application/json", b"<html>oops</html>")
    with pytest.raises(ResponseParseError):
        HTTPRuntime.parse_body(response)


@pytest.mark.asyncio
async def test_error_status_is_reported_and_forwarded(make_transport):
    transport = make_transport(status_code=500, json_body={"errorCode": "InternalError"})
    errors = []
    async with httpx.AsyncClient(transport=transport) as client:
        message = await HTTPRuntime.request(
            client, "GET", "https://acme.tulip.co/api/v3/tables", on_error=errors.append
        )

    assert errors == ["Response status code 500"]
    assert message["response"].status_code == 500
    assert message["payload"] == {"errorCode": "InternalError"}


@pytest.mark.asyncio
async def test_redirect_is_not_an_error(make_transport):
    transport = make_transport(status_code=302, headers={"location": "/elsewhere"})
    errors = []
    async with httpx.AsyncClient(transport=transport) as client:
        message = await HTTPRuntime.request(
            client, "GET", "https://acme.tulip.co/api/v3/tables", on_error=errors.append
        )

    assert errors == []
    assert message["response"].status_code == 302


@pytest.mark.asyncio
async def test_request_sends_auth_and_body(make_transport, basic_auth_header):
    transport = make_transport(json_body={"id": "R1"})
    async with httpx.AsyncClient(transport=transport) as client:
        await HTTPRuntime.request(
            client,
            "POST",
            "https://acme.tulip.co/api/v3/tables/T1/records",
            auth=("apikey.2_abc123", "s3cr3t"),
            headers=HTTPRuntime.prepare_headers(None, has_body=True),
            body='{"id": "R1"}',
        )

    (request,) = transport.requests
    assert request.method == "POST"
    assert request.headers["authorization"] == basic_auth_header
    assert request.headers["content-type"] == "application/json"
    assert request.content == b'{"id": "R1"}'


@pytest.mark.asyncio
async def test_transport_failure(make_transport):
    transport = make_transport(error=httpx.ConnectError("All connection attempts failed"))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(TransportError, match="ConnectError"):
            await HTTPRuntime.request(client, "GET", "https://acme.tulip.co/api/v3/tables")


@pytest.mark.asyncio
async def test_empty_json_response_has_no_payload(make_transport):
    transport = make_transport(status_code=204, headers={"content-type": "application/json"})
    async with httpx.AsyncClient(transport=transport) as client:
        message = await HTTPRuntime.request(
            client, "DELETE", "https://acme.tulip.co/api/v3/tables/T1/records/R1"
        )

    assert message["response"].status_code == 204
    assert message["payload"] is None
