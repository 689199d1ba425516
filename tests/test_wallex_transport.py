import asyncio
from collections.abc import Callable

import httpx
import pytest

from iex.errors import TransportError
from iex.exchange.transport import API_KEY_HEADER, WallexTransport

URL = "https://api.wallex.ir/v1/account/balances"


def _send(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    api_key: str,
    method: str = "GET",
    url: str = URL,
    body: bytes | None = None,
) -> httpx.Response:
    transport = WallexTransport(transport=httpx.MockTransport(handler))

    async def _go() -> httpx.Response:
        try:
            return await transport.send(method, url, api_key=api_key, body=body)
        finally:
            await transport.aclose()

    return asyncio.run(_go())


def _unexpected(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request: {request.url}")


def test_send_attaches_api_key_header() -> None:
    captured: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["api_key"] = request.headers.get(API_KEY_HEADER, "")
        captured["method"] = request.method
        return httpx.Response(200, json={"success": True})

    response = _send(handler, api_key="k-123")

    assert response.status_code == 200
    assert captured == {"api_key": "k-123", "method": "GET"}


def test_send_passes_body_through() -> None:
    bodies: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        return httpx.Response(200)

    _send(handler, api_key="k", body=b'{"x": 1}')

    assert bodies == [b'{"x": 1}']


def test_send_returns_error_status_unchanged() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, content=b"slow down")

    response = _send(handler, api_key="k")

    assert response.status_code == 429
    assert response.content == b"slow down"


def test_lowercase_method_is_accepted() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200)

    assert _send(handler, method="get", api_key="k").status_code == 200


@pytest.mark.parametrize(
    "exc_type",
    [httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError],
)
def test_network_failures_become_transport_error(exc_type: type[httpx.TransportError]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    with pytest.raises(TransportError) as exc_info:
        _send(handler, api_key="k")

    assert exc_info.value.method == "GET"
    assert exc_info.value.url == URL
    assert isinstance(exc_info.value.__cause__, exc_type)


def test_rejects_plain_http_url() -> None:
    with pytest.raises(ValueError):
        _send(_unexpected, url="http://api.wallex.ir/v1/depth", api_key="k")


def test_rejects_relative_url() -> None:
    with pytest.raises(ValueError):
        _send(_unexpected, url="/v1/depth", api_key="k")


def test_rejects_methods_other_than_get() -> None:
    with pytest.raises(ValueError):
        _send(_unexpected, method="POST", api_key="k")


@pytest.mark.parametrize("api_key", ["", "   "])
def test_rejects_missing_api_key(api_key: str) -> None:
    with pytest.raises(ValueError):
        _send(_unexpected, api_key=api_key)


def test_unreadable_body_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(b"notgzip"),
        )

    with pytest.raises(TransportError) as exc_info:
        _send(handler, api_key="k")

    assert isinstance(exc_info.value.__cause__, httpx.DecodingError)
