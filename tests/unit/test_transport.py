"""Unit tests for CommerceTransport.

Tests request shaping, error mapping and client ownership with a mocked
httpx transport.
"""

from __future__ import annotations

import json

import httpx
import pytest

from bytes_commerce.client.errors import DecodeError, QueryError, TransportError
from bytes_commerce.client.transport import (
    DEFAULT_TIMEOUT_SECONDS,
    CommerceTransport,
    TransportResponse,
    decode_json,
    expect_status,
)


@pytest.mark.asyncio
async def test_send_attaches_bearer_and_json_headers(api, transport):
    api.add('POST', '/echo', (200, {'ok': True}))

    resp = await transport.send(
        'POST',
        'https://commerce.example.com/echo',
        token='tok-123',
        json={'basketItemId': 7},
    )

    assert resp.status_code == 200
    assert json.loads(resp.body) == {'ok': True}
    request = api.requests[0]
    assert request.headers['authorization'] == 'Bearer tok-123'
    assert request.headers['content-type'] == 'application/json'
    assert json.loads(request.content) == {'basketItemId': 7}


@pytest.mark.asyncio
async def test_send_form_encodes_data_without_auth(api, transport):
    api.add('POST', '/token', (200, '{}'))

    await transport.send(
        'POST',
        'https://identity.example.com/token',
        data={'grant_type': 'client_credentials'},
    )

    request = api.requests[0]
    assert 'authorization' not in request.headers
    assert request.headers['content-type'] == 'application/x-www-form-urlencoded'
    assert request.content == b'grant_type=client_credentials'


@pytest.mark.asyncio
async def test_send_returns_non_2xx_body_intact(api, transport):
    api.add('GET', '/missing', (500, 'internal boom'))

    resp = await transport.send('GET', 'https://commerce.example.com/missing')

    assert resp.status_code == 500
    assert resp.body == 'internal boom'


@pytest.mark.asyncio
async def test_connect_error_becomes_transport_error(api, transport):
    api.add('GET', '/down', httpx.ConnectError('connection refused'))

    with pytest.raises(TransportError, match='connection refused') as exc_info:
        await transport.send('GET', 'https://commerce.example.com/down', operation='get_order')

    assert exc_info.value.operation == 'get_order'
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_corrupt_encoded_body_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={'Content-Encoding': 'gzip'},
            stream=httpx.ByteStream(b'not gzip at all'),
        )

    transport = CommerceTransport(http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    with pytest.raises(TransportError) as exc_info:
        await transport.send('GET', 'https://commerce.example.com/orders/200', operation='get_order')

    assert exc_info.value.operation == 'get_order'
    assert isinstance(exc_info.value.__cause__, httpx.DecodingError)


@pytest.mark.asyncio
async def test_redirect_loop_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={'Location': str(request.url)})

    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        follow_redirects=True,
        max_redirects=2,
    )
    transport = CommerceTransport(http_client=http_client)

    with pytest.raises(TransportError) as exc_info:
        await transport.send('GET', 'https://commerce.example.com/loop')

    assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)


@pytest.mark.asyncio
async def test_timeout_becomes_transport_error(api, transport):
    api.add('GET', '/slow', httpx.ReadTimeout('timed out'))

    with pytest.raises(TransportError):
        await transport.send('GET', 'https://commerce.example.com/slow')


def test_default_timeout_is_two_minutes():
    assert DEFAULT_TIMEOUT_SECONDS == 120.0
    assert CommerceTransport(http_client=httpx.AsyncClient()).timeout_seconds == 120.0


@pytest.mark.asyncio
async def test_aclose_closes_owned_client():
    transport = CommerceTransport()
    await transport.aclose()
    assert transport._client.is_closed


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open(api):
    http_client = api.http_client()
    transport = CommerceTransport(http_client=http_client)

    await transport.aclose()

    assert not http_client.is_closed
    await http_client.aclose()


def test_expect_status_raises_given_error_with_body():
    resp = TransportResponse(status_code=404, body='order not found')

    with pytest.raises(QueryError) as exc_info:
        expect_status(resp, (200,), QueryError)

    assert exc_info.value.status_code == 404
    assert exc_info.value.body == 'order not found'
    assert 'order not found' in str(exc_info.value)


def test_expect_status_accepts_listed_codes():
    expect_status(TransportResponse(status_code=202, body=''), (200, 202), QueryError)


def test_decode_json_rejects_malformed_body():
    with pytest.raises(DecodeError) as exc_info:
        decode_json(TransportResponse(status_code=200, body='<html>'), 'get_order')

    assert exc_info.value.body == '<html>'
    assert exc_info.value.operation == 'get_order'
