"""Pytest configuration for bytes-commerce tests."""
import sys
from pathlib import Path

# Add src/ to path for src-layout imports
_PROJECT_ROOT = Path(__file__).parent.parent
_SRC = _PROJECT_ROOT / 'src'
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from typing import Any

import httpx
import pytest

from bytes_commerce.client.context import CommerceContext
from bytes_commerce.client.models import SessionToken
from bytes_commerce.client.transport import CommerceTransport

IDENTITY_URL = 'https://identity.example.com'
COMMERCE_URL = 'https://commerce.example.com'
CONTRACT_ID = 42


class FakeCommerceApi:
    """Routes requests by (method, path) to queued responses.

    Each queued entry is ``(status, body)`` or an exception to raise. The
    last entry for a route repeats once the queue is drained.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, text=f'no route for {request.method} {request.url.path}')
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        status, body = entry
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == path
        ]

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def api() -> FakeCommerceApi:
    return FakeCommerceApi()


@pytest.fixture
def transport(api: FakeCommerceApi) -> CommerceTransport:
    return CommerceTransport(http_client=api.http_client())


@pytest.fixture
def context(transport: CommerceTransport) -> CommerceContext:
    return CommerceContext(
        commerce_url=COMMERCE_URL,
        contract_id=CONTRACT_ID,
        token=SessionToken(access_token='test-token', expires_in=3600),
        transport=transport,
    )
