"""Shared async HTTP transport for the identity and commerce APIs.

One ``httpx.AsyncClient`` is reused for every call in a session. Bodies are
read in full before status checks so error objects can carry the raw body;
httpx releases the connection once a non-streamed response has been read.
"""

from __future__ import annotations

import json as jsonlib
import logging
from dataclasses import dataclass
from typing import Any, Collection, Mapping

import httpx

from .errors import DecodeError, TransportError, UnexpectedStatusError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Fully-read HTTP response."""

    status_code: int
    body: str


def bearer_headers(token: str) -> dict[str, str]:
    # Never log these headers.
    return {"Authorization": f"Bearer {token}"}


def json_headers() -> dict[str, str]:
    return {"Content-Type": "application/json", "Accept": "application/json"}


class CommerceTransport:
    """Request-issuing capability shared by every commerce component."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._timeout = float(timeout_seconds)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self._timeout)

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    async def send(
        self,
        method: str,
        url: str,
        *,
        token: str | None = None,
        json: Any | None = None,
        data: Mapping[str, str] | None = None,
        operation: str = "request",
    ) -> TransportResponse:
        """Issue one request and return its status and full body."""
        headers: dict[str, str] = {}
        content: bytes | None = None
        if token is not None:
            headers.update(bearer_headers(token))
        if json is not None:
            headers.update(json_headers())
            content = jsonlib.dumps(json).encode("utf-8")

        try:
            resp = await self._client.request(
                method,
                url,
                headers=headers,
                content=content,
                data=data,
                timeout=self._timeout,
            )
        except httpx.RequestError as e:
            logger.warning(
                "Commerce %s %s failed: %s",
                method,
                url,
                e,
                extra={"operation": operation},
            )
            raise TransportError(operation, str(e) or type(e).__name__) from e

        result = TransportResponse(status_code=resp.status_code, body=resp.text)
        logger.debug(
            "Commerce %s %s -> %d",
            method,
            url,
            result.status_code,
            extra={"operation": operation, "response_body": result.body},
        )
        return result

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()


def expect_status(
    resp: TransportResponse,
    accepted: Collection[int],
    error_cls: type[UnexpectedStatusError],
) -> None:
    if resp.status_code not in accepted:
        raise error_cls(resp.status_code, resp.body)


def decode_json(resp: TransportResponse, operation: str) -> Any:
    try:
        return jsonlib.loads(resp.body)
    except ValueError as e:
        raise DecodeError(operation, str(e), body=resp.body) from e
