"""Client-credentials token exchange against the identity API."""

from __future__ import annotations

import logging

from .errors import AuthError
from .models import Credentials, SessionToken
from .transport import CommerceTransport, decode_json, expect_status

logger = logging.getLogger(__name__)

TOKEN_PATH = "/api/v1/oauth/token"


class TokenManager:
    """Fetches the bearer token used for the rest of a session.

    Fail-fast: one request, no retry. Nothing downstream should run when
    authentication fails.
    """

    def __init__(self, transport: CommerceTransport, identity_url: str) -> None:
        self._transport = transport
        self._identity_url = identity_url.rstrip("/")

    @property
    def token_url(self) -> str:
        return f"{self._identity_url}{TOKEN_PATH}"

    async def authenticate(self, credentials: Credentials) -> SessionToken:
        credentials.require_complete()

        resp = await self._transport.send(
            "POST",
            self.token_url,
            data={
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret,
                "grant_type": "client_credentials",
            },
            operation="authenticate",
        )
        expect_status(resp, (200,), AuthError)

        token = SessionToken.from_payload(decode_json(resp, "authenticate"))
        logger.info(
            "Commerce session authenticated: client_id=%s expires_in=%d",
            credentials.client_id,
            token.expires_in,
            extra={"client_id": credentials.client_id},
        )
        return token
