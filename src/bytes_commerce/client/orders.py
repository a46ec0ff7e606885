"""Order status lookup. Pure read; retry policy belongs to the caller."""

from __future__ import annotations

import logging

from .context import CommerceContext
from .errors import QueryError
from .models import Order
from .transport import decode_json, expect_status

logger = logging.getLogger(__name__)


class OrderQuery:
    def __init__(self, context: CommerceContext) -> None:
        self._ctx = context

    async def get_order(self, order_id: str) -> Order:
        """Fetch an order by id. Success is exactly HTTP 200."""
        if self._ctx.token.is_expired():
            # TODO: re-authenticate once the identity API's token lifetime is confirmed.
            logger.warning(
                "Session token expired at %s; order %s lookup may be rejected",
                self._ctx.token.expires_at,
                order_id,
                extra={"order_id": order_id},
            )

        resp = await self._ctx.transport.send(
            "GET",
            self._ctx.contract_url(f"/orders/{order_id}"),
            token=self._ctx.token.access_token,
            operation="get_order",
        )
        expect_status(resp, (200,), QueryError)
        return Order.from_payload(decode_json(resp, "get_order"))
