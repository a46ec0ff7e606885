"""Basket checkout."""

from __future__ import annotations

import logging

from .context import CommerceContext
from .errors import CheckoutError
from .models import Basket, Checkout
from .transport import decode_json, expect_status

logger = logging.getLogger(__name__)

# 202: accepted for asynchronous processing. Handled exactly like 200.
_ACCEPTED_STATUS_CODES = frozenset({200, 202})


class CheckoutExecutor:
    def __init__(self, context: CommerceContext) -> None:
        self._ctx = context

    async def checkout(self, basket: Basket) -> Checkout:
        """Turn a basket into an order. The checkout id is the order id."""
        resp = await self._ctx.transport.send(
            "POST",
            self._ctx.contract_url(f"/baskets/{basket.id}/checkout"),
            token=self._ctx.token.access_token,
            operation="checkout",
        )
        expect_status(resp, _ACCEPTED_STATUS_CODES, CheckoutError)

        result = Checkout.from_payload(decode_json(resp, "checkout"))
        logger.info(
            "Basket %d checked out as order %d",
            basket.id,
            result.id,
            extra={"basket_id": basket.id, "order_id": result.id},
        )
        return result
