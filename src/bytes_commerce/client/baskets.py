"""Basket creation with stale-basket recovery.

The commerce API keeps a single open basket per contract until it is checked
out or emptied. A run that died between basket creation and checkout leaves
its item behind, and the next creation returns a basket with two or more
items. Such a basket is purged item by item and creation is retried, for at
most ``max_retries`` cycles.
"""

from __future__ import annotations

import logging

from .context import CommerceContext
from .errors import (
    BasketCleanupError,
    BasketConflictExceeded,
    BasketError,
    EmptyBasketError,
    TransportError,
)
from .models import Basket, BasketItem, BasketProduct, SubscriptionRequest
from .transport import decode_json, expect_status

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DELETE_ITEM_PATH = "/api/v1/CloudDashboard/DeleteBasketItem"


class BasketManager:
    """Creates a basket holding exactly one item for the current request."""

    def __init__(
        self,
        context: CommerceContext,
        *,
        product: BasketProduct | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._ctx = context
        self._product = product or BasketProduct()
        self._max_retries = max_retries

    @property
    def max_retries(self) -> int:
        return self._max_retries

    async def create_basket_for(
        self,
        friendly_name: str,
        principal_id: str,
        po_number: str,
        budget_code: str,
    ) -> Basket:
        return await self.create_basket(
            SubscriptionRequest(
                friendly_name=friendly_name,
                principal_id=principal_id,
                po_number=po_number,
                budget_code=budget_code,
            )
        )

    async def create_basket(self, request: SubscriptionRequest) -> Basket:
        """Create a basket, purging stale items left by earlier runs.

        Raises BasketError on a non-200 create, BasketCleanupError when an
        item cannot be deleted and BasketConflictExceeded when stale items
        survive every retry cycle.
        """
        retries = 0
        while True:
            basket = await self._post_basket(request)
            if len(basket.items) < 2:
                break

            logger.warning(
                "Basket %d holds %d items, purging stale items (cycle %d/%d)",
                basket.id,
                len(basket.items),
                retries + 1,
                self._max_retries,
                extra={"basket_id": basket.id, "po_number": request.po_number},
            )
            for item in basket.items:
                await self._delete_item(item)

            if retries >= self._max_retries:
                raise BasketConflictExceeded(retries)
            retries += 1

        if not basket.items:
            raise EmptyBasketError(basket.id)

        logger.info(
            "Basket created: id=%d po_number=%s",
            basket.id,
            request.po_number,
            extra={"basket_id": basket.id, "po_number": request.po_number},
        )
        return basket

    async def _post_basket(self, request: SubscriptionRequest) -> Basket:
        resp = await self._ctx.transport.send(
            "POST",
            self._ctx.contract_url("/baskets"),
            token=self._ctx.token.access_token,
            json=request.basket_payload(self._product),
            operation="create_basket",
        )
        expect_status(resp, (200,), BasketError)
        return Basket.from_payload(decode_json(resp, "create_basket"))

    async def _delete_item(self, item: BasketItem) -> None:
        logger.info(
            "Deleting basket item %d",
            item.id,
            extra={"basket_item_id": item.id},
        )
        try:
            resp = await self._ctx.transport.send(
                "POST",
                self._ctx.api_url(DELETE_ITEM_PATH),
                token=self._ctx.token.access_token,
                json={"basketItemId": item.id},
                operation="delete_basket_item",
            )
        except TransportError as e:
            raise BasketCleanupError(0, str(e), item_id=item.id) from e
        if resp.status_code != 200:
            raise BasketCleanupError(resp.status_code, resp.body, item_id=item.id)
