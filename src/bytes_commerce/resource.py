"""Host adapter exposing create/read/delete over a CommerceSession.

A configuration-management host keeps flat state records. This module maps
the host's input attributes onto a SubscriptionRequest and an Order back onto a
record. The API has no update or delete operation; ``delete`` only forgets.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .client.errors import ConfigurationError
from .client.models import Order, SubscriptionRequest
from .session import CommerceSession

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("friendly_name", "po_number", "budget_code")


def request_from_attributes(attrs: Mapping[str, Any]) -> SubscriptionRequest:
    missing = [name for name in _REQUIRED_FIELDS if not attrs.get(name)]
    if missing:
        raise ConfigurationError(f"missing required fields: {', '.join(missing)}")

    division_id = attrs.get("division_id")
    if division_id in ("", 0):
        division_id = None
    elif division_id is not None:
        try:
            division_id = int(division_id)
        except (TypeError, ValueError):
            raise ConfigurationError(f"division_id must be an integer, got {division_id!r}") from None

    return SubscriptionRequest(
        friendly_name=str(attrs["friendly_name"]),
        po_number=str(attrs["po_number"]),
        budget_code=str(attrs["budget_code"]),
        principal_id=str(attrs.get("default_admin") or ""),
        division_id=division_id,
    )


def order_record(order: Order) -> dict[str, Any]:
    """Flatten an order into the host's state record."""
    record: dict[str, Any] = {
        "id": str(order.id),
        "contract_name": order.contract_name,
        "create_date": order.create_date,
        "subscription_id": "",
        "friendly_name": "",
        "po_number": "",
        "default_admin": "",
    }
    if order.items:
        first = order.items[0]
        record.update(
            subscription_id=first.subscription_id,
            friendly_name=first.friendly_name,
            po_number=first.po_number,
            default_admin=first.principal_id,
        )
    return record


class SubscriptionResource:
    """Create/read/delete lifecycle for the subscription resource."""

    def __init__(self, session: CommerceSession) -> None:
        self._session = session

    async def create(self, attrs: Mapping[str, Any]) -> dict[str, Any]:
        order = await self._session.create_subscription(request_from_attributes(attrs))
        return order_record(order)

    async def read(self, order_id: str) -> dict[str, Any]:
        order = await self._session.get_order_details(order_id)
        return order_record(order)

    async def delete(self, record_id: str) -> None:
        logger.info(
            "Subscription %s removed from state only; the commerce API has no delete",
            record_id,
            extra={"order_id": record_id},
        )
