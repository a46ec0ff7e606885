"""Typed views of the commerce API payloads.

The API speaks camelCase JSON. Each model decodes itself through
``from_payload`` and raises ``DecodeError`` when a required key is missing or
has the wrong type, so callers never see half-populated objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from .errors import ConfigurationError, DecodeError


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise DecodeError(what, f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _get(payload: Mapping[str, Any], key: str, kind: type | tuple[type, ...], what: str) -> Any:
    if key not in payload:
        raise DecodeError(what, f"missing field {key!r}")
    value = payload[key]
    # bool is an int subclass; ids are never booleans.
    if isinstance(value, bool) or not isinstance(value, kind):
        raise DecodeError(what, f"field {key!r} has unexpected type {type(value).__name__}")
    return value


def _opt_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return "" if value is None else str(value)


def _items(payload: Mapping[str, Any], what: str) -> list[Any]:
    items = payload.get("items")
    if items is None:
        return []
    if not isinstance(items, list):
        raise DecodeError(what, f"field 'items' has unexpected type {type(items).__name__}")
    return items


# ── Auth ─────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Credentials:
    """Client-credentials pair for the identity API."""

    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"Credentials(client_id={self.client_id!r}, client_secret='***')"

    def require_complete(self) -> None:
        if not self.client_id or not self.client_secret:
            raise ConfigurationError("define commerce API username and password")


@dataclass(frozen=True, slots=True)
class SessionToken:
    """Bearer token obtained once per session."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    obtained_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return (
            f"SessionToken(token_type={self.token_type!r}, expires_in={self.expires_in}, "
            f"obtained_at={self.obtained_at.isoformat()})"
        )

    @property
    def expires_at(self) -> datetime | None:
        if self.expires_in <= 0:
            return None
        return self.obtained_at + timedelta(seconds=self.expires_in)

    def is_expired(self, now: datetime | None = None) -> bool:
        expires_at = self.expires_at
        if expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= expires_at

    @classmethod
    def from_payload(cls, payload: Any) -> SessionToken:
        what = "authenticate"
        data = _require_mapping(payload, what)
        token = _get(data, "access_token", str, what)
        if not token:
            raise DecodeError(what, "field 'access_token' is empty")
        expires_in = data.get("expires_in") or 0
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise DecodeError(what, "field 'expires_in' has unexpected type")
        return cls(
            access_token=token,
            token_type=_opt_str(data, "token_type") or "Bearer",
            expires_in=expires_in,
        )


# ── Basket ───────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class BasketProduct:
    """Fixed product fields sent with every basket."""

    product_id: str = "ENTITLEMENT"
    sku_id: str = "ENTITLEMENT"
    price_id: int = 24492277
    billing_frequency: str = "monthly"
    term: str = "Perpetual"
    quantity: int = 1


@dataclass(frozen=True, slots=True)
class SubscriptionRequest:
    """What the caller wants provisioned."""

    friendly_name: str
    po_number: str
    budget_code: str
    principal_id: str = ""
    division_id: int | None = None

    def basket_payload(self, product: BasketProduct) -> dict[str, Any]:
        return {
            "quantity": product.quantity,
            "friendlyName": self.friendly_name,
            "productId": product.product_id,
            "skuId": product.sku_id,
            "principalId": self.principal_id,
            "priceId": product.price_id,
            "poNumber": self.po_number,
            "billingFrequency": product.billing_frequency,
            "term": product.term,
            "divisionId": self.division_id,
            "budgetCode": self.budget_code,
        }


@dataclass(frozen=True, slots=True)
class BasketItem:
    id: int
    po_number: str = ""
    principal_id: str = ""
    budget_code: str = ""


@dataclass(frozen=True, slots=True)
class Basket:
    id: int
    items: tuple[BasketItem, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> Basket:
        what = "create_basket"
        data = _require_mapping(payload, what)
        items = []
        for raw in _items(data, what):
            item = _require_mapping(raw, what)
            items.append(
                BasketItem(
                    id=_get(item, "id", int, what),
                    po_number=_opt_str(item, "poNumber"),
                    principal_id=_opt_str(item, "principalId"),
                    budget_code=_opt_str(item, "budgetCode"),
                )
            )
        return cls(id=_get(data, "id", int, what), items=tuple(items))


# ── Checkout ─────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CheckoutItem:
    id: int
    po_number: str = ""
    friendly_name: str = ""
    principal_id: str = ""


@dataclass(frozen=True, slots=True)
class Checkout:
    id: int
    items: tuple[CheckoutItem, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> Checkout:
        what = "checkout"
        data = _require_mapping(payload, what)
        items = []
        for raw in _items(data, what):
            item = _require_mapping(raw, what)
            items.append(
                CheckoutItem(
                    id=_get(item, "id", int, what),
                    po_number=_opt_str(item, "poNumber"),
                    friendly_name=_opt_str(item, "friendlyName"),
                    principal_id=_opt_str(item, "principalId"),
                )
            )
        return cls(id=_get(data, "id", int, what), items=tuple(items))


# ── Order ────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class OrderItem:
    subscription_id: str = ""
    po_number: str = ""
    friendly_name: str = ""
    principal_id: str = ""
    cloud_subscription_id: int | None = None


@dataclass(frozen=True, slots=True)
class Order:
    """Server-side order record; ``subscription_id`` fills in asynchronously."""

    id: int
    contract_name: str = ""
    create_date: str = ""
    items: tuple[OrderItem, ...] = ()

    @property
    def subscription_id(self) -> str:
        if not self.items:
            return ""
        return self.items[0].subscription_id

    @property
    def is_provisioned(self) -> bool:
        return bool(self.subscription_id)

    @classmethod
    def from_payload(cls, payload: Any) -> Order:
        what = "get_order"
        data = _require_mapping(payload, what)
        items = []
        for raw in _items(data, what):
            item = _require_mapping(raw, what)
            cloud_id = item.get("cloudSubscriptionId")
            if cloud_id is not None and (isinstance(cloud_id, bool) or not isinstance(cloud_id, int)):
                raise DecodeError(what, "field 'cloudSubscriptionId' has unexpected type")
            items.append(
                OrderItem(
                    subscription_id=_opt_str(item, "subscriptionId"),
                    po_number=_opt_str(item, "poNumber"),
                    friendly_name=_opt_str(item, "friendlyName"),
                    principal_id=_opt_str(item, "principalId"),
                    cloud_subscription_id=cloud_id,
                )
            )
        return cls(
            id=_get(data, "id", int, what),
            contract_name=_opt_str(data, "contractName"),
            create_date=_opt_str(data, "createDate"),
            items=tuple(items),
        )
