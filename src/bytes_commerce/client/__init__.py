"""Async client for the commerce and identity APIs."""

from .auth import TokenManager
from .baskets import BasketManager
from .checkout import CheckoutExecutor
from .context import CommerceContext
from .errors import (
    AuthError,
    BasketCleanupError,
    BasketConflictExceeded,
    BasketError,
    CheckoutError,
    CommerceError,
    ConfigurationError,
    DecodeError,
    EmptyBasketError,
    MaxRetriesExceeded,
    OrchestrationError,
    ProvisioningCancelled,
    ProvisioningTimeout,
    QueryError,
    TransportError,
    UnexpectedStatusError,
)
from .models import (
    Basket,
    BasketItem,
    BasketProduct,
    Checkout,
    CheckoutItem,
    Credentials,
    Order,
    OrderItem,
    SessionToken,
    SubscriptionRequest,
)
from .orders import OrderQuery
from .transport import CommerceTransport, TransportResponse

__all__ = [
    "AuthError",
    "Basket",
    "BasketCleanupError",
    "BasketConflictExceeded",
    "BasketError",
    "BasketItem",
    "BasketManager",
    "BasketProduct",
    "Checkout",
    "CheckoutError",
    "CheckoutExecutor",
    "CheckoutItem",
    "CommerceContext",
    "CommerceError",
    "CommerceTransport",
    "ConfigurationError",
    "Credentials",
    "DecodeError",
    "EmptyBasketError",
    "MaxRetriesExceeded",
    "OrchestrationError",
    "Order",
    "OrderItem",
    "OrderQuery",
    "ProvisioningCancelled",
    "ProvisioningTimeout",
    "QueryError",
    "SessionToken",
    "SubscriptionRequest",
    "TokenManager",
    "TransportError",
    "TransportResponse",
    "UnexpectedStatusError",
]
