"""Async client and orchestration layer for commerce subscription provisioning."""

from .client import (
    CommerceError,
    ConfigurationError,
    Order,
    SubscriptionRequest,
)
from .provisioning import CancellationToken, PollPolicy
from .resource import SubscriptionResource
from .session import CommerceSession
from .settings import CommerceSettings

__all__ = [
    "CancellationToken",
    "CommerceError",
    "CommerceSession",
    "CommerceSettings",
    "ConfigurationError",
    "Order",
    "PollPolicy",
    "SubscriptionRequest",
    "SubscriptionResource",
]
