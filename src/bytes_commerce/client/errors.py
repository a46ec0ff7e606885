"""Commerce client error hierarchy.

Every failure raised by the client and the orchestrator derives from
``CommerceError`` so hosts can catch them uniformly. Status errors keep the raw
response body; messages embed it so a host can surface it verbatim.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..provisioning.state_machine import ProvisioningJobState


class CommerceError(Exception):
    """Base class for all commerce client errors."""


class ConfigurationError(CommerceError, ValueError):
    """Missing or invalid configuration. Raised before any network call."""


class TransportError(CommerceError):
    """Connection or timeout failure while talking to the API."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: failed to execute request: {message}")


class DecodeError(CommerceError):
    """Response body could not be decoded into the expected shape."""

    def __init__(self, operation: str, message: str, *, body: str = "") -> None:
        self.operation = operation
        self.body = body
        super().__init__(f"{operation}: could not decode response: {message}")


class EmptyBasketError(CommerceError):
    """Basket creation succeeded but the basket holds no items."""

    def __init__(self, basket_id: int) -> None:
        self.basket_id = basket_id
        super().__init__(f"basket {basket_id} was created without any items")


# ── Status errors ────────────────────────────────────────────────


class UnexpectedStatusError(CommerceError):
    """HTTP status outside the accepted set for a call."""

    operation = "request"

    def __init__(
        self,
        status_code: int,
        body: str = "",
        *,
        operation: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        if operation is not None:
            self.operation = operation
        super().__init__(
            f"{self.operation}: unexpected HTTP status code: {status_code}, "
            f"response body: {body}"
        )


class AuthError(UnexpectedStatusError):
    """Token endpoint rejected the client credentials."""

    operation = "authenticate"


class QueryError(UnexpectedStatusError):
    """Order lookup returned a non-200 status."""

    operation = "get_order"


class BasketError(UnexpectedStatusError):
    """Basket creation returned a non-200 status."""

    operation = "create_basket"


class BasketCleanupError(UnexpectedStatusError):
    """Deleting a stale basket item failed."""

    operation = "delete_basket_item"

    def __init__(self, status_code: int, body: str = "", *, item_id: int, **kwargs: Any) -> None:
        self.item_id = item_id
        super().__init__(status_code, body, **kwargs)

    def __str__(self) -> str:
        return f"failed to delete basket item with id {self.item_id}: {super().__str__()}"


class CheckoutError(UnexpectedStatusError):
    """Basket checkout returned neither 200 nor 202."""

    operation = "checkout"


# ── Recovery / orchestration ─────────────────────────────────────


class BasketConflictExceeded(CommerceError):
    """Stale basket items kept reappearing after every purge-and-retry cycle."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            f"max retries reached while trying to create basket ({attempts} cleanup cycles)"
        )


MaxRetriesExceeded = BasketConflictExceeded


class OrchestrationError(CommerceError):
    """A provisioning run ended in the ``failed`` state."""

    def __init__(
        self,
        stage: str,
        message: str,
        *,
        job: ProvisioningJobState | None = None,
    ) -> None:
        self.stage = stage
        self.job = job
        super().__init__(message)


class ProvisioningTimeout(OrchestrationError):
    """The order never reported a subscription id within the polling budget."""

    def __init__(self, attempts: int, *, job: ProvisioningJobState | None = None) -> None:
        self.attempts = attempts
        super().__init__(
            "polling",
            "subscriptionId did not update after waiting for the maximum allowed time "
            f"({attempts} attempts)",
            job=job,
        )


class ProvisioningCancelled(OrchestrationError):
    """The caller cancelled the run before it started or while it was waiting."""

    def __init__(self, stage: str = "polling", *, job: ProvisioningJobState | None = None) -> None:
        super().__init__(stage, "provisioning cancelled by caller", job=job)
