"""In-memory orchestrator collaborators for tests and dry runs."""

from __future__ import annotations

from ..client.errors import CommerceError
from ..client.models import Basket, BasketItem, Checkout, Order, OrderItem, SubscriptionRequest
from .waiter import CancellationToken


class InMemoryBasketCreator:
    """Returns a one-item basket and records each request."""

    def __init__(self, *, basket_id: int = 100, error: CommerceError | None = None) -> None:
        self.basket_id = basket_id
        self.error = error
        self.requests: list[SubscriptionRequest] = []

    async def create_basket(self, request: SubscriptionRequest) -> Basket:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return Basket(
            id=self.basket_id,
            items=(
                BasketItem(
                    id=1,
                    po_number=request.po_number,
                    principal_id=request.principal_id,
                    budget_code=request.budget_code,
                ),
            ),
        )


class InMemoryCheckout:
    def __init__(self, *, checkout_id: int = 200, error: CommerceError | None = None) -> None:
        self.checkout_id = checkout_id
        self.error = error
        self.baskets: list[Basket] = []

    async def checkout(self, basket: Basket) -> Checkout:
        self.baskets.append(basket)
        if self.error is not None:
            raise self.error
        return Checkout(id=self.checkout_id)


class ScriptedOrderReader:
    """Reports an empty subscription id ``pending`` times, then ``subscription_id``.

    With ``subscription_id=None`` the order never gets provisioned.
    ``errors`` maps a 1-based call number to the error raised on that call.
    """

    def __init__(
        self,
        *,
        pending: int = 0,
        subscription_id: str | None = 'sub-abc',
        errors: dict[int, CommerceError] | None = None,
    ) -> None:
        self.pending = pending
        self.subscription_id = subscription_id
        self.errors = errors or {}
        self.calls: list[str] = []

    async def get_order(self, order_id: str) -> Order:
        self.calls.append(order_id)
        call = len(self.calls)
        if call in self.errors:
            raise self.errors[call]
        ready = self.subscription_id is not None and call > self.pending
        return Order(
            id=int(order_id),
            contract_name='contract',
            items=(OrderItem(subscription_id=self.subscription_id if ready else ''),),
        )


class RecordingWaiter:
    """Returns immediately and records each requested wait.

    ``cancel_after`` simulates cancellation arriving during that (1-based) wait.
    """

    def __init__(self, *, cancel_after: int | None = None) -> None:
        self.cancel_after = cancel_after
        self.waits: list[float] = []

    @property
    def total_seconds(self) -> float:
        return sum(self.waits)

    async def wait(self, seconds: float, cancel: CancellationToken | None = None) -> bool:
        self.waits.append(seconds)
        if self.cancel_after is not None and len(self.waits) >= self.cancel_after:
            if cancel is not None:
                cancel.cancel()
            return False
        return not (cancel is not None and cancel.cancelled)
