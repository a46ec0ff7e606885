"""Subscription orchestrator: basket -> checkout -> bounded order polling.

Drives the state machine for one provisioning run:
  creating_basket -> checking_out -> polling -> succeeded

At each step the orchestrator:
  1. Performs the step through an injected collaborator.
  2. Advances the state machine on success.
  3. Transitions to ``failed`` with an actionable code on error and raises
     an OrchestrationError carrying the final job snapshot.

The backend provisions the subscription out of band after checkout. Polling
is the only place that turns that eventual consistency into a bounded,
synchronous outcome. Only "not provisioned yet" is retried; a failed order
query ends the run at once.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import NoReturn, Protocol

import structlog

from ..client.errors import (
    CommerceError,
    OrchestrationError,
    ProvisioningCancelled,
    ProvisioningTimeout,
)
from ..client.models import Basket, Checkout, Order, SubscriptionRequest
from ..observability.logging import get_logger, provisioning_id_ctx
from .state_machine import (
    BASKET_FAILED_CODE,
    CANCELLED_CODE,
    CHECKOUT_FAILED_CODE,
    ORDER_QUERY_FAILED_CODE,
    POLL_TIMEOUT_CODE,
    ProvisioningJobState,
    advance_state,
    record_poll_attempt,
    start_job,
    transition_to_failed,
)
from .waiter import CancellationToken, PollWaiter

logger = get_logger(__name__)

DEFAULT_POLL_MAX_ATTEMPTS = 40
DEFAULT_POLL_INTERVAL_SECONDS = 30.0


# ── Collaborator protocols ───────────────────────────────────────────


class BasketCreator(Protocol):
    async def create_basket(self, request: SubscriptionRequest) -> Basket:
        """Create a basket holding exactly this request's item."""
        ...


class BasketCheckout(Protocol):
    async def checkout(self, basket: Basket) -> Checkout:
        """Convert the basket into an order."""
        ...


class OrderReader(Protocol):
    async def get_order(self, order_id: str) -> Order:
        """Fetch the current order state."""
        ...


class Waiter(Protocol):
    async def wait(self, seconds: float, cancel: CancellationToken | None = None) -> bool:
        """Pause between attempts; False means cancelled."""
        ...


# ── Policy ───────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PollPolicy:
    """How long to wait for the subscription id (default ~20 minutes)."""

    max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS
    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError('max_attempts must be >= 1')
        if self.interval_seconds < 0:
            raise ValueError('interval_seconds must be >= 0')

    @property
    def budget_seconds(self) -> float:
        return self.max_attempts * self.interval_seconds


# ── Orchestrator ─────────────────────────────────────────────────────


class SubscriptionOrchestrator:
    """Composes basket creation, checkout and order polling into one call."""

    def __init__(
        self,
        *,
        baskets: BasketCreator,
        checkout: BasketCheckout,
        orders: OrderReader,
        policy: PollPolicy | None = None,
        waiter: Waiter | None = None,
    ) -> None:
        self._baskets = baskets
        self._checkout = checkout
        self._orders = orders
        self._policy = policy or PollPolicy()
        self._waiter = waiter or PollWaiter()

    @property
    def policy(self) -> PollPolicy:
        return self._policy

    async def create_subscription(
        self,
        request: SubscriptionRequest,
        *,
        cancel: CancellationToken | None = None,
    ) -> Order:
        """Provision a subscription and return the order once it has an id.

        Raises OrchestrationError (or its ProvisioningTimeout and
        ProvisioningCancelled subclasses) with the final job snapshot.
        """
        provisioning_id = uuid.uuid4().hex[:12]
        token = provisioning_id_ctx.set(provisioning_id)
        try:
            with structlog.contextvars.bound_contextvars(po_number=request.po_number):
                return await self._run(request, cancel)
        finally:
            provisioning_id_ctx.reset(token)

    async def _run(
        self,
        request: SubscriptionRequest,
        cancel: CancellationToken | None,
    ) -> Order:
        job = start_job(po_number=request.po_number, now=_now())
        if cancel is not None and cancel.cancelled:
            job = transition_to_failed(
                job,
                now=_now(),
                error_code=CANCELLED_CODE,
                error_detail='cancelled before basket creation',
            )
            logger.warning('provisioning_cancelled', stage='creating_basket')
            raise ProvisioningCancelled('creating_basket', job=job)

        logger.info('provisioning_started', friendly_name=request.friendly_name)

        # Step 1: creating_basket -> checking_out
        try:
            basket = await self._baskets.create_basket(request)
        except CommerceError as exc:
            self._fail(job, BASKET_FAILED_CODE, f'failed to create basket: {exc}', exc)
        job = advance_state(job, now=_now(), basket_id=basket.id)

        # Step 2: checking_out -> polling
        try:
            checkout = await self._checkout.checkout(basket)
        except CommerceError as exc:
            self._fail(job, CHECKOUT_FAILED_CODE, f'failed to checkout basket: {exc}', exc)
        job = advance_state(job, now=_now(), order_id=checkout.id)

        # Step 3: polling -> succeeded
        order_id = str(checkout.id)
        for attempt in range(1, self._policy.max_attempts + 1):
            job = record_poll_attempt(job)
            try:
                order = await self._orders.get_order(order_id)
            except CommerceError as exc:
                self._fail(
                    job,
                    ORDER_QUERY_FAILED_CODE,
                    f'failed to fetch order details: {exc}',
                    exc,
                )

            if order.is_provisioned:
                job = advance_state(job, now=_now())
                logger.info(
                    'provisioning_succeeded',
                    order_id=order.id,
                    subscription_id=order.subscription_id,
                    attempts=attempt,
                )
                return order

            logger.info(
                'subscription_id_pending',
                order_id=order_id,
                attempt=attempt,
                max_attempts=self._policy.max_attempts,
            )
            if attempt == self._policy.max_attempts:
                break
            if not await self._waiter.wait(self._policy.interval_seconds, cancel):
                job = transition_to_failed(
                    job,
                    now=_now(),
                    error_code=CANCELLED_CODE,
                    error_detail='cancelled while waiting for subscription id',
                )
                logger.warning('provisioning_cancelled', order_id=order_id, attempts=attempt)
                raise ProvisioningCancelled(job=job)

        job = transition_to_failed(
            job,
            now=_now(),
            error_code=POLL_TIMEOUT_CODE,
            error_detail=(
                f'subscription id not populated after {self._policy.max_attempts} attempts'
            ),
        )
        logger.error(
            'provisioning_timed_out',
            order_id=order_id,
            attempts=self._policy.max_attempts,
        )
        raise ProvisioningTimeout(self._policy.max_attempts, job=job)

    def _fail(
        self,
        job: ProvisioningJobState,
        code: str,
        message: str,
        cause: CommerceError,
    ) -> NoReturn:
        stage = job.state
        job = transition_to_failed(job, now=_now(), error_code=code, error_detail=str(cause))
        logger.error('provisioning_failed', stage=stage, error_code=code, error=str(cause))
        raise OrchestrationError(stage, message, job=job) from cause


def _now() -> datetime:
    """UTC-aware now for state transitions."""
    return datetime.now(timezone.utc)
