"""Caller-facing entry point: configure once, then provision or look up orders.

Usage::

    async with await CommerceSession.configure(
        identity_url, commerce_url, username, password, contract_id,
    ) as session:
        order = await session.create_subscription(request)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .client.auth import TokenManager
from .client.baskets import DEFAULT_MAX_RETRIES, BasketManager
from .client.checkout import CheckoutExecutor
from .client.context import CommerceContext
from .client.errors import ConfigurationError
from .client.models import BasketProduct, Credentials, Order, SubscriptionRequest
from .client.orders import OrderQuery
from .client.transport import DEFAULT_TIMEOUT_SECONDS, CommerceTransport
from .provisioning.orchestrator import PollPolicy, SubscriptionOrchestrator, Waiter
from .provisioning.waiter import CancellationToken
from .settings import CommerceSettings

logger = logging.getLogger(__name__)


class CommerceSession:
    """Authenticated session bound to one contract.

    The token and transport are read-only after ``configure`` and may back
    concurrent provisioning runs. Concurrent runs against the same contract
    from several processes can starve each other's baskets; that constraint
    is external and not handled here.
    """

    def __init__(
        self,
        context: CommerceContext,
        *,
        product: BasketProduct | None = None,
        basket_max_retries: int = DEFAULT_MAX_RETRIES,
        poll_policy: PollPolicy | None = None,
        waiter: Waiter | None = None,
    ) -> None:
        self._ctx = context
        self._orders = OrderQuery(context)
        self._orchestrator = SubscriptionOrchestrator(
            baskets=BasketManager(context, product=product, max_retries=basket_max_retries),
            checkout=CheckoutExecutor(context),
            orders=self._orders,
            policy=poll_policy,
            waiter=waiter,
        )

    @classmethod
    async def configure(
        cls,
        identity_url: str,
        commerce_url: str,
        username: str,
        password: str,
        contract_id: int,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        **kwargs: Any,
    ) -> CommerceSession:
        """Validate configuration, authenticate and return a ready session.

        Raises ConfigurationError before any network call when a value is
        missing; AuthError, TransportError or DecodeError when the token
        exchange fails.
        """
        if not identity_url:
            raise ConfigurationError("identity API URL is required")
        if not commerce_url:
            raise ConfigurationError("commerce API URL is required")
        if contract_id <= 0:
            raise ConfigurationError("contract ID must be a positive integer")
        credentials = Credentials(client_id=username, client_secret=password)
        credentials.require_complete()

        transport = CommerceTransport(http_client=http_client, timeout_seconds=timeout_seconds)
        try:
            token = await TokenManager(transport, identity_url).authenticate(credentials)
        except BaseException:
            await transport.aclose()
            raise

        logger.info(
            "Commerce session configured: commerce_url=%s contract_id=%d",
            commerce_url,
            contract_id,
            extra={"contract_id": contract_id},
        )
        context = CommerceContext(
            commerce_url=commerce_url,
            contract_id=contract_id,
            token=token,
            transport=transport,
        )
        return cls(context, **kwargs)

    @classmethod
    async def from_settings(
        cls,
        settings: CommerceSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> CommerceSession:
        errors = settings.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))
        return await cls.configure(
            settings.identity_api_url,
            settings.commerce_api_url,
            settings.username,
            settings.password,
            settings.contract_id,
            http_client=http_client,
            timeout_seconds=settings.timeout_seconds,
            basket_max_retries=settings.basket_max_retries,
            poll_policy=PollPolicy(
                max_attempts=settings.poll_max_attempts,
                interval_seconds=settings.poll_interval_seconds,
            ),
            **kwargs,
        )

    @property
    def context(self) -> CommerceContext:
        return self._ctx

    async def create_subscription(
        self,
        request: SubscriptionRequest,
        *,
        cancel: CancellationToken | None = None,
    ) -> Order:
        return await self._orchestrator.create_subscription(request, cancel=cancel)

    async def get_order_details(self, order_id: str) -> Order:
        return await self._orders.get_order(order_id)

    async def aclose(self) -> None:
        await self._ctx.transport.aclose()

    async def __aenter__(self) -> CommerceSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
