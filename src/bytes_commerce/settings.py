"""bytes-commerce configuration settings.

CommerceSettings is the single configuration object accepted by
CommerceSession.from_settings(). It is a plain dataclass (not env-coupled) so
tests can inject config without touching os.environ.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .client.errors import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 120.0
DEFAULT_POLL_INTERVAL_SECONDS = 30.0
DEFAULT_POLL_MAX_ATTEMPTS = 40
DEFAULT_BASKET_MAX_RETRIES = 3


@dataclass(frozen=True, slots=True)
class CommerceSettings:
    """Connection, credential and polling configuration."""

    # ── Endpoints ──────────────────────────────────────────────────
    identity_api_url: str = ""
    """Identity API base URL (token endpoint host)."""

    commerce_api_url: str = ""
    """Commerce API base URL (baskets, checkout, orders)."""

    # ── Credentials ────────────────────────────────────────────────
    username: str = ""
    """Client id for the client-credentials grant."""

    password: str = ""
    """Client secret for the client-credentials grant. Never log this."""

    contract_id: int = 0
    """Contract that baskets and orders are scoped to."""

    # ── Behaviour ──────────────────────────────────────────────────
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    poll_max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS
    basket_max_retries: int = DEFAULT_BASKET_MAX_RETRIES

    def __repr__(self) -> str:
        return (
            f"CommerceSettings(identity_api_url={self.identity_api_url!r}, "
            f"commerce_api_url={self.commerce_api_url!r}, username={self.username!r}, "
            f"password='***', contract_id={self.contract_id})"
        )

    def validate(self) -> list[str]:
        """Return a list of configuration errors. Empty means valid."""
        errors: list[str] = []
        if not self.identity_api_url:
            errors.append("identity_api_url is required (BYTES_IDENTITY_HOST)")
        if not self.commerce_api_url:
            errors.append("commerce_api_url is required (BYTES_COMMERCE_HOST)")
        if not self.username:
            errors.append("username is required (BYTES_USERNAME)")
        if not self.password:
            errors.append("password is required (BYTES_PASSWORD)")
        if self.contract_id <= 0:
            errors.append("contract_id must be a positive integer (BYTES_CONTRACT_ID)")
        if self.timeout_seconds <= 0:
            errors.append("timeout_seconds must be > 0")
        if self.poll_interval_seconds < 0:
            errors.append("poll_interval_seconds must be >= 0")
        if self.poll_max_attempts < 1:
            errors.append("poll_max_attempts must be >= 1")
        if self.basket_max_retries < 0:
            errors.append("basket_max_retries must be >= 0")
        return errors

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> CommerceSettings:
        """Build settings from BYTES_* environment variables.

        Tests should construct CommerceSettings directly.
        """
        if env is None:
            env = dict(os.environ)

        return cls(
            identity_api_url=env.get("BYTES_IDENTITY_HOST", "").strip(),
            commerce_api_url=env.get("BYTES_COMMERCE_HOST", "").strip(),
            username=env.get("BYTES_USERNAME", ""),
            password=env.get("BYTES_PASSWORD", ""),
            contract_id=_int(env, "BYTES_CONTRACT_ID", 0),
            timeout_seconds=_float(env, "BYTES_HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            poll_interval_seconds=_float(
                env, "BYTES_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS
            ),
            poll_max_attempts=_int(env, "BYTES_POLL_MAX_ATTEMPTS", DEFAULT_POLL_MAX_ATTEMPTS),
            basket_max_retries=_int(env, "BYTES_BASKET_MAX_RETRIES", DEFAULT_BASKET_MAX_RETRIES),
        )


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from None
