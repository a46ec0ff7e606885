"""Immutable per-session context shared by the commerce components."""

from __future__ import annotations

from dataclasses import dataclass

from .models import SessionToken
from .transport import CommerceTransport


@dataclass(frozen=True, slots=True)
class CommerceContext:
    """Everything an authenticated commerce call needs.

    Read-only after construction, so one context can back concurrent
    provisioning runs.
    """

    commerce_url: str
    contract_id: int
    token: SessionToken
    transport: CommerceTransport

    def contract_url(self, path: str = "") -> str:
        return f"{self.commerce_url.rstrip('/')}/api/v2/contracts/{self.contract_id}{path}"

    def api_url(self, path: str) -> str:
        return f"{self.commerce_url.rstrip('/')}{path}"
