"""Subscription provisioning state machine.

Canonical flow:
  creating_basket -> checking_out -> polling -> succeeded

And deterministic failure transitions:
  any active state -> failed
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from types import MappingProxyType

PROVISIONING_SEQUENCE = (
    'creating_basket',
    'checking_out',
    'polling',
    'succeeded',
)

TERMINAL_STATES = frozenset({'succeeded', 'failed'})
ACTIVE_STATES = frozenset({'creating_basket', 'checking_out', 'polling'})

ALLOWED_TRANSITIONS = MappingProxyType(
    {
        'creating_basket': frozenset({'checking_out', 'failed'}),
        'checking_out': frozenset({'polling', 'failed'}),
        'polling': frozenset({'succeeded', 'failed'}),
        'succeeded': frozenset(),
        'failed': frozenset(),
    }
)

BASKET_FAILED_CODE = 'basket_creation_failed'
CHECKOUT_FAILED_CODE = 'checkout_failed'
ORDER_QUERY_FAILED_CODE = 'order_query_failed'
POLL_TIMEOUT_CODE = 'subscription_id_timeout'
CANCELLED_CODE = 'cancelled'


@dataclass(frozen=True, slots=True)
class ProvisioningJobState:
    """State snapshot for one subscription provisioning run."""

    po_number: str
    state: str = 'creating_basket'
    basket_id: int | None = None
    order_id: int | None = None
    poll_attempts: int = 0
    state_entered_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    last_error_code: str | None = None
    last_error_detail: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES


class InvalidStateTransition(ValueError):
    """Raised for invalid provisioning state transitions."""

    def __init__(self, from_state: str, to_state: str) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f'invalid state transition: {from_state!r} -> {to_state!r}'
        )


def start_job(*, po_number: str, now: datetime) -> ProvisioningJobState:
    """Create a job snapshot in ``creating_basket``."""
    _require_aware_datetime(now)
    return ProvisioningJobState(
        po_number=po_number,
        state_entered_at=now,
        started_at=now,
    )


def advance_state(
    job: ProvisioningJobState,
    *,
    now: datetime,
    basket_id: int | None = None,
    order_id: int | None = None,
) -> ProvisioningJobState:
    """Advance provisioning by exactly one step along the sequence."""
    _require_aware_datetime(now)
    if job.state not in ACTIVE_STATES:
        raise InvalidStateTransition(job.state, 'next')

    current_index = PROVISIONING_SEQUENCE.index(job.state)
    next_state = PROVISIONING_SEQUENCE[current_index + 1]
    job = _transition(job, to_state=next_state, now=now)
    if basket_id is not None:
        job = replace(job, basket_id=basket_id)
    if order_id is not None:
        job = replace(job, order_id=order_id)
    return job


def record_poll_attempt(job: ProvisioningJobState) -> ProvisioningJobState:
    """Count one order-status query while ``polling``."""
    if job.state != 'polling':
        raise InvalidStateTransition(job.state, 'polling')
    return replace(job, poll_attempts=job.poll_attempts + 1)


def transition_to_failed(
    job: ProvisioningJobState,
    *,
    now: datetime,
    error_code: str,
    error_detail: str,
) -> ProvisioningJobState:
    """Move any active state to terminal ``failed``."""
    _require_aware_datetime(now)
    if job.state not in ACTIVE_STATES:
        raise InvalidStateTransition(job.state, 'failed')

    return _transition(
        job,
        to_state='failed',
        now=now,
        error_code=error_code,
        error_detail=error_detail,
    )


def _transition(
    job: ProvisioningJobState,
    *,
    to_state: str,
    now: datetime,
    error_code: str | None = None,
    error_detail: str | None = None,
) -> ProvisioningJobState:
    allowed = ALLOWED_TRANSITIONS.get(job.state, frozenset())
    if to_state not in allowed:
        raise InvalidStateTransition(job.state, to_state)

    return replace(
        job,
        state=to_state,
        state_entered_at=now,
        finished_at=now if to_state in TERMINAL_STATES else None,
        last_error_code=error_code,
        last_error_detail=error_detail,
        started_at=job.started_at or now,
    )


def _require_aware_datetime(value: datetime) -> None:
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError('now must be timezone-aware')
