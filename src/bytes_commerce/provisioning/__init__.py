"""Subscription provisioning: state machine, waits and orchestration."""

from .orchestrator import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_POLL_MAX_ATTEMPTS,
    PollPolicy,
    SubscriptionOrchestrator,
)
from .state_machine import (
    PROVISIONING_SEQUENCE,
    InvalidStateTransition,
    ProvisioningJobState,
    advance_state,
    record_poll_attempt,
    start_job,
    transition_to_failed,
)
from .waiter import CancellationToken, PollWaiter

__all__ = [
    'CancellationToken',
    'DEFAULT_POLL_INTERVAL_SECONDS',
    'DEFAULT_POLL_MAX_ATTEMPTS',
    'InvalidStateTransition',
    'PROVISIONING_SEQUENCE',
    'PollPolicy',
    'PollWaiter',
    'ProvisioningJobState',
    'SubscriptionOrchestrator',
    'advance_state',
    'record_poll_attempt',
    'start_job',
    'transition_to_failed',
]
