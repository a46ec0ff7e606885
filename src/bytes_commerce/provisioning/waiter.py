"""Cancellable timed waits for the polling loop.

A wait is an asyncio timer raced against a cancellation event, so a caller
in an event loop never parks a worker for the whole polling budget and can
stop a run between attempts.
"""

from __future__ import annotations

import asyncio


class CancellationToken:
    """One-shot cancellation signal shared between a caller and a run."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class PollWaiter:
    """Sleeps between polling attempts unless cancelled first."""

    async def wait(
        self,
        seconds: float,
        cancel: CancellationToken | None = None,
    ) -> bool:
        """Wait ``seconds``. Returns False if ``cancel`` fired first."""
        if cancel is None:
            await asyncio.sleep(seconds)
            return True
        if cancel.cancelled:
            return False
        try:
            await asyncio.wait_for(cancel.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return True
        return False
