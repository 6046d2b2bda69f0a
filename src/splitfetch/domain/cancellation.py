"""Cooperative cancellation shared between the coordinator and its workers."""

import asyncio


class CancellationToken:
    """One-way flag that workers poll between read increments.

    Cancellation is advisory: setting the token never interrupts a worker
    mid-increment, it only stops the next increment from starting.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    async def wait(self) -> None:
        """Block until cancellation has been requested."""
        await self._event.wait()
