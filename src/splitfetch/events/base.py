"""Abstract base class for event emitters."""

import typing as t
from abc import ABC, abstractmethod

# Handlers may be plain callables or coroutine functions.
EventHandler = t.Callable[[t.Any], t.Awaitable[None] | None]


class BaseEmitter(ABC):
    """Publish/subscribe interface shared by workers and the coordinator."""

    @abstractmethod
    def on(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event type."""
        pass

    @abstractmethod
    def off(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe a handler from an event type."""
        pass

    @abstractmethod
    def has_listeners(self, event_type: str) -> bool:
        """True if at least one handler is subscribed to the event type.

        Lets hot paths skip building per-increment event payloads that
        nobody would receive.
        """
        pass

    @abstractmethod
    async def emit(self, event_type: str, event_data: t.Any) -> None:
        """Deliver an event to every subscribed handler."""
        pass
