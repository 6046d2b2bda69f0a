"""In-process event emitter supporting sync and async handlers."""

import asyncio
import inspect
import typing as t
from collections import defaultdict

from ..infrastructure.logging import get_logger
from .base import BaseEmitter, EventHandler

if t.TYPE_CHECKING:
    import loguru


class EventEmitter(BaseEmitter):
    """Dispatches events to subscribed handlers in subscription order.

    A failing handler never breaks emission: its exception is logged and
    the remaining handlers still run. Async handlers are awaited
    concurrently once all sync handlers have been called.
    """

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self._logger = logger
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def on(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            self._logger.warning(f"Handler {handler} not found for event {event_type}")

    def has_listeners(self, event_type: str) -> bool:
        return bool(self._handlers.get(event_type))

    async def emit(self, event_type: str, event_data: t.Any) -> None:
        handlers = list(self._handlers.get(event_type, ()))
        if not handlers:
            return

        pending: list[t.Awaitable[None]] = []
        for handler in handlers:
            try:
                result = handler(event_data)
            except Exception:
                self._logger.exception(f"Handler {handler} failed for {event_type}")
                continue
            if inspect.isawaitable(result):
                pending.append(result)

        if not pending:
            return

        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                self._logger.opt(exception=result).error(
                    f"Async handler failed for {event_type}"
                )
