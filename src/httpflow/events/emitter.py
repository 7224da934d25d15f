"""In-process event emitter supporting sync and async handlers."""

import inspect
import typing as t
from collections import defaultdict

from ..infrastructure.logging import get_logger
from .base import BaseEmitter, EventHandler

if t.TYPE_CHECKING:
    import loguru


class EventEmitter(BaseEmitter):
    """Dispatches events to handlers registered per event type.

    Handlers run in subscription order. A failing handler is logged with its
    traceback and never prevents the remaining handlers from running, so an
    observer bug cannot break a request.
    """

    def __init__(self, logger: "loguru.Logger | None" = None) -> None:
        self._logger = logger if logger is not None else get_logger(__name__)
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def on(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler not in handlers:
            self._logger.warning(f"Handler {handler} not found for event {event_type}")
            return
        handlers.remove(handler)

    def has_listeners(self, event_type: str) -> bool:
        return bool(self._handlers.get(event_type))

    async def emit(self, event_type: str, event: t.Any) -> None:
        # Copy so handlers may unsubscribe themselves while being called
        for handler in list(self._handlers.get(event_type, ())):
            if inspect.iscoroutinefunction(handler):
                try:
                    await handler(event)
                except Exception as exc:
                    self._logger.opt(exception=exc).error(
                        f"Async handler {handler} failed for event {event_type}"
                    )
            else:
                try:
                    handler(event)
                except Exception:
                    self._logger.exception(
                        f"Handler {handler} failed for event {event_type}"
                    )
