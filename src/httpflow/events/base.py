"""Emitter interface shared by the real and null implementations."""

import typing as t
from abc import ABC, abstractmethod

EventHandler = t.Callable[[t.Any], t.Awaitable[None] | None]


class BaseEmitter(ABC):
    """Publishes request lifecycle events to subscribed handlers."""

    @abstractmethod
    def on(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe ``handler`` to ``event_type``."""

    @abstractmethod
    def off(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe ``handler`` from ``event_type``."""

    @abstractmethod
    def has_listeners(self, event_type: str) -> bool:
        """True if at least one handler is subscribed to ``event_type``."""

    @abstractmethod
    async def emit(self, event_type: str, event: t.Any) -> None:
        """Deliver ``event`` to every handler subscribed to ``event_type``."""
