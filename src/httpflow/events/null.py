"""Emitter that drops every event."""

import typing as t

from .base import BaseEmitter, EventHandler


class NullEmitter(BaseEmitter):
    """Null object used when a pipeline runs without observers."""

    def on(self, event_type: str, handler: EventHandler) -> None:
        pass

    def off(self, event_type: str, handler: EventHandler) -> None:
        pass

    def has_listeners(self, event_type: str) -> bool:
        return False

    async def emit(self, event_type: str, event: t.Any) -> None:
        pass
