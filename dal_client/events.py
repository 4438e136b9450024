from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

EventHandler = Callable[[str], None]


class EventBus:
    """Fire-and-forget publish/subscribe for client login state changes."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def subscribe(self, event: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: str) -> None:
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Handler for %s failed", event)
