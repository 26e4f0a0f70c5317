"""In-process event bus shared by the outbox relay and the app handlers."""

from __future__ import annotations

from typing import Dict, Iterable, List, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Synchronous bus; a handler error propagates to the publisher."""

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def subscribe_all(
        self, event_classes: Iterable[Type[DomainEvent]], handler: IEventHandler
    ) -> None:
        for event_class in event_classes:
            self.subscribe(event_class, handler)

    def publish(self, event: DomainEvent) -> int:
        """Dispatch *event* to its handlers; returns how many ran."""
        handlers = self._handlers.get(type(event), [])
        for handler in handlers:
            handler.handle(event)
        logger.debug(
            "event_bus.published",
            event_name=event.event_name,
            handler_count=len(handlers),
        )
        return len(handlers)


# Process-wide instance, populated in each AppConfig.ready
event_bus = InMemoryEventBus()
