"""Ports for in-process event delivery.

Handlers react to events already committed through the outbox; the
relay task is the only publisher in production code.
"""

from __future__ import annotations

from typing import Generic, Iterable, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    def publish(self, event: DomainEvent) -> int:
        """Run every handler subscribed to ``type(event)``; return the count."""
        ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None: ...

    def subscribe_all(
        self, event_classes: Iterable[Type[DomainEvent]], handler: IEventHandler
    ) -> None:
        """Subscribe one handler to several event types."""
        ...
