"""Event bus contracts used by the order board.

Publishing is synchronous and in-process: ``publish`` returns once every
handler has run.  Subscribing to a base event class covers all of its
subclasses, so ``OrderEvent`` handlers see every board change.
"""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

EventT = TypeVar("EventT", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[EventT]):
    """Anything with a ``handle(event)`` method."""

    def handle(self, event: EventT) -> None: ...


class IEventBus(Protocol):
    """Dispatches published events to subscribed handlers."""

    def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to handlers of its class and its base classes."""
        ...

    def subscribe(
        self, event_class: Type[EventT], handler: IEventHandler[EventT]
    ) -> None:
        """Register ``handler``; registering the same pair twice is a no-op."""
        ...

    def unsubscribe(
        self, event_class: Type[EventT], handler: IEventHandler[EventT]
    ) -> None:
        """Remove ``handler``; unknown pairs are ignored."""
        ...
