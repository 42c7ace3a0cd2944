"""Domain events for the order board."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderEvent(DomainEvent):
    """Base class for every order board event."""


@dataclass(frozen=True)
class OrderAdded(OrderEvent):
    """Raised when an order is created in the main list."""


@dataclass(frozen=True)
class OrderUpdated(OrderEvent):
    """Raised when an order's editable fields are replaced."""


@dataclass(frozen=True)
class OrderDeleted(OrderEvent):
    """Raised when an order is removed from the board."""


@dataclass(frozen=True)
class OrderMoved(OrderEvent):
    """Raised when a drag completes.

    ``location`` is the target lane, ``lane_size`` how many orders it holds.
    """

    location: str = ""
    lane_size: int = 0


@dataclass(frozen=True)
class OrdersReordered(OrderEvent):
    """Raised when an order changes position by index."""

    old_index: int = 0
    new_index: int = 0
