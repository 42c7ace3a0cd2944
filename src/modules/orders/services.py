"""Order board service layer: the ``OrderStore``.

Owns the canonical, ordered collection of board orders and is the only
place that mutates it.  The collection order matters: it is the
display order of the main list in ``manual`` mode and the physical
sequence of every machine lane.

Rules enforced:
- ids are assigned here (``max + 1``, ``1`` when empty), never by callers;
- new orders always start in the main list;
- ``update`` never changes an order's lane;
- every mutation ends with a full save of the collection;
- a failed save is logged and does not roll back the in-memory change.

Mutations are serialized with an ``asyncio.Lock`` so two callers on the
same loop cannot interleave a change with another change's save.

Successful changes are logged once, by the audit handler subscribed to
the published events; the store itself logs only loading, rejections
and save failures.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Sequence

import structlog
from pydantic import BaseModel

from modules.orders.constants import DEFAULT_STATUSES, MAIN_LIST, SEED_ORDERS
from modules.orders.dtos import CreateOrderDTO, OrderRecord, UpdateOrderDTO
from modules.orders.events import (
    OrderAdded,
    OrderDeleted,
    OrderEvent,
    OrderMoved,
    OrdersReordered,
    OrderUpdated,
)
from modules.orders.exceptions import InvalidOrderStatus, StateLoadError, StateSaveError
from modules.orders.schema import sanitize_document
from modules.orders.sorting import sort_for_display
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.orders.repositories.interfaces import IOrderStateRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


def seed_orders(statuses: Sequence[str]) -> list[OrderRecord]:
    """The four sample orders a fresh stand-alone board starts with."""
    return [
        OrderRecord.model_validate(
            {**data, "id": index, "status": statuses[(index - 1) % len(statuses)]}
        )
        for index, data in enumerate(SEED_ORDERS, start=1)
    ]


class OrderStore:
    """Application service for the order board.

    Build it with :meth:`initialize`, which loads and sanitizes the
    persisted collection; the constructor only wires collaborators.
    """

    def __init__(
        self,
        repository: IOrderStateRepository,
        orders: Iterable[OrderRecord] = (),
        statuses: Sequence[str] = DEFAULT_STATUSES,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        if not statuses:
            raise ValueError("At least one order status must be configured.")
        self._repository = repository
        self._orders: list[OrderRecord] = list(orders)
        self._statuses: tuple[str, ...] = tuple(statuses)
        self._event_bus = event_bus if event_bus is not None else default_event_bus
        self._lock = asyncio.Lock()

    @classmethod
    async def initialize(
        cls,
        repository: IOrderStateRepository,
        statuses: Sequence[str] = DEFAULT_STATUSES,
        seed_on_empty: bool = False,
        event_bus: Optional[IEventBus] = None,
    ) -> OrderStore:
        """Load the persisted collection and return a ready store.

        Transport or parse failures never propagate: the store starts
        empty, or with the seeded sample when ``seed_on_empty`` is set.
        """
        statuses = tuple(statuses) or DEFAULT_STATUSES
        log = logger.bind(backend=repository.name)
        try:
            document = await repository.load()
            orders = sanitize_document(document, statuses)
        except StateLoadError as exc:
            log.error("orders.load_failed", error=str(exc))
            orders = []

        if not orders and seed_on_empty:
            orders = seed_orders(statuses)
            log.info("orders.seeded", count=len(orders))

        log.info("orders.loaded", count=len(orders))
        return cls(repository, orders, statuses=statuses, event_bus=event_bus)

    @property
    def statuses(self) -> tuple[str, ...]:
        return self._statuses

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all(self) -> list[OrderRecord]:
        """Snapshot of the collection in stored order.

        Records are immutable, so a fresh list is a full copy.
        """
        return list(self._orders)

    def get(self, order_id: int) -> Optional[OrderRecord]:
        index = self._index_of(order_id)
        return self._orders[index] if index is not None else None

    def get_sorted(self, sort_key: str) -> list[OrderRecord]:
        """Main list sorted by ``sort_key``, then all machine-lane orders."""
        return sort_for_display(self._orders, sort_key)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def add(self, data: CreateOrderDTO | Mapping[str, Any]) -> OrderRecord:
        """Create an order in the main list and persist.

        Any ``id`` or ``location`` in ``data`` is ignored.

        Raises:
            pydantic.ValidationError: product name empty, quantity < 1.
            InvalidOrderStatus: status outside the configured set.
        """
        dto = self._coerce(data, CreateOrderDTO)
        self._check_status(dto.status)

        async with self._lock:
            new_id = max((order.id for order in self._orders), default=0) + 1
            record = OrderRecord(id=new_id, location=MAIN_LIST, **dto.model_dump())
            self._orders = [*self._orders, record]
            await self._persist("add")

        self._publish(OrderAdded(aggregate_id=record.id))
        return record

    async def delete(self, order_id: int) -> bool:
        """Remove an order; persists only when something was removed."""
        async with self._lock:
            remaining = [order for order in self._orders if order.id != order_id]
            if len(remaining) == len(self._orders):
                logger.warning("order.delete_unknown", order_id=order_id)
                return False
            self._orders = remaining
            await self._persist("delete")

        self._publish(OrderDeleted(aggregate_id=order_id))
        return True

    async def update(self, data: UpdateOrderDTO | OrderRecord | Mapping[str, Any]) -> bool:
        """Replace an order's fields, keeping its current lane.

        Edit forms carry no lane information, so whatever ``location``
        the payload holds is ignored.

        Raises:
            pydantic.ValidationError: invalid field values.
            InvalidOrderStatus: status outside the configured set.
        """
        dto = self._coerce(data, UpdateOrderDTO)
        self._check_status(dto.status)

        async with self._lock:
            index = self._index_of(dto.id)
            if index is None:
                logger.warning("order.update_unknown", order_id=dto.id)
                return False
            existing = self._orders[index]
            updated = OrderRecord(
                id=existing.id,
                location=existing.location,
                **dto.model_dump(exclude={"id", "location"}),
            )
            orders = list(self._orders)
            orders[index] = updated
            self._orders = orders
            await self._persist("update")

        self._publish(OrderUpdated(aggregate_id=dto.id))
        return True

    async def move_and_reorder(
        self,
        order_id: int,
        new_location: str,
        new_order_ids: Sequence[int],
    ) -> bool:
        """Apply the result of a drag-and-drop onto one lane.

        ``new_order_ids`` is the target lane's full visual order after the
        drop.  Those orders move to the front of the collection in that
        order; every other order keeps its relative position behind them.
        Ids that match no order are skipped.

        Only one lane is reconciled per call: a drop that changes two
        lanes needs one call per lane.

        Returns ``False`` (and persists nothing) when ``order_id`` is
        unknown.
        """
        location = new_location.strip() if new_location else ""
        location = location or MAIN_LIST

        async with self._lock:
            index = self._index_of(order_id)
            if index is None:
                logger.warning("order.move_unknown", order_id=order_id, location=location)
                return False

            by_id = {order.id: order for order in self._orders}
            by_id[order_id] = self._orders[index].model_copy(update={"location": location})

            lane_ids = list(dict.fromkeys(new_order_ids))
            listed = set(lane_ids)
            lane = [by_id[i] for i in lane_ids if i in by_id]
            untouched = [by_id[order.id] for order in self._orders if order.id not in listed]
            self._orders = lane + untouched
            await self._persist("move")

        self._publish(
            OrderMoved(aggregate_id=order_id, location=location, lane_size=len(lane))
        )
        return True

    async def reorder_by_index(self, old_index: int, new_index: int) -> bool:
        """Move the order at ``old_index`` to ``new_index`` in the flat list.

        Both indices must lie in ``[0, len)``; otherwise nothing changes
        and ``False`` is returned.
        """
        async with self._lock:
            size = len(self._orders)
            if not (0 <= old_index < size and 0 <= new_index < size):
                logger.warning(
                    "order.reorder_out_of_range",
                    old_index=old_index,
                    new_index=new_index,
                    size=size,
                )
                return False
            orders = list(self._orders)
            moved = orders.pop(old_index)
            orders.insert(new_index, moved)
            self._orders = orders
            await self._persist("reorder")

        self._publish(
            OrdersReordered(aggregate_id=moved.id, old_index=old_index, new_index=new_index)
        )
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _index_of(self, order_id: int) -> Optional[int]:
        for index, order in enumerate(self._orders):
            if order.id == order_id:
                return index
        return None

    def _check_status(self, status: str) -> None:
        if status not in self._statuses:
            raise InvalidOrderStatus(
                f"Status {status!r} is not one of {', '.join(self._statuses)}."
            )

    @staticmethod
    def _coerce(data: Any, dto_class: type[BaseModel]) -> Any:
        if isinstance(data, dto_class):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump()
        return dto_class.model_validate(data)

    async def _persist(self, operation: str) -> bool:
        """Save the whole collection; failures are logged, not raised."""
        try:
            await self._repository.save(list(self._orders))
        except StateSaveError as exc:
            logger.error(
                "orders.save_failed",
                operation=operation,
                backend=self._repository.name,
                count=len(self._orders),
                error=str(exc),
            )
            return False
        return True

    def _publish(self, event: OrderEvent) -> None:
        self._event_bus.publish(event)
