"""In-memory order state repository."""

from __future__ import annotations

import copy
from typing import Any, Optional, Sequence

from modules.orders.dtos import OrderRecord
from modules.orders.repositories.interfaces import IOrderStateRepository
from modules.orders.schema import dump_collection


class InMemoryOrderStateRepository(IOrderStateRepository):
    """Keeps the serialized document in process memory.

    Only the latest document is held; nothing survives a restart.
    """

    name = "memory"

    def __init__(self, document: Optional[Any] = None) -> None:
        self._document = copy.deepcopy(document) if document is not None else []

    @property
    def document(self) -> Any:
        return copy.deepcopy(self._document)

    async def load(self) -> Any:
        return copy.deepcopy(self._document)

    async def save(self, orders: Sequence[OrderRecord]) -> None:
        self._document = dump_collection(orders)
