"""Order state repository interface.

The ``OrderStore`` depends exclusively on this contract (DIP).  A
repository moves the *whole* order collection in one piece: there are no
per-order writes, and every ``save`` supersedes what was stored before.

Concrete implementations:

- ``HttpOrderStateRepository``: the board's own key-value endpoint.
- ``GistOrderStateRepository``: a file inside a GitHub Gist.
- ``FileOrderStateRepository``: a local JSON file.
- ``InMemoryOrderStateRepository``: process memory (tests, demos).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from modules.orders.dtos import OrderRecord


class IOrderStateRepository(ABC):
    """Repository contract for the persisted order collection."""

    name: str = "abstract"

    @abstractmethod
    async def load(self) -> Any:
        """Fetch the stored document, decoded but not yet sanitized.

        Returns an empty list when nothing has been stored yet.

        Raises:
            StateLoadError: transport failure or undecodable content.
        """

    @abstractmethod
    async def save(self, orders: Sequence[OrderRecord]) -> None:
        """Replace the stored collection with ``orders``.

        Raises:
            StateSaveError: the backend did not acknowledge the write.
        """
