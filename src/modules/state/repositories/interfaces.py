"""State entry repository interface.

The state view depends exclusively on this contract; the Django ORM
implementation lives in ``django_repository``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class IStateEntryRepository(ABC):
    """Repository contract for whole-document key-value entries."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the decoded document stored under ``key``, or ``None``.

        Raises:
            StoredStateCorrupt: the stored value is not valid JSON.
        """

    @abstractmethod
    def put(self, key: str, document: Any) -> None:
        """Replace the document stored under ``key``."""
