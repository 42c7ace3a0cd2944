"""Explicit construction of the configured ``OrderStore``.

There is no module-level store: entry points call :func:`open_store`
once and pass the result to whatever needs it.
"""

from __future__ import annotations

from typing import Optional

from django.conf import settings

from modules.orders.repositories import build_state_repository
from modules.orders.services import OrderStore


async def open_store(backend: Optional[str] = None) -> OrderStore:
    """Load the board from the configured (or given) backend."""
    repository = build_state_repository(backend)
    return await OrderStore.initialize(
        repository,
        statuses=[status.strip() for status in settings.ORDER_STATUSES if status.strip()],
        seed_on_empty=settings.ORDER_SEED_ON_EMPTY,
    )
