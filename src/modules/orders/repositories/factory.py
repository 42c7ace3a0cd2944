"""Builds the configured order state repository from Django settings."""

from __future__ import annotations

from django.conf import settings

from modules.orders.exceptions import UnknownStateBackend
from modules.orders.repositories.file_repository import FileOrderStateRepository
from modules.orders.repositories.gist_repository import GistOrderStateRepository
from modules.orders.repositories.http_repository import HttpOrderStateRepository
from modules.orders.repositories.interfaces import IOrderStateRepository
from modules.orders.repositories.memory_repository import InMemoryOrderStateRepository


def build_state_repository(backend: str | None = None) -> IOrderStateRepository:
    """Return the repository named by ``backend`` or ``ORDER_STATE_BACKEND``.

    Raises:
        UnknownStateBackend: the name is not one of http, gist, file, memory.
    """
    backend = (backend or settings.ORDER_STATE_BACKEND).strip().lower()
    if backend == HttpOrderStateRepository.name:
        return HttpOrderStateRepository(
            url=settings.ORDER_STATE_URL,
            token=settings.ORDER_STATE_TOKEN,
            timeout=settings.ORDER_STATE_TIMEOUT,
        )
    if backend == GistOrderStateRepository.name:
        return GistOrderStateRepository(
            gist_id=settings.GIST_ID,
            token=settings.GITHUB_PAT,
            filename=settings.GIST_FILENAME,
            timeout=settings.ORDER_STATE_TIMEOUT,
        )
    if backend == FileOrderStateRepository.name:
        return FileOrderStateRepository(settings.ORDER_STATE_FILE)
    if backend == InMemoryOrderStateRepository.name:
        return InMemoryOrderStateRepository()
    raise UnknownStateBackend(f"Unknown order state backend {backend!r}.")
