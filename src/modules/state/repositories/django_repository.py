"""Django ORM implementation of the state entry repository."""

from __future__ import annotations

import json
from typing import Any, Optional

import structlog
from django.db import transaction

from modules.state.exceptions import StoredStateCorrupt
from modules.state.models import StateEntry
from modules.state.repositories.interfaces import IStateEntryRepository

logger = structlog.get_logger(__name__)


class StateEntryDjangoRepository(IStateEntryRepository):
    """Concrete state repository backed by Django ORM."""

    def get(self, key: str) -> Optional[Any]:
        entry = StateEntry.objects.filter(key=key).first()
        if entry is None:
            return None
        try:
            return json.loads(entry.value)
        except json.JSONDecodeError as exc:
            logger.error("state.corrupt", key=key, error=str(exc))
            raise StoredStateCorrupt(f"Stored state for {key!r} is not valid JSON.") from exc

    @transaction.atomic
    def put(self, key: str, document: Any) -> None:
        value = json.dumps(document, ensure_ascii=False, indent=2)
        _, created = StateEntry.objects.update_or_create(
            key=key, defaults={"value": value}
        )
        logger.info("state.stored", key=key, created=created, size=len(value))
