"""Key-value storage for whole-document board state.

One row per key; ``value`` holds the serialized JSON document exactly as
the client sent it (after validation), and every write supersedes the
previous one.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class StateEntry(BaseModel):
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()

    class Meta:
        db_table = "state_entries"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key} ({len(self.value)} bytes)"
