"""Local JSON file order state repository.

The stand-alone variant of the board: the collection lives in one JSON
file next to the application.  Writes go to a sibling temp file first
and are moved into place, so a crash mid-write never leaves a truncated
document behind.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Sequence

import structlog

from modules.orders.dtos import OrderRecord
from modules.orders.exceptions import StateLoadError, StateSaveError
from modules.orders.repositories.interfaces import IOrderStateRepository
from modules.orders.schema import dump_collection

logger = structlog.get_logger(__name__)


class FileOrderStateRepository(IOrderStateRepository):
    """Order state stored as a JSON array in a local file."""

    name = "file"

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    async def load(self) -> Any:
        return await asyncio.to_thread(self._read)

    async def save(self, orders: Sequence[OrderRecord]) -> None:
        document = dump_collection(orders)
        await asyncio.to_thread(self._write, document)

    def _read(self) -> Any:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            logger.info("state.file_missing", path=str(self.path))
            return []
        except (OSError, ValueError) as exc:  # bad JSON or bad UTF-8
            raise StateLoadError(f"Could not read {self.path}: {exc}") from exc

    def _write(self, document: list[dict[str, Any]]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StateSaveError(f"Could not write {self.path}: {exc}") from exc
