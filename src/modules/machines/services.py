"""Machine configuration loading and lane projection.

``build_lanes`` is the data half of rendering the board: it groups the
store's output into the main list plus one lane per configured machine.
An order whose location names no configured machine (a machine was
removed from the config, or the stored data is stale) is moved back to
the main list through the store, so the correction is persisted.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from modules.machines.dtos import Machine, MachineList
from modules.machines.exceptions import MachineConfigError
from modules.orders.constants import MAIN_LIST, SortKey

if TYPE_CHECKING:
    from modules.orders.dtos import OrderRecord
    from modules.orders.services import OrderStore

logger = structlog.get_logger(__name__)


def load_machines(path: Path | str) -> MachineList:
    """Read ``[{"id": ..., "name": ...}, ...]`` from a JSON file.

    Raises:
        MachineConfigError: file missing, invalid JSON, or invalid entries.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except (OSError, ValueError) as exc:  # bad JSON or bad UTF-8
        raise MachineConfigError(f"Could not load machine data from {path}: {exc}") from exc

    try:
        machines = MachineList(machines=raw)
    except ValidationError as exc:
        raise MachineConfigError(f"Invalid machine data in {path}: {exc}") from exc

    logger.info("machines.loaded", path=str(path), count=len(machines.machines))
    return machines


async def build_lanes(
    store: OrderStore,
    machines: list[Machine] | MachineList,
    sort_key: str = SortKey.MANUAL,
) -> dict[str, list[OrderRecord]]:
    """Group the board into lanes keyed by location.

    The result always has ``main-list`` first, then every configured
    machine in configuration order (empty lanes included).
    """
    if isinstance(machines, MachineList):
        machines = machines.machines
    known = {MAIN_LIST, *(machine.id for machine in machines)}

    for order in store.get_all():
        if order.location not in known:
            logger.warning(
                "machines.unknown_location",
                order_id=order.id,
                location=order.location,
            )
            await store.move_and_reorder(order.id, MAIN_LIST, [])

    # Grouped after relocation so returned orders sit in their sorted place.
    lanes: dict[str, list[OrderRecord]] = {MAIN_LIST: []}
    for machine in machines:
        lanes[machine.id] = []
    for order in store.get_sorted(sort_key):
        lanes[order.location].append(order)
    return lanes
