"""Load-time sanitization and migration of stored board documents.

The persisted form is an untyped JSON blob written by several board
revisions, so nothing in it can be trusted.  Two document shapes exist:

- schema 1: a bare JSON array.  This is also what every save writes, so
  older clients keep reading it.  Records may use snake_case keys, the
  retired ``rot``/``gelb``/``gruen`` status names, or no ``location`` at
  all (revisions before machine lanes).
- schema 2: an envelope ``{"schemaVersion": 2, "orders": [...]}`` whose
  records already use the current camelCase fields and status names.

Records are first upgraded step by step from the document's version to
``SCHEMA_VERSION``, then normalized: ids and quantities are coerced,
unknown statuses default to the first configured one, empty lanes become
``main-list``.  Nothing is rejected except records without a usable id;
duplicate ids are renumbered so the uniqueness invariant holds after load.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Iterable, Optional, Sequence

import structlog

from modules.orders.constants import (
    MAIN_LIST,
    SCHEMA_VERSION,
    STATUS_ALIASES,
    UNNAMED_PRODUCT,
)
from modules.orders.dtos import OrderRecord
from modules.orders.exceptions import StateLoadError

logger = structlog.get_logger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_V1_RENAMES = {
    "product_name": "productName",
    "customer_name": "customerName",
    "delivery_date": "deliveryDate",
}


def coerce_int(value: Any) -> Optional[int]:
    """Best-effort integer parse; ``None`` when nothing usable is there.

    Strings are read up to the first non-digit (``"12 pcs"`` -> 12),
    floats are truncated.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


# ---------------------------------------------------------------------------
# Version upgrades
# ---------------------------------------------------------------------------


def _upgrade_v1(raw: dict[str, Any]) -> dict[str, Any]:
    """Schema 1 -> 2: camelCase keys, current status names, explicit lane."""
    data = dict(raw)
    for old, new in _V1_RENAMES.items():
        if old in data:
            value = data.pop(old)
            data.setdefault(new, value)

    status = data.get("status")
    if isinstance(status, str):
        data["status"] = STATUS_ALIASES.get(status.strip().casefold(), status)

    location = data.get("location")
    if not isinstance(location, str) or not location.strip():
        data["location"] = MAIN_LIST
    return data


_UPGRADES: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _upgrade_v1,
}


def upgrade_record(raw: dict[str, Any], version: int) -> dict[str, Any]:
    """Apply every upgrade step from ``version`` up to ``SCHEMA_VERSION``."""
    for step in range(version, SCHEMA_VERSION):
        raw = _UPGRADES[step](raw)
    return raw


# ---------------------------------------------------------------------------
# Normalization of current-version records
# ---------------------------------------------------------------------------


def migrate_status(value: Any, statuses: Sequence[str]) -> str:
    """Match ``value`` against the configured statuses, ignoring case.

    Anything unmatched becomes the first configured status.
    """
    if isinstance(value, str):
        text = value.strip()
        if text in statuses:
            return text
        for status in statuses:
            if status.casefold() == text.casefold():
                return status
    return statuses[0]


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


def migrate_record(raw: Any, statuses: Sequence[str]) -> Optional[dict[str, Any]]:
    """Turn one current-version stored object into wire-shaped, typed data.

    Returns ``None`` when the record has no usable id.
    """
    if not isinstance(raw, dict):
        return None
    order_id = coerce_int(raw.get("id"))
    if order_id is None:
        return None

    quantity = coerce_int(raw.get("quantity"))
    product_name = str(raw.get("productName") or "").strip()
    location = raw.get("location")
    if not isinstance(location, str) or not location.strip():
        location = MAIN_LIST

    return {
        "id": order_id,
        "productName": product_name or UNNAMED_PRODUCT,
        "quantity": quantity if quantity is not None and quantity > 0 else 1,
        "status": migrate_status(raw.get("status"), statuses),
        "location": location.strip(),
        "customerName": _optional_text(raw.get("customerName")),
        "deliveryDate": _optional_text(raw.get("deliveryDate")),
    }


def unwrap_document(document: Any) -> tuple[int, list[Any]]:
    """Return ``(schema_version, raw_orders)`` for a stored document.

    Raises:
        StateLoadError: the document has neither supported shape.
    """
    if document is None:
        return 1, []
    if isinstance(document, list):
        return 1, document
    if isinstance(document, dict) and isinstance(document.get("orders"), list):
        version = coerce_int(document.get("schemaVersion")) or SCHEMA_VERSION
        return version, document["orders"]
    raise StateLoadError(
        f"Stored state has unsupported shape {type(document).__name__}."
    )


def sanitize_document(document: Any, statuses: Sequence[str]) -> list[OrderRecord]:
    """Migrate a stored document into a clean, id-unique record list."""
    version, raw_orders = unwrap_document(document)
    log = logger.bind(schema_version=version, stored=len(raw_orders))
    if version > SCHEMA_VERSION:
        log.warning("orders.newer_schema", supported=SCHEMA_VERSION)
    version = min(max(version, 1), SCHEMA_VERSION)

    migrated: list[dict[str, Any]] = []
    for raw in raw_orders:
        data = None
        if isinstance(raw, dict):
            data = migrate_record(upgrade_record(raw, version), statuses)
        if data is None:
            log.warning("orders.record_dropped", record=repr(raw)[:200])
            continue
        migrated.append(data)

    next_id = max((data["id"] for data in migrated), default=0) + 1
    seen: set[int] = set()
    records: list[OrderRecord] = []
    for data in migrated:
        if data["id"] in seen:
            log.warning("orders.duplicate_id_renumbered", old_id=data["id"], new_id=next_id)
            data["id"] = next_id
            next_id += 1
        seen.add(data["id"])
        records.append(OrderRecord.model_validate(data))

    log.debug("orders.sanitized", loaded=len(records))
    return records


def dump_collection(records: Iterable[OrderRecord]) -> list[dict[str, Any]]:
    """Serialize records into the bare-array wire format."""
    return [record.to_wire() for record in records]
