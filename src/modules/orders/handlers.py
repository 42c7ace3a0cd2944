"""Event handlers for order board events."""

from __future__ import annotations

from dataclasses import asdict

import structlog

from modules.orders.events import OrderEvent
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderAuditLogHandler(IEventHandler[OrderEvent]):
    """Writes one structured log line per board change."""

    def handle(self, event: OrderEvent) -> None:
        details = {
            key: value
            for key, value in asdict(event).items()
            if key not in {"aggregate_id", "event_id", "occurred_on", "event_name"}
        }
        logger.info(
            "order.event",
            event_name=event.event_name,
            order_id=event.aggregate_id,
            event_id=str(event.event_id),
            **details,
        )


order_audit_log_handler = OrderAuditLogHandler()
