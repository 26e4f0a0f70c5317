"""Event handlers for Shipments domain events."""

from __future__ import annotations

import structlog

from shared.domain.bus import IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class ShipmentNotificationHandler(IEventHandler[DomainEvent]):
    """Forwards shipment lifecycle events to the notification log."""

    def handle(self, event: DomainEvent) -> None:
        logger.info(
            "shipment.notification",
            event_name=event.event_name,
            shipment_id=str(event.aggregate_id),
        )


shipment_notification_handler = ShipmentNotificationHandler()
