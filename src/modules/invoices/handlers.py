"""Event handlers for Invoices domain events."""

from __future__ import annotations

import structlog

from modules.invoices.events import InvoiceBound, InvoiceUnbound
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class InvoiceBindingHandler(IEventHandler[InvoiceBound]):
    def handle(self, event: InvoiceBound | InvoiceUnbound) -> None:
        logger.info(
            "invoice.notification",
            event_name=event.event_name,
            invoice_id=str(event.aggregate_id),
            shipment_id=event.shipment_id,
        )


invoice_binding_handler = InvoiceBindingHandler()
