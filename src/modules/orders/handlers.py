"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    AuditSubmitted,
    ConferenceSubmitted,
    OrderCreated,
    ReviewValidated,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            f"Pedido {event.order_number} disponível para separação",
            order_id=str(event.aggregate_id),
        )


class ConferenceSubmittedHandler(IEventHandler[ConferenceSubmitted]):
    def handle(self, event: ConferenceSubmitted) -> None:
        logger.info(
            f"Conferência registrada para o pedido {event.aggregate_id}",
            order_id=str(event.aggregate_id),
            has_inconsistency=event.has_inconsistency,
        )


class AuditSubmittedHandler(IEventHandler[AuditSubmitted]):
    def handle(self, event: AuditSubmitted) -> None:
        logger.info(
            f"Auditoria registrada para o pedido {event.aggregate_id}",
            order_id=str(event.aggregate_id),
            audit_has_error=event.audit_has_error,
        )


class ReviewValidatedHandler(IEventHandler[ReviewValidated]):
    def handle(self, event: ReviewValidated) -> None:
        logger.info(
            f"Pedido {event.aggregate_id} validado",
            order_id=str(event.aggregate_id),
            validation_status=event.validation_status,
        )


order_created_handler = OrderCreatedHandler()
conference_submitted_handler = ConferenceSubmittedHandler()
audit_submitted_handler = AuditSubmittedHandler()
review_validated_handler = ReviewValidatedHandler()
