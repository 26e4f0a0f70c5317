"""Django ORM implementation of the Shipment repository.

Domain events collected on the aggregate are written to the outbox in
the same transaction as the row itself.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, QuerySet

from modules.core.outbox import store_domain_events
from modules.shipments.models import Shipment
from modules.shipments.repositories.interfaces import IShipmentRepository

logger = structlog.get_logger(__name__)


class ShipmentDjangoRepository(IShipmentRepository):
    def get_by_id(self, id: str) -> Optional[Shipment]:
        """Retrieve a shipment with its invoices prefetched."""
        try:
            return (
                Shipment.objects.select_related("created_by")
                .prefetch_related("invoices")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Shipment]:
        try:
            return Shipment.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = Shipment.objects.select_related("created_by").annotate(
            invoice_count=Count("invoices")
        )
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Shipment) -> Shipment:
        entity.save()
        store_domain_events(entity, topic="shipments")
        logger.info("shipment.saved", shipment_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Shipment.objects.filter(id=id).delete()
        return bool(deleted)
