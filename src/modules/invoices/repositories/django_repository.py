"""Django ORM implementation of the Invoice repository."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from modules.core.outbox import store_domain_events
from modules.invoices.models import Invoice
from modules.invoices.repositories.interfaces import IInvoiceRepository

logger = structlog.get_logger(__name__)


class InvoiceDjangoRepository(IInvoiceRepository):
    """Concrete Invoice repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Invoice]:
        try:
            return Invoice.objects.select_related("shipment").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Invoice]:
        try:
            return Invoice.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_many_for_update(self, ids: Iterable[str]) -> List[Invoice]:
        try:
            return list(
                Invoice.objects.select_for_update()
                .filter(id__in=list(ids))
                .order_by("id")
            )
        except (ValueError, ValidationError):
            return []

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = Invoice.objects.select_related("shipment")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def find_unbound_duplicate(self, code: str, number: str) -> Optional[Invoice]:
        return (
            Invoice.objects.filter(shipment__isnull=True)
            .filter(Q(code=code) | Q(number=number))
            .first()
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Invoice) -> Invoice:
        """Persist an invoice and its pending domain events."""
        entity.save()
        store_domain_events(entity, topic="invoices")
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Invoice.objects.filter(id=id).delete()
        if deleted:
            logger.info("invoice.deleted", invoice_id=str(id))
        return bool(deleted)

    def unbind_all(self, shipment_id: str) -> int:
        count = Invoice.objects.filter(shipment_id=shipment_id).update(
            shipment=None, updated_at=timezone.now()
        )
        logger.info("invoice.unbound_all", shipment_id=str(shipment_id), count=count)
        return count
