"""Django ORM implementation of the Order repositories.

Domain events collected on ``Order``/``OrderReview`` are written to the
outbox in the same transaction as the row (topic ``orders``).
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.core.outbox import store_domain_events
from modules.orders.constants import ReviewStage, ValidationStatus
from modules.orders.models import Order, OrderReview
from modules.orders.repositories.interfaces import (
    IOrderRepository,
    IOrderReviewRepository,
)

logger = structlog.get_logger(__name__)

_REVIEW_RELATIONS = ("order", "separator", "conferer", "auditor", "validator")


class OrderDjangoRepository(IOrderRepository):
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its review and separator (single JOIN).

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("separator", "shipment", "review")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def exists_by_number(self, order_number: str) -> bool:
        return Order.objects.filter(order_number=order_number).exists()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = Order.objects.select_related("separator", "shipment", "review")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        store_domain_events(entity, topic="orders")
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Order.objects.filter(id=id).delete()
        return bool(deleted)


class OrderReviewDjangoRepository(IOrderReviewRepository):
    def get_by_id(self, id: str) -> Optional[OrderReview]:
        try:
            return (
                OrderReview.objects.select_related(*_REVIEW_RELATIONS)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[OrderReview]:
        try:
            return OrderReview.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_order(self, order_id: str) -> Optional[OrderReview]:
        try:
            return OrderReview.objects.filter(order_id=order_id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_order_for_update(self, order_id: str) -> Optional[OrderReview]:
        try:
            return (
                OrderReview.objects.select_for_update()
                .filter(order_id=order_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = OrderReview.objects.select_related(*_REVIEW_RELATIONS)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def pending_audit(self) -> QuerySet:
        return self.list(
            {"separator__isnull": False, "audit_performed": False}
        ).order_by("conferred_at", "id")

    def pending_validation(self) -> QuerySet:
        return self.list(
            {
                "stage": ReviewStage.AUDITED,
                "validation_status": ValidationStatus.PENDING,
            }
        ).order_by("audited_at", "id")

    def conferred_between(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
        stage: Optional[str] = None,
        conferer_id: Optional[UUID] = None,
    ) -> QuerySet:
        queryset = self.list({"conferred_at__isnull": False})
        if start_date:
            queryset = queryset.filter(conferred_at__date__gte=start_date)
        if end_date:
            queryset = queryset.filter(conferred_at__date__lte=end_date)
        if stage:
            queryset = queryset.filter(stage=stage)
        if conferer_id:
            queryset = queryset.filter(conferer_id=conferer_id)
        return queryset.order_by("-conferred_at", "-id")

    @transaction.atomic
    def save(self, entity: OrderReview) -> OrderReview:
        entity.save()
        store_domain_events(entity, topic="orders")
        logger.info("order_review.saved", review_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = OrderReview.objects.filter(id=id).delete()
        return bool(deleted)
