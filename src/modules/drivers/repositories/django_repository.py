"""Django ORM implementation of the Driver repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.drivers.models import Driver
from modules.drivers.repositories.interfaces import IDriverRepository

logger = structlog.get_logger(__name__)


class DriverDjangoRepository(IDriverRepository):
    def get_by_id(self, id: str) -> Optional[Driver]:
        try:
            return Driver.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def exists_by_tax_id(self, tax_id: str) -> bool:
        return Driver.objects.filter(tax_id=tax_id).exists()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = Driver.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Driver) -> Driver:
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Driver.objects.filter(id=id).delete()
        if deleted:
            logger.info("driver.deleted", driver_id=str(id))
        return bool(deleted)
