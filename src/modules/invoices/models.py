"""Invoice (nota fiscal) model.

Business rules implemented:
- An invoice binds to at most one shipment (single nullable FK).
- Duplicates are detected against *unbound* invoices only (service layer),
  so ``code``/``number`` carry no global unique constraint.
- Value and volumes cannot be negative.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from shared.domain.events import DomainEventMixin


class Invoice(DomainEventMixin, BaseModel):
    code = models.CharField(max_length=64)
    number = models.CharField(max_length=32)
    value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    volumes = models.PositiveIntegerField(default=0)
    shipment = models.ForeignKey(
        "shipments.Shipment",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invoices",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoices",
    )

    class Meta:
        db_table = "invoices"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["code"], name="invoices_code_idx"),
            models.Index(fields=["number"], name="invoices_number_idx"),
            models.Index(fields=["-created_at"], name="invoices_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(value__gte=0),
                name="invoices_value_non_negative",
            ),
        ]

    @property
    def is_bound(self) -> bool:
        return self.shipment_id is not None

    def __str__(self) -> str:
        return f"NF {self.number} ({self.code})"
