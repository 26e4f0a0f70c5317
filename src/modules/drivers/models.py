"""Driver (motorista) catalog model.

The tax id is stored normalized (digits only) and is unique across the
catalog; checksum validation happens in the service before persistence.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.shipments.constants import Carrier


class Driver(BaseModel):
    name = models.CharField(max_length=255)
    tax_id = models.CharField(max_length=11, unique=True)
    license_number = models.CharField(max_length=20)
    phone = models.CharField(max_length=20, blank=True, default="")
    carrier = models.CharField(max_length=32, choices=Carrier.choices)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="drivers",
    )

    class Meta:
        db_table = "drivers"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="drivers_name_idx"),
            models.Index(fields=["carrier"], name="drivers_carrier_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.get_carrier_display()})"
