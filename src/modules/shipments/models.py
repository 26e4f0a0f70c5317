"""Shipment (controle de carga) model.

Business rules implemented:
- Driver tax id is stored normalized (digits only) and validated by the
  service layer before persistence.
- Pallet count cannot be negative (DB check constraint).
- Manifest number is a unique sequential integer (``max + 1``).
- ``status`` is an explicit state machine: OPEN -> FINALIZED.
- Bound invoices use ``PROTECT`` so the shipment row cannot be removed
  while invoices still point at it.
"""

from __future__ import annotations

from typing import Any

import structlog
from django.conf import settings
from django.db import IntegrityError, models, transaction
from django.db.models import Max

from modules.core.models import BaseModel
from modules.shipments.constants import (
    MANIFEST_NUMBER_MAX_RETRIES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    Carrier,
    ShipmentStatus,
)
from modules.shipments.exceptions import ManifestNumberUnavailable
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Shipment(DomainEventMixin, BaseModel):
    """Shipment aggregate root: one carrier dispatch grouping invoices."""

    driver_name = models.CharField(max_length=255)
    driver_tax_id = models.CharField(max_length=11)
    responsible_name = models.CharField(max_length=255)
    carrier = models.CharField(max_length=32, choices=Carrier.choices)
    pallet_count = models.PositiveIntegerField(default=0)
    note = models.TextField(blank=True, default="")
    manifest_number = models.PositiveIntegerField(unique=True, editable=False)
    status = models.CharField(
        max_length=20,
        choices=ShipmentStatus.choices,
        default=ShipmentStatus.OPEN,
    )
    finalized_at = models.DateTimeField(null=True, blank=True, default=None)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shipments",
    )
    driver_signature = models.TextField(blank=True, default="")
    driver_signed_at = models.DateTimeField(null=True, blank=True, default=None)
    responsible_signature = models.TextField(blank=True, default="")
    responsible_signed_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "shipments"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="shipments_status_idx"),
            models.Index(fields=["-created_at"], name="shipments_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(pallet_count__gte=0),
                name="shipments_pallet_count_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def finalized(self) -> bool:
        return self.status == ShipmentStatus.FINALIZED

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    # ------------------------------------------------------------------
    # Manifest number generation
    # ------------------------------------------------------------------

    @staticmethod
    def next_manifest_number() -> int:
        current = Shipment.objects.aggregate(last=Max("manifest_number"))["last"]
        return (current or 0) + 1

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.manifest_number:
            super().save(*args, **kwargs)
            return

        # Two concurrent creations can read the same max; the unique index
        # rejects the loser, which retries with a fresh number.
        for attempt in range(MANIFEST_NUMBER_MAX_RETRIES):
            self.manifest_number = self.next_manifest_number()
            try:
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError:
                logger.warning(
                    "shipment.manifest_number_collision",
                    manifest_number=self.manifest_number,
                    attempt=attempt + 1,
                )
                self.manifest_number = None
        raise ManifestNumberUnavailable(
            f"Failed to allocate manifest number after "
            f"{MANIFEST_NUMBER_MAX_RETRIES} attempts"
        )

    def __str__(self) -> str:
        return f"Manifest {self.manifest_number} ({self.status})"
