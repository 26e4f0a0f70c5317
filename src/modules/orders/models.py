"""Order and OrderReview models.

Business rules implemented:
- An order has at most one review (one-to-one, DB unique), which makes
  the conference a one-shot operation even under concurrent requests.
- The review carries an explicit ``stage`` instead of loose flags; the
  service moves it along ``VALID_TRANSITIONS``.
- ``validation_status`` leaves PENDING exactly once.
"""

from __future__ import annotations

import structlog
from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ReviewStage,
    ValidationStatus,
)
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Order(DomainEventMixin, BaseModel):
    """Unit of warehouse picking work (pedido)."""

    order_number = models.CharField(max_length=50, unique=True)
    shipment = models.ForeignKey(
        "shipments.Shipment",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    separator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="separated_orders",
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    @property
    def stage(self) -> str:
        """Current workflow stage; UNREVIEWED when no review exists."""
        review = getattr(self, "review", None)
        return review.stage if review is not None else ReviewStage.UNREVIEWED

    def __str__(self) -> str:
        return f"{self.order_number} ({self.stage})"


class OrderReview(DomainEventMixin, BaseModel):
    """Conference / audit / validation record of an order (pedido conferido)."""

    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="review",
    )
    separator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    conferer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    auditor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    validator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    # Conference
    fully_picked = models.BooleanField(default=False)
    has_inconsistency = models.BooleanField(default=False)
    inconsistency_reasons = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, default="")
    conference_performed = models.BooleanField(default=False)
    conferred_at = models.DateTimeField(null=True, blank=True, default=None)

    # Audit
    audit_performed = models.BooleanField(default=False)
    audited_at = models.DateTimeField(null=True, blank=True, default=None)
    audit_has_error = models.BooleanField(default=False)
    audit_notes = models.TextField(blank=True, default="")

    # Validation
    stage = models.CharField(
        max_length=20,
        choices=ReviewStage.choices,
        default=ReviewStage.CONFERRED,
    )
    validation_status = models.CharField(
        max_length=20,
        choices=ValidationStatus.choices,
        default=ValidationStatus.PENDING,
    )
    validated_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "order_reviews"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["stage"], name="order_reviews_stage_idx"),
            models.Index(
                fields=["validation_status"], name="order_reviews_validation_idx"
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.stage in TERMINAL_STATES

    def can_transition_to(self, new_stage: str) -> bool:
        """Check whether moving to *new_stage* is valid."""
        allowed = VALID_TRANSITIONS.get(self.stage, set())
        return new_stage in allowed

    def __str__(self) -> str:
        return f"Review {self.order_id} [{self.stage}/{self.validation_status}]"
