"""Scoring ledger models.

- ``ScoringEvent``: append-only ledger entry, never updated.
- ``UserScore``: per-user aggregate derived from the ledger; ``rank`` is
  rewritten for every user whenever an event is recorded.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.scoring.constants import ScoringAction


class ScoringEvent(BaseModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="scoring_events",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="scoring_events",
    )
    action = models.CharField(max_length=20, choices=ScoringAction.choices)
    points = models.IntegerField()
    description = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "scoring_events"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["user", "-created_at"], name="scoring_user_created_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} {self.action} {self.points:+d}"


class UserScore(BaseModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="score",
    )
    total = models.IntegerField(default=0)
    correct_count = models.PositiveIntegerField(default=0)
    incorrect_count = models.PositiveIntegerField(default=0)
    rank = models.PositiveIntegerField(null=True, blank=True, default=None)

    class Meta:
        db_table = "user_scores"
        ordering = ["rank"]

    def __str__(self) -> str:
        return f"#{self.rank} {self.user_id} ({self.total} pts)"
