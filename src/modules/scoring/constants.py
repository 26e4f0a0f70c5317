"""Scoring policy constants."""

from django.db import models


class ScoringAction(models.TextChoices):
    CORRECT = "CORRECT", "Pedido correto"
    INCORRECT = "INCORRECT", "Pedido incorreto"


POINTS: dict[str, int] = {
    ScoringAction.CORRECT: 10,
    ScoringAction.INCORRECT: -5,
}
