"""Shipment domain constants.

Status choices and the transition table for the shipment state machine.
"""

from django.db import models


class ShipmentStatus(models.TextChoices):
    OPEN = "OPEN", "Aberto"
    FINALIZED = "FINALIZED", "Finalizado"


class Carrier(models.TextChoices):
    ACERT = "ACERT", "Acert"
    EXPRESSO_GOIAS = "EXPRESSO_GOIAS", "Expresso Goiás"


class SignatureRole(models.TextChoices):
    DRIVER = "driver", "Motorista"
    RESPONSIBLE = "responsible", "Responsável"


VALID_TRANSITIONS: dict[str, set[str]] = {
    ShipmentStatus.OPEN: {ShipmentStatus.FINALIZED},
    ShipmentStatus.FINALIZED: set(),
}

TERMINAL_STATES: set[str] = {ShipmentStatus.FINALIZED}

MANIFEST_NUMBER_MAX_RETRIES = 5
