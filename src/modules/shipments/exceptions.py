"""Shipment domain exceptions.

Raised by the Service Layer and rendered by the API exception handler.
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, InvalidInput, NotFound


class ShipmentNotFound(NotFound):
    default_message = "Shipment not found."


class ShipmentAlreadyFinalized(Conflict):
    """Finalize attempted on a shipment that is already finalized."""

    default_message = "Shipment is already finalized."


class InvalidTaxId(InvalidInput):
    default_message = "Invalid driver tax id."


class ManifestNumberUnavailable(Conflict):
    default_message = "Could not allocate a manifest number, try again."
