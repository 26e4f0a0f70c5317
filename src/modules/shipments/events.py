"""Domain events for the Shipments bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class ShipmentCreated(DomainEvent):
    """Raised when a shipment is opened."""

    manifest_number: Optional[int] = None
    invoice_count: int = 0


@dataclass(frozen=True)
class ShipmentUpdated(DomainEvent):
    pass


@dataclass(frozen=True)
class ShipmentSigned(DomainEvent):
    """Raised when a driver or responsible-party signature is attached."""

    role: str = ""


@dataclass(frozen=True)
class ShipmentFinalized(DomainEvent):
    """Raised on the OPEN -> FINALIZED transition."""

    manifest_number: Optional[int] = None


@dataclass(frozen=True)
class ShipmentDeleted(DomainEvent):
    """Raised after a shipment is removed and its invoices unbound."""

    unbound_invoices: int = 0
