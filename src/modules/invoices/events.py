"""Domain events for the Invoices bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class InvoiceBound(DomainEvent):
    shipment_id: Optional[str] = None


@dataclass(frozen=True)
class InvoiceUnbound(DomainEvent):
    shipment_id: Optional[str] = None
