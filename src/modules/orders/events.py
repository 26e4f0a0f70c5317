"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is registered."""

    order_number: str = ""


@dataclass(frozen=True)
class SeparatorAssigned(DomainEvent):
    separator_id: Optional[str] = None


@dataclass(frozen=True)
class ConferenceSubmitted(DomainEvent):
    """Raised when the review is created (stage CONFERRED)."""

    has_inconsistency: bool = False


@dataclass(frozen=True)
class AuditSubmitted(DomainEvent):
    audit_has_error: bool = False


@dataclass(frozen=True)
class ReviewValidated(DomainEvent):
    """Raised when a manager records the final outcome."""

    validation_status: str = ""
