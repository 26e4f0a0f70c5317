"""Shipment DTOs for the Service Layer.

Framework-agnostic, immutable (``frozen=True``) pydantic v2 models.
Tax-id checksum validation happens in the service so it surfaces as a
field-level ``InvalidInput`` like every other domain validation.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.shipments.constants import Carrier, SignatureRole


class CreateShipmentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    driver_name: str
    driver_tax_id: str
    responsible_name: str
    carrier: Carrier
    pallet_count: int = 0
    note: str = ""
    invoice_ids: List[UUID] = []

    @field_validator("pallet_count")
    @classmethod
    def pallet_count_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Pallet count cannot be negative.")
        return v

    @field_validator("invoice_ids")
    @classmethod
    def no_duplicate_invoices(cls, v: List[UUID]) -> List[UUID]:
        if len(v) != len(set(v)):
            raise ValueError("Duplicate invoice IDs are not allowed.")
        return v


class UpdateShipmentDTO(BaseModel):
    """Partial update; ``None`` leaves a field unchanged.

    ``invoice_ids``, when given, is the complete set of invoices the
    shipment should hold afterwards.
    """

    model_config = ConfigDict(frozen=True)

    driver_name: Optional[str] = None
    driver_tax_id: Optional[str] = None
    responsible_name: Optional[str] = None
    carrier: Optional[Carrier] = None
    pallet_count: Optional[int] = None
    note: Optional[str] = None
    invoice_ids: Optional[List[UUID]] = None

    @field_validator("pallet_count")
    @classmethod
    def pallet_count_must_not_be_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Pallet count cannot be negative.")
        return v


class AttachSignatureDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: SignatureRole
    image: str
