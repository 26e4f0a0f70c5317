"""Driver DTOs for the Service Layer."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.shipments.constants import Carrier


class CreateDriverDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    tax_id: str
    license_number: str
    carrier: Carrier
    phone: str = ""

    @field_validator("name", "license_number", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class UpdateDriverDTO(BaseModel):
    """Partial update; ``None`` leaves a field unchanged."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    tax_id: Optional[str] = None
    license_number: Optional[str] = None
    carrier: Optional[Carrier] = None
    phone: Optional[str] = None

    @field_validator("name", "license_number", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v
