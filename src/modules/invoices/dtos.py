"""Invoice DTOs for the Service Layer.

Pydantic v2, immutable.  ``value`` is kept raw here: money parsing
(``parse_money``) belongs to the registry so every entry point shares
the same rules.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator


class CreateInvoiceDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    number: str
    value: Optional[Union[Decimal, str]] = None
    volumes: int = 0

    @field_validator("code", "number", mode="before")
    @classmethod
    def strip_identifiers(cls, v):
        if isinstance(v, str):
            return v.strip()
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("volumes")
    @classmethod
    def volumes_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Volumes cannot be negative.")
        return v


class CreateInvoiceBatchDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: List[CreateInvoiceDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateInvoiceDTO]
    ) -> List[CreateInvoiceDTO]:
        if not v:
            raise ValueError("At least one invoice is required.")
        return v
