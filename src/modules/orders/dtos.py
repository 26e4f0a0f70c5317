"""Order workflow DTOs for the Service Layer.

Framework-agnostic, immutable (``frozen=True``) pydantic v2 models.
Reason codes are checked against ``InconsistencyReason`` here; the
cross-field rule (reason codes required when an inconsistency is
reported) belongs to the service, which reports it as a field error.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import (
    InconsistencyReason,
    ReviewStage,
    ValidationOutcome,
)


class CreateOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_number: str
    shipment_id: Optional[UUID] = None
    separator_id: Optional[UUID] = None

    @field_validator("order_number", mode="before")
    @classmethod
    def strip_order_number(cls, v):
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v


class AssignSeparatorDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    separator_id: UUID


class ReviewFindingsDTO(BaseModel):
    """What a conferer or auditor found when checking a picked order."""

    model_config = ConfigDict(frozen=True)

    fully_picked: bool = False
    has_inconsistency: bool = False
    reasons: List[InconsistencyReason] = []
    notes: str = ""

    @field_validator("reasons")
    @classmethod
    def unique_reasons(cls, v: List[InconsistencyReason]) -> List[InconsistencyReason]:
        return list(dict.fromkeys(v))


class ValidateReviewDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: ValidationOutcome


class ConferenceReportDTO(BaseModel):
    """Report window over ``conferred_at`` dates, both ends inclusive."""

    model_config = ConfigDict(frozen=True)

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    stage: Optional[ReviewStage] = None
    conferer_id: Optional[UUID] = None

    @model_validator(mode="after")
    def window_is_ordered(self) -> "ConferenceReportDTO":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date.")
        return self
