"""
Grade Level Fee Schemas

Requests carry decimal amounts (e.g. 12500.00); the service converts them to
cents. Responses carry every amount as a MoneyAmount.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from app.modules.grade_level_fees.models import GradeLevel
from app.modules.shared import MAX_AMOUNT, MoneyAmount


class GradeLevelFeeCreate(BaseModel):
    """Request body for POST /grade-level-fees."""

    enrollment_period_id: UUID
    grade_level: GradeLevel
    tuition_fee: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    registration_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    miscellaneous_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    laboratory_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    library_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    sports_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    is_active: bool = True


class GradeLevelFeeUpdate(BaseModel):
    """
    Request body for PATCH /grade-level-fees/{id}.

    An explicit null clears an optional component.
    """

    tuition_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    registration_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    miscellaneous_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    laboratory_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    library_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    sports_fee: Decimal | None = Field(None, ge=0, le=MAX_AMOUNT)
    is_active: bool | None = None


class GradeLevelFeeResponse(BaseModel):
    id: UUID
    enrollment_period_id: UUID
    grade_level: GradeLevel
    grade_level_label: str
    tuition_fee: MoneyAmount
    registration_fee: MoneyAmount
    miscellaneous_fee: MoneyAmount
    laboratory_fee: MoneyAmount
    library_fee: MoneyAmount
    sports_fee: MoneyAmount
    total_fee: MoneyAmount
    is_active: bool
    created_at: datetime
    updated_at: datetime


class GradeLevelFeeListResponse(BaseModel):
    items: list[GradeLevelFeeResponse]
    total: int
