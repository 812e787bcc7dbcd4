"""
Enrollment Schemas

Pydantic schemas for request validation and response serialization.
Payments arrive as decimal amounts; responses expose every amount as a
MoneyAmount (cents, decimal and formatted).
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.modules.enrollments.models import EnrollmentStatus, PaymentStatus
from app.modules.grade_level_fees.models import GradeLevel
from app.modules.shared import MAX_AMOUNT, MoneyAmount


class EnrollmentCreate(BaseModel):
    """Request body for POST /enrollments."""

    student_name: str = Field(..., min_length=1, max_length=255)
    is_returning_student: bool = False
    grade_level: GradeLevel
    guardian_name: str = Field(..., min_length=1, max_length=255)
    guardian_email: EmailStr


class EnrollmentStatusUpdate(BaseModel):
    """Request body for POST /enrollments/{id}/status."""

    status: EnrollmentStatus
    reason: str | None = Field(None, max_length=1000)

    @model_validator(mode="after")
    def validate_reason(self) -> "EnrollmentStatusUpdate":
        if self.status == EnrollmentStatus.REJECTED and not self.reason:
            raise ValueError("reason is required when rejecting an enrollment")
        return self


class PaymentDueDateUpdate(BaseModel):
    """Request body for PATCH /enrollments/{id}/due-date."""

    payment_due_date: date


class PaymentCreate(BaseModel):
    """Request body for POST /enrollments/{id}/payments."""

    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)


class EnrollmentResponse(BaseModel):
    id: UUID
    enrollment_period_id: UUID
    student_name: str
    is_returning_student: bool
    grade_level: GradeLevel
    grade_level_label: str
    guardian_name: str
    guardian_email: str
    status: EnrollmentStatus
    payment_status: PaymentStatus
    net_amount: MoneyAmount
    amount_paid: MoneyAmount
    balance: MoneyAmount
    payment_due_date: date | None = None
    created_at: datetime
    updated_at: datetime


class EnrollmentEligibilityResponse(BaseModel):
    """Response for GET /enrollments/eligibility."""

    eligible: bool
    errors: list[str]
