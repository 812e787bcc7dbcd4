"""
Enrollment Period Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.modules.enrollment_periods.models import EnrollmentPeriodStatus
from app.modules.enrollment_periods.window import EnrollmentWindow, WindowPhase

SCHOOL_YEAR_PATTERN = r"^\d{4}-\d{4}$"


def _check_school_year(school_year: str) -> None:
    start, end = (int(part) for part in school_year.split("-"))
    if end != start + 1:
        raise ValueError("school_year must span consecutive years (e.g. 2025-2026)")


class EnrollmentPeriodCreate(BaseModel):
    """Request body for POST /enrollment-periods."""

    school_year: str = Field(..., pattern=SCHOOL_YEAR_PATTERN)
    start_date: date
    end_date: date
    early_registration_deadline: date | None = None
    regular_registration_deadline: date
    late_registration_deadline: date | None = None
    description: str | None = Field(None, max_length=1000)
    allow_new_students: bool = True
    allow_returning_students: bool = True

    @model_validator(mode="after")
    def validate_period(self) -> "EnrollmentPeriodCreate":
        _check_school_year(self.school_year)
        # Raises InvalidWindow (a ValueError) for inconsistent dates
        EnrollmentWindow(
            start_date=self.start_date,
            end_date=self.end_date,
            regular_deadline=self.regular_registration_deadline,
            early_deadline=self.early_registration_deadline,
            late_deadline=self.late_registration_deadline,
        )
        return self


class EnrollmentPeriodUpdate(BaseModel):
    """
    Request body for PATCH /enrollment-periods/{id}.

    Only provided fields change. The merged dates are re-validated by the
    service, since a partial update cannot be checked on its own.
    """

    school_year: str | None = Field(None, pattern=SCHOOL_YEAR_PATTERN)
    start_date: date | None = None
    end_date: date | None = None
    early_registration_deadline: date | None = None
    regular_registration_deadline: date | None = None
    late_registration_deadline: date | None = None
    description: str | None = Field(None, max_length=1000)
    allow_new_students: bool | None = None
    allow_returning_students: bool | None = None

    @model_validator(mode="after")
    def validate_school_year(self) -> "EnrollmentPeriodUpdate":
        if self.school_year is not None:
            _check_school_year(self.school_year)
        return self


class EnrollmentPeriodResponse(BaseModel):
    """An enrollment period with its window evaluated against today."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    school_year: str
    start_date: date
    end_date: date
    early_registration_deadline: date | None
    regular_registration_deadline: date
    late_registration_deadline: date | None
    status: EnrollmentPeriodStatus
    description: str | None
    allow_new_students: bool
    allow_returning_students: bool
    created_at: datetime
    updated_at: datetime

    # Computed against the caller's "today"
    phase: WindowPhase
    is_open: bool
    days_remaining: int
    next_deadline: date | None
    accepting_enrollments: bool


class EnrollmentPeriodListResponse(BaseModel):
    items: list[EnrollmentPeriodResponse]
    total: int


class ActiveEnrollmentPeriodResponse(BaseModel):
    """Response for GET /enrollment-periods/active."""

    period: EnrollmentPeriodResponse | None
    message: str
