"""
Enrollment Period Service Layer

Business logic for enrollment periods:

1. Management (super admin):
   - Create and edit periods; the merged dates are re-validated on every edit
   - Activate a period (closing any other active one) or close it by hand

2. Evaluation:
   - summarize() evaluates a period's window against a given day
   - accepting_enrollments() combines the persisted status with the window:
     a period accepts enrollments only while it is ACTIVE and today falls
     inside its dates
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.enrollment_periods import repository
from app.modules.enrollment_periods.models import EnrollmentPeriod, EnrollmentPeriodStatus
from app.modules.enrollment_periods.repository import InvalidStatusTransitionError
from app.modules.enrollment_periods.schemas import (
    EnrollmentPeriodCreate,
    EnrollmentPeriodResponse,
    EnrollmentPeriodUpdate,
)
from app.modules.enrollment_periods.window import (
    EnrollmentWindow,
    InvalidWindow,
    current_deadline,
    days_remaining,
    is_open,
    phase,
)

logger = logging.getLogger(__name__)

# Fields that may be explicitly cleared with null on update
NULLABLE_FIELDS = frozenset(
    {"early_registration_deadline", "late_registration_deadline", "description"}
)


class EnrollmentPeriodServiceError(Exception):
    """Base exception for enrollment period service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class EnrollmentPeriodNotFoundError(EnrollmentPeriodServiceError):
    def __init__(self, period_id: UUID | None = None):
        message = (
            f"Enrollment period {period_id} not found"
            if period_id
            else "Enrollment period not found"
        )
        super().__init__(
            message=message,
            error_code="ENROLLMENT_PERIOD_NOT_FOUND",
            status_code=404,
        )


class InvalidEnrollmentPeriodError(EnrollmentPeriodServiceError):
    """Raised when the period's dates are inconsistent."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="INVALID_ENROLLMENT_PERIOD",
            status_code=422,
        )


class InvalidEnrollmentPeriodStateError(EnrollmentPeriodServiceError):
    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="INVALID_ENROLLMENT_PERIOD_STATE",
            status_code=409,
        )


def accepting_enrollments(period: EnrollmentPeriod, today: date) -> bool:
    """True when the period is ACTIVE and today falls inside its window."""
    return period.status == EnrollmentPeriodStatus.ACTIVE and is_open(period.window(), today)


def summarize(period: EnrollmentPeriod, today: date) -> EnrollmentPeriodResponse:
    """Build the API response for a period, evaluated against today."""
    window = period.window()
    return EnrollmentPeriodResponse(
        id=period.id,
        school_year=period.school_year,
        start_date=period.start_date,
        end_date=period.end_date,
        early_registration_deadline=period.early_registration_deadline,
        regular_registration_deadline=period.regular_registration_deadline,
        late_registration_deadline=period.late_registration_deadline,
        status=period.status,
        description=period.description,
        allow_new_students=period.allow_new_students,
        allow_returning_students=period.allow_returning_students,
        created_at=period.created_at,
        updated_at=period.updated_at,
        phase=phase(window, today),
        is_open=is_open(window, today),
        days_remaining=days_remaining(window, today),
        next_deadline=current_deadline(window, today),
        accepting_enrollments=accepting_enrollments(period, today),
    )


async def get_period(db: AsyncSession, period_id: UUID) -> EnrollmentPeriod:
    """
    Raises:
        EnrollmentPeriodNotFoundError: If no period has this ID
    """
    period = await repository.get_by_id(db, period_id)
    if not period:
        raise EnrollmentPeriodNotFoundError(period_id)
    return period


async def list_periods(
    db: AsyncSession,
    status: EnrollmentPeriodStatus | None = None,
) -> list[EnrollmentPeriod]:
    return await repository.list_periods(db, status=status)


async def get_active_period(db: AsyncSession) -> EnrollmentPeriod | None:
    return await repository.get_active(db)


async def create_period(db: AsyncSession, data: EnrollmentPeriodCreate) -> EnrollmentPeriod:
    """Create a period. Dates were already validated by the schema."""
    period = await repository.create(db, data)
    logger.info(f"Created enrollment period {period.id} for school year {period.school_year}")
    return period


async def update_period(
    db: AsyncSession,
    period_id: UUID,
    data: EnrollmentPeriodUpdate,
) -> EnrollmentPeriod:
    """
    Apply a partial update.

    The window is rebuilt from the merged values before anything is written.

    Raises:
        EnrollmentPeriodNotFoundError: If no period has this ID
        InvalidEnrollmentPeriodError: If the merged dates are inconsistent
    """
    period = await get_period(db, period_id)

    changes = {
        name: value
        for name, value in data.model_dump(exclude_unset=True).items()
        if value is not None or name in NULLABLE_FIELDS
    }

    def merged(name: str):
        return changes.get(name, getattr(period, name))

    try:
        EnrollmentWindow(
            start_date=merged("start_date"),
            end_date=merged("end_date"),
            regular_deadline=merged("regular_registration_deadline"),
            early_deadline=merged("early_registration_deadline"),
            late_deadline=merged("late_registration_deadline"),
        )
    except InvalidWindow as e:
        raise InvalidEnrollmentPeriodError(str(e)) from e

    period = await repository.update_fields(db, period, **changes)
    logger.info(f"Updated enrollment period {period.id}: {sorted(changes)}")
    return period


async def _change_status(
    db: AsyncSession,
    period_id: UUID,
    status: EnrollmentPeriodStatus,
) -> EnrollmentPeriod:
    period = await get_period(db, period_id)

    if period.status == status:
        return period

    previous = period.status
    try:
        period = await repository.update_status(db, period, status)
    except InvalidStatusTransitionError as e:
        raise InvalidEnrollmentPeriodStateError(str(e)) from e

    logger.info(f"Enrollment period {period.id} status: {previous.value} -> {status.value}")
    return period


async def activate_period(db: AsyncSession, period_id: UUID) -> EnrollmentPeriod:
    """
    Make a period the active one, closing any other active period.

    Activating an already active period is a no-op.
    """
    return await _change_status(db, period_id, EnrollmentPeriodStatus.ACTIVE)


async def close_period(db: AsyncSession, period_id: UUID) -> EnrollmentPeriod:
    """Close a period. Closing an already closed period is a no-op."""
    return await _change_status(db, period_id, EnrollmentPeriodStatus.CLOSED)
