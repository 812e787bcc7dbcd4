"""
Enrollment Period Repository

Database operations for enrollment periods.

Design Principles:
- Single responsibility - only database operations, no business logic
- Status changes are validated against VALID_STATUS_TRANSITIONS
- Date filters take an explicit calendar date
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import EnrollmentPeriod, EnrollmentPeriodStatus
from .schemas import EnrollmentPeriodCreate

# Closed periods may be re-opened by an administrator; nothing returns to upcoming
VALID_STATUS_TRANSITIONS: dict[EnrollmentPeriodStatus, set[EnrollmentPeriodStatus]] = {
    EnrollmentPeriodStatus.UPCOMING: {
        EnrollmentPeriodStatus.ACTIVE,
        EnrollmentPeriodStatus.CLOSED,
    },
    EnrollmentPeriodStatus.ACTIVE: {
        EnrollmentPeriodStatus.CLOSED,
    },
    EnrollmentPeriodStatus.CLOSED: {
        EnrollmentPeriodStatus.ACTIVE,
    },
}


class InvalidStatusTransitionError(ValueError):
    """Raised when an invalid status transition is attempted."""

    def __init__(
        self,
        current_status: EnrollmentPeriodStatus,
        new_status: EnrollmentPeriodStatus,
    ):
        self.current_status = current_status
        self.new_status = new_status
        valid_transitions = VALID_STATUS_TRANSITIONS.get(current_status, set())
        super().__init__(
            f"Invalid status transition: {current_status.value} -> {new_status.value}. "
            f"Valid transitions: {sorted(s.value for s in valid_transitions)}"
        )


async def create(db: AsyncSession, data: EnrollmentPeriodCreate) -> EnrollmentPeriod:
    """Create a new enrollment period in the upcoming state."""
    period = EnrollmentPeriod(
        school_year=data.school_year,
        start_date=data.start_date,
        end_date=data.end_date,
        early_registration_deadline=data.early_registration_deadline,
        regular_registration_deadline=data.regular_registration_deadline,
        late_registration_deadline=data.late_registration_deadline,
        description=data.description,
        allow_new_students=data.allow_new_students,
        allow_returning_students=data.allow_returning_students,
        status=EnrollmentPeriodStatus.UPCOMING,
    )

    db.add(period)
    await db.commit()
    await db.refresh(period)

    return period


async def get_by_id(db: AsyncSession, id: UUID) -> EnrollmentPeriod | None:
    return await db.get(EnrollmentPeriod, id)


async def list_periods(
    db: AsyncSession,
    status: EnrollmentPeriodStatus | None = None,
) -> list[EnrollmentPeriod]:
    """List periods, newest first, optionally filtered by status."""
    query = select(EnrollmentPeriod).order_by(EnrollmentPeriod.start_date.desc())
    if status is not None:
        query = query.where(EnrollmentPeriod.status == status)

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_active(db: AsyncSession) -> EnrollmentPeriod | None:
    """
    Get the active period.

    At most one period should be active; if several are, the one that
    started most recently wins.
    """
    result = await db.execute(
        select(EnrollmentPeriod)
        .where(EnrollmentPeriod.status == EnrollmentPeriodStatus.ACTIVE)
        .order_by(EnrollmentPeriod.start_date.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_upcoming_to_activate(db: AsyncSession, today: date) -> list[EnrollmentPeriod]:
    """
    Upcoming periods whose window contains today.

    A period whose end date has already passed is never activated, so it
    cannot displace the current active period.
    """
    result = await db.execute(
        select(EnrollmentPeriod)
        .where(
            EnrollmentPeriod.status == EnrollmentPeriodStatus.UPCOMING,
            EnrollmentPeriod.start_date <= today,
            EnrollmentPeriod.end_date >= today,
        )
        .order_by(EnrollmentPeriod.start_date.asc())
    )
    return list(result.scalars().all())


async def get_active_to_close(db: AsyncSession, today: date) -> list[EnrollmentPeriod]:
    """Active periods whose end date has passed."""
    result = await db.execute(
        select(EnrollmentPeriod).where(
            EnrollmentPeriod.status == EnrollmentPeriodStatus.ACTIVE,
            EnrollmentPeriod.end_date < today,
        )
    )
    return list(result.scalars().all())


async def close_other_active(db: AsyncSession, exclude_id: UUID) -> None:
    """Close every active period except exclude_id. Does not commit."""
    await db.execute(
        update(EnrollmentPeriod)
        .where(
            EnrollmentPeriod.status == EnrollmentPeriodStatus.ACTIVE,
            EnrollmentPeriod.id != exclude_id,
        )
        .values(status=EnrollmentPeriodStatus.CLOSED)
    )


async def update_fields(
    db: AsyncSession,
    period: EnrollmentPeriod,
    **fields,
) -> EnrollmentPeriod:
    """Apply field changes to a period and commit."""
    for name, value in fields.items():
        setattr(period, name, value)

    await db.commit()
    await db.refresh(period)
    return period


async def update_status(
    db: AsyncSession,
    period: EnrollmentPeriod,
    status: EnrollmentPeriodStatus,
) -> EnrollmentPeriod:
    """
    Change a period's status.

    Activating a period closes every other active period in the same
    transaction.

    Raises:
        InvalidStatusTransitionError: If the transition is not allowed
    """
    if status not in VALID_STATUS_TRANSITIONS[period.status]:
        raise InvalidStatusTransitionError(period.status, status)

    if status == EnrollmentPeriodStatus.ACTIVE:
        await close_other_active(db, period.id)

    period.status = status
    await db.commit()
    await db.refresh(period)
    return period
