"""
Enrollment Repository

Database operations for enrollments and payment reminder records.
"""

from datetime import date, datetime, time
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .helpers import OPEN_ENROLLMENT_STATUSES
from .models import Enrollment, EnrollmentStatus, PaymentReminder, ReminderType


async def create(db: AsyncSession, enrollment: Enrollment) -> Enrollment:
    db.add(enrollment)
    await db.commit()
    await db.refresh(enrollment)
    return enrollment


async def get_by_id(db: AsyncSession, id: UUID) -> Enrollment | None:
    return await db.get(Enrollment, id)


async def find_open_duplicate(
    db: AsyncSession,
    enrollment_period_id: UUID,
    student_name: str,
    guardian_email: str,
) -> Enrollment | None:
    """Find a live enrollment for the same student and guardian in a period."""
    query = select(Enrollment).where(
        Enrollment.enrollment_period_id == enrollment_period_id,
        func.lower(Enrollment.student_name) == student_name.strip().lower(),
        func.lower(Enrollment.guardian_email) == guardian_email.lower(),
        Enrollment.status.in_(OPEN_ENROLLMENT_STATUSES),
    )
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


async def get_with_outstanding_balance(db: AsyncSession) -> list[Enrollment]:
    """Enrolled students that still owe money and have a due date."""
    query = select(Enrollment).where(
        Enrollment.status == EnrollmentStatus.ENROLLED,
        Enrollment.balance_cents > 0,
        Enrollment.payment_due_date.is_not(None),
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def save(db: AsyncSession, enrollment: Enrollment) -> Enrollment:
    await db.commit()
    await db.refresh(enrollment)
    return enrollment


async def reminder_sent_on(
    db: AsyncSession,
    enrollment_id: UUID,
    reminder_type: ReminderType,
    day: date,
    tz_name: str,
) -> bool:
    """Whether a reminder of this type was recorded on the given local day."""
    tz = ZoneInfo(tz_name)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max, tzinfo=tz)

    query = select(PaymentReminder.id).where(
        PaymentReminder.enrollment_id == enrollment_id,
        PaymentReminder.reminder_type == reminder_type,
        PaymentReminder.sent_at >= start,
        PaymentReminder.sent_at <= end,
    )
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def record_reminder(
    db: AsyncSession,
    enrollment_id: UUID,
    reminder_type: ReminderType,
) -> PaymentReminder:
    reminder = PaymentReminder(enrollment_id=enrollment_id, reminder_type=reminder_type)
    db.add(reminder)
    await db.commit()
    return reminder
