"""
Enrollments Shared Helpers

Pure functions used by service.py and jobs.py.
"""

from datetime import date

from app.modules.enrollment_periods.models import EnrollmentPeriod
from app.modules.enrollment_periods.service import accepting_enrollments
from app.modules.enrollments.models import (
    Enrollment,
    EnrollmentStatus,
    PaymentStatus,
    ReminderType,
)

# Days until the due date at which a reminder goes out
REMINDER_SCHEDULE: dict[int, ReminderType] = {
    7: ReminderType.UPCOMING_7DAYS,
    3: ReminderType.UPCOMING_3DAYS,
    1: ReminderType.UPCOMING_1DAY,
    0: ReminderType.OVERDUE,
    -7: ReminderType.OVERDUE_7DAYS,
    -30: ReminderType.OVERDUE_30DAYS,
}

# Statuses that block a second enrollment for the same student in a period
OPEN_ENROLLMENT_STATUSES = (
    EnrollmentStatus.PENDING,
    EnrollmentStatus.APPROVED,
    EnrollmentStatus.ENROLLED,
)

# Upper bound of the BIGINT amount columns
MAX_STORED_CENTS = 2**63 - 1

VALID_STATUS_TRANSITIONS: dict[EnrollmentStatus, set[EnrollmentStatus]] = {
    EnrollmentStatus.PENDING: {EnrollmentStatus.APPROVED, EnrollmentStatus.REJECTED},
    EnrollmentStatus.APPROVED: {EnrollmentStatus.ENROLLED},
    EnrollmentStatus.REJECTED: set(),
    EnrollmentStatus.ENROLLED: set(),
}


def check_eligibility(
    period: EnrollmentPeriod,
    is_returning_student: bool,
    today: date,
) -> list[str]:
    """
    Check whether a student may enroll in a period on a given day.

    Args:
        period: The enrollment period
        is_returning_student: Whether the student was enrolled before
        today: Calendar date in the school's time zone

    Returns:
        Human-readable reasons the student is not eligible; empty if eligible
    """
    errors = []

    if not accepting_enrollments(period, today):
        errors.append("Enrollment period is not currently open.")

    if is_returning_student and not period.allow_returning_students:
        errors.append("This enrollment period does not accept returning students.")
    if not is_returning_student and not period.allow_new_students:
        errors.append("This enrollment period does not accept new students.")

    return errors


def determine_reminder_type(days_until_due: int) -> ReminderType | None:
    """Reminder to send for the given number of days until the due date, if any."""
    return REMINDER_SCHEDULE.get(days_until_due)


def payment_status_for(enrollment: Enrollment) -> PaymentStatus:
    if enrollment.amount_paid_cents <= 0:
        return PaymentStatus.PENDING
    if enrollment.balance_cents > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PAID
