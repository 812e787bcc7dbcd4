"""
Enrollment Service Layer

Business logic for enrollments:

1. Submission (guardian):
   - Requires an active enrollment period that is accepting enrollments
   - Student must be eligible (new/returning rules of the period)
   - One live enrollment per student and guardian per period
   - Assessed amount = total of the active fee schedule for the grade

2. Review (staff):
   - pending -> approved | rejected, approved -> enrolled
   - Guardian is emailed on approval or rejection

3. Payments (staff):
   - Amounts arrive as decimals and are truncated to cents
   - balance = max(0, net - paid); payment status follows the balance
   - Due date starts at the period's regular deadline; only staff move it
"""

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.email import send_enrollment_decision, send_enrollment_submitted
from app.core.money import MoneyFormatter, get_money_formatter
from app.modules.enrollment_periods import repository as period_repository
from app.modules.enrollments import repository
from app.modules.enrollments.helpers import (
    MAX_STORED_CENTS,
    VALID_STATUS_TRANSITIONS,
    check_eligibility,
    payment_status_for,
)
from app.modules.enrollments.models import Enrollment, EnrollmentStatus, PaymentStatus
from app.modules.enrollments.schemas import EnrollmentCreate, EnrollmentResponse
from app.modules.grade_level_fees import service as fee_service
from app.modules.grade_level_fees.models import GradeLevel
from app.modules.shared import local_today, money_amount

logger = logging.getLogger(__name__)


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class EnrollmentClosedError(EnrollmentServiceError):
    def __init__(self):
        super().__init__(
            message="Enrollment is currently closed. No active enrollment period available.",
            error_code="ENROLLMENT_CLOSED",
            status_code=409,
        )


class EnrollmentNotEligibleError(EnrollmentServiceError):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            message=" ".join(errors),
            error_code="ENROLLMENT_NOT_ELIGIBLE",
            status_code=422,
        )


class EnrollmentNotFoundError(EnrollmentServiceError):
    def __init__(self, enrollment_id: UUID | None = None):
        message = f"Enrollment {enrollment_id} not found" if enrollment_id else "Enrollment not found"
        super().__init__(message=message, error_code="ENROLLMENT_NOT_FOUND", status_code=404)


class DuplicateEnrollmentError(EnrollmentServiceError):
    def __init__(self, student_name: str):
        super().__init__(
            message=f"{student_name} already has an enrollment in this period",
            error_code="DUPLICATE_ENROLLMENT",
            status_code=409,
        )


class FeeNotConfiguredError(EnrollmentServiceError):
    def __init__(self, grade_level: GradeLevel):
        super().__init__(
            message=f"Fees for {grade_level.label} are not configured for this enrollment period",
            error_code="FEE_NOT_CONFIGURED",
            status_code=422,
        )


class InvalidEnrollmentStatusError(EnrollmentServiceError):
    def __init__(self, current: EnrollmentStatus, new: EnrollmentStatus):
        super().__init__(
            message=f"Cannot change enrollment status from {current.value} to {new.value}",
            error_code="INVALID_STATUS_TRANSITION",
            status_code=409,
        )


class InvalidPaymentError(EnrollmentServiceError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="INVALID_PAYMENT", status_code=422)


def to_response(
    enrollment: Enrollment,
    money: MoneyFormatter | None = None,
) -> EnrollmentResponse:
    money = money or get_money_formatter()
    return EnrollmentResponse(
        id=enrollment.id,
        enrollment_period_id=enrollment.enrollment_period_id,
        student_name=enrollment.student_name,
        is_returning_student=enrollment.is_returning_student,
        grade_level=enrollment.grade_level,
        grade_level_label=enrollment.grade_level.label,
        guardian_name=enrollment.guardian_name,
        guardian_email=enrollment.guardian_email,
        status=enrollment.status,
        payment_status=enrollment.payment_status,
        net_amount=money_amount(enrollment.net_amount_cents, money),
        amount_paid=money_amount(enrollment.amount_paid_cents, money),
        balance=money_amount(enrollment.balance_cents, money),
        payment_due_date=enrollment.payment_due_date,
        created_at=enrollment.created_at,
        updated_at=enrollment.updated_at,
    )


async def check_enrollment_eligibility(
    db: AsyncSession,
    is_returning_student: bool,
    today: date | None = None,
) -> list[str]:
    """Eligibility errors against the active period; empty if eligible."""
    period = await period_repository.get_active(db)
    if period is None:
        return [EnrollmentClosedError().message]
    return check_eligibility(period, is_returning_student, today or local_today())


async def submit_enrollment(
    db: AsyncSession,
    data: EnrollmentCreate,
    today: date | None = None,
    money: MoneyFormatter | None = None,
) -> Enrollment:
    """
    Submit an enrollment into the active period.

    Args:
        db: Database session
        data: Validated enrollment request
        today: Calendar date to evaluate (defaults to today in settings.timezone)
        money: Formatter for the confirmation email

    Returns:
        The created enrollment, pending review

    Raises:
        EnrollmentClosedError: If no period is active
        EnrollmentNotEligibleError: If the period is not open or rejects the student
        DuplicateEnrollmentError: If the student already has a live enrollment
        FeeNotConfiguredError: If the grade has no active fee schedule
    """
    today = today or local_today()
    money = money or get_money_formatter()

    period = await period_repository.get_active(db)
    if period is None:
        raise EnrollmentClosedError()

    errors = check_eligibility(period, data.is_returning_student, today)
    if errors:
        logger.warning(f"Ineligible enrollment attempt for period {period.id}: {errors}")
        raise EnrollmentNotEligibleError(errors)

    student_name = data.student_name.strip()
    duplicate = await repository.find_open_duplicate(
        db, period.id, student_name, data.guardian_email
    )
    if duplicate:
        logger.warning(f"Duplicate enrollment attempt for period {period.id}")
        raise DuplicateEnrollmentError(student_name)

    fee = await fee_service.get_fee_for_grade(db, period.id, data.grade_level)
    if fee is None:
        raise FeeNotConfiguredError(data.grade_level)

    net_amount_cents = fee.total_fee_cents
    enrollment = Enrollment(
        enrollment_period_id=period.id,
        student_name=student_name,
        is_returning_student=data.is_returning_student,
        grade_level=data.grade_level,
        guardian_name=data.guardian_name,
        guardian_email=data.guardian_email,
        status=EnrollmentStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        net_amount_cents=net_amount_cents,
        amount_paid_cents=0,
        balance_cents=net_amount_cents,
        payment_due_date=period.regular_registration_deadline,
    )
    enrollment = await repository.create(db, enrollment)
    logger.info(f"Created enrollment {enrollment.id} in period {period.id}")

    try:
        email_sent = await send_enrollment_submitted(
            to_email=enrollment.guardian_email,
            guardian_name=enrollment.guardian_name,
            student_name=enrollment.student_name,
            school_year=period.school_year,
            amount_due=money.format(net_amount_cents),
        )
        if not email_sent:
            logger.error(f"Failed to send submission email for enrollment {enrollment.id}")
    except Exception as e:
        logger.error(f"Exception sending submission email for enrollment {enrollment.id}: {e}")

    return enrollment


async def get_enrollment(db: AsyncSession, enrollment_id: UUID) -> Enrollment:
    enrollment = await repository.get_by_id(db, enrollment_id)
    if not enrollment:
        raise EnrollmentNotFoundError(enrollment_id)
    return enrollment


async def update_status(
    db: AsyncSession,
    enrollment_id: UUID,
    new_status: EnrollmentStatus,
    reason: str | None = None,
) -> Enrollment:
    """
    Move an enrollment through review.

    Raises:
        EnrollmentNotFoundError: If the enrollment does not exist
        InvalidEnrollmentStatusError: If the transition is not allowed
    """
    enrollment = await get_enrollment(db, enrollment_id)

    if new_status not in VALID_STATUS_TRANSITIONS[enrollment.status]:
        raise InvalidEnrollmentStatusError(enrollment.status, new_status)

    previous = enrollment.status
    enrollment.status = new_status
    enrollment = await repository.save(db, enrollment)
    logger.info(f"Enrollment {enrollment.id} moved from {previous.value} to {new_status.value}")

    if new_status in (EnrollmentStatus.APPROVED, EnrollmentStatus.REJECTED):
        try:
            await send_enrollment_decision(
                to_email=enrollment.guardian_email,
                guardian_name=enrollment.guardian_name,
                student_name=enrollment.student_name,
                approved=new_status == EnrollmentStatus.APPROVED,
                reason=reason,
            )
        except Exception as e:
            logger.error(f"Failed to send decision email for enrollment {enrollment.id}: {e}")

    return enrollment


async def set_payment_due_date(
    db: AsyncSession,
    enrollment_id: UUID,
    due_date: date,
) -> Enrollment:
    """
    Move the payment due date of an enrollment.

    Reminders already recorded keep their type; the next run schedules from
    the new date.

    Raises:
        EnrollmentNotFoundError: If the enrollment does not exist
        InvalidPaymentError: If the enrollment is rejected
    """
    enrollment = await get_enrollment(db, enrollment_id)

    if enrollment.status == EnrollmentStatus.REJECTED:
        raise InvalidPaymentError("Cannot set a due date for a rejected enrollment")

    enrollment.payment_due_date = due_date
    enrollment = await repository.save(db, enrollment)
    logger.info(f"Enrollment {enrollment.id} payment due date set to {due_date.isoformat()}")
    return enrollment


async def record_payment(
    db: AsyncSession,
    enrollment_id: UUID,
    amount: Decimal,
    money: MoneyFormatter | None = None,
) -> Enrollment:
    """
    Record a payment against an enrollment.

    Raises:
        EnrollmentNotFoundError: If the enrollment does not exist
        InvalidPaymentError: If the enrollment cannot take payments or the
            amount is less than one minor unit, or the paid total would
            exceed the storable range
    """
    money = money or get_money_formatter()
    enrollment = await get_enrollment(db, enrollment_id)

    if enrollment.status == EnrollmentStatus.REJECTED:
        raise InvalidPaymentError("Cannot record a payment for a rejected enrollment")

    cents = money.from_decimal(amount)
    if cents is None or cents <= 0:
        raise InvalidPaymentError("Payment amount must be at least one minor unit")

    if enrollment.amount_paid_cents + cents > MAX_STORED_CENTS:
        raise InvalidPaymentError("Payment would exceed the maximum recordable total")

    enrollment.amount_paid_cents += cents
    enrollment.balance_cents = max(0, enrollment.net_amount_cents - enrollment.amount_paid_cents)
    enrollment.payment_status = payment_status_for(enrollment)

    enrollment = await repository.save(db, enrollment)
    logger.info(
        f"Recorded payment of {cents} cents for enrollment {enrollment.id}; "
        f"balance {enrollment.balance_cents} cents"
    )
    return enrollment
