"""
Enrollments Router

Endpoints:
- GET /enrollments/eligibility - Check eligibility against the active period (public)
- POST /enrollments - Submit an enrollment (public, guardian)
- GET /enrollments/{id} - Enrollment details (staff)
- POST /enrollments/{id}/status - Approve, reject or mark enrolled (staff)
- POST /enrollments/{id}/payments - Record a payment (staff)
- PATCH /enrollments/{id}/due-date - Move the payment due date (staff)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import StaffUser, get_current_staff_user
from app.core.database import get_db
from app.modules.enrollments import service
from app.modules.enrollments.schemas import (
    EnrollmentCreate,
    EnrollmentEligibilityResponse,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
    PaymentCreate,
    PaymentDueDateUpdate,
)
from app.modules.enrollments.service import EnrollmentServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: EnrollmentServiceError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


@router.get("/eligibility", response_model=EnrollmentEligibilityResponse)
async def check_eligibility(
    is_returning_student: bool = Query(False),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentEligibilityResponse:
    errors = await service.check_enrollment_eligibility(db, is_returning_student)
    return EnrollmentEligibilityResponse(eligible=not errors, errors=errors)


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def submit_enrollment(
    data: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """
    Submit an enrollment for a student.

    The enrollment is created in the active period with the fees configured
    for the student's grade level, and the guardian receives a confirmation
    email.
    """
    try:
        enrollment = await service.submit_enrollment(db, data)
    except EnrollmentServiceError as e:
        raise _handle_service_error(e) from e
    return service.to_response(enrollment)


@router.get("/{enrollment_id}", response_model=EnrollmentResponse)
async def get_enrollment(
    enrollment_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user: StaffUser = Depends(get_current_staff_user),
) -> EnrollmentResponse:
    try:
        enrollment = await service.get_enrollment(db, enrollment_id)
    except EnrollmentServiceError as e:
        raise _handle_service_error(e) from e
    return service.to_response(enrollment)


@router.post("/{enrollment_id}/status", response_model=EnrollmentResponse)
async def update_status(
    enrollment_id: UUID,
    data: EnrollmentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: StaffUser = Depends(get_current_staff_user),
) -> EnrollmentResponse:
    try:
        enrollment = await service.update_status(db, enrollment_id, data.status, data.reason)
    except EnrollmentServiceError as e:
        raise _handle_service_error(e) from e
    logger.info(f"Staff {user.id} set enrollment {enrollment_id} to {data.status.value}")
    return service.to_response(enrollment)


@router.post("/{enrollment_id}/payments", response_model=EnrollmentResponse)
async def record_payment(
    enrollment_id: UUID,
    data: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    user: StaffUser = Depends(get_current_staff_user),
) -> EnrollmentResponse:
    try:
        enrollment = await service.record_payment(db, enrollment_id, data.amount)
    except EnrollmentServiceError as e:
        raise _handle_service_error(e) from e
    logger.info(f"Staff {user.id} recorded a payment for enrollment {enrollment_id}")
    return service.to_response(enrollment)


@router.patch("/{enrollment_id}/due-date", response_model=EnrollmentResponse)
async def set_payment_due_date(
    enrollment_id: UUID,
    data: PaymentDueDateUpdate,
    db: AsyncSession = Depends(get_db),
    user: StaffUser = Depends(get_current_staff_user),
) -> EnrollmentResponse:
    try:
        enrollment = await service.set_payment_due_date(db, enrollment_id, data.payment_due_date)
    except EnrollmentServiceError as e:
        raise _handle_service_error(e) from e
    logger.info(f"Staff {user.id} moved the due date of enrollment {enrollment_id}")
    return service.to_response(enrollment)
