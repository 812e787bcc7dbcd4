"""
Enrollment Periods Router

Endpoints:
- GET /enrollment-periods/active - Current period and whether it is open (public)
- GET /enrollment-periods - List periods (staff)
- GET /enrollment-periods/{id} - Period details (staff)
- POST /enrollment-periods - Create period (super admin)
- PATCH /enrollment-periods/{id} - Edit period (super admin)
- POST /enrollment-periods/{id}/activate - Activate period (super admin)
- POST /enrollment-periods/{id}/close - Close period (super admin)

Every response evaluates the period's window against today in the
configured time zone.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import StaffUser, get_current_admin_user, get_current_staff_user
from app.core.database import get_db
from app.modules.enrollment_periods import service
from app.modules.enrollment_periods.models import EnrollmentPeriodStatus
from app.modules.enrollment_periods.schemas import (
    ActiveEnrollmentPeriodResponse,
    EnrollmentPeriodCreate,
    EnrollmentPeriodListResponse,
    EnrollmentPeriodResponse,
    EnrollmentPeriodUpdate,
)
from app.modules.enrollment_periods.service import EnrollmentPeriodServiceError
from app.modules.shared import local_today

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: EnrollmentPeriodServiceError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


@router.get("/active", response_model=ActiveEnrollmentPeriodResponse)
async def get_active_period(
    db: AsyncSession = Depends(get_db),
) -> ActiveEnrollmentPeriodResponse:
    """Return the active period, if any, with its open/closed evaluation."""
    period = await service.get_active_period(db)
    if period is None:
        return ActiveEnrollmentPeriodResponse(
            period=None,
            message="Enrollment is currently closed. No active enrollment period available.",
        )

    summary = service.summarize(period, local_today())
    message = (
        f"Enrollment is open. {summary.days_remaining} day(s) remaining."
        if summary.accepting_enrollments
        else "Enrollment period is not currently open."
    )
    return ActiveEnrollmentPeriodResponse(period=summary, message=message)


@router.get("", response_model=EnrollmentPeriodListResponse)
async def list_periods(
    status_filter: EnrollmentPeriodStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    _user: StaffUser = Depends(get_current_staff_user),
) -> EnrollmentPeriodListResponse:
    periods = await service.list_periods(db, status=status_filter)
    today = local_today()
    items = [service.summarize(period, today) for period in periods]
    return EnrollmentPeriodListResponse(items=items, total=len(items))


@router.get("/{period_id}", response_model=EnrollmentPeriodResponse)
async def get_period(
    period_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user: StaffUser = Depends(get_current_staff_user),
) -> EnrollmentPeriodResponse:
    try:
        period = await service.get_period(db, period_id)
    except EnrollmentPeriodServiceError as e:
        raise _handle_service_error(e) from e
    return service.summarize(period, local_today())


@router.post("", response_model=EnrollmentPeriodResponse, status_code=status.HTTP_201_CREATED)
async def create_period(
    data: EnrollmentPeriodCreate,
    db: AsyncSession = Depends(get_db),
    admin: StaffUser = Depends(get_current_admin_user),
) -> EnrollmentPeriodResponse:
    period = await service.create_period(db, data)
    logger.info(f"Admin {admin.id} created enrollment period {period.id}")
    return service.summarize(period, local_today())


@router.patch("/{period_id}", response_model=EnrollmentPeriodResponse)
async def update_period(
    period_id: UUID,
    data: EnrollmentPeriodUpdate,
    db: AsyncSession = Depends(get_db),
    admin: StaffUser = Depends(get_current_admin_user),
) -> EnrollmentPeriodResponse:
    try:
        period = await service.update_period(db, period_id, data)
    except EnrollmentPeriodServiceError as e:
        raise _handle_service_error(e) from e
    logger.info(f"Admin {admin.id} updated enrollment period {period_id}")
    return service.summarize(period, local_today())


@router.post("/{period_id}/activate", response_model=EnrollmentPeriodResponse)
async def activate_period(
    period_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: StaffUser = Depends(get_current_admin_user),
) -> EnrollmentPeriodResponse:
    try:
        period = await service.activate_period(db, period_id)
    except EnrollmentPeriodServiceError as e:
        raise _handle_service_error(e) from e
    logger.info(f"Admin {admin.id} activated enrollment period {period_id}")
    return service.summarize(period, local_today())


@router.post("/{period_id}/close", response_model=EnrollmentPeriodResponse)
async def close_period(
    period_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: StaffUser = Depends(get_current_admin_user),
) -> EnrollmentPeriodResponse:
    try:
        period = await service.close_period(db, period_id)
    except EnrollmentPeriodServiceError as e:
        raise _handle_service_error(e) from e
    logger.info(f"Admin {admin.id} closed enrollment period {period_id}")
    return service.summarize(period, local_today())
