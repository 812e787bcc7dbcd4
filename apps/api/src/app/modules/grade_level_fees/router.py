"""
Grade Level Fees Router

Endpoints:
- GET /grade-level-fees - List fee schedules, optionally for one period (staff)
- GET /grade-level-fees/{id} - Fee schedule details (staff)
- POST /grade-level-fees - Create fee schedule (super admin)
- PATCH /grade-level-fees/{id} - Edit fee schedule (super admin)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import StaffUser, get_current_admin_user, get_current_staff_user
from app.core.database import get_db
from app.core.money import get_money_formatter
from app.modules.grade_level_fees import service
from app.modules.grade_level_fees.schemas import (
    GradeLevelFeeCreate,
    GradeLevelFeeListResponse,
    GradeLevelFeeResponse,
    GradeLevelFeeUpdate,
)
from app.modules.grade_level_fees.service import GradeLevelFeeServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: GradeLevelFeeServiceError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


@router.get("", response_model=GradeLevelFeeListResponse)
async def list_fees(
    enrollment_period_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _user: StaffUser = Depends(get_current_staff_user),
) -> GradeLevelFeeListResponse:
    fees = await service.list_fees(db, enrollment_period_id)
    money = get_money_formatter()
    items = [service.to_response(fee, money) for fee in fees]
    return GradeLevelFeeListResponse(items=items, total=len(items))


@router.get("/{fee_id}", response_model=GradeLevelFeeResponse)
async def get_fee(
    fee_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user: StaffUser = Depends(get_current_staff_user),
) -> GradeLevelFeeResponse:
    try:
        fee = await service.get_fee(db, fee_id)
    except GradeLevelFeeServiceError as e:
        raise _handle_service_error(e) from e
    return service.to_response(fee)


@router.post("", response_model=GradeLevelFeeResponse, status_code=status.HTTP_201_CREATED)
async def create_fee(
    data: GradeLevelFeeCreate,
    db: AsyncSession = Depends(get_db),
    admin: StaffUser = Depends(get_current_admin_user),
) -> GradeLevelFeeResponse:
    try:
        fee = await service.create_fee(db, data)
    except GradeLevelFeeServiceError as e:
        raise _handle_service_error(e) from e
    logger.info(f"Admin {admin.id} created grade level fee {fee.id}")
    return service.to_response(fee)


@router.patch("/{fee_id}", response_model=GradeLevelFeeResponse)
async def update_fee(
    fee_id: UUID,
    data: GradeLevelFeeUpdate,
    db: AsyncSession = Depends(get_db),
    admin: StaffUser = Depends(get_current_admin_user),
) -> GradeLevelFeeResponse:
    try:
        fee = await service.update_fee(db, fee_id, data)
    except GradeLevelFeeServiceError as e:
        raise _handle_service_error(e) from e
    logger.info(f"Admin {admin.id} updated grade level fee {fee_id}")
    return service.to_response(fee)
