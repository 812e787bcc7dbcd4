"""
Grade Level Fee Service Layer

Converts decimal amounts from requests into cents for storage and builds
responses with decimal and formatted amounts.

Decimal -> cents conversion truncates toward zero (see app.core.money), so
12500.009 is stored as 1250000 cents.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.money import MoneyFormatter, get_money_formatter
from app.modules.enrollment_periods import repository as period_repository
from app.modules.grade_level_fees.models import FEE_COMPONENTS, GradeLevel, GradeLevelFee
from app.modules.grade_level_fees.repository import GradeLevelFeeRepository
from app.modules.grade_level_fees.schemas import (
    GradeLevelFeeCreate,
    GradeLevelFeeResponse,
    GradeLevelFeeUpdate,
)
from app.modules.shared import money_amount

logger = logging.getLogger(__name__)


class GradeLevelFeeServiceError(Exception):
    """Base exception for grade level fee service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class GradeLevelFeeNotFoundError(GradeLevelFeeServiceError):
    def __init__(self, fee_id: UUID | None = None):
        message = f"Grade level fee {fee_id} not found" if fee_id else "Grade level fee not found"
        super().__init__(message=message, error_code="GRADE_LEVEL_FEE_NOT_FOUND", status_code=404)


class DuplicateGradeLevelFeeError(GradeLevelFeeServiceError):
    def __init__(self, grade_level: GradeLevel):
        super().__init__(
            message=f"Fees for {grade_level.label} already exist in this enrollment period",
            error_code="DUPLICATE_GRADE_LEVEL_FEE",
            status_code=409,
        )


class FeePeriodNotFoundError(GradeLevelFeeServiceError):
    def __init__(self, period_id: UUID):
        super().__init__(
            message=f"Enrollment period {period_id} not found",
            error_code="ENROLLMENT_PERIOD_NOT_FOUND",
            status_code=404,
        )


def to_response(
    fee: GradeLevelFee,
    money: MoneyFormatter | None = None,
) -> GradeLevelFeeResponse:
    """Build the API response, converting every cents column."""
    money = money or get_money_formatter()
    amounts = {name: money_amount(getattr(fee, f"{name}_cents"), money) for name in FEE_COMPONENTS}

    return GradeLevelFeeResponse(
        id=fee.id,
        enrollment_period_id=fee.enrollment_period_id,
        grade_level=fee.grade_level,
        grade_level_label=fee.grade_level.label,
        total_fee=money_amount(fee.total_fee_cents, money),
        is_active=fee.is_active,
        created_at=fee.created_at,
        updated_at=fee.updated_at,
        **amounts,
    )


async def create_fee(
    db: AsyncSession,
    data: GradeLevelFeeCreate,
    money: MoneyFormatter | None = None,
) -> GradeLevelFee:
    """
    Create fees for a grade in a period.

    Raises:
        FeePeriodNotFoundError: If the period does not exist
        DuplicateGradeLevelFeeError: If the grade already has fees in the period
    """
    money = money or get_money_formatter()

    if not await period_repository.get_by_id(db, data.enrollment_period_id):
        raise FeePeriodNotFoundError(data.enrollment_period_id)

    existing = await GradeLevelFeeRepository.get_by_period_and_grade(
        db, data.enrollment_period_id, data.grade_level
    )
    if existing:
        raise DuplicateGradeLevelFeeError(data.grade_level)

    cents = {f"{name}_cents": money.from_decimal(getattr(data, name)) for name in FEE_COMPONENTS}

    return await GradeLevelFeeRepository.create(
        db,
        enrollment_period_id=data.enrollment_period_id,
        grade_level=data.grade_level,
        is_active=data.is_active,
        **cents,
    )


async def get_fee(db: AsyncSession, fee_id: UUID) -> GradeLevelFee:
    fee = await GradeLevelFeeRepository.get_by_id(db, fee_id)
    if not fee:
        raise GradeLevelFeeNotFoundError(fee_id)
    return fee


async def list_fees(
    db: AsyncSession,
    enrollment_period_id: UUID | None = None,
) -> list[GradeLevelFee]:
    return await GradeLevelFeeRepository.list_fees(db, enrollment_period_id)


async def get_fee_for_grade(
    db: AsyncSession,
    enrollment_period_id: UUID,
    grade_level: GradeLevel,
) -> GradeLevelFee | None:
    """Active fee schedule for a grade in a period, if configured."""
    return await GradeLevelFeeRepository.get_by_period_and_grade(
        db, enrollment_period_id, grade_level, active_only=True
    )


async def update_fee(
    db: AsyncSession,
    fee_id: UUID,
    data: GradeLevelFeeUpdate,
    money: MoneyFormatter | None = None,
) -> GradeLevelFee:
    """
    Apply a partial update. Tuition cannot be cleared; other components can.

    Raises:
        GradeLevelFeeNotFoundError: If the fee does not exist
    """
    money = money or get_money_formatter()
    fee = await get_fee(db, fee_id)

    changes = {}
    for name, value in data.model_dump(exclude_unset=True).items():
        if name == "is_active":
            if value is not None:
                changes["is_active"] = value
        elif name == "tuition_fee" and value is None:
            continue
        else:
            changes[f"{name}_cents"] = money.from_decimal(value)

    fee = await GradeLevelFeeRepository.update(db, fee, **changes)
    logger.info(f"Updated grade level fee {fee.id}: {sorted(changes)}")
    return fee
