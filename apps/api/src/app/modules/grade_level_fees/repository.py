"""
Grade Level Fee Repository

Database operations for grade level fees. Amounts arrive already in cents.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.grade_level_fees.models import GradeLevel, GradeLevelFee

logger = logging.getLogger(__name__)


class GradeLevelFeeRepository:
    """Repository for grade level fee database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        enrollment_period_id: UUID,
        grade_level: GradeLevel,
        tuition_fee_cents: int,
        registration_fee_cents: int | None = None,
        miscellaneous_fee_cents: int | None = None,
        laboratory_fee_cents: int | None = None,
        library_fee_cents: int | None = None,
        sports_fee_cents: int | None = None,
        is_active: bool = True,
    ) -> GradeLevelFee:
        """Create a new fee schedule row."""
        fee = GradeLevelFee(
            enrollment_period_id=enrollment_period_id,
            grade_level=grade_level,
            tuition_fee_cents=tuition_fee_cents,
            registration_fee_cents=registration_fee_cents,
            miscellaneous_fee_cents=miscellaneous_fee_cents,
            laboratory_fee_cents=laboratory_fee_cents,
            library_fee_cents=library_fee_cents,
            sports_fee_cents=sports_fee_cents,
            is_active=is_active,
        )
        db.add(fee)
        await db.commit()
        await db.refresh(fee)

        logger.info(f"Created grade level fee {fee.id} ({grade_level.value})")
        return fee

    @staticmethod
    async def get_by_id(db: AsyncSession, fee_id: UUID) -> GradeLevelFee | None:
        return await db.get(GradeLevelFee, fee_id)

    @staticmethod
    async def get_by_period_and_grade(
        db: AsyncSession,
        enrollment_period_id: UUID,
        grade_level: GradeLevel,
        active_only: bool = False,
    ) -> GradeLevelFee | None:
        query = select(GradeLevelFee).where(
            GradeLevelFee.enrollment_period_id == enrollment_period_id,
            GradeLevelFee.grade_level == grade_level,
        )
        if active_only:
            query = query.where(GradeLevelFee.is_active == True)  # noqa: E712

        result = await db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_fees(
        db: AsyncSession,
        enrollment_period_id: UUID | None = None,
    ) -> list[GradeLevelFee]:
        query = select(GradeLevelFee).order_by(
            GradeLevelFee.enrollment_period_id, GradeLevelFee.grade_level
        )
        if enrollment_period_id is not None:
            query = query.where(GradeLevelFee.enrollment_period_id == enrollment_period_id)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update(db: AsyncSession, fee: GradeLevelFee, **fields) -> GradeLevelFee:
        for name, value in fields.items():
            setattr(fee, name, value)

        await db.commit()
        await db.refresh(fee)
        return fee
