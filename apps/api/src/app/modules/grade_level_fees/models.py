"""
Grade Level Fee Models

Fee schedule per grade level within an enrollment period. Every amount is
stored as integer minor units (cents); conversion to decimals and display
strings happens in the service layer via app.core.money.
"""

import enum
import uuid

from sqlalchemy import BigInteger, Boolean, Enum, ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.modules.enrollment_periods.models import EnrollmentPeriod
from app.modules.shared import BaseModel


class GradeLevel(str, enum.Enum):
    """Grade levels offered by the school, in order."""

    KINDER = "kinder"
    GRADE_1 = "grade_1"
    GRADE_2 = "grade_2"
    GRADE_3 = "grade_3"
    GRADE_4 = "grade_4"
    GRADE_5 = "grade_5"
    GRADE_6 = "grade_6"

    @property
    def label(self) -> str:
        if self is GradeLevel.KINDER:
            return "Kinder"
        return f"Grade {self.value.split('_')[1]}"


# Fee components, in display order. Each maps to a "<name>_cents" column.
FEE_COMPONENTS = (
    "tuition_fee",
    "registration_fee",
    "miscellaneous_fee",
    "laboratory_fee",
    "library_fee",
    "sports_fee",
)


class GradeLevelFee(BaseModel):
    """Fees for one grade level in one enrollment period."""

    __tablename__ = "grade_level_fees"

    enrollment_period_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("enrollment_periods.id", ondelete="CASCADE"),
        nullable=False,
    )
    grade_level: Mapped[GradeLevel] = mapped_column(
        Enum(GradeLevel, name="grade_level"), nullable=False
    )

    # Amounts in cents. Tuition is required; the rest are optional.
    tuition_fee_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    registration_fee_cents: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    miscellaneous_fee_cents: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    laboratory_fee_cents: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    library_fee_cents: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    sports_fee_cents: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    enrollment_period: Mapped[EnrollmentPeriod] = relationship(EnrollmentPeriod)

    __table_args__ = (
        UniqueConstraint(
            "enrollment_period_id", "grade_level", name="uq_grade_level_fees_period_grade"
        ),
        Index("ix_grade_level_fees_enrollment_period_id", "enrollment_period_id"),
    )

    @property
    def total_fee_cents(self) -> int:
        """Sum of every component that is set."""
        return sum(getattr(self, f"{name}_cents") or 0 for name in FEE_COMPONENTS)

    def __repr__(self) -> str:
        return (
            f"<GradeLevelFee(id={self.id}, grade_level={self.grade_level.value}, "
            f"total_fee_cents={self.total_fee_cents})>"
        )
