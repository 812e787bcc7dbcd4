"""
Enrollment Models

An enrollment is a guardian's request to enroll one student in an enrollment
period. Assessed fees, payments and the outstanding balance are stored in
cents.
"""

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import BigInteger, Boolean, Date, DateTime, Enum, ForeignKey, Index, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.grade_level_fees.models import GradeLevel
from app.modules.shared import BaseModel


class EnrollmentStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ENROLLED = "enrolled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class ReminderType(str, enum.Enum):
    """Payment reminder kinds, keyed by days until the due date."""

    UPCOMING_7DAYS = "upcoming_7days"
    UPCOMING_3DAYS = "upcoming_3days"
    UPCOMING_1DAY = "upcoming_1day"
    OVERDUE = "overdue"
    OVERDUE_7DAYS = "overdue_7days"
    OVERDUE_30DAYS = "overdue_30days"

    @property
    def is_overdue(self) -> bool:
        return self.value.startswith("overdue")


class Enrollment(BaseModel):
    """Enrollment of a student in an enrollment period."""

    __tablename__ = "enrollments"

    enrollment_period_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("enrollment_periods.id", ondelete="RESTRICT"),
        nullable=False,
    )

    student_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_returning_student: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    grade_level: Mapped[GradeLevel] = mapped_column(
        Enum(GradeLevel, name="grade_level"), nullable=False
    )

    guardian_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guardian_email: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[EnrollmentStatus] = mapped_column(
        Enum(EnrollmentStatus, name="enrollment_status"),
        nullable=False,
        default=EnrollmentStatus.PENDING,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status"),
        nullable=False,
        default=PaymentStatus.PENDING,
    )

    # Amounts in cents
    net_amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    amount_paid_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    balance_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    payment_due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        Index("ix_enrollments_enrollment_period_id", "enrollment_period_id"),
        Index("ix_enrollments_status", "status"),
        Index("ix_enrollments_guardian_email", "guardian_email"),
    )

    def __repr__(self) -> str:
        return (
            f"<Enrollment(id={self.id}, student_name={self.student_name}, "
            f"status={self.status.value}, balance_cents={self.balance_cents})>"
        )


class PaymentReminder(BaseModel):
    """Record of a payment reminder email, one row per send."""

    __tablename__ = "payment_reminders"

    enrollment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        nullable=False,
    )
    reminder_type: Mapped[ReminderType] = mapped_column(
        Enum(ReminderType, name="payment_reminder_type"), nullable=False
    )
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_payment_reminders_enrollment_type", "enrollment_id", "reminder_type"),
    )
