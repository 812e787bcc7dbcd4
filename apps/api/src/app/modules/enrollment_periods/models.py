"""
Enrollment Period Models

One row per recruitment cycle (usually one per school year). The scheduled
status job moves periods from upcoming to active to closed; administrators
may also activate or close a period by hand.
"""

import enum
from datetime import date

from sqlalchemy import Boolean, Date, Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.enrollment_periods.window import EnrollmentWindow
from app.modules.shared import BaseModel


class EnrollmentPeriodStatus(str, enum.Enum):
    """Persisted status of an enrollment period."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    CLOSED = "closed"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class EnrollmentPeriod(BaseModel):
    """
    Enrollment period (recruitment cycle).

    Dates are plain calendar dates. The date consistency rules live in
    EnrollmentWindow; call window() to evaluate them.
    """

    __tablename__ = "enrollment_periods"

    school_year: Mapped[str] = mapped_column(String(9), nullable=False)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    early_registration_deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    regular_registration_deadline: Mapped[date] = mapped_column(Date, nullable=False)
    late_registration_deadline: Mapped[date | None] = mapped_column(Date, nullable=True)

    status: Mapped[EnrollmentPeriodStatus] = mapped_column(
        Enum(EnrollmentPeriodStatus, name="enrollment_period_status"),
        nullable=False,
        default=EnrollmentPeriodStatus.UPCOMING,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    allow_new_students: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allow_returning_students: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_enrollment_periods_status", "status"),
        Index("ix_enrollment_periods_school_year", "school_year"),
    )

    def window(self) -> EnrollmentWindow:
        """
        Build the window value for this period.

        Raises:
            InvalidWindow: If the stored dates are inconsistent
        """
        return EnrollmentWindow(
            start_date=self.start_date,
            end_date=self.end_date,
            regular_deadline=self.regular_registration_deadline,
            early_deadline=self.early_registration_deadline,
            late_deadline=self.late_registration_deadline,
            allow_new_students=self.allow_new_students,
            allow_returning_students=self.allow_returning_students,
        )

    def __repr__(self) -> str:
        return (
            f"<EnrollmentPeriod(id={self.id}, school_year={self.school_year}, "
            f"status={self.status.value})>"
        )
