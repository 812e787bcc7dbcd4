"""
Fixtures for enrollments tests.
"""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.money import CurrencyFormat, MoneyFormatter
from app.modules.enrollment_periods.models import EnrollmentPeriod, EnrollmentPeriodStatus
from app.modules.enrollments.models import Enrollment, EnrollmentStatus, PaymentStatus
from app.modules.enrollments.schemas import EnrollmentCreate
from app.modules.grade_level_fees.models import GradeLevel, GradeLevelFee


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def money():
    return MoneyFormatter(CurrencyFormat())


@pytest.fixture
def active_period():
    """Active June 2025 period accepting new and returning students."""
    now = datetime.now(UTC)
    return EnrollmentPeriod(
        id=uuid4(),
        school_year="2025-2026",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 30),
        regular_registration_deadline=date(2025, 6, 15),
        status=EnrollmentPeriodStatus.ACTIVE,
        allow_new_students=True,
        allow_returning_students=True,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def grade_1_fee(active_period):
    return GradeLevelFee(
        id=uuid4(),
        enrollment_period_id=active_period.id,
        grade_level=GradeLevel.GRADE_1,
        tuition_fee_cents=1250000,
        registration_fee_cents=150000,
        is_active=True,
    )


@pytest.fixture
def enrollment_create():
    return EnrollmentCreate(
        student_name="  Maria Santos ",
        is_returning_student=False,
        grade_level=GradeLevel.GRADE_1,
        guardian_name="Ana Santos",
        guardian_email="ana.santos@example.com",
    )


@pytest.fixture
def make_enrollment(active_period):
    """Factory for enrollment models owing 14,000.00 by default."""

    def _make(**overrides) -> Enrollment:
        now = datetime.now(UTC)
        fields = {
            "id": uuid4(),
            "enrollment_period_id": active_period.id,
            "student_name": "Maria Santos",
            "is_returning_student": False,
            "grade_level": GradeLevel.GRADE_1,
            "guardian_name": "Ana Santos",
            "guardian_email": "ana.santos@example.com",
            "status": EnrollmentStatus.PENDING,
            "payment_status": PaymentStatus.PENDING,
            "net_amount_cents": 1400000,
            "amount_paid_cents": 0,
            "balance_cents": 1400000,
            "payment_due_date": date(2025, 6, 15),
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return Enrollment(**fields)

    return _make


@pytest.fixture
def mock_session_maker(mock_db):
    """Stand-in for async_session_maker yielding mock_db."""
    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=mock_db)
    session_cm.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session_cm)
