"""
Fixtures for enrollment periods tests.
"""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.modules.enrollment_periods.models import EnrollmentPeriod, EnrollmentPeriodStatus


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
def make_period():
    """Factory for enrollment period models (June 2025 cycle by default)."""

    def _make(**overrides) -> EnrollmentPeriod:
        now = datetime.now(UTC)
        fields = {
            "id": uuid4(),
            "school_year": "2025-2026",
            "start_date": date(2025, 6, 1),
            "end_date": date(2025, 6, 30),
            "early_registration_deadline": None,
            "regular_registration_deadline": date(2025, 6, 15),
            "late_registration_deadline": None,
            "status": EnrollmentPeriodStatus.UPCOMING,
            "description": None,
            "allow_new_students": True,
            "allow_returning_students": True,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return EnrollmentPeriod(**fields)

    return _make


@pytest.fixture
def active_period(make_period):
    return make_period(status=EnrollmentPeriodStatus.ACTIVE)


@pytest.fixture
def mock_session_maker(mock_db):
    """Stand-in for async_session_maker yielding mock_db."""
    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=mock_db)
    session_cm.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session_cm)
