"""
Fixtures for grade level fees tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.money import CurrencyFormat, MoneyFormatter
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
def sample_fee():
    """Grade 1 fees: tuition, registration and miscellaneous set."""
    now = datetime.now(UTC)
    return GradeLevelFee(
        id=uuid4(),
        enrollment_period_id=uuid4(),
        grade_level=GradeLevel.GRADE_1,
        tuition_fee_cents=1250000,
        registration_fee_cents=150000,
        miscellaneous_fee_cents=325050,
        laboratory_fee_cents=None,
        library_fee_cents=None,
        sports_fee_cents=None,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
