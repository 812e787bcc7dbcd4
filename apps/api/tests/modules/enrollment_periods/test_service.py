"""
Unit tests for enrollment period service layer.

These tests cover:
- Window evaluation (summarize, accepting_enrollments)
- Partial updates with re-validated dates
- Activation and closing, including idempotency
"""

from datetime import date
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from app.modules.enrollment_periods.models import EnrollmentPeriodStatus
from app.modules.enrollment_periods.repository import InvalidStatusTransitionError
from app.modules.enrollment_periods.schemas import EnrollmentPeriodUpdate
from app.modules.enrollment_periods.service import (
    EnrollmentPeriodNotFoundError,
    InvalidEnrollmentPeriodError,
    InvalidEnrollmentPeriodStateError,
    accepting_enrollments,
    activate_period,
    close_period,
    get_period,
    summarize,
    update_period,
)
from app.modules.enrollment_periods.window import WindowPhase


class TestAcceptingEnrollments:
    """Tests for accepting_enrollments."""

    def test_active_and_inside_window(self, active_period):
        assert accepting_enrollments(active_period, date(2025, 6, 10))

    def test_active_but_past_end_date(self, active_period):
        assert not accepting_enrollments(active_period, date(2025, 7, 1))

    def test_inside_window_but_not_active(self, make_period):
        period = make_period(status=EnrollmentPeriodStatus.UPCOMING)
        assert not accepting_enrollments(period, date(2025, 6, 10))


class TestSummarize:
    """Tests for summarize."""

    def test_open_period(self, active_period):
        result = summarize(active_period, date(2025, 6, 28))

        assert result.id == active_period.id
        assert result.phase == WindowPhase.OPEN
        assert result.is_open is True
        assert result.days_remaining == 2
        assert result.next_deadline is None
        assert result.accepting_enrollments is True

    def test_closed_period(self, active_period):
        result = summarize(active_period, date(2025, 7, 5))

        assert result.phase == WindowPhase.CLOSED
        assert result.is_open is False
        assert result.days_remaining == 0
        assert result.accepting_enrollments is False

    def test_next_deadline(self, make_period):
        period = make_period(early_registration_deadline=date(2025, 6, 7))
        result = summarize(period, date(2025, 6, 8))
        assert result.next_deadline == date(2025, 6, 15)


class TestGetPeriod:
    """Tests for get_period."""

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db):
        with patch("app.modules.enrollment_periods.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(EnrollmentPeriodNotFoundError) as exc_info:
                await get_period(mock_db, uuid4())

            assert exc_info.value.status_code == 404


class TestUpdatePeriod:
    """Tests for update_period."""

    @pytest.mark.asyncio
    async def test_valid_update_applied(self, mock_db, make_period):
        period = make_period()
        with patch("app.modules.enrollment_periods.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=period)
            mock_repo.update_fields = AsyncMock(return_value=period)

            data = EnrollmentPeriodUpdate(end_date=date(2025, 7, 15), description=None)
            await update_period(mock_db, period.id, data)

            mock_repo.update_fields.assert_called_once_with(
                mock_db, period, end_date=date(2025, 7, 15), description=None
            )

    @pytest.mark.asyncio
    async def test_null_for_required_field_ignored(self, mock_db, make_period):
        period = make_period()
        with patch("app.modules.enrollment_periods.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=period)
            mock_repo.update_fields = AsyncMock(return_value=period)

            await update_period(mock_db, period.id, EnrollmentPeriodUpdate(start_date=None))

            mock_repo.update_fields.assert_called_once_with(mock_db, period)

    @pytest.mark.asyncio
    async def test_merged_dates_revalidated(self, mock_db, make_period):
        """Moving end_date before the stored regular deadline is rejected."""
        period = make_period()
        with patch("app.modules.enrollment_periods.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=period)
            mock_repo.update_fields = AsyncMock()

            with pytest.raises(InvalidEnrollmentPeriodError) as exc_info:
                await update_period(
                    mock_db, period.id, EnrollmentPeriodUpdate(end_date=date(2025, 6, 10))
                )

            assert exc_info.value.status_code == 422
            mock_repo.update_fields.assert_not_called()


class TestStatusChanges:
    """Tests for activate_period and close_period."""

    @pytest.mark.asyncio
    async def test_activate_upcoming_period(self, mock_db, make_period):
        period = make_period()
        with patch("app.modules.enrollment_periods.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=period)
            mock_repo.update_status = AsyncMock(return_value=period)

            await activate_period(mock_db, period.id)

            mock_repo.update_status.assert_called_once_with(
                mock_db, period, EnrollmentPeriodStatus.ACTIVE
            )

    @pytest.mark.asyncio
    async def test_activate_is_idempotent(self, mock_db, active_period):
        with patch("app.modules.enrollment_periods.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=active_period)
            mock_repo.update_status = AsyncMock()

            result = await activate_period(mock_db, active_period.id)

            assert result is active_period
            mock_repo.update_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, mock_db, make_period):
        period = make_period(status=EnrollmentPeriodStatus.CLOSED)
        with patch("app.modules.enrollment_periods.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=period)
            mock_repo.update_status = AsyncMock()

            await close_period(mock_db, period.id)

            mock_repo.update_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_transition_becomes_state_error(self, mock_db, make_period):
        period = make_period(status=EnrollmentPeriodStatus.ACTIVE)
        with patch("app.modules.enrollment_periods.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=period)
            mock_repo.update_status = AsyncMock(
                side_effect=InvalidStatusTransitionError(
                    EnrollmentPeriodStatus.ACTIVE, EnrollmentPeriodStatus.UPCOMING
                )
            )

            with pytest.raises(InvalidEnrollmentPeriodStateError) as exc_info:
                await close_period(mock_db, period.id)

            assert exc_info.value.status_code == 409
