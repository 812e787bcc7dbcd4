"""
Unit tests for enrollments service layer.

These tests cover:
- Enrollment submission (closed, ineligible, duplicate, missing fees)
- Status review transitions and decision emails
- Payment recording and balance tracking
"""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from app.modules.enrollments.helpers import MAX_STORED_CENTS
from app.modules.enrollments.models import EnrollmentStatus, PaymentStatus
from app.modules.enrollments.schemas import EnrollmentCreate
from app.modules.enrollments.service import (
    DuplicateEnrollmentError,
    EnrollmentClosedError,
    EnrollmentNotEligibleError,
    EnrollmentNotFoundError,
    FeeNotConfiguredError,
    InvalidEnrollmentStatusError,
    InvalidPaymentError,
    check_enrollment_eligibility,
    record_payment,
    set_payment_due_date,
    submit_enrollment,
    to_response,
    update_status,
)

SERVICE = "app.modules.enrollments.service"
OPEN_DAY = date(2025, 6, 10)


class TestSubmitEnrollment:
    """Tests for submit_enrollment."""

    @pytest.mark.asyncio
    async def test_success(self, mock_db, money, active_period, grade_1_fee, enrollment_create):
        with (
            patch(f"{SERVICE}.period_repository") as mock_periods,
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.fee_service") as mock_fees,
            patch(f"{SERVICE}.send_enrollment_submitted", new_callable=AsyncMock) as mock_email,
        ):
            mock_periods.get_active = AsyncMock(return_value=active_period)
            mock_repo.find_open_duplicate = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(side_effect=lambda db, enrollment: enrollment)
            mock_fees.get_fee_for_grade = AsyncMock(return_value=grade_1_fee)
            mock_email.return_value = True

            result = await submit_enrollment(mock_db, enrollment_create, OPEN_DAY, money)

            assert result.student_name == "Maria Santos"
            assert result.status == EnrollmentStatus.PENDING
            assert result.payment_status == PaymentStatus.PENDING
            assert result.net_amount_cents == 1400000
            assert result.balance_cents == 1400000
            assert result.amount_paid_cents == 0
            assert result.payment_due_date == date(2025, 6, 15)
            assert result.enrollment_period_id == active_period.id

            mock_email.assert_called_once()
            assert mock_email.call_args.kwargs["amount_due"] == "₱14,000.00"
            assert mock_email.call_args.kwargs["school_year"] == "2025-2026"

    @pytest.mark.asyncio
    async def test_guardian_cannot_choose_due_date(
        self, mock_db, money, active_period, grade_1_fee, enrollment_create
    ):
        data = EnrollmentCreate.model_validate(
            {**enrollment_create.model_dump(), "payment_due_date": "2026-12-31"}
        )
        with (
            patch(f"{SERVICE}.period_repository") as mock_periods,
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.fee_service") as mock_fees,
            patch(f"{SERVICE}.send_enrollment_submitted", new_callable=AsyncMock),
        ):
            mock_periods.get_active = AsyncMock(return_value=active_period)
            mock_repo.find_open_duplicate = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(side_effect=lambda db, enrollment: enrollment)
            mock_fees.get_fee_for_grade = AsyncMock(return_value=grade_1_fee)

            result = await submit_enrollment(mock_db, data, OPEN_DAY, money)

            assert result.payment_due_date == date(2025, 6, 15)

    @pytest.mark.asyncio
    async def test_no_active_period(self, mock_db, money, enrollment_create):
        with patch(f"{SERVICE}.period_repository") as mock_periods:
            mock_periods.get_active = AsyncMock(return_value=None)

            with pytest.raises(EnrollmentClosedError) as exc_info:
                await submit_enrollment(mock_db, enrollment_create, OPEN_DAY, money)

            assert exc_info.value.message == (
                "Enrollment is currently closed. No active enrollment period available."
            )
            assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_window_already_ended(self, mock_db, money, active_period, enrollment_create):
        with (
            patch(f"{SERVICE}.period_repository") as mock_periods,
            patch(f"{SERVICE}.repository") as mock_repo,
        ):
            mock_periods.get_active = AsyncMock(return_value=active_period)
            mock_repo.create = AsyncMock()

            with pytest.raises(EnrollmentNotEligibleError) as exc_info:
                await submit_enrollment(mock_db, enrollment_create, date(2025, 7, 1), money)

            assert exc_info.value.errors == ["Enrollment period is not currently open."]
            mock_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_new_students_not_accepted(
        self, mock_db, money, active_period, enrollment_create
    ):
        active_period.allow_new_students = False
        with patch(f"{SERVICE}.period_repository") as mock_periods:
            mock_periods.get_active = AsyncMock(return_value=active_period)

            with pytest.raises(EnrollmentNotEligibleError) as exc_info:
                await submit_enrollment(mock_db, enrollment_create, OPEN_DAY, money)

            assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_rejected(
        self, mock_db, money, active_period, enrollment_create, make_enrollment
    ):
        with (
            patch(f"{SERVICE}.period_repository") as mock_periods,
            patch(f"{SERVICE}.repository") as mock_repo,
        ):
            mock_periods.get_active = AsyncMock(return_value=active_period)
            mock_repo.find_open_duplicate = AsyncMock(return_value=make_enrollment())

            with pytest.raises(DuplicateEnrollmentError):
                await submit_enrollment(mock_db, enrollment_create, OPEN_DAY, money)

            mock_repo.find_open_duplicate.assert_called_once_with(
                mock_db, active_period.id, "Maria Santos", "ana.santos@example.com"
            )

    @pytest.mark.asyncio
    async def test_fee_not_configured(self, mock_db, money, active_period, enrollment_create):
        with (
            patch(f"{SERVICE}.period_repository") as mock_periods,
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.fee_service") as mock_fees,
        ):
            mock_periods.get_active = AsyncMock(return_value=active_period)
            mock_repo.find_open_duplicate = AsyncMock(return_value=None)
            mock_fees.get_fee_for_grade = AsyncMock(return_value=None)

            with pytest.raises(FeeNotConfiguredError) as exc_info:
                await submit_enrollment(mock_db, enrollment_create, OPEN_DAY, money)

            assert "Grade 1" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_submission(
        self, mock_db, money, active_period, grade_1_fee, enrollment_create
    ):
        with (
            patch(f"{SERVICE}.period_repository") as mock_periods,
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.fee_service") as mock_fees,
            patch(f"{SERVICE}.send_enrollment_submitted", new_callable=AsyncMock) as mock_email,
        ):
            mock_periods.get_active = AsyncMock(return_value=active_period)
            mock_repo.find_open_duplicate = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(side_effect=lambda db, enrollment: enrollment)
            mock_fees.get_fee_for_grade = AsyncMock(return_value=grade_1_fee)
            mock_email.side_effect = RuntimeError("Resend unavailable")

            result = await submit_enrollment(mock_db, enrollment_create, OPEN_DAY, money)

            assert result.status == EnrollmentStatus.PENDING


class TestCheckEnrollmentEligibility:
    """Tests for check_enrollment_eligibility."""

    @pytest.mark.asyncio
    async def test_no_active_period(self, mock_db):
        with patch(f"{SERVICE}.period_repository") as mock_periods:
            mock_periods.get_active = AsyncMock(return_value=None)

            errors = await check_enrollment_eligibility(mock_db, False, OPEN_DAY)

            assert errors == [
                "Enrollment is currently closed. No active enrollment period available."
            ]

    @pytest.mark.asyncio
    async def test_eligible(self, mock_db, active_period):
        with patch(f"{SERVICE}.period_repository") as mock_periods:
            mock_periods.get_active = AsyncMock(return_value=active_period)

            assert await check_enrollment_eligibility(mock_db, True, OPEN_DAY) == []


class TestUpdateStatus:
    """Tests for update_status."""

    @pytest.mark.asyncio
    async def test_approve_sends_decision(self, mock_db, make_enrollment):
        enrollment = make_enrollment()
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_enrollment_decision", new_callable=AsyncMock) as mock_email,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock(side_effect=lambda db, e: e)

            result = await update_status(mock_db, enrollment.id, EnrollmentStatus.APPROVED)

            assert result.status == EnrollmentStatus.APPROVED
            assert mock_email.call_args.kwargs["approved"] is True

    @pytest.mark.asyncio
    async def test_reject_sends_reason(self, mock_db, make_enrollment):
        enrollment = make_enrollment()
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_enrollment_decision", new_callable=AsyncMock) as mock_email,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock(side_effect=lambda db, e: e)

            await update_status(
                mock_db, enrollment.id, EnrollmentStatus.REJECTED, reason="Grade level is full"
            )

            assert mock_email.call_args.kwargs["approved"] is False
            assert mock_email.call_args.kwargs["reason"] == "Grade level is full"

    @pytest.mark.asyncio
    async def test_enroll_approved_without_email(self, mock_db, make_enrollment):
        enrollment = make_enrollment(status=EnrollmentStatus.APPROVED)
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_enrollment_decision", new_callable=AsyncMock) as mock_email,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock(side_effect=lambda db, e: e)

            result = await update_status(mock_db, enrollment.id, EnrollmentStatus.ENROLLED)

            assert result.status == EnrollmentStatus.ENROLLED
            mock_email.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "current,new",
        [
            (EnrollmentStatus.PENDING, EnrollmentStatus.ENROLLED),
            (EnrollmentStatus.REJECTED, EnrollmentStatus.APPROVED),
            (EnrollmentStatus.ENROLLED, EnrollmentStatus.PENDING),
        ],
    )
    async def test_invalid_transitions(self, mock_db, make_enrollment, current, new):
        enrollment = make_enrollment(status=current)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock()

            with pytest.raises(InvalidEnrollmentStatusError):
                await update_status(mock_db, enrollment.id, new)

            mock_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(EnrollmentNotFoundError):
                await update_status(mock_db, uuid4(), EnrollmentStatus.APPROVED)


class TestRecordPayment:
    """Tests for record_payment."""

    @pytest.mark.asyncio
    async def test_partial_payment(self, mock_db, money, make_enrollment):
        enrollment = make_enrollment(status=EnrollmentStatus.ENROLLED)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock(side_effect=lambda db, e: e)

            result = await record_payment(mock_db, enrollment.id, Decimal("5000.509"), money)

            assert result.amount_paid_cents == 500050
            assert result.balance_cents == 1400000 - 500050
            assert result.payment_status == PaymentStatus.PARTIAL

    @pytest.mark.asyncio
    async def test_full_payment(self, mock_db, money, make_enrollment):
        enrollment = make_enrollment(
            status=EnrollmentStatus.ENROLLED, amount_paid_cents=400000, balance_cents=1000000
        )
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock(side_effect=lambda db, e: e)

            result = await record_payment(mock_db, enrollment.id, Decimal("10000"), money)

            assert result.balance_cents == 0
            assert result.payment_status == PaymentStatus.PAID

    @pytest.mark.asyncio
    async def test_overpayment_clamps_balance(self, mock_db, money, make_enrollment):
        enrollment = make_enrollment(status=EnrollmentStatus.APPROVED)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock(side_effect=lambda db, e: e)

            result = await record_payment(mock_db, enrollment.id, Decimal("20000"), money)

            assert result.amount_paid_cents == 2000000
            assert result.balance_cents == 0
            assert result.payment_status == PaymentStatus.PAID

    @pytest.mark.asyncio
    async def test_sub_cent_amount_rejected(self, mock_db, money, make_enrollment):
        enrollment = make_enrollment()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock()

            with pytest.raises(InvalidPaymentError):
                await record_payment(mock_db, enrollment.id, Decimal("0.009"), money)

            mock_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejected_enrollment_rejects_payment(self, mock_db, money, make_enrollment):
        enrollment = make_enrollment(status=EnrollmentStatus.REJECTED)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)

            with pytest.raises(InvalidPaymentError):
                await record_payment(mock_db, enrollment.id, Decimal("100"), money)

    @pytest.mark.asyncio
    async def test_total_beyond_storable_range_rejected(self, mock_db, money, make_enrollment):
        enrollment = make_enrollment(
            status=EnrollmentStatus.ENROLLED, amount_paid_cents=MAX_STORED_CENTS - 100
        )
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock()

            with pytest.raises(InvalidPaymentError) as exc_info:
                await record_payment(mock_db, enrollment.id, Decimal("1.01"), money)

            assert "maximum" in exc_info.value.message
            assert enrollment.amount_paid_cents == MAX_STORED_CENTS - 100
            mock_repo.save.assert_not_called()


class TestSetPaymentDueDate:
    """Tests for set_payment_due_date."""

    @pytest.mark.asyncio
    async def test_moves_due_date(self, mock_db, make_enrollment):
        enrollment = make_enrollment(status=EnrollmentStatus.ENROLLED)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)
            mock_repo.save = AsyncMock(side_effect=lambda db, e: e)

            result = await set_payment_due_date(mock_db, enrollment.id, date(2025, 7, 15))

            assert result.payment_due_date == date(2025, 7, 15)
            mock_repo.save.assert_called_once()

    @pytest.mark.asyncio
    async def test_rejected_enrollment_rejected(self, mock_db, make_enrollment):
        enrollment = make_enrollment(status=EnrollmentStatus.REJECTED)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=enrollment)

            with pytest.raises(InvalidPaymentError):
                await set_payment_due_date(mock_db, enrollment.id, date(2025, 7, 15))

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(EnrollmentNotFoundError):
                await set_payment_due_date(mock_db, uuid4(), date(2025, 7, 15))


class TestToResponse:
    """Tests for to_response."""

    def test_amounts_formatted(self, money, make_enrollment):
        enrollment = make_enrollment(amount_paid_cents=500050, balance_cents=899950)

        result = to_response(enrollment, money)

        assert result.net_amount.formatted == "₱14,000.00"
        assert result.amount_paid.amount == Decimal("5000.50")
        assert result.balance.formatted == "₱8,999.50"
        assert result.grade_level_label == "Grade 1"
