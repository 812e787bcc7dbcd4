"""
Enrollment Background Jobs

Daily payment reminders for enrolled students with an outstanding balance:
- 7, 3 and 1 day(s) before the due date
- On the due date, and 7 and 30 days after it

Design Principles:
- Idempotent: a reminder type is sent at most once per enrollment per day
- Each enrollment is processed in its own session; one failure doesn't stop the job
- The reminder row is recorded only after the email went out
"""

import logging
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

from apscheduler.triggers.cron import CronTrigger

from app.core.config import settings
from app.core.database import async_session_maker
from app.core.email import send_payment_overdue, send_payment_reminder
from app.core.money import MoneyFormatter, get_money_formatter
from app.core.scheduler import register_job
from app.modules.enrollments import repository
from app.modules.enrollments.helpers import determine_reminder_type
from app.modules.enrollments.models import Enrollment, ReminderType
from app.modules.shared import local_today

logger = logging.getLogger(__name__)

JOB_ID_PAYMENT_REMINDERS = "enrollments_payment_reminders"


async def _send(
    enrollment: Enrollment,
    reminder_type: ReminderType,
    days_until_due: int,
    money: MoneyFormatter,
) -> bool:
    balance = money.format(enrollment.balance_cents)
    due_date = enrollment.payment_due_date.isoformat()

    if reminder_type.is_overdue:
        return await send_payment_overdue(
            to_email=enrollment.guardian_email,
            guardian_name=enrollment.guardian_name,
            student_name=enrollment.student_name,
            balance=balance,
            due_date=due_date,
            days_overdue=-days_until_due,
        )
    return await send_payment_reminder(
        to_email=enrollment.guardian_email,
        guardian_name=enrollment.guardian_name,
        student_name=enrollment.student_name,
        balance=balance,
        due_date=due_date,
        days_until_due=days_until_due,
    )


async def _process_enrollment(
    enrollment_id: UUID,
    today: date,
    dry_run: bool,
    money: MoneyFormatter,
) -> dict[str, Any] | None:
    """
    Send the reminder due today for one enrollment, if any.

    Returns:
        Result entry, or None when no reminder is due
    """
    async with async_session_maker() as db:
        enrollment = await repository.get_by_id(db, enrollment_id)
        if enrollment is None or enrollment.payment_due_date is None:
            return None

        days_until_due = (enrollment.payment_due_date - today).days
        reminder_type = determine_reminder_type(days_until_due)
        if reminder_type is None:
            return None

        entry = {
            "enrollment_id": str(enrollment.id),
            "reminder_type": reminder_type.value,
            "days_until_due": days_until_due,
        }

        if await repository.reminder_sent_on(
            db, enrollment.id, reminder_type, today, settings.timezone
        ):
            entry["status"] = "already_sent"
            return entry

        if dry_run:
            logger.info(
                f"[DRY RUN] Would send {reminder_type.value} reminder for enrollment {enrollment.id}"
            )
            entry["status"] = "would_send"
            return entry

        if not await _send(enrollment, reminder_type, days_until_due, money):
            logger.error(f"Failed to send {reminder_type.value} reminder for enrollment {enrollment.id}")
            entry["status"] = "email_failed"
            return entry

        await repository.record_reminder(db, enrollment.id, reminder_type)
        logger.info(f"Sent {reminder_type.value} reminder for enrollment {enrollment.id}")
        entry["status"] = "sent"
        return entry


async def send_payment_reminders(
    dry_run: bool = False,
    today: date | None = None,
) -> dict[str, Any]:
    """
    Send payment reminders and overdue notices to guardians.

    Args:
        dry_run: Report what would be sent without emailing or recording
        today: Calendar date to evaluate (defaults to today in settings.timezone)

    Returns:
        Dict with executed_at, today, per-enrollment entries and totals
    """
    today = today or local_today()
    results: dict[str, Any] = {
        "executed_at": datetime.now(UTC).isoformat(),
        "today": today.isoformat(),
        "dry_run": dry_run,
        "enabled": settings.payment_reminders_enabled,
        "reminders": [],
        "total_sent": 0,
        "total_skipped": 0,
        "total_errors": 0,
    }

    if not settings.payment_reminders_enabled:
        logger.info("Payment reminders are disabled, skipping")
        return results

    logger.info(f"Starting payment reminder job for {today.isoformat()}")
    money = get_money_formatter()

    async with async_session_maker() as db:
        candidates = await repository.get_with_outstanding_balance(db)

    for enrollment in candidates:
        try:
            entry = await _process_enrollment(enrollment.id, today, dry_run, money)
        except Exception as e:
            logger.error(
                f"Error processing payment reminder for enrollment {enrollment.id}: {e}",
                exc_info=True,
            )
            results["reminders"].append(
                {"enrollment_id": str(enrollment.id), "status": "error", "error": str(e)}
            )
            results["total_errors"] += 1
            continue

        if entry is None:
            continue
        results["reminders"].append(entry)
        if entry["status"] in ("sent", "would_send"):
            results["total_sent"] += 1
        elif entry["status"] == "already_sent":
            results["total_skipped"] += 1
        else:
            results["total_errors"] += 1

    logger.info(
        f"Payment reminder job completed. Sent: {results['total_sent']}, "
        f"Skipped: {results['total_skipped']}, Errors: {results['total_errors']}"
    )
    return results


def register_enrollment_jobs() -> None:
    """Register enrollment jobs with the scheduler. Reminders go out daily at 08:00 local time."""
    register_job(
        job_id=JOB_ID_PAYMENT_REMINDERS,
        func=send_payment_reminders,
        trigger=CronTrigger(hour=8, minute=0, timezone=settings.timezone),
    )
    logger.info(f"Registered job: {JOB_ID_PAYMENT_REMINDERS} (daily at 08:00)")
