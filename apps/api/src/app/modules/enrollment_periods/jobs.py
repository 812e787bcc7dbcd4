"""
Enrollment Period Background Jobs

Keeps the persisted period status in line with the calendar:
1. Activate upcoming periods whose window contains today
2. Close active periods whose end date has passed
3. Notify administrators when anything changed

Design Principles:
- Idempotent: a period that was already moved is not selected again
- Each period is processed in its own session; one failure doesn't stop the job
- dry_run reports what would change without writing or emailing
"""

import logging
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.database import async_session_maker
from app.core.email import send_enrollment_period_status_changed
from app.core.scheduler import register_job
from app.modules.enrollment_periods import repository
from app.modules.enrollment_periods.models import EnrollmentPeriod, EnrollmentPeriodStatus
from app.modules.shared import local_today

logger = logging.getLogger(__name__)

JOB_ID_UPDATE_STATUSES = "enrollment_periods_update_statuses"


def _describe(period: EnrollmentPeriod) -> dict[str, Any]:
    return {
        "period_id": str(period.id),
        "school_year": period.school_year,
        "previous_status": period.status.value,
    }


async def _set_status(period_id: UUID, status: EnrollmentPeriodStatus) -> None:
    async with async_session_maker() as db:
        period = await repository.get_by_id(db, period_id)
        if period is None:
            raise ValueError(f"Enrollment period {period_id} disappeared")
        if period.status != status:
            await repository.update_status(db, period, status)


async def _apply(
    periods: list[EnrollmentPeriod],
    status: EnrollmentPeriodStatus,
    dry_run: bool,
    results: list[dict[str, Any]],
) -> tuple[int, int]:
    """Move each period to status. Returns (changed, errors)."""
    changed = errors = 0

    for period in periods:
        entry = _describe(period)
        try:
            if not dry_run:
                await _set_status(period.id, status)
            entry["status"] = f"would_{status.value}" if dry_run else status.value
            changed += 1
            logger.info(
                f"{'[DRY RUN] ' if dry_run else ''}Enrollment period {period.id} "
                f"({period.school_year}) -> {status.value}"
            )
        except Exception as e:
            logger.error(
                f"Error moving enrollment period {period.id} to {status.value}: {e}",
                exc_info=True,
            )
            entry.update({"status": "error", "error": str(e)})
            errors += 1
        results.append(entry)

    return changed, errors


async def _notify_admins(activated: int, closed: int) -> int:
    """Email every configured administrator. Returns the number of emails sent."""
    recipients = settings.admin_notification_emails_list
    if not recipients:
        logger.info("No admin_notification_emails configured, skipping notifications")
        return 0

    sent = 0
    for email in recipients:
        if await send_enrollment_period_status_changed(email, activated=activated, closed=closed):
            sent += 1
        else:
            logger.error(f"Failed to send period status notification to {email}")
    return sent


async def update_enrollment_period_statuses(
    dry_run: bool = False,
    notify: bool = True,
    today: date | None = None,
) -> dict[str, Any]:
    """
    Activate and close enrollment periods based on today's date.

    Args:
        dry_run: Report changes without applying them
        notify: Email administrators when something changed
        today: Calendar date to evaluate (defaults to today in settings.timezone)

    Returns:
        Dict with executed_at, today, activated/closed entries, totals
        and the number of notifications sent
    """
    today = today or local_today()
    results: dict[str, Any] = {
        "executed_at": datetime.now(UTC).isoformat(),
        "today": today.isoformat(),
        "dry_run": dry_run,
        "activated": [],
        "closed": [],
        "total_activated": 0,
        "total_closed": 0,
        "total_errors": 0,
        "notifications_sent": 0,
    }

    logger.info(f"Starting enrollment period status job for {today.isoformat()}")

    async with async_session_maker() as db:
        to_activate = await repository.get_upcoming_to_activate(db, today)

    activated, errors = await _apply(
        to_activate, EnrollmentPeriodStatus.ACTIVE, dry_run, results["activated"]
    )
    results["total_activated"] = activated
    results["total_errors"] += errors

    async with async_session_maker() as db:
        to_close = await repository.get_active_to_close(db, today)

    closed, errors = await _apply(to_close, EnrollmentPeriodStatus.CLOSED, dry_run, results["closed"])
    results["total_closed"] = closed
    results["total_errors"] += errors

    if not activated and not closed:
        logger.info("No enrollment period status changes needed")
    elif notify and not dry_run:
        results["notifications_sent"] = await _notify_admins(activated, closed)

    logger.info(
        f"Enrollment period status job completed. Activated: {activated}, "
        f"Closed: {closed}, Errors: {results['total_errors']}"
    )
    return results


def register_enrollment_period_jobs() -> None:
    """
    Register enrollment period jobs with the scheduler.

    The status job runs hourly so a period opens or closes within an hour of
    midnight in the configured time zone.
    """
    register_job(
        job_id=JOB_ID_UPDATE_STATUSES,
        func=update_enrollment_period_statuses,
        trigger=IntervalTrigger(hours=1),
    )
    logger.info(f"Registered job: {JOB_ID_UPDATE_STATUSES} (interval: 1 hour)")
