"""
Email Service using Resend

Transactional emails for the enrollment workflow:
- Enrollment submitted / approved / rejected (guardian)
- Payment reminders and overdue notices (guardian)
- Enrollment period status changes (administrators)

When RESEND_API_KEY is not configured, emails are logged instead of sent.
"""

import asyncio
import logging
from html import escape

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key

_BASE_STYLE = """
            body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
            .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
            .header { color: #1e3a8a; margin-bottom: 24px; }
            .button { display: inline-block; background-color: #1e3a8a; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }
            .highlight { background-color: #fef3c7; border-left: 4px solid #f59e0b; padding: 16px; margin: 16px 0; }
            .summary-box { background-color: #f9fafb; border: 1px solid #e5e7eb; padding: 16px; border-radius: 8px; margin: 16px 0; }
            .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
"""


def _render(title: str, body: str) -> str:
    """Wrap pre-escaped body HTML in the shared email layout."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>{_BASE_STYLE}</style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>
            {body}
            <div class="footer">
                <p>This is an automated message from the school enrollment office.</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Returns:
        True if the email was sent (or logged when no API key is configured)
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's client is synchronous
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_enrollment_submitted(
    to_email: str,
    guardian_name: str,
    student_name: str,
    school_year: str,
    amount_due: str,
) -> bool:
    """Confirm to the guardian that an enrollment was received."""
    safe_guardian = escape(guardian_name)
    safe_student = escape(student_name)
    safe_year = escape(school_year)

    body = f"""
            <p>Hello {safe_guardian},</p>
            <p>We received the enrollment application for <strong>{safe_student}</strong>
            for school year <strong>{safe_year}</strong>. Our registrar will review it shortly.</p>
            <div class="summary-box">
                <p><strong>Assessed fees:</strong> {escape(amount_due)}</p>
            </div>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Enrollment received for {safe_student}",
        html_content=_render("Enrollment Received", body),
    )


async def send_enrollment_decision(
    to_email: str,
    guardian_name: str,
    student_name: str,
    approved: bool,
    reason: str | None = None,
) -> bool:
    """Notify the guardian that an enrollment was approved or rejected."""
    safe_guardian = escape(guardian_name)
    safe_student = escape(student_name)
    decision = "approved" if approved else "rejected"

    body = f"""
            <p>Hello {safe_guardian},</p>
            <p>The enrollment application for <strong>{safe_student}</strong> has been
            <strong>{decision}</strong>.</p>
    """
    if reason:
        body += f'<div class="highlight"><p>{escape(reason)}</p></div>'
    if approved:
        body += f'<a href="{settings.frontend_url}/guardian/billing" class="button">View Billing</a>'

    return await send_email(
        to_email=to_email,
        subject=f"Enrollment {decision} for {safe_student}",
        html_content=_render(f"Enrollment {decision.capitalize()}", body),
    )


async def send_payment_reminder(
    to_email: str,
    guardian_name: str,
    student_name: str,
    balance: str,
    due_date: str,
    days_until_due: int,
) -> bool:
    """Remind the guardian of an upcoming payment."""
    safe_guardian = escape(guardian_name)
    safe_student = escape(student_name)
    day_word = "day" if days_until_due == 1 else "days"

    body = f"""
            <p>Hello {safe_guardian},</p>
            <p>This is a friendly reminder that a payment for <strong>{safe_student}</strong>
            is due in <strong>{days_until_due} {day_word}</strong>.</p>
            <div class="highlight">
                <p><strong>Outstanding balance:</strong> {escape(balance)}</p>
                <p><strong>Due date:</strong> {escape(due_date)}</p>
            </div>
            <a href="{settings.frontend_url}/guardian/billing" class="button">View Billing</a>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Payment reminder for {safe_student}",
        html_content=_render("Payment Reminder", body),
    )


async def send_payment_overdue(
    to_email: str,
    guardian_name: str,
    student_name: str,
    balance: str,
    due_date: str,
    days_overdue: int,
) -> bool:
    """Notify the guardian that a payment is overdue."""
    safe_guardian = escape(guardian_name)
    safe_student = escape(student_name)

    if days_overdue == 0:
        when = "is due today"
    else:
        when = f"is {days_overdue} day{'s' if days_overdue != 1 else ''} overdue"

    body = f"""
            <p>Hello {safe_guardian},</p>
            <p>The payment for <strong>{safe_student}</strong> {when}.</p>
            <div class="highlight">
                <p><strong>Outstanding balance:</strong> {escape(balance)}</p>
                <p><strong>Due date:</strong> {escape(due_date)}</p>
            </div>
            <p>Please settle the balance or contact the registrar's office.</p>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Payment overdue for {safe_student}",
        html_content=_render("Payment Overdue", body),
    )


async def send_enrollment_period_status_changed(
    to_email: str,
    activated: int,
    closed: int,
) -> bool:
    """Tell an administrator that the status job activated or closed periods."""
    items = ""
    if activated:
        items += f"<li>{activated} period(s) activated</li>"
    if closed:
        items += f"<li>{closed} period(s) closed</li>"

    body = f"""
            <p>The scheduled status update changed the following enrollment periods:</p>
            <div class="summary-box"><ul>{items}</ul></div>
            <a href="{settings.frontend_url}/super-admin/enrollment-periods" class="button">Review Periods</a>
    """
    return await send_email(
        to_email=to_email,
        subject="Enrollment period status update",
        html_content=_render("Enrollment Period Status Update", body),
    )
