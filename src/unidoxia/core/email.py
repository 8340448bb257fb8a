"""
Email Service using Resend

Sends application status updates to students and overdue-review reminders
to reviewers.
"""

import asyncio
import logging
import os
from datetime import datetime
from html import escape

import resend

logger = logging.getLogger(__name__)

resend.api_key = os.getenv("RESEND_API_KEY")

EMAIL_FROM = os.getenv("EMAIL_FROM", "UniDoxia <info@unidoxia.com>")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

_BASE_STYLE = """
    body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
    .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
    .header { color: #1e3a8a; margin-bottom: 24px; }
    .button { display: inline-block; background-color: #1e3a8a; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }
    .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
"""


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Without RESEND_API_KEY the email is logged instead of sent.

    Returns:
        True if email was sent (or logged) successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": EMAIL_FROM,
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


def _wrap(title: str, body: str) -> str:
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
                <p>UniDoxia - Study Abroad Admissions</p>
            </div>
        </div>
    </body>
    </html>
    """


def _status_message(status: str, program: str, university: str) -> tuple[str, str]:
    """Return (subject, body) for a status update. Inputs must already be escaped."""
    messages = {
        "submitted": (
            f"Application Submitted: {program}",
            f"<p>Your application to <strong>{program}</strong> at <strong>{university}</strong> "
            "has been successfully submitted.</p>"
            "<p>Our team will verify your documents within 2-3 business days. "
            "Once verified, it will be forwarded to the university.</p>",
        ),
        "screening": (
            f"Application Under Review: {program}",
            f"<p>Your application to <strong>{program}</strong> is now under review by "
            f"<strong>{university}</strong>.</p>",
        ),
        "conditional_offer": (
            f"Conditional Offer: {program}",
            f"<p>Congratulations! You have received a <strong>Conditional Offer</strong> for "
            f"<strong>{program}</strong> at <strong>{university}</strong>.</p>"
            "<p>Please review the conditions in your dashboard to proceed.</p>",
        ),
        "unconditional_offer": (
            f"Unconditional Offer: {program}",
            f"<p>Congratulations! You have received an <strong>Unconditional Offer</strong> for "
            f"<strong>{program}</strong> at <strong>{university}</strong>.</p>",
        ),
        "cas_loa": (
            f"CAS / LOA Issued: {program}",
            f"<p>Your confirmation of acceptance for <strong>{program}</strong> has been issued. "
            "You can now proceed with your visa application.</p>",
        ),
        "rejected": (
            f"Update on your application to {program}",
            f"<p>There has been an update to your application for <strong>{program}</strong> at "
            f"<strong>{university}</strong>. Please check your dashboard for details.</p>",
        ),
        "withdrawn": (
            f"Application Withdrawn: {program}",
            f"<p>Your application to <strong>{program}</strong> at <strong>{university}</strong> "
            "has been withdrawn.</p>",
        ),
    }
    return messages.get(
        status,
        (
            f"Application Update: {program}",
            f"<p>The status of your application to <strong>{program}</strong> at "
            f"<strong>{university}</strong> has changed to "
            f"<strong>{status.replace('_', ' ')}</strong>.</p>",
        ),
    )


async def send_application_status_update(
    to_email: str,
    student_name: str,
    program_name: str,
    university_name: str,
    status: str,
    status_label: str,
) -> bool:
    """Notify a student that their application status changed."""
    safe_student_name = escape(student_name)
    subject, body = _status_message(status, escape(program_name), escape(university_name))

    dashboard_url = f"{FRONTEND_URL}/dashboard/applications"
    html_content = _wrap(
        escape(status_label),
        f"""
        <p>Hello {safe_student_name},</p>
        {body}
        <a href="{dashboard_url}" class="button">View Application</a>
        """,
    )
    return await send_email(to_email=to_email, subject=subject, html_content=html_content)


async def send_overdue_review_reminder(
    to_email: str,
    reviewer_name: str,
    application_id: str,
    due_at: datetime,
) -> bool:
    """Remind a reviewer that an assigned review has passed its SLA."""
    safe_reviewer_name = escape(reviewer_name)
    review_url = f"{FRONTEND_URL}/staff/applications/{application_id}"

    html_content = _wrap(
        "Review Overdue",
        f"""
        <p>Hello {safe_reviewer_name},</p>
        <p>The review assigned to you for application <strong>{application_id}</strong>
        was due at <strong>{due_at.strftime("%Y-%m-%d %H:%M UTC")}</strong>.</p>
        <a href="{review_url}" class="button">Open Review</a>
        """,
    )
    return await send_email(
        to_email=to_email,
        subject="Reminder: application review overdue",
        html_content=html_content,
    )
