"""
Reviews Background Jobs

Scheduled tasks for the review SLA:
1. Remind reviewers whose assigned review is past its SLA

The job is idempotent: each overdue review is reminded once, tracked by
sla_reminder_sent_at. Individual failures are logged and don't stop the run.
It can also be triggered manually via the debug endpoints.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from unidoxia.core.database import async_session_maker
from unidoxia.core.email import send_overdue_review_reminder
from unidoxia.core.scheduler import register_job
from unidoxia.modules.applications.models import Application
from unidoxia.modules.reviews import repository
from unidoxia.modules.reviews.models import ApplicationReview, ReviewerProfile

logger = logging.getLogger(__name__)

JOB_ID_OVERDUE_REMINDERS = "reviews_send_overdue_reminders"


async def _process_overdue_review(
    review: ApplicationReview,
    application: Application,
    reviewer: ReviewerProfile,
) -> dict[str, Any]:
    email_sent = await send_overdue_review_reminder(
        to_email=reviewer.email,
        reviewer_name=reviewer.name,
        application_id=str(application.id),
        due_at=application.sla_due_at,
    )

    if not email_sent:
        logger.error(f"Failed to send overdue reminder for review {review.id}")

    # Marked even when the e-mail failed so the job doesn't retry every hour
    async with async_session_maker() as db:
        await repository.mark_reminder_sent(db, review.id)

    return {
        "review_id": str(review.id),
        "application_id": str(application.id),
        "reviewer_id": str(reviewer.id),
        "status": "sent" if email_sent else "marked_sent_email_failed",
    }


async def send_overdue_review_reminders() -> dict[str, Any]:
    """
    E-mail reviewers about pending reviews past their SLA.

    Returns:
        Dict with job execution summary:
        - executed_at: When the job ran
        - reminders: Per-review results
        - total_sent: Reminders processed
        - total_errors: Number of processing errors
    """
    executed_at = datetime.now(UTC)
    logger.info(f"Starting overdue review reminder job at {executed_at.isoformat()}")

    results: dict[str, Any] = {
        "executed_at": executed_at.isoformat(),
        "reminders": [],
        "total_sent": 0,
        "total_errors": 0,
    }

    async with async_session_maker() as db:
        overdue = await repository.get_overdue_pending_reviews(db, now=executed_at)

    logger.info(f"Found {len(overdue)} overdue reviews")

    for review, application, reviewer in overdue:
        try:
            result = await _process_overdue_review(review, application, reviewer)
            results["reminders"].append(result)
            results["total_sent"] += 1
        except Exception as e:
            logger.error(f"Error processing overdue review {review.id}: {e}", exc_info=True)
            results["reminders"].append(
                {
                    "review_id": str(review.id),
                    "status": "error",
                    "error": str(e),
                }
            )
            results["total_errors"] += 1

    logger.info(
        f"Overdue review reminder job completed. "
        f"Sent: {results['total_sent']}, Errors: {results['total_errors']}"
    )

    return results


def register_review_jobs() -> None:
    """Register review background jobs. Call before the scheduler starts."""
    register_job(
        job_id=JOB_ID_OVERDUE_REMINDERS,
        func=send_overdue_review_reminders,
        trigger=IntervalTrigger(hours=1),
    )
    logger.info(f"Registered job: {JOB_ID_OVERDUE_REMINDERS} (interval: 1 hour)")
