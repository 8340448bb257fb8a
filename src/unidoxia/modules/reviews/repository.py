"""
Reviews Repository

Database operations for application reviews and reviewer profiles.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import and_, any_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.modules.applications.models import Application
from unidoxia.modules.reviews.models import (
    ApplicationReview,
    ReviewerProfile,
    ReviewState,
)


async def get_latest_review(db: AsyncSession, application_id: UUID) -> ApplicationReview | None:
    """Most recently created review for an application."""
    result = await db.execute(
        select(ApplicationReview)
        .where(ApplicationReview.application_id == application_id)
        .order_by(ApplicationReview.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_review(db: AsyncSession, application_id: UUID, **fields) -> ApplicationReview:
    review = ApplicationReview(application_id=application_id, **fields)
    db.add(review)
    await db.commit()
    await db.refresh(review)
    return review


async def update_review(
    db: AsyncSession, review: ApplicationReview, **fields
) -> ApplicationReview:
    for key, value in fields.items():
        setattr(review, key, value)
    await db.commit()
    await db.refresh(review)
    return review


# ============================================
# Reviewer assignment
# ============================================


async def find_available_reviewer(
    db: AsyncSession,
    country: str | None,
    discipline: str | None,
) -> ReviewerProfile | None:
    """
    Pick the least loaded reviewer with spare capacity.

    Reviewers whose country expertise includes the university country and whose
    programme expertise includes the discipline (or is empty) are preferred;
    otherwise any reviewer with capacity is chosen. The row is locked for the
    rest of the transaction.
    """
    has_capacity = ReviewerProfile.current_workload < ReviewerProfile.max_workload
    base = (
        select(ReviewerProfile)
        .order_by(ReviewerProfile.current_workload.asc(), ReviewerProfile.created_at.asc())
        .limit(1)
        .with_for_update(skip_locked=True)
    )

    if country:
        discipline_match = or_(
            ReviewerProfile.program_expertise.is_(None),
            func.cardinality(ReviewerProfile.program_expertise) == 0,
        )
        if discipline:
            discipline_match = or_(
                discipline == any_(ReviewerProfile.program_expertise),
                discipline_match,
            )

        result = await db.execute(
            base.where(
                and_(
                    has_capacity,
                    country == any_(ReviewerProfile.country_expertise),
                    discipline_match,
                )
            )
        )
        reviewer = result.scalar_one_or_none()
        if reviewer:
            return reviewer

    result = await db.execute(base.where(has_capacity))
    return result.scalar_one_or_none()


async def assign_reviewer(
    db: AsyncSession,
    application: Application,
    reviewer: ReviewerProfile,
    sla_due_at: datetime,
    stage: str,
) -> ApplicationReview:
    """
    Assign a reviewer in one transaction.

    Sets the application's reviewer and SLA, bumps the reviewer's workload and
    creates the pending review for the stage.
    """
    application.assigned_reviewer_id = reviewer.id
    application.sla_due_at = sla_due_at
    reviewer.current_workload = ReviewerProfile.current_workload + 1

    review = ApplicationReview(
        application_id=application.id,
        reviewer_id=reviewer.id,
        stage=stage,
        status=ReviewState.PENDING,
    )
    db.add(review)

    await db.commit()
    await db.refresh(application)
    await db.refresh(reviewer)

    return review


# ============================================
# Background Job Repository Methods
# ============================================


async def get_overdue_pending_reviews(
    db: AsyncSession,
    now: datetime,
) -> list[tuple[ApplicationReview, Application, ReviewerProfile]]:
    """
    Pending reviews whose application SLA has passed.

    Finds reviews that:
    1. Are still pending
    2. Belong to an application with sla_due_at before now
    3. Have NOT yet triggered a reminder (sla_reminder_sent_at is NULL)

    Idempotent until mark_reminder_sent() is called.
    """
    result = await db.execute(
        select(ApplicationReview, Application, ReviewerProfile)
        .join(Application, Application.id == ApplicationReview.application_id)
        .join(ReviewerProfile, ReviewerProfile.id == ApplicationReview.reviewer_id)
        .where(
            and_(
                ApplicationReview.status == ReviewState.PENDING,
                ApplicationReview.sla_reminder_sent_at.is_(None),
                Application.sla_due_at.is_not(None),
                Application.sla_due_at < now,
            )
        )
        .order_by(Application.sla_due_at.asc())
    )
    return [tuple(row) for row in result.all()]


async def mark_reminder_sent(
    db: AsyncSession,
    review_id: UUID,
    sent_at: datetime | None = None,
) -> ApplicationReview | None:
    """
    Stamp sla_reminder_sent_at so the reminder job skips this review next run.

    Returns:
        The updated review, or None if not found
    """
    review = await db.get(ApplicationReview, review_id)

    if not review:
        return None

    review.sla_reminder_sent_at = sent_at or datetime.now(UTC)

    await db.commit()
    await db.refresh(review)

    return review
