"""
Reviews Service Layer

Business logic for scoring and submitting application reviews and for
assigning reviewers to newly submitted applications.

Review submission is blocked until the application's university has a
scoring rubric; there is no fallback to default weights.
"""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.core.auth import CurrentUser
from unidoxia.core.config import settings
from unidoxia.modules.applications import repository as application_repository
from unidoxia.modules.applications.models import Application
from unidoxia.modules.reviews import repository
from unidoxia.modules.reviews.models import ApplicationReview, ReviewState
from unidoxia.modules.reviews.schemas import (
    ReviewFeedback,
    ReviewFeedbackInput,
    ReviewSubmitRequest,
)
from unidoxia.modules.reviews.scoring import (
    InvalidScoringConfigError,
    ReviewScores,
    ScoringConfig,
    compute_total_score,
    parse_scoring_config,
)

logger = logging.getLogger(__name__)


class ReviewServiceError(Exception):
    """Base exception for review service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ReviewApplicationNotFoundError(ReviewServiceError):
    def __init__(self, application_id: UUID):
        super().__init__(
            message=f"Application {application_id} not found",
            error_code="APPLICATION_NOT_FOUND",
            status_code=404,
        )


class ScoringConfigMissing(ReviewServiceError):
    """Raised when the university has no rubric; reviews are blocked."""

    def __init__(self, university_name: str | None = None):
        target = university_name or "This university"
        super().__init__(
            message=(
                f"{target} has not configured a scoring rubric. "
                "Reviews cannot be submitted until one is set up."
            ),
            error_code="SCORING_CONFIG_MISSING",
            status_code=409,
        )


class ScoringConfigInvalid(ReviewServiceError):
    """Raised when the stored rubric cannot be parsed."""

    def __init__(self, detail: str):
        super().__init__(
            message=f"The university's scoring rubric is invalid: {detail}",
            error_code="SCORING_CONFIG_INVALID",
            status_code=409,
        )


# ============================================
# Helpers
# ============================================


def split_feedback_lines(text: str | None) -> list[str]:
    """One item per line; blank lines dropped, surrounding whitespace trimmed."""
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def build_feedback(data: ReviewFeedbackInput) -> ReviewFeedback:
    return ReviewFeedback(
        strengths=split_feedback_lines(data.strengths),
        weaknesses=split_feedback_lines(data.weaknesses),
        conditions=split_feedback_lines(data.conditions),
        visa_concerns=split_feedback_lines(data.visa_concerns),
    )


async def _get_application(db: AsyncSession, application_id: UUID) -> Application:
    application = await application_repository.get_by_id(db, application_id)
    if not application:
        logger.warning(f"Application not found: {application_id}")
        raise ReviewApplicationNotFoundError(application_id)
    return application


def get_scoring_config_for_application(application: Application) -> ScoringConfig | None:
    """
    Rubric of the university the application's programme belongs to.

    Returns:
        The parsed rubric, or None when the university has none

    Raises:
        ScoringConfigInvalid: If the stored rubric is malformed
    """
    university = application.program.university
    try:
        return parse_scoring_config(university.scoring_config)
    except InvalidScoringConfigError as e:
        logger.error(f"University {university.id} has an invalid scoring config: {e}")
        raise ScoringConfigInvalid(str(e)) from e


def _require_scoring_config(application: Application) -> ScoringConfig:
    config = get_scoring_config_for_application(application)
    if config is None:
        university = application.program.university
        logger.warning(
            f"Review blocked for application {application.id}: "
            f"university {university.id} has no scoring config"
        )
        raise ScoringConfigMissing(university.name)
    return config


# ============================================
# Reviews
# ============================================


async def get_review_context(
    db: AsyncSession,
    application_id: UUID,
) -> tuple[ApplicationReview | None, ScoringConfig | None]:
    """
    Latest review together with the rubric in force.

    Raises:
        ReviewApplicationNotFoundError: If application doesn't exist
        ScoringConfigInvalid: If the stored rubric is malformed
    """
    application = await _get_application(db, application_id)
    config = get_scoring_config_for_application(application)
    review = await repository.get_latest_review(db, application_id)
    return review, config


async def get_latest_review(db: AsyncSession, application_id: UUID) -> ApplicationReview | None:
    return await repository.get_latest_review(db, application_id)


async def preview_score(
    db: AsyncSession,
    application_id: UUID,
    scores: ReviewScores,
) -> tuple[int, ScoringConfig]:
    """
    Weighted total for the given scores without saving anything.

    Raises:
        ReviewApplicationNotFoundError: If application doesn't exist
        ScoringConfigMissing: If the university has no rubric
        ScoringConfigInvalid: If the stored rubric is malformed
    """
    application = await _get_application(db, application_id)
    config = _require_scoring_config(application)
    return compute_total_score(scores, config), config


async def submit_review(
    db: AsyncSession,
    application_id: UUID,
    reviewer: CurrentUser,
    data: ReviewSubmitRequest,
) -> ApplicationReview:
    """
    Score and save a review.

    The latest review for the application is updated in place (keeping its
    stage); a new review at the default stage is created when none exists.
    Either way the review ends up completed.

    Raises:
        ReviewApplicationNotFoundError: If application doesn't exist
        ScoringConfigMissing: If the university has no rubric
        ScoringConfigInvalid: If the stored rubric is malformed
    """
    application = await _get_application(db, application_id)
    config = _require_scoring_config(application)

    total_score = compute_total_score(data.scores, config)
    fields = {
        "reviewer_id": reviewer.id,
        "status": ReviewState.COMPLETED,
        "scores": data.scores.model_dump(),
        "feedback": build_feedback(data.feedback).model_dump(),
        "decision": data.decision,
        "total_score": total_score,
    }

    existing = await repository.get_latest_review(db, application_id)
    if existing:
        review = await repository.update_review(db, existing, **fields)
        logger.info(
            f"Reviewer {reviewer.id} updated review {review.id} for application "
            f"{application_id}: total={total_score}, decision={data.decision.value}"
        )
    else:
        review = await repository.create_review(
            db, application_id, stage=settings.default_review_stage, **fields
        )
        logger.info(
            f"Reviewer {reviewer.id} created review {review.id} for application "
            f"{application_id}: total={total_score}, decision={data.decision.value}"
        )

    return review


# ============================================
# Reviewer assignment
# ============================================


async def assign_reviewer(db: AsyncSession, application: Application) -> Application:
    """
    Assign the best available reviewer to a submitted application.

    The application is returned unassigned when no reviewer has capacity.
    """
    program = application.program
    reviewer = await repository.find_available_reviewer(
        db,
        country=program.university.country,
        discipline=program.discipline,
    )

    if reviewer is None:
        logger.warning(f"No reviewer with capacity for application {application.id}")
        return application

    sla_due_at = datetime.now(UTC) + timedelta(hours=settings.review_sla_hours)
    await repository.assign_reviewer(
        db,
        application,
        reviewer,
        sla_due_at=sla_due_at,
        stage=settings.default_review_stage,
    )

    logger.info(
        f"Assigned reviewer {reviewer.id} to application {application.id}, "
        f"due {sla_due_at.isoformat()}"
    )
    return application
