"""
Reviews Router

Endpoints:
- GET /applications/{id}/review - Latest review and the rubric in force
- POST /applications/{id}/review - Submit (or resubmit) a scored review
- POST /applications/{id}/review/preview-score - Weighted total without saving

All endpoints require a reviewer role. Submissions return
409 SCORING_CONFIG_MISSING while the university has no rubric.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.core.auth import CurrentUser, get_current_reviewer
from unidoxia.core.database import get_db
from unidoxia.core.rate_limit import enforce_user_rate_limit
from unidoxia.modules.reviews import service
from unidoxia.modules.reviews.schemas import (
    ApplicationReviewResponse,
    ReviewResponse,
    ReviewSubmitRequest,
    ScorePreviewRequest,
    ScorePreviewResponse,
)
from unidoxia.modules.reviews.service import ReviewServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_SUBMIT_REVIEW = (20, 60)  # 20 submissions per minute


def _handle_service_error(e: ReviewServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )


@router.get(
    "/{application_id}/review",
    response_model=ApplicationReviewResponse,
    summary="Get Application Review",
)
async def get_application_review(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> ApplicationReviewResponse:
    """
    Latest review for the application and the university's rubric.

    `scoring_configured=false` tells the UI to show the missing-configuration
    state instead of the scoring form.
    """
    try:
        review, config = await service.get_review_context(db, application_id)

        return ApplicationReviewResponse(
            application_id=application_id,
            scoring_configured=config is not None,
            scoring_config=config,
            review=ReviewResponse.model_validate(review) if review else None,
        )

    except ReviewServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error loading review for application {application_id}: {e}")
        raise _internal_error() from e


@router.post(
    "/{application_id}/review",
    response_model=ReviewResponse,
    summary="Submit Review",
    description="""
Score an application against its university's rubric and save the review.

The total is `round_half_up(sum(score * weight / 100))`. Resubmitting updates
the latest review in place. Feedback fields are split into one item per
non-blank line.

**Errors:**
- 404 APPLICATION_NOT_FOUND
- 409 SCORING_CONFIG_MISSING / SCORING_CONFIG_INVALID
- 422 scores outside 0-100
""",
)
async def submit_review(
    application_id: UUID,
    request: ReviewSubmitRequest,
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> ReviewResponse:
    await enforce_user_rate_limit(reviewer, "submit_review", *RATE_LIMIT_SUBMIT_REVIEW)

    try:
        review = await service.submit_review(db, application_id, reviewer, request)
        return ReviewResponse.model_validate(review)

    except ReviewServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error submitting review for application {application_id}: {e}")
        raise _internal_error() from e


@router.post(
    "/{application_id}/review/preview-score",
    response_model=ScorePreviewResponse,
    summary="Preview Review Score",
)
async def preview_review_score(
    application_id: UUID,
    request: ScorePreviewRequest,
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> ScorePreviewResponse:
    try:
        total, config = await service.preview_score(db, application_id, request.scores)
        return ScorePreviewResponse(
            application_id=application_id,
            total_score=total,
            weight_total=config.total_weight,
        )

    except ReviewServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error previewing score for application {application_id}: {e}")
        raise _internal_error() from e
