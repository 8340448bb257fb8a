"""
Universities Router

Endpoints:
- GET /universities/{id}/scoring-config - Current review rubric (null if unset,
  with the default rubric as a suggestion)
- PUT /universities/{id}/scoring-config - Replace the review rubric

Both endpoints require a reviewer role. Saved weights must sum to 100.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.core.auth import CurrentUser, get_current_reviewer
from unidoxia.core.database import get_db
from unidoxia.core.rate_limit import enforce_user_rate_limit
from unidoxia.modules.universities import service
from unidoxia.modules.universities.schemas import (
    ScoringConfigResponse,
    ScoringConfigUpdateRequest,
)
from unidoxia.modules.universities.service import UniversityServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_UPDATE_RUBRIC = (10, 60)  # 10 rubric updates per minute


def _handle_service_error(e: UniversityServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


@router.get(
    "/{university_id}/scoring-config",
    response_model=ScoringConfigResponse,
    summary="Get Scoring Rubric",
)
async def get_scoring_config(
    university_id: UUID,
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> ScoringConfigResponse:
    try:
        config = await service.get_scoring_config(db, university_id)
        return service.build_scoring_config_response(university_id, config)

    except UniversityServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error loading scoring config for university {university_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
            },
        ) from e


@router.put(
    "/{university_id}/scoring-config",
    response_model=ScoringConfigResponse,
    summary="Update Scoring Rubric",
    description="""
Replace the university's review rubric.

Each of `academics`, `english_proficiency`, `statement_quality` and
`visa_risk` takes `{"weight": <0-100>}`; the four weights must sum to 100
(422 otherwise).
""",
)
async def update_scoring_config(
    university_id: UUID,
    request: ScoringConfigUpdateRequest,
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> ScoringConfigResponse:
    await enforce_user_rate_limit(reviewer, "update_rubric", *RATE_LIMIT_UPDATE_RUBRIC)

    try:
        config = await service.update_scoring_config(db, university_id, request, reviewer)
        return service.build_scoring_config_response(university_id, config)

    except UniversityServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating scoring config for university {university_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
            },
        ) from e
