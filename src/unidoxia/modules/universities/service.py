"""
Universities Service Layer

Reading and saving a university's review scoring rubric.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.core.auth import CurrentUser
from unidoxia.modules.reviews.scoring import (
    DEFAULT_SCORING_CONFIG,
    InvalidScoringConfigError,
    ScoringConfig,
    parse_scoring_config,
    validate_weight_total,
)
from unidoxia.modules.universities import repository
from unidoxia.modules.universities.models import University
from unidoxia.modules.universities.schemas import ScoringConfigResponse

logger = logging.getLogger(__name__)


class UniversityServiceError(Exception):
    """Base exception for university service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class UniversityNotFoundError(UniversityServiceError):
    def __init__(self, university_id: UUID):
        super().__init__(
            message=f"University {university_id} not found",
            error_code="UNIVERSITY_NOT_FOUND",
            status_code=404,
        )


class InvalidRubricError(UniversityServiceError):
    def __init__(self, message: str, status_code: int = 422):
        super().__init__(
            message=message,
            error_code="SCORING_CONFIG_INVALID",
            status_code=status_code,
        )


async def _get_university(db: AsyncSession, university_id: UUID) -> University:
    university = await repository.get_by_id(db, university_id)
    if not university:
        logger.warning(f"University not found: {university_id}")
        raise UniversityNotFoundError(university_id)
    return university


async def get_scoring_config(
    db: AsyncSession,
    university_id: UUID,
) -> ScoringConfig | None:
    """
    Stored rubric, or None when the university has not configured one.

    Raises:
        UniversityNotFoundError: If university doesn't exist
        InvalidRubricError: If the stored rubric is malformed (409)
    """
    university = await _get_university(db, university_id)
    try:
        return parse_scoring_config(university.scoring_config)
    except InvalidScoringConfigError as e:
        raise InvalidRubricError(str(e), status_code=409) from e


async def update_scoring_config(
    db: AsyncSession,
    university_id: UUID,
    config: ScoringConfig,
    actor: CurrentUser,
) -> ScoringConfig:
    """
    Save a university's rubric. Weights must sum to exactly 100.

    Raises:
        UniversityNotFoundError: If university doesn't exist
        InvalidRubricError: If the weights don't sum to 100 (422)
    """
    try:
        validate_weight_total(config)
    except InvalidScoringConfigError as e:
        raise InvalidRubricError(str(e)) from e

    university = await _get_university(db, university_id)
    stored = ScoringConfig.model_validate(config.model_dump()).model_dump()
    await repository.update_scoring_config(db, university, stored)

    logger.info(f"User {actor.id} updated scoring config for university {university_id}")

    return parse_scoring_config(university.scoring_config)


def build_scoring_config_response(
    university_id: UUID,
    config: ScoringConfig | None,
) -> ScoringConfigResponse:
    """Rubric view; unconfigured universities get the default rubric as a suggestion."""
    return ScoringConfigResponse(
        university_id=university_id,
        configured=config is not None,
        scoring_config=config,
        weight_total=config.total_weight if config else None,
        suggested_config=None if config else DEFAULT_SCORING_CONFIG,
    )
