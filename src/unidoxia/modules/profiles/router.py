"""
Profiles Router

Endpoints:
- POST /profiles/completion - Profile completion percentage and missing fields
"""

import logging

from fastapi import APIRouter, Depends

from unidoxia.core.auth import CurrentUser, get_current_user
from unidoxia.modules.profiles.completion import calculate_profile_completion
from unidoxia.modules.profiles.schemas import (
    ProfileCompletionRequest,
    ProfileCompletionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/completion",
    response_model=ProfileCompletionResponse,
    summary="Calculate Profile Completion",
)
async def profile_completion(
    request: ProfileCompletionRequest,
    user: CurrentUser = Depends(get_current_user),
) -> ProfileCompletionResponse:
    result = calculate_profile_completion(
        request.profile.model_dump(),
        role=request.role,
        role_data=request.role_data,
    )
    logger.debug(f"Profile completion for user {user.id}: {result.percentage}%")

    return ProfileCompletionResponse(
        percentage=result.percentage,
        completed_fields=result.completed_fields,
        total_fields=result.total_fields,
        missing_fields=result.missing_fields,
    )
