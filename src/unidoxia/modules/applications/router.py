"""
Applications Router

API endpoints for the application lifecycle.

Endpoints:
- GET /applications/statuses - Status catalogue (public)
- GET /applications/statuses/{value} - Describe a single status value (public)
- GET /applications - List applications with filters and pagination
- GET /applications/{id} - Get application details
- POST /applications/{id}/status - Change application status
- GET /applications/{id}/categorization - Triage tags and risk band

Security:
- All endpoints except the status catalogue require a reviewer role
- Status changes are rate limited per user
- Illegal transitions return 409 INVALID_STATUS_TRANSITION
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.core.auth import CurrentUser, get_current_reviewer
from unidoxia.core.database import get_db
from unidoxia.core.rate_limit import enforce_user_rate_limit
from unidoxia.modules.applications import service
from unidoxia.modules.applications.models import Application
from unidoxia.modules.applications.schemas import (
    ApplicationDetailResponse,
    ApplicationListItem,
    ApplicationListResponse,
    CategorizationResponse,
    ChangeStatusRequest,
    ChangeStatusResponse,
    StatusCatalogResponse,
    StatusView,
)
from unidoxia.modules.applications.service import ApplicationServiceError
from unidoxia.modules.applications.status import (
    ApplicationStatus,
    get_status_label,
    get_status_progress,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Rate Limiting Configuration
# ============================================

RATE_LIMIT_STATUS_CHANGE = (30, 60)  # 30 status changes per minute


# ============================================
# Helper Functions
# ============================================


def _handle_service_error(e: ApplicationServiceError) -> None:
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


def _application_to_list_item(app: Application) -> ApplicationListItem:
    return ApplicationListItem(
        id=app.id,
        program_id=app.program_id,
        student_name=app.student_name,
        status=app.status,
        status_label=get_status_label(app.status),
        progress=get_status_progress(app.status),
        assigned_reviewer_id=app.assigned_reviewer_id,
        sla_due_at=app.sla_due_at,
        submitted_at=app.submitted_at,
        updated_at=app.updated_at,
    )


def _application_to_detail(app: Application) -> ApplicationDetailResponse:
    program = app.program
    return ApplicationDetailResponse(
        id=app.id,
        program_id=app.program_id,
        program_name=program.name,
        university_id=program.university_id,
        university_name=program.university.name,
        student_id=app.student_id,
        student_name=app.student_name,
        student_email=app.student_email,
        student_nationality=app.student_nationality,
        student_country=app.student_country,
        agent_id=app.agent_id,
        status=service.build_status_view(app.status),
        assigned_reviewer_id=app.assigned_reviewer_id,
        sla_due_at=app.sla_due_at,
        documents_count=app.documents_count,
        last_document_at=app.last_document_at,
        submitted_at=app.submitted_at,
        created_at=app.created_at,
        updated_at=app.updated_at,
    )


# ============================================
# Status catalogue (public)
# ============================================


@router.get(
    "/statuses",
    response_model=StatusCatalogResponse,
    summary="List Application Statuses",
    description="""
Every application status in pipeline order with its display label, progress
percentage, badge style, terminal flag and whether university reviewers may
select it.
""",
)
async def list_statuses() -> StatusCatalogResponse:
    return StatusCatalogResponse(statuses=service.get_status_catalog())


@router.get(
    "/statuses/{value}",
    response_model=StatusView,
    summary="Describe Status Value",
    description="""
Describe any status string. Unrecognised values are answered with
`is_known=false`, the raw value as label, 0 progress and the `unknown` badge.
""",
)
async def get_status(value: str) -> StatusView:
    return service.build_status_view(value)


# ============================================
# Reviewer endpoints
# ============================================


@router.get(
    "",
    response_model=ApplicationListResponse,
    summary="List Applications",
)
async def list_applications(
    status_filter: ApplicationStatus | None = Query(
        None,
        alias="status",
        description="Filter by application status",
    ),
    reviewer_id: UUID | None = Query(
        None,
        description="Filter by assigned reviewer",
    ),
    skip: int = Query(0, ge=0, description="Records to skip"),
    limit: int = Query(20, ge=1, le=100, description="Maximum records to return"),
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> ApplicationListResponse:
    """List applications, least recently updated first."""
    try:
        result = await service.list_applications(
            db,
            status=status_filter,
            reviewer_id=reviewer_id,
            skip=skip,
            limit=limit,
        )

        logger.info(
            f"Reviewer {reviewer.id} listed applications: "
            f"total={result['total']}, returned={len(result['applications'])}"
        )

        return ApplicationListResponse(
            applications=[_application_to_list_item(a) for a in result["applications"]],
            total=result["total"],
            skip=result["skip"],
            limit=result["limit"],
        )

    except ApplicationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error listing applications: {e}")
        raise _internal_error() from e


@router.get(
    "/{application_id}",
    response_model=ApplicationDetailResponse,
    summary="Get Application",
)
async def get_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> ApplicationDetailResponse:
    try:
        application = await service.get_application(db, application_id)
        return _application_to_detail(application)

    except ApplicationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error getting application {application_id}: {e}")
        raise _internal_error() from e


@router.post(
    "/{application_id}/status",
    response_model=ChangeStatusResponse,
    summary="Change Application Status",
    description="""
Move an application to a new status.

**Rules:**
- The target must be reachable from the current status
- Re-setting the current status is accepted and changes nothing
- Entering `submitted` assigns a reviewer with a 24 hour SLA
- The student receives an e-mail for every change

**Errors:**
- 404 APPLICATION_NOT_FOUND
- 409 INVALID_STATUS_TRANSITION
- 429 rate limit exceeded
""",
)
async def change_application_status(
    application_id: UUID,
    request: ChangeStatusRequest,
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> ChangeStatusResponse:
    await enforce_user_rate_limit(reviewer, "application_status", *RATE_LIMIT_STATUS_CHANGE)

    try:
        application, previous_status = await service.change_status(
            db, application_id, request.status, reviewer
        )

        return ChangeStatusResponse(
            id=application.id,
            previous_status=previous_status,
            status=service.build_status_view(application.status),
            assigned_reviewer_id=application.assigned_reviewer_id,
            message=f"Application moved to {get_status_label(application.status)}",
        )

    except ApplicationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error changing status of application {application_id}: {e}")
        raise _internal_error() from e


@router.get(
    "/{application_id}/categorization",
    response_model=CategorizationResponse,
    summary="Categorize Application",
)
async def get_application_categorization(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    reviewer: CurrentUser = Depends(get_current_reviewer),
) -> CategorizationResponse:
    """Level, route, geography and risk band tags for triage."""
    try:
        application = await service.get_application(db, application_id)
        result = service.get_categorization(application)

        return CategorizationResponse(
            application_id=application.id,
            level=result.level.value,
            route=result.route.value,
            geography=result.geography.value,
            risk_band=result.risk_band.value,
            risk_score=result.risk_score,
            tags=result.tags,
        )

    except ApplicationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error categorizing application {application_id}: {e}")
        raise _internal_error() from e
