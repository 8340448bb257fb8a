"""
Applications Service Layer

Business logic for the application lifecycle.
Orchestrates repository operations, reviewer assignment and student
notifications.

This module implements:
1. Status catalogue:
   - Labels, progress, badges and allowed next statuses for every status
   - Graceful views for unknown status values

2. Status changes:
   - Transitions validated against VALID_STATUS_TRANSITIONS
   - Entering 'submitted' stamps submitted_at and assigns a reviewer
   - Student is e-mailed on every change (best effort)

3. Categorization:
   - Level, route, geography and risk band tags for staff triage
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.core.auth import CurrentUser
from unidoxia.core.email import send_application_status_update
from unidoxia.modules.applications import repository
from unidoxia.modules.applications.categorization import (
    ApplicationCategorization,
    CategorizationInput,
    categorize_application,
)
from unidoxia.modules.applications.models import Application
from unidoxia.modules.applications.schemas import StatusView
from unidoxia.modules.applications.status import (
    ApplicationStatus,
    KnownStatus,
    allowed_transitions,
    get_status_badge,
    get_status_label,
    get_status_progress,
    is_review_status_option,
    is_terminal,
    parse_status,
)

logger = logging.getLogger(__name__)


class ApplicationServiceError(Exception):
    """Base exception for application service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ApplicationNotFoundError(ApplicationServiceError):
    """Raised when an application is not found."""

    def __init__(self, application_id: UUID | None = None):
        message = (
            f"Application {application_id} not found" if application_id else "Application not found"
        )
        super().__init__(
            message=message,
            error_code="APPLICATION_NOT_FOUND",
            status_code=404,
        )


class InvalidStatusChangeError(ApplicationServiceError):
    """Raised when the requested status is not reachable from the current one."""

    def __init__(self, current_status: str, new_status: str, valid: list[str]):
        super().__init__(
            message=(
                f"Cannot move application from '{current_status}' to '{new_status}'. "
                f"Allowed next statuses: {', '.join(valid) or 'none'}."
            ),
            error_code="INVALID_STATUS_TRANSITION",
            status_code=409,
        )


# ============================================
# Status views
# ============================================


def build_status_view(value: str | ApplicationStatus) -> StatusView:
    """Describe any status value; unknown strings get the unknown variant."""
    variant = parse_status(value)

    if isinstance(variant, KnownStatus):
        status = variant.status
        return StatusView(
            status=status.value,
            is_known=True,
            label=get_status_label(status),
            progress=get_status_progress(status),
            badge=get_status_badge(status),
            is_terminal=is_terminal(status),
            is_review_option=is_review_status_option(status.value),
            allowed_transitions=sorted(allowed_transitions(status), key=lambda s: s.value),
        )

    return StatusView(
        status=variant.raw,
        is_known=False,
        label=get_status_label(variant.raw),
        progress=get_status_progress(variant.raw),
        badge=get_status_badge(variant.raw),
    )


def get_status_catalog() -> list[StatusView]:
    """Every status in pipeline order."""
    return [build_status_view(status) for status in ApplicationStatus]


# ============================================
# Queries
# ============================================


async def get_application(db: AsyncSession, application_id: UUID) -> Application:
    """
    Raises:
        ApplicationNotFoundError: If application doesn't exist
    """
    application = await repository.get_by_id(db, application_id)
    if not application:
        logger.warning(f"Application not found: {application_id}")
        raise ApplicationNotFoundError(application_id)
    return application


async def list_applications(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    reviewer_id: UUID | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    applications, total = await repository.list_applications(
        db, status=status, reviewer_id=reviewer_id, skip=skip, limit=limit
    )
    return {
        "applications": applications,
        "total": total,
        "skip": skip,
        "limit": limit,
    }


# ============================================
# Status changes
# ============================================


async def _notify_student(application: Application) -> None:
    """Send the status-update e-mail. Failures are logged, never raised."""
    try:
        program = application.program
        sent = await send_application_status_update(
            to_email=application.student_email,
            student_name=application.student_name,
            program_name=program.name,
            university_name=program.university.name,
            status=application.status.value,
            status_label=get_status_label(application.status),
        )
        if not sent:
            logger.warning(f"Status e-mail for application {application.id} was not sent")
    except Exception as e:
        logger.error(
            f"Failed to send status e-mail for application {application.id}: {e}",
            exc_info=True,
        )


async def change_status(
    db: AsyncSession,
    application_id: UUID,
    new_status: ApplicationStatus,
    actor: CurrentUser,
) -> tuple[Application, ApplicationStatus]:
    """
    Move an application to a new status.

    Args:
        db: Database session
        application_id: UUID of the application
        new_status: Target status
        actor: Reviewer performing the change

    Returns:
        (updated application, previous status)

    Raises:
        ApplicationNotFoundError: If application doesn't exist
        InvalidStatusChangeError: If the transition is not allowed
    """
    # Imported here: the reviews service depends on this module's repository
    from unidoxia.modules.reviews import service as review_service

    application = await get_application(db, application_id)
    previous_status = application.status

    logger.info(
        f"User {actor.id} changing application {application_id} status: "
        f"{previous_status.value} -> {new_status.value}"
    )

    extra: dict = {}
    if new_status == ApplicationStatus.SUBMITTED and previous_status != new_status:
        extra["submitted_at"] = datetime.now(UTC)

    try:
        application = await repository.update_status(db, application_id, new_status, **extra)
    except repository.InvalidStatusTransitionError as e:
        logger.warning(f"Rejected status change for {application_id}: {e}")
        raise InvalidStatusChangeError(
            previous_status.value,
            new_status.value,
            sorted(s.value for s in allowed_transitions(previous_status)),
        ) from e

    if previous_status == new_status:
        return application, previous_status

    if new_status == ApplicationStatus.SUBMITTED:
        application = await review_service.assign_reviewer(db, application)

    await _notify_student(application)

    return application, previous_status


# ============================================
# Categorization
# ============================================


def build_categorization_input(application: Application) -> CategorizationInput:
    program = application.program
    return CategorizationInput(
        program_level=program.level,
        program_name=program.name,
        university_country=program.university.country,
        student_nationality=application.student_nationality,
        student_current_country=application.student_country,
        status=application.status.value,
        created_at=application.created_at,
        last_updated_at=application.updated_at,
        last_document_at=application.last_document_at,
        documents_count=application.documents_count,
        agent_id=str(application.agent_id) if application.agent_id else None,
    )


def get_categorization(
    application: Application,
    now: datetime | None = None,
) -> ApplicationCategorization:
    return categorize_application(build_categorization_input(application), now=now)
