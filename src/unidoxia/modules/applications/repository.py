"""
Applications Repository

Database operations for applications. Status updates are checked against
the lifecycle transition table before they are written.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.modules.applications.models import Application
from unidoxia.modules.applications.status import (
    VALID_STATUS_TRANSITIONS,
    ApplicationStatus,
    InvalidStatusTransitionError,
    validate_transition,
)

__all__ = [
    "VALID_STATUS_TRANSITIONS",
    "InvalidStatusTransitionError",
    "get_by_id",
    "list_applications",
    "update_status",
]


async def get_by_id(db: AsyncSession, id: UUID) -> Application | None:
    """Get application by ID (programme and university are eager-loaded)."""
    return await db.get(Application, id)


async def list_applications(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    reviewer_id: UUID | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Application], int]:
    """
    List applications, oldest update first.

    Returns:
        (applications, total count matching the filters)
    """
    filters = []
    if status is not None:
        filters.append(Application.status == status)
    if reviewer_id is not None:
        filters.append(Application.assigned_reviewer_id == reviewer_id)

    total = await db.scalar(select(func.count()).select_from(Application).where(*filters))

    result = await db.execute(
        select(Application)
        .where(*filters)
        .order_by(Application.updated_at.asc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().unique().all()), total or 0


async def update_status(
    db: AsyncSession,
    id: UUID,
    status: ApplicationStatus,
    **kwargs,
) -> Application:
    """
    Update application status and optional fields.

    Args:
        db: Database session
        id: Application UUID
        status: New status to set
        **kwargs: Additional fields to update (e.g., submitted_at)

    Returns:
        Updated Application

    Raises:
        ValueError: If application not found
        InvalidStatusTransitionError: If the transition is not allowed
    """
    application = await get_by_id(db, id)
    if not application:
        raise ValueError(f"Application {id} not found")

    validate_transition(application.status, status)

    application.status = status

    for key, value in kwargs.items():
        if hasattr(application, key):
            setattr(application, key, value)

    await db.commit()
    await db.refresh(application)

    return application
