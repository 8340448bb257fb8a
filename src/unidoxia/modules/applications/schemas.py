"""
Application Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from unidoxia.modules.applications.status import ApplicationStatus


class StatusView(BaseModel):
    """Display information for a status value.

    Unknown values are reported with is_known=False, the raw value as label,
    0 progress and the 'unknown' badge.
    """

    status: str = Field(..., description="Raw status value")
    is_known: bool = Field(..., description="Whether the value is a recognised status")
    label: str = Field(..., description="Human readable label")
    progress: int = Field(..., ge=0, le=100, description="Pipeline progress percentage")
    badge: str = Field(..., description="Badge style key for the UI")
    is_terminal: bool = Field(False, description="No further transitions are possible")
    is_review_option: bool = Field(
        False, description="Offered to university reviewers as a selectable status"
    )
    allowed_transitions: list[ApplicationStatus] = Field(
        default_factory=list, description="Statuses this status may move to"
    )


class StatusCatalogResponse(BaseModel):
    statuses: list[StatusView]


class ApplicationListItem(BaseModel):
    """Application summary for queue views."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    program_id: UUID
    student_name: str
    status: ApplicationStatus
    status_label: str
    progress: int
    assigned_reviewer_id: UUID | None = None
    sla_due_at: datetime | None = None
    submitted_at: datetime | None = None
    updated_at: datetime


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationListItem]
    total: int = Field(..., ge=0)
    skip: int = Field(..., ge=0)
    limit: int = Field(..., ge=1, le=100)


class ApplicationDetailResponse(BaseModel):
    """Full application details for reviewers."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    program_id: UUID
    program_name: str
    university_id: UUID
    university_name: str
    student_id: UUID
    student_name: str
    student_email: str
    student_nationality: str | None = None
    student_country: str | None = None
    agent_id: UUID | None = None
    status: StatusView
    assigned_reviewer_id: UUID | None = None
    sla_due_at: datetime | None = None
    documents_count: int
    last_document_at: datetime | None = None
    submitted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ChangeStatusRequest(BaseModel):
    """Request body for POST /applications/{id}/status."""

    status: ApplicationStatus = Field(..., description="New application status")


class ChangeStatusResponse(BaseModel):
    id: UUID
    previous_status: ApplicationStatus
    status: StatusView
    assigned_reviewer_id: UUID | None = None
    message: str = "Application status updated"


class CategorizationResponse(BaseModel):
    application_id: UUID
    level: str
    route: str
    geography: str
    risk_band: str
    risk_score: int = Field(..., ge=0, le=100)
    tags: list[str]
