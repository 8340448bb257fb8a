"""
Application Models

Database model for study-abroad applications.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from unidoxia.core.database import Base
from unidoxia.modules.applications.status import ApplicationStatus
from unidoxia.modules.universities.models import Program

__all__ = ["Application", "ApplicationStatus"]


class Application(Base):
    """
    A student's application to a programme.

    Student contact and location fields are snapshots taken at submission so
    notifications and categorization don't need the profile service.
    """

    __tablename__ = "applications"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    program_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("programs.id", ondelete="RESTRICT"),
        nullable=False,
    )

    # Student snapshot
    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    student_name: Mapped[str] = mapped_column(String(200), nullable=False)
    student_email: Mapped[str] = mapped_column(String(255), nullable=False)
    student_nationality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    student_country: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Agent who manages this lead, if any
    agent_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)

    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(
            ApplicationStatus,
            name="application_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ApplicationStatus.DRAFT,
    )

    # Review assignment
    assigned_reviewer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("reviewer_profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    sla_due_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Document activity
    documents_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_document_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    program: Mapped["Program"] = relationship("Program", lazy="joined", innerjoin=True)

    __table_args__ = (
        Index("ix_applications_status", "status"),
        Index("ix_applications_program_id", "program_id"),
        Index("ix_applications_assigned_reviewer_id", "assigned_reviewer_id"),
        Index("ix_applications_student_id", "student_id"),
    )
