"""
Review Models

Reviewer profiles (expertise and workload) and application reviews.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from unidoxia.core.database import Base


class ReviewDecision(str, enum.Enum):
    """Reviewer recommendation."""

    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CHANGES = "request_changes"


class ReviewState(str, enum.Enum):
    """Whether the reviewer has submitted the review."""

    PENDING = "pending"
    COMPLETED = "completed"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class ReviewerProfile(Base):
    """
    A platform reviewer.

    Expertise arrays drive automatic assignment; an empty or NULL
    program_expertise means the reviewer takes any discipline.
    """

    __tablename__ = "reviewer_profiles"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    country_expertise: Mapped[list[str] | None] = mapped_column(ARRAY(String), nullable=True)
    program_expertise: Mapped[list[str] | None] = mapped_column(ARRAY(String), nullable=True)

    max_workload: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    current_workload: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class ApplicationReview(Base):
    """
    A review of an application at a given stage.

    The most recently created review for an application is authoritative;
    resubmissions update it in place.
    """

    __tablename__ = "application_reviews"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    application_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
    )
    reviewer_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)

    # e.g. admin_review, university_review
    stage: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[ReviewState] = mapped_column(
        Enum(ReviewState, name="review_state", values_callable=_enum_values),
        nullable=False,
        default=ReviewState.PENDING,
    )

    # {"academics": 80, "english_proficiency": 70, ...}
    scores: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    # {"strengths": [...], "weaknesses": [...], "conditions": [...], "visa_concerns": [...]}
    feedback: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    decision: Mapped[ReviewDecision | None] = mapped_column(
        Enum(ReviewDecision, name="review_decision", values_callable=_enum_values),
        nullable=True,
    )
    total_score: Mapped[int | None] = mapped_column(Integer, nullable=True)

    sla_reminder_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_application_reviews_application_created", "application_id", "created_at"),
        Index("ix_application_reviews_reviewer_id", "reviewer_id"),
    )
