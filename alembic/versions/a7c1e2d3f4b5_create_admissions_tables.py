"""create admissions tables

Revision ID: a7c1e2d3f4b5
Revises:
Create Date: 2026-07-03 00:00:00.000000

This migration:
1. Creates universities (with the nullable scoring_config rubric) and programs
2. Creates reviewer_profiles with expertise arrays and workload counters
3. Creates applications with the application_status enum and review assignment
4. Creates application_reviews with the review_state and review_decision enums

Tables are created parent-first so foreign keys resolve.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a7c1e2d3f4b5"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

APPLICATION_STATUS_VALUES = (
    "draft",
    "submitted",
    "screening",
    "conditional_offer",
    "unconditional_offer",
    "cas_loa",
    "visa",
    "enrolled",
    "withdrawn",
    "rejected",
    "deferred",
)
REVIEW_STATE_VALUES = ("pending", "completed")
REVIEW_DECISION_VALUES = ("approve", "reject", "request_changes")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create admissions tables and enum types."""
    bind = op.get_bind()

    application_status_enum = postgresql.ENUM(
        *APPLICATION_STATUS_VALUES, name="application_status", create_type=False
    )
    review_state_enum = postgresql.ENUM(*REVIEW_STATE_VALUES, name="review_state", create_type=False)
    review_decision_enum = postgresql.ENUM(
        *REVIEW_DECISION_VALUES, name="review_decision", create_type=False
    )
    application_status_enum.create(bind, checkfirst=True)
    review_state_enum.create(bind, checkfirst=True)
    review_decision_enum.create(bind, checkfirst=True)

    op.create_table(
        "universities",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=True),
        # NULL until the university configures its rubric
        sa.Column("scoring_config", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "programs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("university_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("level", sa.String(length=100), nullable=True),
        sa.Column("discipline", sa.String(length=100), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["university_id"],
            ["universities.id"],
            name="fk_programs_university_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_programs_university_id", "programs", ["university_id"], unique=False)

    op.create_table(
        "reviewer_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("country_expertise", postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column("program_expertise", postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column("max_workload", sa.Integer(), nullable=False, server_default="20"),
        sa.Column("current_workload", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "applications",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("program_id", postgresql.UUID(as_uuid=True), nullable=False),
        # Student snapshot
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_name", sa.String(length=200), nullable=False),
        sa.Column("student_email", sa.String(length=255), nullable=False),
        sa.Column("student_nationality", sa.String(length=100), nullable=True),
        sa.Column("student_country", sa.String(length=100), nullable=True),
        sa.Column("agent_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "status",
            application_status_enum,
            nullable=False,
            server_default="draft",
        ),
        # Review assignment
        sa.Column("assigned_reviewer_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("sla_due_at", sa.DateTime(timezone=True), nullable=True),
        # Document activity
        sa.Column("documents_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_document_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["program_id"],
            ["programs.id"],
            name="fk_applications_program_id",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["assigned_reviewer_id"],
            ["reviewer_profiles.id"],
            name="fk_applications_assigned_reviewer_id",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_applications_status", "applications", ["status"], unique=False)
    op.create_index("ix_applications_program_id", "applications", ["program_id"], unique=False)
    op.create_index(
        "ix_applications_assigned_reviewer_id",
        "applications",
        ["assigned_reviewer_id"],
        unique=False,
    )
    op.create_index("ix_applications_student_id", "applications", ["student_id"], unique=False)

    op.create_table(
        "application_reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("application_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reviewer_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("stage", sa.String(length=50), nullable=False),
        sa.Column("status", review_state_enum, nullable=False, server_default="pending"),
        sa.Column("scores", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("feedback", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("decision", review_decision_enum, nullable=True),
        sa.Column("total_score", sa.Integer(), nullable=True),
        sa.Column("sla_reminder_sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["application_id"],
            ["applications.id"],
            name="fk_application_reviews_application_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_application_reviews_application_created",
        "application_reviews",
        ["application_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_application_reviews_reviewer_id",
        "application_reviews",
        ["reviewer_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop admissions tables and enum types."""
    op.drop_index("ix_application_reviews_reviewer_id", table_name="application_reviews")
    op.drop_index("ix_application_reviews_application_created", table_name="application_reviews")
    op.drop_table("application_reviews")

    op.drop_index("ix_applications_student_id", table_name="applications")
    op.drop_index("ix_applications_assigned_reviewer_id", table_name="applications")
    op.drop_index("ix_applications_program_id", table_name="applications")
    op.drop_index("ix_applications_status", table_name="applications")
    op.drop_table("applications")

    op.drop_table("reviewer_profiles")

    op.drop_index("ix_programs_university_id", table_name="programs")
    op.drop_table("programs")
    op.drop_table("universities")

    bind = op.get_bind()
    postgresql.ENUM(*REVIEW_DECISION_VALUES, name="review_decision").drop(bind, checkfirst=True)
    postgresql.ENUM(*REVIEW_STATE_VALUES, name="review_state").drop(bind, checkfirst=True)
    postgresql.ENUM(*APPLICATION_STATUS_VALUES, name="application_status").drop(
        bind, checkfirst=True
    )
