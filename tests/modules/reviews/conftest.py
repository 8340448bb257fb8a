"""
Fixtures for reviews tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from unidoxia.core.auth import CurrentUser
from unidoxia.modules.applications.models import Application, ApplicationStatus
from unidoxia.modules.reviews.models import (
    ApplicationReview,
    ReviewDecision,
    ReviewerProfile,
    ReviewState,
)
from unidoxia.modules.reviews.scoring import DimensionWeight, ScoringConfig
from unidoxia.modules.universities.models import Program, University

RUBRIC_40_30_20_10 = {
    "academics": {"weight": 40},
    "english_proficiency": {"weight": 30},
    "statement_quality": {"weight": 20},
    "visa_risk": {"weight": 10},
}


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def reviewer_user():
    return CurrentUser(id=uuid4(), email="staff@unidoxia.com", role="staff", name="Staff Reviewer")


@pytest.fixture
def weighted_config():
    return ScoringConfig(
        academics=DimensionWeight(weight=40),
        english_proficiency=DimensionWeight(weight=30),
        statement_quality=DimensionWeight(weight=20),
        visa_risk=DimensionWeight(weight=10),
    )


@pytest.fixture
def sample_university():
    university = MagicMock(spec=University)
    university.id = uuid4()
    university.name = "University of Toronto"
    university.country = "Canada"
    university.scoring_config = dict(RUBRIC_40_30_20_10)
    return university


@pytest.fixture
def sample_application(sample_university):
    program = MagicMock(spec=Program)
    program.id = uuid4()
    program.university_id = sample_university.id
    program.university = sample_university
    program.name = "MEng Civil Engineering"
    program.level = "Masters"
    program.discipline = "Engineering"

    app = MagicMock(spec=Application)
    app.id = uuid4()
    app.program_id = program.id
    app.program = program
    app.status = ApplicationStatus.SUBMITTED
    app.assigned_reviewer_id = None
    app.sla_due_at = None
    return app


@pytest.fixture
def sample_reviewer():
    reviewer = MagicMock(spec=ReviewerProfile)
    reviewer.id = uuid4()
    reviewer.name = "Grace Reviewer"
    reviewer.email = "grace@unidoxia.com"
    reviewer.country_expertise = ["Canada"]
    reviewer.program_expertise = ["Engineering"]
    reviewer.max_workload = 20
    reviewer.current_workload = 3
    return reviewer


@pytest.fixture
def pending_review(sample_application):
    now = datetime.now(UTC)
    review = MagicMock(spec=ApplicationReview)
    review.id = uuid4()
    review.application_id = sample_application.id
    review.reviewer_id = uuid4()
    review.stage = "university_review"
    review.status = ReviewState.PENDING
    review.scores = None
    review.feedback = None
    review.decision = None
    review.total_score = None
    review.sla_reminder_sent_at = None
    review.created_at = now - timedelta(days=2)
    review.updated_at = now - timedelta(days=2)
    return review


@pytest.fixture
def decision_approve():
    return ReviewDecision.APPROVE
