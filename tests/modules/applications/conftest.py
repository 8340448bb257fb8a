"""
Fixtures for applications tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from unidoxia.core.auth import CurrentUser
from unidoxia.modules.applications.models import Application, ApplicationStatus
from unidoxia.modules.universities.models import Program, University


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.scalar = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def reviewer_user():
    return CurrentUser(id=uuid4(), email="staff@unidoxia.com", role="staff", name="Staff Reviewer")


@pytest.fixture
def sample_university():
    university = MagicMock(spec=University)
    university.id = uuid4()
    university.name = "University of Leeds"
    university.country = "United Kingdom"
    university.scoring_config = None
    return university


@pytest.fixture
def sample_program(sample_university):
    program = MagicMock(spec=Program)
    program.id = uuid4()
    program.university_id = sample_university.id
    program.university = sample_university
    program.name = "MSc Data Science"
    program.level = "Masters"
    program.discipline = "Computer Science"
    return program


@pytest.fixture
def sample_application(sample_program):
    """A draft application to a UK masters programme."""
    now = datetime.now(UTC)
    app = MagicMock(spec=Application)
    app.id = uuid4()
    app.program_id = sample_program.id
    app.program = sample_program
    app.student_id = uuid4()
    app.student_name = "Amina Bello"
    app.student_email = "amina@example.com"
    app.student_nationality = "Nigeria"
    app.student_country = "Nigeria"
    app.agent_id = None
    app.status = ApplicationStatus.DRAFT
    app.assigned_reviewer_id = None
    app.sla_due_at = None
    app.documents_count = 3
    app.last_document_at = now - timedelta(days=2)
    app.submitted_at = None
    app.created_at = now - timedelta(days=10)
    app.updated_at = now - timedelta(days=2)
    return app
