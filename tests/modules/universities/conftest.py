"""
Fixtures for universities tests.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from unidoxia.core.auth import CurrentUser
from unidoxia.modules.universities.models import University


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    return db


@pytest.fixture
def admin_user():
    return CurrentUser(id=uuid4(), email="admin@unidoxia.com", role="admin")


@pytest.fixture
def sample_university():
    university = MagicMock(spec=University)
    university.id = uuid4()
    university.name = "University of Melbourne"
    university.country = "Australia"
    university.scoring_config = None
    return university


@pytest.fixture
def rubric_payload():
    return {
        "academics": {"weight": 50},
        "english_proficiency": {"weight": 20},
        "statement_quality": {"weight": 20},
        "visa_risk": {"weight": 10},
    }
