"""
Unit tests for applications repository layer.

These tests focus on the lifecycle transition table and its enforcement.
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from unidoxia.modules.applications import repository
from unidoxia.modules.applications.models import Application, ApplicationStatus
from unidoxia.modules.applications.repository import (
    VALID_STATUS_TRANSITIONS,
    InvalidStatusTransitionError,
)
from unidoxia.modules.applications.status import can_transition


class TestStatusTransitions:
    """Tests for the status transition state machine."""

    def test_draft_can_only_be_submitted_or_withdrawn(self):
        assert VALID_STATUS_TRANSITIONS[ApplicationStatus.DRAFT] == {
            ApplicationStatus.SUBMITTED,
            ApplicationStatus.WITHDRAWN,
        }

    def test_submitted_goes_to_screening(self):
        valid = VALID_STATUS_TRANSITIONS[ApplicationStatus.SUBMITTED]
        assert ApplicationStatus.SCREENING in valid
        assert ApplicationStatus.REJECTED in valid
        # Offers need screening first
        assert ApplicationStatus.CONDITIONAL_OFFER not in valid
        assert ApplicationStatus.ENROLLED not in valid

    def test_screening_can_make_either_offer(self):
        valid = VALID_STATUS_TRANSITIONS[ApplicationStatus.SCREENING]
        assert ApplicationStatus.CONDITIONAL_OFFER in valid
        assert ApplicationStatus.UNCONDITIONAL_OFFER in valid
        assert ApplicationStatus.CAS_LOA not in valid

    def test_offer_path(self):
        assert ApplicationStatus.UNCONDITIONAL_OFFER in VALID_STATUS_TRANSITIONS[
            ApplicationStatus.CONDITIONAL_OFFER
        ]
        assert ApplicationStatus.CAS_LOA in VALID_STATUS_TRANSITIONS[
            ApplicationStatus.UNCONDITIONAL_OFFER
        ]
        assert ApplicationStatus.VISA in VALID_STATUS_TRANSITIONS[ApplicationStatus.CAS_LOA]
        assert ApplicationStatus.ENROLLED in VALID_STATUS_TRANSITIONS[ApplicationStatus.VISA]

    def test_visa_can_be_refused(self):
        assert ApplicationStatus.REJECTED in VALID_STATUS_TRANSITIONS[ApplicationStatus.VISA]

    def test_no_going_back(self):
        assert ApplicationStatus.DRAFT not in VALID_STATUS_TRANSITIONS[ApplicationStatus.SUBMITTED]
        assert ApplicationStatus.SCREENING not in VALID_STATUS_TRANSITIONS[
            ApplicationStatus.CONDITIONAL_OFFER
        ]

    @pytest.mark.parametrize(
        "status",
        [
            ApplicationStatus.ENROLLED,
            ApplicationStatus.WITHDRAWN,
            ApplicationStatus.REJECTED,
            ApplicationStatus.DEFERRED,
        ],
    )
    def test_terminal_states_have_no_transitions(self, status):
        assert VALID_STATUS_TRANSITIONS[status] == set()

    def test_all_statuses_are_in_transition_map(self):
        for status in ApplicationStatus:
            assert status in VALID_STATUS_TRANSITIONS

    def test_same_status_is_allowed(self):
        assert can_transition(ApplicationStatus.ENROLLED, ApplicationStatus.ENROLLED) is True


class TestInvalidStatusTransitionError:
    def test_error_message_contains_both_statuses(self):
        error = InvalidStatusTransitionError(ApplicationStatus.DRAFT, ApplicationStatus.ENROLLED)
        assert "draft" in str(error)
        assert "enrolled" in str(error)
        assert "submitted" in str(error)  # lists valid transitions

    def test_error_stores_statuses(self):
        error = InvalidStatusTransitionError(ApplicationStatus.VISA, ApplicationStatus.DRAFT)
        assert error.current_status == ApplicationStatus.VISA
        assert error.new_status == ApplicationStatus.DRAFT

    def test_is_value_error(self):
        error = InvalidStatusTransitionError(ApplicationStatus.DRAFT, ApplicationStatus.VISA)
        assert isinstance(error, ValueError)


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_update_status_applies_fields(self, mock_db):
        application = MagicMock(spec=Application)
        application.status = ApplicationStatus.DRAFT
        application.submitted_at = None
        mock_db.get.return_value = application

        result = await repository.update_status(
            mock_db, uuid4(), ApplicationStatus.SUBMITTED, submitted_at="now"
        )

        assert result.status == ApplicationStatus.SUBMITTED
        assert result.submitted_at == "now"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_status_rejects_illegal_transition(self, mock_db):
        application = MagicMock(spec=Application)
        application.status = ApplicationStatus.DRAFT
        mock_db.get.return_value = application

        with pytest.raises(InvalidStatusTransitionError):
            await repository.update_status(mock_db, uuid4(), ApplicationStatus.ENROLLED)

        assert application.status == ApplicationStatus.DRAFT
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_status_not_found(self, mock_db):
        mock_db.get.return_value = None

        with pytest.raises(ValueError, match="not found"):
            await repository.update_status(mock_db, uuid4(), ApplicationStatus.SUBMITTED)
