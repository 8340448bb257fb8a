"""
Unit tests for reviews repository layer.

These tests cover:
- Reviewer selection (expertise match first, then any reviewer with capacity)
- Assignment bookkeeping in a single commit
- The overdue review query and reminder stamping
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from unidoxia.modules.reviews import repository
from unidoxia.modules.reviews.models import ApplicationReview, ReviewState


def _result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _compiled(mock_db, call_index: int):
    statement = mock_db.execute.await_args_list[call_index].args[0]
    return statement.compile(dialect=postgresql.dialect())


class TestFindAvailableReviewer:
    @pytest.mark.asyncio
    async def test_expertise_match_wins(self, mock_db, sample_reviewer):
        mock_db.execute.return_value = _result(sample_reviewer)

        reviewer = await repository.find_available_reviewer(
            mock_db, country="Canada", discipline="Engineering"
        )

        assert reviewer is sample_reviewer
        assert mock_db.execute.await_count == 1

        compiled = _compiled(mock_db, 0)
        sql = str(compiled)
        assert "reviewer_profiles.current_workload < reviewer_profiles.max_workload" in sql
        assert "ANY (reviewer_profiles.country_expertise)" in sql
        assert "ANY (reviewer_profiles.program_expertise)" in sql
        assert "cardinality(reviewer_profiles.program_expertise)" in sql
        assert "reviewer_profiles.program_expertise IS NULL" in sql
        assert (
            "ORDER BY reviewer_profiles.current_workload ASC, reviewer_profiles.created_at ASC"
            in sql
        )
        assert "FOR UPDATE SKIP LOCKED" in sql
        assert "Canada" in compiled.params.values()
        assert "Engineering" in compiled.params.values()

    @pytest.mark.asyncio
    async def test_falls_back_to_any_reviewer_with_capacity(self, mock_db, sample_reviewer):
        mock_db.execute.side_effect = [_result(None), _result(sample_reviewer)]

        reviewer = await repository.find_available_reviewer(
            mock_db, country="Canada", discipline="Engineering"
        )

        assert reviewer is sample_reviewer
        assert mock_db.execute.await_count == 2

        fallback_sql = str(_compiled(mock_db, 1))
        assert "reviewer_profiles.current_workload < reviewer_profiles.max_workload" in fallback_sql
        assert "country_expertise" not in fallback_sql.split("WHERE", 1)[1]
        assert "FOR UPDATE SKIP LOCKED" in fallback_sql

    @pytest.mark.asyncio
    async def test_no_country_skips_expertise_query(self, mock_db, sample_reviewer):
        mock_db.execute.return_value = _result(sample_reviewer)

        reviewer = await repository.find_available_reviewer(
            mock_db, country=None, discipline="Engineering"
        )

        assert reviewer is sample_reviewer
        assert mock_db.execute.await_count == 1
        assert "country_expertise" not in str(_compiled(mock_db, 0)).split("WHERE", 1)[1]

    @pytest.mark.asyncio
    async def test_no_discipline_matches_generalists_only(self, mock_db, sample_reviewer):
        mock_db.execute.return_value = _result(sample_reviewer)

        await repository.find_available_reviewer(mock_db, country="Canada", discipline=None)

        sql = str(_compiled(mock_db, 0))
        assert "ANY (reviewer_profiles.program_expertise)" not in sql
        assert "cardinality(reviewer_profiles.program_expertise)" in sql

    @pytest.mark.asyncio
    async def test_nobody_has_capacity(self, mock_db):
        mock_db.execute.side_effect = [_result(None), _result(None)]

        reviewer = await repository.find_available_reviewer(
            mock_db, country="Canada", discipline="Engineering"
        )

        assert reviewer is None
        assert mock_db.execute.await_count == 2


class TestAssignReviewer:
    @pytest.mark.asyncio
    async def test_assigns_and_creates_pending_review(
        self, mock_db, sample_application, sample_reviewer
    ):
        due = datetime.now(UTC) + timedelta(hours=24)

        review = await repository.assign_reviewer(
            mock_db, sample_application, sample_reviewer, sla_due_at=due, stage="admin_review"
        )

        assert sample_application.assigned_reviewer_id == sample_reviewer.id
        assert sample_application.sla_due_at == due

        mock_db.add.assert_called_once()
        added = mock_db.add.call_args.args[0]
        assert added is review
        assert isinstance(review, ApplicationReview)
        assert review.status == ReviewState.PENDING
        assert review.stage == "admin_review"
        assert review.application_id == sample_application.id
        assert review.reviewer_id == sample_reviewer.id

        mock_db.commit.assert_awaited_once()
        assert mock_db.refresh.await_count == 2

    @pytest.mark.asyncio
    async def test_workload_incremented_in_database(
        self, mock_db, sample_application, sample_reviewer
    ):
        await repository.assign_reviewer(
            mock_db,
            sample_application,
            sample_reviewer,
            sla_due_at=datetime.now(UTC),
            stage="admin_review",
        )

        increment = str(sample_reviewer.current_workload.compile(dialect=postgresql.dialect()))
        assert increment.startswith("reviewer_profiles.current_workload + ")


class TestOverdueReviews:
    @pytest.mark.asyncio
    async def test_query_filters(self, mock_db, pending_review, sample_application, sample_reviewer):
        now = datetime.now(UTC)
        result = MagicMock()
        result.all.return_value = [(pending_review, sample_application, sample_reviewer)]
        mock_db.execute.return_value = result

        rows = await repository.get_overdue_pending_reviews(mock_db, now)

        assert rows == [(pending_review, sample_application, sample_reviewer)]

        compiled = _compiled(mock_db, 0)
        sql = str(compiled)
        assert "application_reviews.status = " in sql
        assert "application_reviews.sla_reminder_sent_at IS NULL" in sql
        assert "applications.sla_due_at IS NOT NULL" in sql
        assert "applications.sla_due_at < " in sql
        assert "ORDER BY applications.sla_due_at ASC" in sql
        assert now in compiled.params.values()

    @pytest.mark.asyncio
    async def test_mark_reminder_sent_stamps_review(self, mock_db, pending_review):
        sent_at = datetime.now(UTC)
        mock_db.get.return_value = pending_review

        review = await repository.mark_reminder_sent(mock_db, pending_review.id, sent_at)

        assert review.sla_reminder_sent_at == sent_at
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_mark_reminder_sent_missing_review(self, mock_db):
        mock_db.get.return_value = None

        assert await repository.mark_reminder_sent(mock_db, uuid4()) is None
        mock_db.commit.assert_not_called()
