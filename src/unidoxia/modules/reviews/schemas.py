"""
Review Schemas

Pydantic schemas for review submission and responses.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from unidoxia.modules.reviews.models import ReviewDecision, ReviewState
from unidoxia.modules.reviews.scoring import ReviewScores, ScoringConfig


class ReviewFeedbackInput(BaseModel):
    """Free-text feedback; one item per line."""

    strengths: str | None = Field(None, max_length=5000)
    weaknesses: str | None = Field(None, max_length=5000)
    conditions: str | None = Field(None, max_length=5000)
    visa_concerns: str | None = Field(None, max_length=5000)


class ReviewFeedback(BaseModel):
    """Feedback as stored: each category is a list of lines."""

    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)
    visa_concerns: list[str] = Field(default_factory=list)


class ReviewSubmitRequest(BaseModel):
    """Request body for POST /applications/{id}/review."""

    scores: ReviewScores
    feedback: ReviewFeedbackInput = Field(default_factory=ReviewFeedbackInput)
    decision: ReviewDecision = ReviewDecision.REQUEST_CHANGES


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    application_id: UUID
    reviewer_id: UUID | None = None
    stage: str
    status: ReviewState
    scores: ReviewScores | None = None
    feedback: ReviewFeedback | None = None
    decision: ReviewDecision | None = None
    total_score: int | None = None
    created_at: datetime
    updated_at: datetime


class ApplicationReviewResponse(BaseModel):
    """Latest review for an application together with the rubric in force.

    scoring_configured=False means reviews are blocked until the university
    sets up its rubric.
    """

    application_id: UUID
    scoring_configured: bool
    scoring_config: ScoringConfig | None = None
    review: ReviewResponse | None = None


class ScorePreviewRequest(BaseModel):
    scores: ReviewScores


class ScorePreviewResponse(BaseModel):
    application_id: UUID
    total_score: int
    weight_total: float = Field(..., description="Sum of rubric weights (nominally 100)")
