"""
University Schemas
"""

from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from unidoxia.modules.reviews.scoring import (
    InvalidScoringConfigError,
    ScoringConfig,
    validate_weight_total,
)


class ScoringConfigUpdateRequest(ScoringConfig):
    """Request body for PUT /universities/{id}/scoring-config.

    Weights must sum to exactly 100 when a rubric is saved.
    """

    @model_validator(mode="after")
    def validate_weights(self) -> "ScoringConfigUpdateRequest":
        try:
            validate_weight_total(self)
        except InvalidScoringConfigError as e:
            raise ValueError(str(e)) from e
        return self


class ScoringConfigResponse(BaseModel):
    university_id: UUID
    configured: bool = Field(..., description="Whether a rubric has been configured")
    scoring_config: ScoringConfig | None = None
    weight_total: float | None = None
    suggested_config: ScoringConfig | None = Field(
        None,
        description="Equal-weight starting rubric, offered only while none is configured",
    )
