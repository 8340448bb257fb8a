"""
Review Scoring

Weighted rubric scoring for application reviews.

Each rubric dimension is scored 0-100 by the reviewer; the university's
ScoringConfig supplies a percentage weight per dimension and the total is

    round_half_up(sum(score_i * weight_i / 100))

The weights are NOT required to sum to 100 when scoring: a rubric summing to
110 can produce totals above 100. validate_weight_total() is applied when a
university saves its rubric instead.
"""

import enum
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

MIN_SCORE = Decimal(0)
MAX_SCORE = Decimal(100)
REQUIRED_WEIGHT_TOTAL = Decimal(100)


class RubricDimension(str, enum.Enum):
    """Scored categories of an application review."""

    ACADEMICS = "academics"
    ENGLISH_PROFICIENCY = "english_proficiency"
    STATEMENT_QUALITY = "statement_quality"
    VISA_RISK = "visa_risk"


class ScoringConfigurationError(Exception):
    """Base error for unusable scoring rubrics."""


class ScoringConfigMissingError(ScoringConfigurationError):
    """Raised when a university has not configured a scoring rubric."""

    def __init__(self, message: str = "The university has not configured a scoring rubric."):
        super().__init__(message)


class InvalidScoringConfigError(ScoringConfigurationError):
    """Raised when a scoring rubric is malformed or its weights are invalid."""


class DimensionWeight(BaseModel):
    weight: float = Field(..., ge=0, le=100, description="Weight as a percentage (0-100)")


class ScoringConfig(BaseModel):
    """Percentage weight for each rubric dimension."""

    model_config = ConfigDict(extra="ignore")

    academics: DimensionWeight
    english_proficiency: DimensionWeight
    statement_quality: DimensionWeight
    visa_risk: DimensionWeight

    def weight_for(self, dimension: RubricDimension) -> float:
        return getattr(self, dimension.value).weight

    @property
    def total_weight(self) -> float:
        return float(sum(_to_decimal(self.weight_for(d)) for d in RubricDimension))


class ReviewScores(BaseModel):
    """Reviewer scores per rubric dimension, each 0-100."""

    academics: int = Field(0, ge=0, le=100)
    english_proficiency: int = Field(0, ge=0, le=100)
    statement_quality: int = Field(0, ge=0, le=100)
    visa_risk: int = Field(0, ge=0, le=100)


DEFAULT_SCORING_CONFIG = ScoringConfig(
    academics=DimensionWeight(weight=25),
    english_proficiency=DimensionWeight(weight=25),
    statement_quality=DimensionWeight(weight=25),
    visa_risk=DimensionWeight(weight=25),
)


def _to_decimal(value: float | int) -> Decimal:
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))


def _clamp(score: Decimal) -> Decimal:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def parse_scoring_config(raw: Mapping | None) -> ScoringConfig | None:
    """
    Parse a stored rubric.

    Returns:
        The parsed config, or None when no rubric is stored

    Raises:
        InvalidScoringConfigError: If a dimension is missing or a weight is not a
            number in 0-100
    """
    if raw is None:
        return None
    try:
        return ScoringConfig.model_validate(raw)
    except ValidationError as e:
        raise InvalidScoringConfigError(f"Malformed scoring configuration: {e}") from e


def validate_weight_total(config: ScoringConfig) -> None:
    """
    Raises:
        InvalidScoringConfigError: Unless the weights sum to exactly 100
    """
    total = sum(_to_decimal(config.weight_for(d)) for d in RubricDimension)
    if total != REQUIRED_WEIGHT_TOTAL:
        raise InvalidScoringConfigError(
            f"Rubric weights must sum to 100, got {format(total.normalize(), 'f')}"
        )


def compute_total_score(
    scores: ReviewScores | Mapping[str, float | int | None],
    config: ScoringConfig | None,
) -> int:
    """
    Combine per-dimension scores into the weighted total.

    Scores outside 0-100 are clamped; missing scores count as 0.

    Raises:
        ScoringConfigMissingError: If config is None
    """
    if config is None:
        raise ScoringConfigMissingError()

    values = scores.model_dump() if isinstance(scores, ReviewScores) else scores

    total = Decimal(0)
    for dimension in RubricDimension:
        score = _clamp(_to_decimal(values.get(dimension.value) or 0))
        weight = _to_decimal(config.weight_for(dimension))
        total += score * weight / 100

    return int(total.quantize(Decimal(1), rounding=ROUND_HALF_UP))
