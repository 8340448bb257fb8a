"""
Unit tests for weighted rubric scoring.
"""

import pytest

from unidoxia.modules.reviews.scoring import (
    DEFAULT_SCORING_CONFIG,
    DimensionWeight,
    InvalidScoringConfigError,
    ReviewScores,
    ScoringConfig,
    ScoringConfigMissingError,
    compute_total_score,
    parse_scoring_config,
    validate_weight_total,
)


def _config(academics, english, statement, visa) -> ScoringConfig:
    return ScoringConfig(
        academics=DimensionWeight(weight=academics),
        english_proficiency=DimensionWeight(weight=english),
        statement_quality=DimensionWeight(weight=statement),
        visa_risk=DimensionWeight(weight=visa),
    )


class TestComputeTotalScore:
    def test_weighted_example(self, weighted_config):
        scores = ReviewScores(
            academics=80, english_proficiency=70, statement_quality=90, visa_risk=50
        )
        # 32 + 21 + 18 + 5
        assert compute_total_score(scores, weighted_config) == 76

    def test_accepts_plain_mapping(self, weighted_config):
        scores = {
            "academics": 80,
            "english_proficiency": 70,
            "statement_quality": 90,
            "visa_risk": 50,
        }
        assert compute_total_score(scores, weighted_config) == 76

    def test_weights_are_not_normalised(self):
        config = _config(40, 40, 20, 10)
        scores = ReviewScores(
            academics=100, english_proficiency=100, statement_quality=100, visa_risk=100
        )
        assert compute_total_score(scores, config) == 110

    def test_missing_config_raises(self):
        with pytest.raises(ScoringConfigMissingError):
            compute_total_score(ReviewScores(academics=90), None)

    def test_all_zero_scores(self, weighted_config):
        assert compute_total_score(ReviewScores(), weighted_config) == 0

    def test_missing_dimension_counts_as_zero(self, weighted_config):
        assert compute_total_score({"academics": 100}, weighted_config) == 40

    def test_rounds_half_up(self):
        config = _config(50, 0, 0, 0)
        assert compute_total_score({"academics": 1}, config) == 1  # 0.5
        assert compute_total_score({"academics": 3}, config) == 2  # 1.5
        assert compute_total_score({"academics": 5}, config) == 3  # 2.5

    def test_fractional_weights_have_no_float_drift(self):
        config = _config(33.3, 33.3, 33.4, 0)
        scores = {"academics": 75, "english_proficiency": 75, "statement_quality": 75}
        assert compute_total_score(scores, config) == 75

    def test_out_of_range_scores_are_clamped(self, weighted_config):
        scores = {
            "academics": 150,
            "english_proficiency": -20,
            "statement_quality": 100,
            "visa_risk": 100,
        }
        # 40 + 0 + 20 + 10
        assert compute_total_score(scores, weighted_config) == 70

    def test_is_deterministic(self, weighted_config):
        scores = ReviewScores(
            academics=63, english_proficiency=71, statement_quality=58, visa_risk=89
        )
        first = compute_total_score(scores, weighted_config)
        assert all(compute_total_score(scores, weighted_config) == first for _ in range(5))

    def test_default_rubric_is_an_average(self):
        scores = ReviewScores(
            academics=60, english_proficiency=70, statement_quality=80, visa_risk=90
        )
        assert compute_total_score(scores, DEFAULT_SCORING_CONFIG) == 75


class TestReviewScores:
    def test_scores_outside_range_are_rejected(self):
        with pytest.raises(ValueError):
            ReviewScores(academics=101)
        with pytest.raises(ValueError):
            ReviewScores(visa_risk=-1)


class TestParseScoringConfig:
    def test_none_means_not_configured(self):
        assert parse_scoring_config(None) is None

    def test_parses_stored_rubric(self):
        config = parse_scoring_config(
            {
                "academics": {"weight": 40},
                "english_proficiency": {"weight": 30},
                "statement_quality": {"weight": 20},
                "visa_risk": {"weight": 10},
            }
        )
        assert config.academics.weight == 40
        assert config.total_weight == 100

    def test_missing_dimension_is_invalid(self):
        with pytest.raises(InvalidScoringConfigError):
            parse_scoring_config({"academics": {"weight": 100}})

    def test_non_numeric_weight_is_invalid(self):
        with pytest.raises(InvalidScoringConfigError):
            parse_scoring_config(
                {
                    "academics": {"weight": "heavy"},
                    "english_proficiency": {"weight": 30},
                    "statement_quality": {"weight": 20},
                    "visa_risk": {"weight": 10},
                }
            )


class TestValidateWeightTotal:
    def test_exactly_100_passes(self, weighted_config):
        validate_weight_total(weighted_config)
        validate_weight_total(DEFAULT_SCORING_CONFIG)

    def test_fractional_weights_summing_to_100_pass(self):
        validate_weight_total(_config(33.3, 33.3, 33.4, 0))

    def test_other_totals_fail(self):
        with pytest.raises(InvalidScoringConfigError, match="110"):
            validate_weight_total(_config(40, 40, 20, 10))
        with pytest.raises(InvalidScoringConfigError):
            validate_weight_total(_config(25, 25, 25, 0))
