"""
Unit tests for application categorization.
"""

from datetime import UTC, datetime, timedelta

import pytest

from unidoxia.modules.applications.categorization import (
    CategorizationInput,
    GeographyTag,
    LevelTag,
    RiskBand,
    RouteTag,
    categorize_application,
    compute_risk_score,
    infer_geography,
    infer_level,
    infer_route,
    risk_band_for,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


class TestInferLevel:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("PhD", LevelTag.PHD),
            ("Doctorate", LevelTag.PHD),
            ("Masters", LevelTag.PG),
            ("Postgraduate Diploma", LevelTag.PG),
            ("Graduate Certificate", LevelTag.PG),
            ("Undergraduate", LevelTag.UG),
            ("Bachelor", LevelTag.UG),
            (None, LevelTag.UG),
        ],
    )
    def test_levels(self, level, expected):
        assert infer_level(level) == expected


class TestInferRoute:
    def test_foundation_from_name(self):
        assert infer_route("Undergraduate", "International Foundation Year") == RouteTag.FOUNDATION

    def test_pathway_from_level(self):
        assert infer_route("Pathway", "Business") == RouteTag.FOUNDATION

    @pytest.mark.parametrize("name", ["BSc Top-up", "Top Up Degree", "BA Topup"])
    def test_top_up(self, name):
        assert infer_route("Undergraduate", name) == RouteTag.TOP_UP

    def test_direct_by_default(self):
        assert infer_route("Masters", "MSc Data Science") == RouteTag.DIRECT


class TestInferGeography:
    def test_university_country_wins(self):
        assert infer_geography("Canada", "United Kingdom", "USA") == GeographyTag.CANADA

    def test_falls_back_to_nationality(self):
        assert infer_geography("Nigeria", "United States", None) == GeographyTag.US

    def test_falls_back_to_current_country(self):
        assert infer_geography(None, "Ghana", "Australia") == GeographyTag.AUSTRALIA

    def test_eu_member(self):
        assert infer_geography("Germany", None, None) == GeographyTag.EU

    def test_uk_aliases(self):
        assert infer_geography("Scotland", None, None) == GeographyTag.UK

    def test_defaults_to_eu(self):
        assert infer_geography("Nigeria", "Ghana", None) == GeographyTag.EU


class TestRiskScore:
    def test_fresh_submission_without_agent_or_documents(self):
        data = CategorizationInput(
            status="submitted",
            created_at=NOW - timedelta(days=1),
            documents_count=0,
        )
        # 30 + 15 (early stage) + 5 (no agent) + 10 (no documents)
        assert compute_risk_score(data, now=NOW) == 60

    def test_offer_with_agent_and_documents(self):
        data = CategorizationInput(
            status="conditional_offer",
            agent_id="agent-1",
            documents_count=4,
            last_document_at=NOW - timedelta(days=3),
        )
        assert compute_risk_score(data, now=NOW) == 20

    def test_inactivity_bands(self):
        base = {"status": "visa", "agent_id": "a", "documents_count": 2}
        scores = [
            compute_risk_score(
                CategorizationInput(**base, last_updated_at=NOW - timedelta(days=days)), now=NOW
            )
            for days in (10, 31, 61, 91)
        ]
        assert scores == [10, 20, 30, 40]

    def test_last_document_takes_precedence(self):
        data = CategorizationInput(
            status="visa",
            agent_id="a",
            documents_count=1,
            last_document_at=NOW - timedelta(days=1),
            last_updated_at=NOW - timedelta(days=200),
        )
        assert compute_risk_score(data, now=NOW) == 10

    def test_clamped_to_100(self):
        data = CategorizationInput(
            status="rejected",
            documents_count=0,
            created_at=NOW - timedelta(days=365),
        )
        # 30 + 40 + 5 + 10 + 30 = 115
        assert compute_risk_score(data, now=NOW) == 100

    @pytest.mark.parametrize(
        ("score", "band"),
        [(0, RiskBand.LOW), (39, RiskBand.LOW), (40, RiskBand.MEDIUM), (69, RiskBand.MEDIUM),
         (70, RiskBand.HIGH), (100, RiskBand.HIGH)],
    )
    def test_bands(self, score, band):
        assert risk_band_for(score) == band


class TestCategorizeApplication:
    def test_full_categorization(self):
        result = categorize_application(
            CategorizationInput(
                program_level="Masters",
                program_name="MSc Finance",
                university_country="United Kingdom",
                status="screening",
                documents_count=0,
                created_at=NOW - timedelta(days=5),
            ),
            now=NOW,
        )

        assert result.level == LevelTag.PG
        assert result.route == RouteTag.DIRECT
        assert result.geography == GeographyTag.UK
        assert result.risk_score == 60
        assert result.risk_band == RiskBand.MEDIUM
        assert result.tags == ["PG", "Direct", "UK", "Medium"]
