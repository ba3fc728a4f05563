"""Shared fixtures for the valuation engine tests."""

from datetime import datetime

import pytest

from valuation_engine.engine.calculator import ValuationEngine
from valuation_engine.methodology.schema import EngineConfig, IndustryMultipleRange
from valuation_engine.models.assessment import AssessmentResponse, CoreFactors
from valuation_engine.models.company import CompanyProfile, EbitdaInputs, ValuationInputs
from valuation_engine.models.enums import BRI_CATEGORIES


def make_response(
    question_id,
    category="FINANCIAL",
    score=None,
    weight=10.0,
    source_round="initial",
    updated_at=None,
    override_score=None,
):
    return AssessmentResponse(
        question_id=question_id,
        category=category,
        weight=weight,
        score_value=score,
        source_round=source_round,
        updated_at=updated_at,
        selected_option_id=f"{question_id}-opt" if score is not None else None,
        override_option_id=f"{question_id}-upgrade" if override_score is not None else None,
        override_score_value=override_score,
    )


@pytest.fixture
def engine():
    return ValuationEngine()


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def multiples():
    return IndustryMultipleRange(low=3.0, high=6.0)


@pytest.fixture
def core_factors():
    """A mid-sized recurring-contracts business with moderate owner involvement."""
    return CoreFactors(
        revenue_size_category="FROM_3M_TO_10M",
        revenue_model="RECURRING_CONTRACTS",
        gross_margin_proxy="GOOD",
        labor_intensity="MODERATE",
        asset_intensity="MODERATE",
        owner_involvement="MODERATE",
    )


@pytest.fixture
def all_category_responses():
    """One answered question per BRI category, each scoring 0.7."""
    return [
        make_response(f"q-{category.value.lower()}", category=category.value, score=0.7)
        for category in BRI_CATEGORIES
    ]


@pytest.fixture
def valuation_inputs(multiples, core_factors, all_category_responses):
    return ValuationInputs(
        multiples=multiples,
        company_id="acme",
        core_factors=core_factors,
        response_lists=[all_category_responses],
        ebitda=EbitdaInputs(annual_revenue=5_000_000, annual_ebitda=800_000),
        profile=CompanyProfile(revenue_growth_rate=0.12, top_customer_concentration=0.22),
        calculated_at=datetime(2026, 1, 15, 12, 0, 0),
    )
