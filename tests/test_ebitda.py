"""Tests for the adjusted EBITDA bridge."""

import pytest

from valuation_engine.engine.ebitda import (
    DEFAULT_MARKET_SALARY,
    adjusted_ebitda,
    estimate_ebitda_from_revenue,
    market_salary,
    owner_comp_adjustment,
)
from valuation_engine.methodology.schema import IndustryMultipleRange
from valuation_engine.models.company import EbitdaAdjustment, EbitdaInputs
from valuation_engine.models.enums import EbitdaAdjustmentType


@pytest.fixture
def multiples_with_revenue():
    return IndustryMultipleRange(low=3.0, high=6.0, revenue_low=0.5, revenue_high=1.5)


class TestMarketSalary:
    def test_by_band(self):
        assert market_salary("UNDER_500K") == 80_000
        assert market_salary("FROM_3M_TO_10M") == 200_000
        assert market_salary("OVER_25M") == 400_000

    def test_fallback(self):
        assert market_salary(None) == DEFAULT_MARKET_SALARY
        assert market_salary("GIGANTIC") == DEFAULT_MARKET_SALARY

    def test_overpaid_owner_adds_back(self):
        assert owner_comp_adjustment(350_000, "FROM_3M_TO_10M") == 150_000

    def test_underpaid_owner_reduces(self):
        assert owner_comp_adjustment(50_000, "FROM_3M_TO_10M") == -150_000


class TestEstimateFromRevenue:
    def test_blended_estimate(self, multiples_with_revenue):
        # (10M * 0.5 / 6 + 10M * 1.5 / 3) / 2 = 2,916,667 -> 2,900,000
        assert estimate_ebitda_from_revenue(10_000_000, multiples_with_revenue) == 2_900_000

    def test_capped_at_35_percent_margin(self):
        multiples = IndustryMultipleRange(low=1.0, high=2.0, revenue_low=1.0, revenue_high=3.0)
        # Uncapped blend would be 2M * (0.5 + 3.0) / 2 = 3.5M
        assert estimate_ebitda_from_revenue(2_000_000, multiples) == 700_000

    def test_zero_multiple_returns_zero(self):
        multiples = IndustryMultipleRange(low=0.0, high=6.0, revenue_low=0.5, revenue_high=1.5)
        assert estimate_ebitda_from_revenue(10_000_000, multiples) == 0.0

    def test_no_revenue_multiples_returns_zero(self):
        multiples = IndustryMultipleRange(low=3.0, high=6.0)
        assert estimate_ebitda_from_revenue(10_000_000, multiples) == 0.0


class TestAdjustedEbitda:
    def test_full_bridge(self, multiples_with_revenue):
        inputs = EbitdaInputs(
            annual_revenue=5_000_000,
            annual_ebitda=700_000,
            owner_compensation=300_000,
            adjustments=(
                EbitdaAdjustment("One-time legal settlement", 40_000),
                EbitdaAdjustment("Owner family payroll", 60_000),
                EbitdaAdjustment("Deferred maintenance", 25_000, EbitdaAdjustmentType.DEDUCTION),
            ),
        )
        bridge, warnings = adjusted_ebitda(inputs, multiples_with_revenue, "FROM_3M_TO_10M")
        assert bridge.add_backs == 100_000
        assert bridge.deductions == 25_000
        assert bridge.owner_comp_adjustment == 100_000
        assert bridge.adjusted_ebitda == 875_000
        assert bridge.is_estimated is False
        assert warnings == []

    def test_precomputed_adjusted_ebitda_skips_bridge(self, multiples_with_revenue):
        inputs = EbitdaInputs(annual_ebitda=500_000, owner_compensation=10, adjusted_ebitda=640_000)
        bridge, _ = adjusted_ebitda(inputs, multiples_with_revenue)
        assert bridge.adjusted_ebitda == 640_000
        assert bridge.owner_comp_adjustment == 0.0

    def test_missing_ebitda_is_estimated(self, multiples_with_revenue):
        inputs = EbitdaInputs(annual_revenue=10_000_000)
        bridge, warnings = adjusted_ebitda(inputs, multiples_with_revenue)
        assert bridge.is_estimated is True
        assert bridge.adjusted_ebitda == 2_900_000
        assert any("estimated" in w for w in warnings)

    def test_nothing_supplied(self, multiples_with_revenue):
        bridge, warnings = adjusted_ebitda(EbitdaInputs(), multiples_with_revenue)
        assert bridge.adjusted_ebitda == 0.0
        assert len(warnings) == 2

    def test_no_owner_compensation_means_no_adjustment(self, multiples_with_revenue):
        bridge, _ = adjusted_ebitda(EbitdaInputs(annual_ebitda=400_000), multiples_with_revenue)
        assert bridge.adjusted_ebitda == 400_000
