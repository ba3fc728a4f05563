"""Tests for the quality/risk adjusted multiple and the EV band."""

import pytest

from valuation_engine.engine.adjuster import apply_adjustments, dlom_amount, spread_factor
from valuation_engine.engine.multiple import valuation
from valuation_engine.models.company import AdjustmentProfile


@pytest.fixture
def baseline():
    # base multiple 4.8
    return valuation(1_000_000, 3.0, 6.0, core_score=0.6, bri_score=0.62)


class TestSpreadFactor:
    @pytest.mark.parametrize(
        "assessed,spread",
        [(6, 0.15), (5, 0.25), (3, 0.25), (2, 0.35), (1, 0.35), (0, 0.40)],
    )
    def test_by_assessed_categories(self, assessed, spread):
        assert spread_factor(assessed) == pytest.approx(spread)

    def test_missing_core_factors_widens(self):
        assert spread_factor(6, has_core_factors=False) == pytest.approx(0.20)
        assert spread_factor(0, has_core_factors=False) == pytest.approx(0.45)


class TestDlomAmount:
    def test_gross_up(self):
        # 1,000,000 * 0.15 / 0.85
        assert dlom_amount(1_000_000, 0.15) == pytest.approx(176_470.588, rel=1e-6)

    def test_zero_ev(self):
        assert dlom_amount(0.0, 0.15) == 0.0


class TestApplyAdjustments:
    def test_dlom_only(self, baseline):
        profile = AdjustmentProfile(revenue_size_category="OVER_25M", assessed_category_count=6)
        result = apply_adjustments(baseline, 3.0, 6.0, 1_000_000, profile)
        assert result.quality_adjustments == []
        assert result.quality_adjusted_multiple == pytest.approx(4.8)
        assert result.risk_multiplier == pytest.approx(0.90)
        assert result.risk_adjusted_multiple == pytest.approx(4.32)
        assert result.ev_mid == pytest.approx(4_320_000)
        assert result.ev_low == pytest.approx(4_320_000 * 0.85)
        assert result.ev_high == pytest.approx(4_320_000 * 1.15)
        assert result.dlom_rate == 0.10
        assert result.dlom_amount == pytest.approx(480_000)

    def test_quality_multiple_capped_at_ceiling(self, baseline):
        profile = AdjustmentProfile(
            revenue_size_category="OVER_25M",
            revenue_growth_rate=0.4,
            revenue_model="SUBSCRIPTION_SAAS",
        )
        result = apply_adjustments(baseline, 3.0, 6.0, 1_000_000, profile)
        assert result.total_quality_adjustment == pytest.approx(0.45)
        assert result.quality_adjusted_multiple == 6.0

    def test_quality_multiple_floored_at_industry_low(self, baseline):
        profile = AdjustmentProfile(
            revenue_size_category="UNDER_500K",
            revenue_growth_rate=-0.3,
            ebitda_margin=-0.1,
        )
        result = apply_adjustments(baseline, 3.0, 6.0, 1_000_000, profile)
        assert result.quality_adjusted_multiple == 3.0

    def test_negative_ebitda_floors_ev(self, baseline):
        result = apply_adjustments(baseline, 3.0, 6.0, -200_000, AdjustmentProfile())
        assert result.ev_low == result.ev_mid == result.ev_high == 0.0
        assert result.dlom_amount == 0.0

    def test_adjustments_property_concatenates(self, baseline):
        profile = AdjustmentProfile(revenue_model="PROJECT_BASED", legal_tax_score=0.1)
        result = apply_adjustments(baseline, 3.0, 6.0, 1_000_000, profile)
        names = [a.name for a in result.adjustments]
        assert names == ["Revenue Model Discount", "Lack of Marketability (DLOM)", "Legal/Tax Risk"]


class TestEvOrdering:
    PROFILES = [
        AdjustmentProfile(),
        AdjustmentProfile(revenue=300_000, owner_involvement="CRITICAL", transferability_score=0.1),
        AdjustmentProfile(
            revenue_size_category="FROM_1M_TO_3M",
            top_customer_concentration=0.5,
            financial_score=0.2,
            legal_tax_score=0.2,
            assessed_category_count=2,
        ),
        AdjustmentProfile(
            revenue_size_category="OVER_25M",
            revenue_growth_rate=0.5,
            ebitda_margin=0.4,
            is_recurring_revenue=True,
            assessed_category_count=6,
        ),
    ]

    @pytest.mark.parametrize("profile", PROFILES)
    @pytest.mark.parametrize("ebitda", [-50_000, 0, 250_000, 5_000_000])
    def test_low_mid_high(self, baseline, profile, ebitda):
        result = apply_adjustments(baseline, 3.0, 6.0, ebitda, profile)
        assert 0 <= result.ev_low <= result.ev_mid <= result.ev_high
        assert 0 < result.risk_multiplier <= 1
        assert 3.0 <= result.quality_adjusted_multiple <= 6.0
