"""Structural quality adjustments to the base multiple.

Each adjuster returns zero or more signed impacts (-0.10 = 10% discount).
They are summed and applied multiplicatively:

    adjustment_multiplier = clamp(1 + sum(impacts), 0.3, 1.5)

Customer concentration is handled by the risk discount stack, not here.
"""

from __future__ import annotations

import logging
from typing import Optional

from valuation_engine.engine.registry import QUALITY, get_adjusters, register_adjuster
from valuation_engine.engine.result import AdjustmentEntry, QualityAdjustmentResult
from valuation_engine.models.company import AdjustmentProfile
from valuation_engine.models.enums import AdjustmentCategory, RevenueSizeCategory

logger = logging.getLogger(__name__)

MIN_ADJUSTMENT_MULTIPLIER = 0.3
MAX_ADJUSTMENT_MULTIPLIER = 1.5

SIZE_DISCOUNTS: dict[str, float] = {
    "UNDER_500K": -0.35,
    "FROM_500K_TO_1M": -0.25,
    "FROM_1M_TO_3M": -0.18,
    "FROM_3M_TO_10M": -0.10,
    "FROM_10M_TO_25M": -0.05,
    "OVER_25M": 0.0,
}

# Upper revenue bound (exclusive) for each size band
_SIZE_BAND_LIMITS: list[tuple[float, RevenueSizeCategory]] = [
    (500_000, RevenueSizeCategory.UNDER_500K),
    (1_000_000, RevenueSizeCategory.FROM_500K_TO_1M),
    (3_000_000, RevenueSizeCategory.FROM_1M_TO_3M),
    (10_000_000, RevenueSizeCategory.FROM_3M_TO_10M),
    (25_000_000, RevenueSizeCategory.FROM_10M_TO_25M),
]

# (minimum growth rate, impact, label), checked top-down
GROWTH_TIERS: list[tuple[float, float, str]] = [
    (0.30, 0.20, "High growth (30%+)"),
    (0.20, 0.12, "Strong growth (20-30%)"),
    (0.10, 0.05, "Moderate growth (10-20%)"),
    (0.0, 0.0, "Stable (0-10%)"),
    (-0.10, -0.10, "Declining (-10% to 0%)"),
    (float("-inf"), -0.20, "Rapid decline (below -10%)"),
]

MARGIN_TIERS: list[tuple[float, float, str]] = [
    (0.30, 0.15, "Premium margins (30%+)"),
    (0.20, 0.08, "Strong margins (20-30%)"),
    (0.15, 0.0, "Average margins (15-20%)"),
    (0.10, -0.08, "Below-average margins (10-15%)"),
    (0.0, -0.15, "Thin margins (0-10%)"),
    (float("-inf"), -0.25, "Negative margins"),
]

OWNER_DEPENDENCY_MAX_DISCOUNT = -0.25
MIN_MEANINGFUL_IMPACT = 0.02

REVENUE_MODEL_PREMIUMS: dict[str, float] = {
    "SUBSCRIPTION_SAAS": 0.25,
    "RECURRING_CONTRACTS": 0.12,
    "TRANSACTIONAL": 0.0,
    "PROJECT_BASED": -0.05,
}
GENERIC_RECURRING_PREMIUM = 0.15


def infer_size_category(revenue: Optional[float]) -> Optional[str]:
    """Map annual revenue onto a size band; None when revenue is unknown."""
    if revenue is None:
        return None
    for limit, category in _SIZE_BAND_LIMITS:
        if revenue < limit:
            return category.value
    return RevenueSizeCategory.OVER_25M.value


def size_category(profile: AdjustmentProfile) -> Optional[str]:
    """Explicit size band if given, otherwise inferred from revenue."""
    if profile.revenue_size_category:
        return str(profile.revenue_size_category).upper()
    return infer_size_category(profile.revenue)


def size_discount_rate(profile: AdjustmentProfile) -> float:
    """Signed size discount (<= 0) for the profile's band, 0 when unknown."""
    category = size_category(profile)
    if category is None:
        return 0.0
    return SIZE_DISCOUNTS.get(category, 0.0)


def _percent(value: float) -> str:
    return f"{abs(value) * 100:.0f}%"


@register_adjuster(
    adjuster_id="size_discount",
    label="Size Discount",
    description="Smaller private companies trade below larger peers.",
    kind=QUALITY,
)
def adjust_for_size(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    category = size_category(profile)
    impact = SIZE_DISCOUNTS.get(category, 0.0) if category else 0.0
    if impact == 0:
        return []
    return [
        AdjustmentEntry(
            factor="size_discount",
            name="Size Discount",
            impact=impact,
            explanation=(
                f"Private companies in the {category} revenue band typically trade at a "
                f"{_percent(impact)} discount to larger comparables."
            ),
            category=AdjustmentCategory.SIZE,
        )
    ]


@register_adjuster(
    adjuster_id="growth_adjustment",
    label="Growth Premium/Discount",
    description="Buyers pay for future earnings power.",
    kind=QUALITY,
)
def adjust_for_growth(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    growth = profile.revenue_growth_rate
    if growth is None:
        return []
    impact, label = next((i, lbl) for floor, i, lbl in GROWTH_TIERS if growth >= floor)
    if impact == 0:
        return []
    premium = impact > 0
    return [
        AdjustmentEntry(
            factor="growth_adjustment",
            name="Growth Premium" if premium else "Growth Discount",
            impact=impact,
            explanation=(
                f"Revenue growth of {growth * 100:.1f}% ({label}) warrants a "
                f"{_percent(impact)} {'premium' if premium else 'discount'}."
            ),
            category=AdjustmentCategory.GROWTH,
        )
    ]


@register_adjuster(
    adjuster_id="margin_adjustment",
    label="Margin Premium/Discount",
    description="Margins signal pricing power and efficiency.",
    kind=QUALITY,
)
def adjust_for_margin(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    margin = profile.ebitda_margin
    if margin is None:
        return []
    impact, label = next((i, lbl) for floor, i, lbl in MARGIN_TIERS if margin >= floor)
    if impact == 0:
        return []
    premium = impact > 0
    return [
        AdjustmentEntry(
            factor="margin_adjustment",
            name="Margin Premium" if premium else "Margin Discount",
            impact=impact,
            explanation=(
                f"EBITDA margin of {margin * 100:.1f}% ({label}) warrants a "
                f"{_percent(impact)} {'premium' if premium else 'discount'}."
            ),
            category=AdjustmentCategory.PROFITABILITY,
        )
    ]


@register_adjuster(
    adjuster_id="owner_dependency",
    label="Owner Dependency Discount",
    description="Discount scaled by the Transferability category score.",
    kind=QUALITY,
)
def adjust_for_owner_dependency(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    score = profile.transferability_score
    if score is None:
        return []
    impact = OWNER_DEPENDENCY_MAX_DISCOUNT * (1 - score)
    if abs(impact) < MIN_MEANINGFUL_IMPACT:
        return []
    if score < 0.3:
        severity = "high"
    elif score < 0.6:
        severity = "moderate"
    else:
        severity = "low"
    return [
        AdjustmentEntry(
            factor="owner_dependency",
            name="Owner Dependency Discount",
            impact=impact,
            explanation=(
                f"Transferability score of {score * 100:.0f}% indicates {severity} owner "
                f"dependency, a {_percent(impact)} discount."
            ),
            category=AdjustmentCategory.RISK,
            addressable=True,
        )
    ]


@register_adjuster(
    adjuster_id="recurring_revenue",
    label="Revenue Model Premium/Discount",
    description="Predictable revenue lowers buyer risk.",
    kind=QUALITY,
)
def adjust_for_revenue_model(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    model = str(profile.revenue_model).upper() if profile.revenue_model else None
    impact = REVENUE_MODEL_PREMIUMS.get(model, 0.0) if model else 0.0
    if impact != 0:
        premium = impact > 0
        return [
            AdjustmentEntry(
                factor="recurring_revenue",
                name="Recurring Revenue Premium" if premium else "Revenue Model Discount",
                impact=impact,
                explanation=(
                    f"{model} revenue model warrants a {_percent(impact)} "
                    f"{'premium' if premium else 'discount'}."
                ),
                category=AdjustmentCategory.QUALITY,
            )
        ]
    if profile.is_recurring_revenue:
        return [
            AdjustmentEntry(
                factor="recurring_revenue",
                name="Recurring Revenue Premium",
                impact=GENERIC_RECURRING_PREMIUM,
                explanation=(
                    f"Recurring revenue warrants a {_percent(GENERIC_RECURRING_PREMIUM)} premium."
                ),
                category=AdjustmentCategory.QUALITY,
            )
        ]
    return []


def quality_adjustments(profile: AdjustmentProfile) -> QualityAdjustmentResult:
    """Run every registered quality adjuster against the profile."""
    adjustments: list[AdjustmentEntry] = []
    for definition in get_adjusters(QUALITY):
        adjustments.extend(definition.adjuster_fn(profile))

    total = sum(a.impact for a in adjustments if a.enabled and a.impact is not None)
    multiplier = max(MIN_ADJUSTMENT_MULTIPLIER, min(1 + total, MAX_ADJUSTMENT_MULTIPLIER))
    logger.debug(
        "Quality adjustments: %s total=%.3f multiplier=%.3f",
        [a.factor for a in adjustments],
        total,
        multiplier,
    )
    return QualityAdjustmentResult(
        adjustments=adjustments,
        total_adjustment=total,
        adjustment_multiplier=multiplier,
    )
