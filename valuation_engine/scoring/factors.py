"""Core Score: structural business quality from the six onboarding factors.

Each factor maps through one canonical ordinal table to [0, 1]. Both the
basic multiple calculation and the quality/risk adjusters read these tables;
nothing else in the package keeps its own copy.
"""

from __future__ import annotations

import logging
from typing import Optional

from valuation_engine.models.assessment import CoreFactors
from valuation_engine.models.enums import (
    AssetIntensity,
    GrossMarginProxy,
    LaborIntensity,
    OwnerInvolvement,
    RevenueModel,
    RevenueSizeCategory,
)

logger = logging.getLogger(__name__)

NEUTRAL_FACTOR_SCORE = 0.5

CORE_FACTOR_SCORES: dict[str, dict[str, float]] = {
    "revenue_model": {
        RevenueModel.PROJECT_BASED: 0.25,
        RevenueModel.TRANSACTIONAL: 0.5,
        RevenueModel.RECURRING_CONTRACTS: 0.75,
        RevenueModel.SUBSCRIPTION_SAAS: 1.0,
    },
    "gross_margin_proxy": {
        GrossMarginProxy.LOW: 0.25,
        GrossMarginProxy.MODERATE: 0.5,
        GrossMarginProxy.GOOD: 0.75,
        GrossMarginProxy.EXCELLENT: 1.0,
    },
    "labor_intensity": {
        LaborIntensity.VERY_HIGH: 0.25,
        LaborIntensity.HIGH: 0.5,
        LaborIntensity.MODERATE: 0.75,
        LaborIntensity.LOW: 1.0,
    },
    "asset_intensity": {
        AssetIntensity.ASSET_HEAVY: 0.33,
        AssetIntensity.MODERATE: 0.67,
        AssetIntensity.ASSET_LIGHT: 1.0,
    },
    "owner_involvement": {
        OwnerInvolvement.CRITICAL: 0.0,
        OwnerInvolvement.HIGH: 0.25,
        OwnerInvolvement.MODERATE: 0.5,
        OwnerInvolvement.LOW: 0.75,
        OwnerInvolvement.MINIMAL: 1.0,
    },
}

# Revenue size is scored but kept out of the Core Score average: it already
# drives the size discount and the DLOM rate.
REVENUE_SIZE_SCORES: dict[str, float] = {
    RevenueSizeCategory.UNDER_500K: 0.2,
    RevenueSizeCategory.FROM_500K_TO_1M: 0.4,
    RevenueSizeCategory.FROM_1M_TO_3M: 0.6,
    RevenueSizeCategory.FROM_3M_TO_10M: 0.8,
    RevenueSizeCategory.FROM_10M_TO_25M: 0.9,
    RevenueSizeCategory.OVER_25M: 1.0,
}

CORE_SCORE_FACTORS: tuple[str, ...] = tuple(CORE_FACTOR_SCORES)


def score_factor(factor_name: str, value: Optional[str]) -> float:
    """Look up one factor value, falling back to 0.5 when unknown."""
    if factor_name == "revenue_size_category":
        table = REVENUE_SIZE_SCORES
    else:
        table = CORE_FACTOR_SCORES.get(factor_name)
        if table is None:
            raise ValueError(f"Unknown core factor '{factor_name}'")

    if value is None:
        return NEUTRAL_FACTOR_SCORE

    key = value.value if hasattr(value, "value") else str(value)
    score = table.get(key.upper())
    if score is None:
        logger.warning(
            "Unknown value '%s' for factor %s, using neutral score", value, factor_name
        )
        return NEUTRAL_FACTOR_SCORE
    return score


def factor_scores(factors: Optional[CoreFactors]) -> dict[str, float]:
    """Per-factor breakdown of the Core Score inputs."""
    if factors is None:
        return {name: NEUTRAL_FACTOR_SCORE for name in CORE_SCORE_FACTORS}
    return {name: score_factor(name, factors.get(name)) for name in CORE_SCORE_FACTORS}


def core_score(factors: Optional[CoreFactors]) -> float:
    """Unweighted mean of the factor scores; 0.5 when no profile exists yet."""
    if factors is None:
        logger.debug("No core factors supplied, using neutral core score")
        return NEUTRAL_FACTOR_SCORE

    missing = [name for name in CORE_SCORE_FACTORS if name not in factors.available_factors()]
    if missing:
        logger.debug("Core factors %s not supplied, scored as neutral", missing)

    scores = list(factor_scores(factors).values())
    return sum(scores) / len(scores)
