"""Quality and risk adjustment of the buyer-readiness multiple.

    quality_adjusted = clamp(base_multiple * quality_multiplier, L, H)
    risk_adjusted    = quality_adjusted * risk_multiplier
    ev_mid           = adjusted_ebitda * risk_adjusted
    ev_low, ev_high  = ev_mid * (1 -/+ spread_factor)
"""

from __future__ import annotations

import logging

from valuation_engine.engine.quality import quality_adjustments
from valuation_engine.engine.result import AdjustmentResult, MultipleResult
from valuation_engine.engine.risk import DLOM_NAME, risk_discounts
from valuation_engine.models.company import AdjustmentProfile
from valuation_engine.models.enums import BRI_CATEGORIES

logger = logging.getLogger(__name__)

# (minimum assessed categories, spread), checked top-down
SPREAD_BY_ASSESSED_CATEGORIES: list[tuple[int, float]] = [
    (len(BRI_CATEGORIES), 0.15),
    (3, 0.25),
    (1, 0.35),
    (0, 0.40),
]
MISSING_CORE_FACTORS_SPREAD = 0.05
MAX_SPREAD = 0.50


def spread_factor(assessed_category_count: int, has_core_factors: bool = True) -> float:
    """Width of the EV band; fewer assessed categories means a wider band."""
    spread = next(
        s for minimum, s in SPREAD_BY_ASSESSED_CATEGORIES if assessed_category_count >= minimum
    )
    if not has_core_factors:
        spread += MISSING_CORE_FACTORS_SPREAD
    return min(spread, MAX_SPREAD)


def dlom_amount(ev_mid: float, rate: float) -> float:
    """Dollar value of the DLOM already embedded in ``ev_mid``."""
    if ev_mid <= 0 or rate <= 0:
        return 0.0
    return ev_mid * rate / (1 - rate)


def apply_adjustments(
    baseline: MultipleResult,
    low: float,
    high: float,
    adjusted_ebitda: float,
    profile: AdjustmentProfile,
) -> AdjustmentResult:
    """Apply quality adjustments and risk discounts to the baseline multiple."""
    quality = quality_adjustments(profile)
    quality_adjusted = baseline.base_multiple * quality.adjustment_multiplier
    quality_adjusted = max(low, min(high, quality_adjusted))

    risk = risk_discounts(profile)
    risk_adjusted = quality_adjusted * risk.risk_multiplier

    ev_mid = max(0.0, adjusted_ebitda * risk_adjusted)
    spread = spread_factor(profile.assessed_category_count, profile.has_core_factors)
    ev_low = ev_mid * (1 - spread)
    ev_high = ev_mid * (1 + spread)

    dlom = next((d.rate for d in risk.discounts if d.name == DLOM_NAME and d.enabled), 0.0)

    logger.debug(
        "Adjusted multiple: base=%.3f quality=%.3f risk=%.3f ev_mid=%.0f spread=%.2f",
        baseline.base_multiple,
        quality_adjusted,
        risk_adjusted,
        ev_mid,
        spread,
    )
    return AdjustmentResult(
        quality_adjusted_multiple=quality_adjusted,
        risk_adjusted_multiple=risk_adjusted,
        risk_multiplier=risk.risk_multiplier,
        risk_severity_score=risk.risk_severity_score,
        total_quality_adjustment=quality.total_adjustment,
        ev_low=ev_low,
        ev_mid=ev_mid,
        ev_high=ev_high,
        spread_factor=spread,
        dlom_rate=dlom,
        dlom_amount=dlom_amount(ev_mid, dlom),
        quality_adjustments=quality.adjustments,
        risk_discounts=risk.discounts,
    )
