"""Split the distance to the industry ceiling into actionable buckets.

total_gap is (H - risk_adjusted_multiple) * adjusted EBITDA. It is allocated
in order:

1. addressable  -- value recovered by removing the remediable risk discounts
                   and the addressable quality discounts (owner dependency)
2. structural   -- DLOM plus the size discount, fixed in the near term
3. aspirational -- whatever remains up to H

Each bucket is capped by what is left of the total, so all three are >= 0
and they sum to total_gap.
"""

from __future__ import annotations

import logging
from typing import Iterable

from valuation_engine.engine.result import AdjustmentEntry, GapResult
from valuation_engine.engine.risk import STRUCTURAL_RISK_NAMES

logger = logging.getLogger(__name__)


def _product(discounts: Iterable[AdjustmentEntry]) -> float:
    result = 1.0
    for d in discounts:
        if d.enabled and d.rate is not None:
            result *= 1 - d.rate
    return result


def decompose_gap(
    adjusted_ebitda: float,
    industry_median_multiple: float,
    high: float,
    quality_adjusted_multiple: float,
    risk_adjusted_multiple: float,
    risk_discounts: list[AdjustmentEntry],
    size_discount_rate: float,
    quality_adjustments: Iterable[AdjustmentEntry] = (),
) -> GapResult:
    if adjusted_ebitda <= 0:
        return GapResult(addressable_gap=0.0, structural_gap=0.0, aspirational_gap=0.0, total_gap=0.0)

    total = max(0.0, high - risk_adjusted_multiple) * adjusted_ebitda

    structural_product = _product(d for d in risk_discounts if d.name in STRUCTURAL_RISK_NAMES)
    all_product = _product(risk_discounts)

    addressable_raw = max(0.0, quality_adjusted_multiple * (structural_product - all_product))
    addressable_raw *= adjusted_ebitda
    # Addressable quality discounts are priced against the median, like the size discount
    addressable_raw += sum(
        industry_median_multiple * -a.impact * adjusted_ebitda
        for a in quality_adjustments
        if a.addressable and a.enabled and a.impact is not None and a.impact < 0
    )
    structural_raw = quality_adjusted_multiple * (1 - structural_product) * adjusted_ebitda
    structural_raw += industry_median_multiple * abs(size_discount_rate) * adjusted_ebitda

    addressable = min(addressable_raw, total)
    remaining = total - addressable
    structural = min(max(0.0, structural_raw), remaining)
    aspirational = max(0.0, remaining - structural)

    logger.debug(
        "Gap: total=%.0f addressable=%.0f structural=%.0f aspirational=%.0f",
        total,
        addressable,
        structural,
        aspirational,
    )
    return GapResult(
        addressable_gap=addressable,
        structural_gap=structural,
        aspirational_gap=aspirational,
        total_gap=total,
    )
