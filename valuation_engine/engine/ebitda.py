"""Adjusted EBITDA bridge.

adjusted = base EBITDA + add-backs - deductions + (owner comp - market salary)

The owner-compensation term is signed: an owner paid below market reduces
adjusted EBITDA because a buyer must budget a market-rate replacement.
"""

from __future__ import annotations

import logging
from typing import Optional

from valuation_engine.engine.result import EbitdaBridge
from valuation_engine.methodology.schema import IndustryMultipleRange
from valuation_engine.models.company import EbitdaInputs
from valuation_engine.models.enums import EbitdaAdjustmentType

logger = logging.getLogger(__name__)

# Market salary for a replacement owner/CEO, by revenue size category.
MARKET_SALARY_BY_REVENUE: dict[str, float] = {
    "UNDER_500K": 80_000,
    "FROM_500K_TO_1M": 120_000,
    "FROM_1M_TO_3M": 150_000,
    "FROM_3M_TO_10M": 200_000,
    "FROM_10M_TO_25M": 300_000,
    "OVER_25M": 400_000,
}
DEFAULT_MARKET_SALARY = 150_000

# 95th percentile EBITDA margin for SMBs; estimates above it are capped.
MAX_ESTIMATED_MARGIN = 0.35


def market_salary(revenue_size_category: Optional[str]) -> float:
    """Replacement salary benchmark, $150K when the size band is unknown."""
    if not revenue_size_category:
        return DEFAULT_MARKET_SALARY
    return MARKET_SALARY_BY_REVENUE.get(str(revenue_size_category).upper(), DEFAULT_MARKET_SALARY)


def owner_comp_adjustment(
    owner_compensation: float, revenue_size_category: Optional[str]
) -> float:
    """Signed normalisation of owner pay against the market benchmark."""
    return owner_compensation - market_salary(revenue_size_category)


def estimate_ebitda_from_revenue(revenue: float, multiples: IndustryMultipleRange) -> float:
    """Blend conservative and optimistic EBITDA implied by revenue multiples.

    ebitda_low  = revenue * revenue_low / ebitda_high
    ebitda_high = revenue * revenue_high / ebitda_low

    The blend is capped at a 35% implied margin and rounded to the nearest
    $100,000.
    """
    if revenue <= 0:
        return 0.0
    if multiples.low == 0 or multiples.high == 0:
        return 0.0
    if multiples.revenue_low is None or multiples.revenue_high is None:
        return 0.0

    ebitda_low = revenue * multiples.revenue_low / multiples.high
    ebitda_high = revenue * multiples.revenue_high / multiples.low
    blended = (ebitda_low + ebitda_high) / 2
    capped = min(blended, revenue * MAX_ESTIMATED_MARGIN)
    return float(round(capped / 100_000) * 100_000)


def adjusted_ebitda(
    inputs: EbitdaInputs,
    multiples: IndustryMultipleRange,
    revenue_size_category: Optional[str] = None,
) -> tuple[EbitdaBridge, list[str]]:
    """Derive adjusted EBITDA and the bridge that explains it.

    Returns:
        Tuple of (EbitdaBridge, list of warning strings).
    """
    warnings: list[str] = []
    add_backs = sum(
        a.amount for a in inputs.adjustments if a.type == EbitdaAdjustmentType.ADD_BACK
    )
    deductions = sum(
        a.amount for a in inputs.adjustments if a.type == EbitdaAdjustmentType.DEDUCTION
    )
    benchmark = market_salary(revenue_size_category)

    if inputs.adjusted_ebitda is not None:
        return (
            EbitdaBridge(
                base_ebitda=inputs.adjusted_ebitda,
                is_estimated=False,
                add_backs=0.0,
                deductions=0.0,
                owner_compensation=0.0,
                market_salary=benchmark,
                owner_comp_adjustment=0.0,
                adjusted_ebitda=inputs.adjusted_ebitda,
            ),
            warnings,
        )

    is_estimated = False
    if inputs.annual_ebitda is not None and inputs.annual_ebitda > 0:
        base = inputs.annual_ebitda
    elif inputs.annual_revenue:
        base = estimate_ebitda_from_revenue(inputs.annual_revenue, multiples)
        is_estimated = True
        warnings.append(
            f"EBITDA not reported; estimated {base:,.0f} from revenue multiples."
        )
    else:
        base = 0.0
        warnings.append("Neither EBITDA nor revenue supplied; adjusted EBITDA is 0.")

    if inputs.owner_compensation is not None:
        owner_comp = inputs.owner_compensation
        owner_adj = owner_comp_adjustment(owner_comp, revenue_size_category)
    else:
        owner_comp = 0.0
        owner_adj = 0.0

    result = base + add_backs - deductions + owner_adj
    logger.debug(
        "EBITDA bridge: base=%.0f add_backs=%.0f deductions=%.0f owner_adj=%.0f -> %.0f",
        base,
        add_backs,
        deductions,
        owner_adj,
        result,
    )
    if result <= 0:
        warnings.append("Adjusted EBITDA is not positive; enterprise values are floored at 0.")

    return (
        EbitdaBridge(
            base_ebitda=base,
            is_estimated=is_estimated,
            add_backs=add_backs,
            deductions=deductions,
            owner_compensation=owner_comp,
            market_salary=benchmark,
            owner_comp_adjustment=owner_adj,
            adjusted_ebitda=result,
        ),
        warnings,
    )
