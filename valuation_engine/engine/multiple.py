"""Buyer-readiness multiple: Core Score positions, BRI discounts.

    base_multiple     = L + core_score * (H - L)
    discount_fraction = (1 - bri_score) ** alpha
    final_multiple    = L + (base_multiple - L) * (1 - discount_fraction)

Only the span above the industry floor is ever discounted, so
final_multiple >= L for every score in [0, 1].
"""

from __future__ import annotations

import logging

from valuation_engine.engine.result import MultipleResult

logger = logging.getLogger(__name__)

ALPHA = 1.4
ALPHA_MIN = 1.0
ALPHA_MAX = 2.0
# Product-tested band; values outside it are legal but unusual.
ALPHA_RECOMMENDED = (1.3, 1.6)


def validate_alpha(alpha: float) -> float:
    if not (ALPHA_MIN <= alpha <= ALPHA_MAX):
        raise ValueError(f"alpha must be {ALPHA_MIN}-{ALPHA_MAX}, got {alpha}")
    low, high = ALPHA_RECOMMENDED
    if not (low <= alpha <= high):
        logger.warning("alpha %.2f is outside the recommended %.1f-%.1f band", alpha, low, high)
    return alpha


def validate_range(low: float, high: float) -> None:
    if low < 0 or high < 0:
        raise ValueError("industry multiples cannot be negative")
    if low > high:
        raise ValueError(
            f"Industry multiple range must be ordered: low ({low}) <= high ({high})"
        )


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def base_multiple(low: float, high: float, core_score: float) -> float:
    """Position the company inside the industry band by Core Score."""
    return low + _clamp_unit(core_score) * (high - low)


def discount_fraction(bri_score: float, alpha: float = ALPHA) -> float:
    """Convex buyer skepticism curve: 0 at BRI 1.0, 1 at BRI 0.0."""
    return (1.0 - _clamp_unit(bri_score)) ** alpha


def valuation(
    adjusted_ebitda: float,
    low: float,
    high: float,
    core_score: float,
    bri_score: float,
    alpha: float = ALPHA,
) -> MultipleResult:
    """Run the buyer-readiness valuation.

    potential_value is what the business would be worth at a perfect BRI
    (zero discount); value_gap is never negative.
    """
    validate_range(low, high)
    validate_alpha(alpha)

    base = base_multiple(low, high, core_score)
    discount = discount_fraction(bri_score, alpha)
    final = low + (base - low) * (1.0 - discount)
    # Keep float rounding from stepping outside [L, base]
    final = min(max(final, low), base)

    if adjusted_ebitda > 0:
        current = adjusted_ebitda * final
        potential = adjusted_ebitda * base
    else:
        current = 0.0
        potential = 0.0

    return MultipleResult(
        base_multiple=base,
        discount_fraction=discount,
        final_multiple=final,
        current_value=current,
        potential_value=potential,
        value_gap=max(0.0, potential - current),
    )


def valuation_from_percentages(
    adjusted_ebitda: float,
    low: float,
    high: float,
    core_score: float,
    bri_score_percent: float,
    alpha: float = ALPHA,
) -> MultipleResult:
    """Same as ``valuation`` with BRI on the 0-100 display scale."""
    if not (0 <= bri_score_percent <= 100):
        raise ValueError(f"bri_score_percent must be 0-100, got {bri_score_percent}")
    return valuation(adjusted_ebitda, low, high, core_score, bri_score_percent / 100, alpha)
