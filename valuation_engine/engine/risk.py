"""Named risk discounts applied multiplicatively to the quality-adjusted multiple.

    risk_multiplier     = product(1 - rate_i)
    risk_severity_score = 1 - risk_multiplier

Every private company carries a DLOM. The remaining discounts fire only when
their inputs are known and cross a threshold.
"""

from __future__ import annotations

import logging

from valuation_engine.engine.quality import size_category
from valuation_engine.engine.registry import RISK, get_adjusters, register_adjuster
from valuation_engine.engine.result import AdjustmentEntry, RiskDiscountResult
from valuation_engine.models.company import AdjustmentProfile
from valuation_engine.models.enums import AdjustmentCategory

logger = logging.getLogger(__name__)

DLOM_NAME = "Lack of Marketability (DLOM)"
KEY_PERSON_NAME = "Key-Person Risk"
CONCENTRATION_SINGLE_NAME = "Customer Concentration (Single)"
CONCENTRATION_TOP3_NAME = "Customer Concentration (Top 3)"
DOCUMENTATION_NAME = "Documentation Quality"
LEGAL_TAX_NAME = "Legal/Tax Risk"

# Discounts a company can remove through remediation
ADDRESSABLE_RISK_NAMES: frozenset[str] = frozenset(
    {
        KEY_PERSON_NAME,
        CONCENTRATION_SINGLE_NAME,
        CONCENTRATION_TOP3_NAME,
        DOCUMENTATION_NAME,
        LEGAL_TAX_NAME,
    }
)
# Discounts that only a transaction removes
STRUCTURAL_RISK_NAMES: frozenset[str] = frozenset({DLOM_NAME})

DLOM_BY_SIZE: dict[str, float] = {
    "UNDER_500K": 0.25,
    "FROM_500K_TO_1M": 0.22,
    "FROM_1M_TO_3M": 0.18,
    "FROM_3M_TO_10M": 0.15,
    "FROM_10M_TO_25M": 0.12,
    "OVER_25M": 0.10,
}
DEFAULT_DLOM = 0.18

KEY_PERSON_RATES: dict[str, float] = {
    "CRITICAL": 0.25,
    "HIGH": 0.15,
    "MODERATE": 0.08,
    "LOW": 0.03,
    "MINIMAL": 0.0,
}
KEY_PERSON_MAX_RATE = 0.30
KEY_PERSON_MIN_RATE = 0.02

CONCENTRATION_SINGLE_HIGH = (0.30, 0.15)  # (threshold, rate)
CONCENTRATION_SINGLE_MODERATE = (0.20, 0.08)
CONCENTRATION_TOP3_HIGH = (0.60, 0.10)
CONCENTRATION_TOP3_MODERATE = (0.40, 0.05)

DOCS_DISCOUNT_THRESHOLD = 0.50
DOCS_DISCOUNT_RATE = 0.05
LEGAL_DISCOUNT_THRESHOLD = 0.40
LEGAL_DISCOUNT_RATE = 0.08

# risk_multiplier never reaches 0
MIN_RISK_MULTIPLIER = 1e-6


def is_addressable(name: str) -> bool:
    return name in ADDRESSABLE_RISK_NAMES


def _discount(name: str, factor: str, rate: float, explanation: str) -> AdjustmentEntry:
    if not (0 <= rate < 1):
        raise ValueError(f"risk discount rate must be in [0, 1), got {rate}")
    return AdjustmentEntry(
        factor=factor,
        name=name,
        rate=rate,
        explanation=explanation,
        category=AdjustmentCategory.RISK,
        addressable=is_addressable(name),
    )


def dlom_rate(profile: AdjustmentProfile) -> float:
    category = size_category(profile)
    if category is None:
        return DEFAULT_DLOM
    return DLOM_BY_SIZE.get(category, DEFAULT_DLOM)


@register_adjuster(
    adjuster_id="dlom",
    label=DLOM_NAME,
    description="Private-company illiquidity discount by size band.",
    kind=RISK,
)
def discount_for_marketability(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    rate = dlom_rate(profile)
    return [
        _discount(
            DLOM_NAME,
            "dlom",
            rate,
            f"Private companies are less liquid than public ones; a size-appropriate "
            f"DLOM of {rate * 100:.0f}% applies.",
        )
    ]


@register_adjuster(
    adjuster_id="key_person",
    label=KEY_PERSON_NAME,
    description="Owner involvement, moderated by the Transferability score.",
    kind=RISK,
)
def discount_for_key_person(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    involvement = str(profile.owner_involvement).upper() if profile.owner_involvement else ""
    base_rate = KEY_PERSON_RATES.get(involvement, 0.0)
    if base_rate == 0:
        return []

    rate = base_rate
    transferability = profile.transferability_score
    if transferability is not None:
        # Scales the rate by 0.75 at full transferability, 1.25 at none
        modifier = 1 - (transferability - 0.5) * 0.5
        rate = max(0.0, min(KEY_PERSON_MAX_RATE, base_rate * modifier))
    if rate < KEY_PERSON_MIN_RATE:
        return []

    shown = f"{transferability * 100:.0f}%" if transferability is not None else "N/A"
    return [
        _discount(
            KEY_PERSON_NAME,
            "key_person",
            round(rate, 2),
            f'Owner involvement "{involvement}" with transferability score of {shown}; '
            f"dependence on the current owner creates acquisition risk.",
        )
    ]


@register_adjuster(
    adjuster_id="customer_concentration",
    label="Customer Concentration",
    description="Single-customer and top-3 revenue concentration.",
    kind=RISK,
)
def discount_for_concentration(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    discounts: list[AdjustmentEntry] = []
    single = profile.top_customer_concentration
    top3 = profile.top3_customer_concentration

    single_high = False
    if single is not None:
        if single >= CONCENTRATION_SINGLE_HIGH[0]:
            single_high = True
            discounts.append(
                _discount(
                    CONCENTRATION_SINGLE_NAME,
                    "customer_concentration_single",
                    CONCENTRATION_SINGLE_HIGH[1],
                    f"Top customer represents {single * 100:.0f}% of revenue.",
                )
            )
        elif single >= CONCENTRATION_SINGLE_MODERATE[0]:
            discounts.append(
                _discount(
                    CONCENTRATION_SINGLE_NAME,
                    "customer_concentration_single",
                    CONCENTRATION_SINGLE_MODERATE[1],
                    f"Top customer represents {single * 100:.0f}% of revenue, "
                    "a moderate concentration risk.",
                )
            )

    if not single_high and top3 is not None:
        if top3 >= CONCENTRATION_TOP3_HIGH[0]:
            rate = CONCENTRATION_TOP3_HIGH[1]
        elif top3 >= CONCENTRATION_TOP3_MODERATE[0]:
            rate = CONCENTRATION_TOP3_MODERATE[1]
        else:
            rate = 0.0
        if rate:
            discounts.append(
                _discount(
                    CONCENTRATION_TOP3_NAME,
                    "customer_concentration_top3",
                    rate,
                    f"Top 3 customers represent {top3 * 100:.0f}% of revenue.",
                )
            )
    return discounts


@register_adjuster(
    adjuster_id="documentation_quality",
    label=DOCUMENTATION_NAME,
    description="Weak Financial category score.",
    kind=RISK,
)
def discount_for_documentation(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    score = profile.financial_score
    if score is None or score >= DOCS_DISCOUNT_THRESHOLD:
        return []
    return [
        _discount(
            DOCUMENTATION_NAME,
            "documentation_quality",
            DOCS_DISCOUNT_RATE,
            f"Financial documentation score of {score * 100:.0f}% is below the "
            f"{DOCS_DISCOUNT_THRESHOLD * 100:.0f}% threshold.",
        )
    ]


@register_adjuster(
    adjuster_id="legal_tax",
    label=LEGAL_TAX_NAME,
    description="Weak Legal/Tax category score.",
    kind=RISK,
)
def discount_for_legal_tax(profile: AdjustmentProfile) -> list[AdjustmentEntry]:
    score = profile.legal_tax_score
    if score is None or score >= LEGAL_DISCOUNT_THRESHOLD:
        return []
    return [
        _discount(
            LEGAL_TAX_NAME,
            "legal_tax",
            LEGAL_DISCOUNT_RATE,
            f"Legal/tax readiness score of {score * 100:.0f}% is below the "
            f"{LEGAL_DISCOUNT_THRESHOLD * 100:.0f}% threshold.",
        )
    ]


def combined_multiplier(discounts: list[AdjustmentEntry]) -> float:
    """product(1 - rate) over enabled discounts, floored above zero."""
    multiplier = 1.0
    for d in discounts:
        if d.enabled and d.rate is not None:
            multiplier *= 1 - d.rate
    return max(MIN_RISK_MULTIPLIER, multiplier)


def risk_discounts(profile: AdjustmentProfile) -> RiskDiscountResult:
    """Run every registered risk discount against the profile."""
    discounts: list[AdjustmentEntry] = []
    for definition in get_adjusters(RISK):
        discounts.extend(definition.adjuster_fn(profile))

    multiplier = combined_multiplier(discounts)
    logger.debug(
        "Risk discounts: %s multiplier=%.4f",
        [(d.name, d.rate) for d in discounts],
        multiplier,
    )
    return RiskDiscountResult(
        discounts=discounts,
        risk_multiplier=multiplier,
        risk_severity_score=1 - multiplier,
    )
