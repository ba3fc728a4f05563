from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from valuation_engine.methodology.schema import IndustryMultipleRange

from .assessment import AssessmentResponse, CoreFactors
from .enums import EbitdaAdjustmentType


@dataclass(frozen=True)
class EbitdaAdjustment:
    """A single add-back or deduction on the EBITDA bridge."""

    description: str
    amount: float
    type: EbitdaAdjustmentType = EbitdaAdjustmentType.ADD_BACK


@dataclass(frozen=True)
class EbitdaInputs:
    """Financial inputs used to derive adjusted EBITDA.

    If ``adjusted_ebitda`` is set the caller has already normalised EBITDA
    and the bridge is skipped.
    """

    annual_revenue: Optional[float] = None
    annual_ebitda: Optional[float] = None
    owner_compensation: Optional[float] = None
    adjustments: tuple[EbitdaAdjustment, ...] = ()
    adjusted_ebitda: Optional[float] = None


@dataclass(frozen=True)
class CompanyProfile:
    """Buyer-facing facts that are not captured by assessment questions."""

    revenue_growth_rate: Optional[float] = None
    top_customer_concentration: Optional[float] = None
    top3_customer_concentration: Optional[float] = None
    is_recurring_revenue: bool = False

    def __post_init__(self) -> None:
        for name in ("top_customer_concentration", "top3_customer_concentration"):
            value = getattr(self, name)
            if value is not None and not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be 0-1.0, got {value}")


@dataclass(frozen=True)
class AdjustmentProfile:
    """Everything the quality and risk adjusters look at for one company."""

    revenue: Optional[float] = None
    revenue_size_category: Optional[str] = None
    revenue_model: Optional[str] = None
    revenue_growth_rate: Optional[float] = None
    ebitda_margin: Optional[float] = None
    top_customer_concentration: Optional[float] = None
    top3_customer_concentration: Optional[float] = None
    is_recurring_revenue: bool = False
    owner_involvement: Optional[str] = None
    transferability_score: Optional[float] = None
    financial_score: Optional[float] = None
    legal_tax_score: Optional[float] = None
    assessed_category_count: int = 0
    has_core_factors: bool = True


@dataclass
class ValuationInputs:
    """Unified input object for one engine run.

    ``response_lists`` must be in priority order, most authoritative first
    (the in-progress round before older completed rounds).
    A blank ``snapshot_id`` is replaced by a content hash of the result.
    """

    multiples: IndustryMultipleRange
    company_id: str = ""
    core_factors: Optional[CoreFactors] = None
    response_lists: list[list[AssessmentResponse]] = field(default_factory=list)
    ebitda: EbitdaInputs = field(default_factory=EbitdaInputs)
    profile: CompanyProfile = field(default_factory=CompanyProfile)
    company_weights: Optional[dict[str, Any]] = None
    alpha: Optional[float] = None
    snapshot_id: str = ""
    snapshot_reason: str = "Assessment completed"
    calculated_at: Optional[datetime] = None
