"""Immutable result and audit trail data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from valuation_engine.models.assessment import ReconciliationEntry
from valuation_engine.models.enums import AdjustmentCategory


@dataclass(frozen=True)
class CategoryScore:
    """Points earned against points available for one BRI category."""

    category: str
    earned_points: float
    total_points: float
    score: float
    question_count: int = 0


@dataclass(frozen=True)
class AdjustmentEntry:
    """A single named, explainable quality adjustment or risk discount.

    Quality adjustments use a signed ``impact`` (-0.15 = 15% discount);
    risk discounts use a ``rate`` in [0, 1).
    """

    factor: str
    name: str
    explanation: str
    category: AdjustmentCategory
    impact: Optional[float] = None
    rate: Optional[float] = None
    addressable: bool = False
    enabled: bool = True


@dataclass(frozen=True)
class MultipleResult:
    """Base multiple positioned by Core Score, discounted by BRI."""

    base_multiple: float
    discount_fraction: float
    final_multiple: float
    current_value: float
    potential_value: float
    value_gap: float


@dataclass(frozen=True)
class QualityAdjustmentResult:
    adjustments: list[AdjustmentEntry]
    total_adjustment: float
    adjustment_multiplier: float


@dataclass(frozen=True)
class RiskDiscountResult:
    discounts: list[AdjustmentEntry]
    risk_multiplier: float
    risk_severity_score: float


@dataclass(frozen=True)
class AdjustmentResult:
    """Quality- and risk-adjusted multiples plus the enterprise-value band."""

    quality_adjusted_multiple: float
    risk_adjusted_multiple: float
    risk_multiplier: float
    risk_severity_score: float
    total_quality_adjustment: float
    ev_low: float
    ev_mid: float
    ev_high: float
    spread_factor: float
    dlom_rate: float
    dlom_amount: float
    quality_adjustments: list[AdjustmentEntry] = field(default_factory=list)
    risk_discounts: list[AdjustmentEntry] = field(default_factory=list)

    @property
    def adjustments(self) -> list[AdjustmentEntry]:
        """Quality adjustments followed by risk discounts."""
        return [*self.quality_adjustments, *self.risk_discounts]


@dataclass(frozen=True)
class GapResult:
    addressable_gap: float
    structural_gap: float
    aspirational_gap: float
    total_gap: float


@dataclass(frozen=True)
class EbitdaBridge:
    """How adjusted EBITDA was derived."""

    base_ebitda: float
    is_estimated: bool
    add_backs: float
    deductions: float
    owner_compensation: float
    market_salary: float
    owner_comp_adjustment: float
    adjusted_ebitda: float


@dataclass(frozen=True)
class SnapshotDelta:
    """Before/after differences against the previous snapshot."""

    previous_snapshot_id: str
    bri_score_change: float
    core_score_change: float
    final_multiple_change: float
    current_value_change: float
    ev_mid_change: float
    value_gap_change: float
    category_changes: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ValuationSnapshot:
    """Top-level result object for one complete engine run."""

    snapshot_id: str
    company_id: str
    snapshot_reason: str
    calculated_at: Optional[datetime]

    # Inputs as used
    adjusted_ebitda: float
    industry_multiple_low: float
    industry_multiple_high: float
    industry_median_multiple: float
    alpha: float
    category_weights: dict[str, float]

    # Scores
    core_score: float
    bri_score: float
    category_scores: list[CategoryScore]

    # Buyer-readiness valuation
    base_multiple: float
    discount_fraction: float
    final_multiple: float
    current_value: float
    potential_value: float
    value_gap: float

    # Quality/risk valuation
    quality_adjusted_multiple: float
    risk_adjusted_multiple: float
    risk_multiplier: float
    risk_severity_score: float
    total_quality_adjustment: float
    ev_low: float
    ev_mid: float
    ev_high: float
    spread_factor: float
    dlom_rate: float
    dlom_amount: float

    # Gap decomposition
    addressable_gap: float
    structural_gap: float
    aspirational_gap: float
    total_gap: float

    # Audit trail
    quality_adjustments: list[AdjustmentEntry] = field(default_factory=list)
    risk_discounts: list[AdjustmentEntry] = field(default_factory=list)
    ebitda_bridge: Optional[EbitdaBridge] = None
    reconciliation: list[ReconciliationEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    previous_snapshot_id: Optional[str] = None
    delta: Optional[SnapshotDelta] = None

    def get_category_score(self, category: str) -> Optional[float]:
        for cs in self.category_scores:
            if cs.category == category:
                return cs.score
        return None
