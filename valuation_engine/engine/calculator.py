"""Core valuation engine.

Takes assessment responses + company profile + engine config -> produces a
ValuationSnapshot with the full audit trail.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
import logging
from typing import Optional

from valuation_engine.engine.adjuster import apply_adjustments
from valuation_engine.engine.delta import compute_delta
from valuation_engine.engine.ebitda import adjusted_ebitda
from valuation_engine.engine.gap import decompose_gap
from valuation_engine.engine.multiple import validate_alpha, valuation
from valuation_engine.engine.quality import size_discount_rate
from valuation_engine.engine.result import CategoryScore, EbitdaBridge, ValuationSnapshot
from valuation_engine.methodology.schema import EngineConfig
from valuation_engine.models.company import AdjustmentProfile, ValuationInputs
from valuation_engine.models.enums import BRI_CATEGORIES, BriCategory
from valuation_engine.scoring.categories import (
    category_scores,
    get_category_score,
    resolve_weights,
    weighted_bri,
)
from valuation_engine.scoring.factors import core_score
from valuation_engine.scoring.reconciler import reconcile_with_audit

logger = logging.getLogger(__name__)


class ValuationEngine:
    """Stateless engine that runs one valuation per call."""

    def calculate(
        self,
        inputs: ValuationInputs,
        config: Optional[EngineConfig] = None,
        previous: Optional[ValuationSnapshot] = None,
    ) -> ValuationSnapshot:
        """Run the full pipeline and return an immutable snapshot.

        reconcile -> category scores -> BRI -> core score -> adjusted EBITDA
        -> buyer-readiness multiple -> quality/risk adjustments -> gap.
        """
        config = config or EngineConfig()
        alpha = validate_alpha(inputs.alpha if inputs.alpha is not None else config.alpha)
        weights = resolve_weights(
            inputs.company_weights,
            global_weights=config.global_weights,
            default_weights=config.category_weights,
        )
        multiples = inputs.multiples
        warnings: list[str] = []

        # Scores
        reconciled, reconciliation = reconcile_with_audit(inputs.response_lists)
        scores = category_scores(reconciled, neutral_score=config.unanswered_category_score)
        unassessed = [c.value for c in BRI_CATEGORIES if get_category_score(scores, c) is None]
        if unassessed:
            warnings.append(
                f"Unassessed categories: {unassessed}. They contribute nothing to the BRI."
            )
        bri = weighted_bri(scores, weights)

        if inputs.core_factors is None:
            warnings.append("No core factors supplied; using neutral core score 0.5.")
        core = core_score(inputs.core_factors)

        # Adjusted EBITDA
        size_band = inputs.core_factors.revenue_size_category if inputs.core_factors else None
        bridge, ebitda_warnings = adjusted_ebitda(inputs.ebitda, multiples, size_band)
        warnings.extend(ebitda_warnings)
        ebitda = bridge.adjusted_ebitda

        # Multiples
        baseline = valuation(ebitda, multiples.low, multiples.high, core, bri, alpha)
        profile = self._build_profile(inputs, scores, bridge)
        adjusted = apply_adjustments(baseline, multiples.low, multiples.high, ebitda, profile)
        gap = decompose_gap(
            adjusted_ebitda=ebitda,
            industry_median_multiple=multiples.median_multiple,
            high=multiples.high,
            quality_adjusted_multiple=adjusted.quality_adjusted_multiple,
            risk_adjusted_multiple=adjusted.risk_adjusted_multiple,
            risk_discounts=adjusted.risk_discounts,
            size_discount_rate=size_discount_rate(profile),
            quality_adjustments=adjusted.quality_adjustments,
        )

        snapshot = ValuationSnapshot(
            snapshot_id=inputs.snapshot_id,
            company_id=inputs.company_id,
            snapshot_reason=inputs.snapshot_reason,
            calculated_at=inputs.calculated_at,
            adjusted_ebitda=ebitda,
            industry_multiple_low=multiples.low,
            industry_multiple_high=multiples.high,
            industry_median_multiple=multiples.median_multiple,
            alpha=alpha,
            category_weights={c.value: w for c, w in weights.as_dict().items()},
            core_score=core,
            bri_score=bri,
            category_scores=scores,
            base_multiple=baseline.base_multiple,
            discount_fraction=baseline.discount_fraction,
            final_multiple=baseline.final_multiple,
            current_value=baseline.current_value,
            potential_value=baseline.potential_value,
            value_gap=baseline.value_gap,
            quality_adjusted_multiple=adjusted.quality_adjusted_multiple,
            risk_adjusted_multiple=adjusted.risk_adjusted_multiple,
            risk_multiplier=adjusted.risk_multiplier,
            risk_severity_score=adjusted.risk_severity_score,
            total_quality_adjustment=adjusted.total_quality_adjustment,
            ev_low=adjusted.ev_low,
            ev_mid=adjusted.ev_mid,
            ev_high=adjusted.ev_high,
            spread_factor=adjusted.spread_factor,
            dlom_rate=adjusted.dlom_rate,
            dlom_amount=adjusted.dlom_amount,
            addressable_gap=gap.addressable_gap,
            structural_gap=gap.structural_gap,
            aspirational_gap=gap.aspirational_gap,
            total_gap=gap.total_gap,
            quality_adjustments=adjusted.quality_adjustments,
            risk_discounts=adjusted.risk_discounts,
            ebitda_bridge=bridge,
            reconciliation=reconciliation,
            warnings=warnings,
            previous_snapshot_id=previous.snapshot_id if previous else None,
        )
        if not snapshot.snapshot_id:
            snapshot = dataclasses.replace(snapshot, snapshot_id=self._fingerprint(snapshot))
        if previous is not None:
            snapshot = dataclasses.replace(snapshot, delta=compute_delta(previous, snapshot))

        logger.info(
            "Valuation %s for company %s: core=%.3f bri=%.3f final=%.2fx ev_mid=%.0f gap=%.0f",
            snapshot.snapshot_id,
            snapshot.company_id or "-",
            core,
            bri,
            baseline.final_multiple,
            adjusted.ev_mid,
            gap.total_gap,
        )
        return snapshot

    def _build_profile(
        self,
        inputs: ValuationInputs,
        scores: list[CategoryScore],
        bridge: EbitdaBridge,
    ) -> AdjustmentProfile:
        """Collect what the quality and risk adjusters need."""
        factors = inputs.core_factors
        revenue = inputs.ebitda.annual_revenue
        margin = bridge.adjusted_ebitda / revenue if revenue else None
        # A zero-point category holds only the neutral default, not a measured score
        measured = [c for c in scores if c.total_points > 0]
        assessed = sum(1 for c in BRI_CATEGORIES if get_category_score(measured, c) is not None)
        return AdjustmentProfile(
            revenue=revenue,
            revenue_size_category=factors.revenue_size_category if factors else None,
            revenue_model=factors.revenue_model if factors else None,
            revenue_growth_rate=inputs.profile.revenue_growth_rate,
            ebitda_margin=margin,
            top_customer_concentration=inputs.profile.top_customer_concentration,
            top3_customer_concentration=inputs.profile.top3_customer_concentration,
            is_recurring_revenue=inputs.profile.is_recurring_revenue,
            owner_involvement=factors.owner_involvement if factors else None,
            transferability_score=get_category_score(measured, BriCategory.TRANSFERABILITY),
            financial_score=get_category_score(measured, BriCategory.FINANCIAL),
            legal_tax_score=get_category_score(measured, BriCategory.LEGAL_TAX),
            assessed_category_count=assessed,
            has_core_factors=factors is not None,
        )

    def _fingerprint(self, snapshot: ValuationSnapshot) -> str:
        """Content hash of the snapshot; identical runs share an id."""
        payload = json.dumps(dataclasses.asdict(snapshot), sort_keys=True, default=str)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:32]
