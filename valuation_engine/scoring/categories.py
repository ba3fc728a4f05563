"""Per-category readiness scores and the composite Buyer Readiness Index."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from valuation_engine.engine.result import CategoryScore
from valuation_engine.methodology.schema import CategoryWeights
from valuation_engine.models.assessment import ReconciledResponse
from valuation_engine.models.enums import BRI_CATEGORIES, BriCategory

logger = logging.getLogger(__name__)

_CATEGORY_ORDER = {category.value: i for i, category in enumerate(BRI_CATEGORIES)}


def _normalize_category(category: str) -> str:
    name = category.value if isinstance(category, BriCategory) else str(category)
    return name.upper()


def category_scores(
    reconciled: Mapping[str, ReconciledResponse],
    neutral_score: float = 0.0,
) -> list[CategoryScore]:
    """Aggregate reconciled responses into one score per category.

    score = sum(weight * score_value) / sum(weight). A category whose answered
    questions carry no points gets ``neutral_score`` instead of dividing by
    zero. Categories with no answered questions are not returned at all.
    """
    earned: dict[str, float] = {}
    total: dict[str, float] = {}
    counts: dict[str, int] = {}

    for response in reconciled.values():
        cat = _normalize_category(response.category)
        earned[cat] = earned.get(cat, 0.0) + response.weight * response.score_value
        total[cat] = total.get(cat, 0.0) + response.weight
        counts[cat] = counts.get(cat, 0) + 1

    ordered = sorted(total, key=lambda c: (_CATEGORY_ORDER.get(c, len(_CATEGORY_ORDER)), c))
    scores: list[CategoryScore] = []
    for cat in ordered:
        if cat not in _CATEGORY_ORDER:
            logger.warning("Responses in unknown category '%s' are scored but not weighted", cat)
        points = total[cat]
        score = earned[cat] / points if points > 0 else neutral_score
        scores.append(
            CategoryScore(
                category=cat,
                earned_points=earned[cat],
                total_points=points,
                score=score,
                question_count=counts[cat],
            )
        )
    return scores


def get_category_score(
    scores: list[CategoryScore],
    category: BriCategory | str,
    default: Optional[float] = None,
) -> Optional[float]:
    """Score for one category, or ``default`` if it has not been assessed."""
    name = _normalize_category(category)
    for cs in scores:
        if cs.category == name:
            return cs.score
    return default


def weighted_bri(scores: list[CategoryScore], weights: CategoryWeights) -> float:
    """Composite BRI in [0, 1].

    Sum of score * weight over the six canonical categories. Unassessed
    categories are skipped, so they contribute nothing rather than a guessed
    value.
    """
    bri = 0.0
    for category in BRI_CATEGORIES:
        score = get_category_score(scores, category)
        if score is None:
            continue
        bri += score * weights.get(category)
    return max(0.0, min(1.0, bri))


def resolve_weights(
    company_weights: Optional[Mapping[str, Any] | CategoryWeights],
    global_weights: Optional[CategoryWeights] = None,
    default_weights: Optional[CategoryWeights] = None,
) -> CategoryWeights:
    """Pick the weights for a run.

    Priority: company override > global custom > system defaults. An
    override that does not sum to ~1.0 raises instead of being normalised.
    """
    if company_weights is not None:
        if isinstance(company_weights, CategoryWeights):
            return company_weights
        return CategoryWeights.from_mapping(company_weights)
    if global_weights is not None:
        return global_weights
    return default_weights or CategoryWeights()
