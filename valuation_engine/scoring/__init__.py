"""Answer reconciliation and score aggregation."""

from .categories import category_scores, get_category_score, resolve_weights, weighted_bri
from .factors import core_score, factor_scores
from .reconciler import reconcile, reconcile_with_audit

__all__ = [
    "category_scores",
    "core_score",
    "factor_scores",
    "get_category_score",
    "reconcile",
    "reconcile_with_audit",
    "resolve_weights",
    "weighted_bri",
]
