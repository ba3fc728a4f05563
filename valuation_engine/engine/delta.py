from __future__ import annotations

from valuation_engine.engine.result import SnapshotDelta, ValuationSnapshot


def compute_delta(previous: ValuationSnapshot, current: ValuationSnapshot) -> SnapshotDelta:
    """Differences (current - previous) for the headline numbers.

    Category changes cover every category scored in either snapshot; a
    category missing on one side counts as 0 there.
    """
    categories = [cs.category for cs in previous.category_scores]
    categories += [
        cs.category for cs in current.category_scores if cs.category not in categories
    ]
    category_changes = {
        cat: (current.get_category_score(cat) or 0.0) - (previous.get_category_score(cat) or 0.0)
        for cat in categories
    }
    return SnapshotDelta(
        previous_snapshot_id=previous.snapshot_id,
        bri_score_change=current.bri_score - previous.bri_score,
        core_score_change=current.core_score - previous.core_score,
        final_multiple_change=current.final_multiple - previous.final_multiple,
        current_value_change=current.current_value - previous.current_value,
        ev_mid_change=current.ev_mid - previous.ev_mid,
        value_gap_change=current.value_gap - previous.value_gap,
        category_changes=category_changes,
    )
