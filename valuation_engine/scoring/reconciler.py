"""Merge assessment responses from several rounds into one answer per question."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Sequence

from valuation_engine.models.assessment import (
    AssessmentResponse,
    ReconciledResponse,
    ReconciliationEntry,
)

logger = logging.getLogger(__name__)


def _recency_key(response: AssessmentResponse) -> tuple[bool, datetime]:
    return (response.updated_at is not None, response.updated_at or datetime.min)


def _collapse_round(responses: Iterable[AssessmentResponse]) -> dict[str, AssessmentResponse]:
    """Pick one response per question within a single round.

    An override beats a plain answer, a plain answer beats a skip, and ties
    go to the most recently updated response.
    """
    grouped: dict[str, list[AssessmentResponse]] = {}
    for response in responses:
        grouped.setdefault(response.question_id, []).append(response)

    collapsed: dict[str, AssessmentResponse] = {}
    for question_id, group in grouped.items():
        overrides = [r for r in group if r.has_override]
        answered = [r for r in group if r.is_answered]
        pool = overrides or answered or group
        collapsed[question_id] = max(pool, key=_recency_key)
    return collapsed


def _effective_score(response: AssessmentResponse) -> float | None:
    if response.has_override:
        return response.override_score_value
    return response.score_value


def reconcile_with_audit(
    response_lists: Sequence[Sequence[AssessmentResponse]],
) -> tuple[dict[str, ReconciledResponse], list[ReconciliationEntry]]:
    """Reconcile priority-ordered response lists.

    Rules:
    - Lists are in priority order, most authoritative first. The caller owns
      that ordering; timestamps are never used to re-rank lists.
    - An override from the highest-priority list that has one wins over
      everything, including newer plain answers.
    - Otherwise the first list with a non-null answer wins.
    - Questions with no resolvable answer in any list are dropped.

    Returns:
        Tuple of (question_id -> ReconciledResponse, list of ReconciliationEntry
        describing every answer that lost).
    """
    rounds = [_collapse_round(responses) for responses in response_lists]

    question_order: list[str] = []
    seen: set[str] = set()
    for collapsed in rounds:
        for question_id in collapsed:
            if question_id not in seen:
                seen.add(question_id)
                question_order.append(question_id)

    reconciled: dict[str, ReconciledResponse] = {}
    audit: list[ReconciliationEntry] = []

    for question_id in question_order:
        candidates = [
            (index, collapsed[question_id])
            for index, collapsed in enumerate(rounds)
            if question_id in collapsed
        ]

        winner = next(((i, r) for i, r in candidates if r.has_override), None)
        if winner is None:
            winner = next(((i, r) for i, r in candidates if r.is_answered), None)
        if winner is None:
            logger.debug("Dropping unanswered question %s", question_id)
            continue

        list_index, response = winner
        score = _effective_score(response)
        chosen = ReconciledResponse(
            question_id=question_id,
            category=response.category,
            weight=response.weight,
            score_value=score,
            source_round=response.source_round,
            list_index=list_index,
            option_id=(
                response.override_option_id
                if response.has_override
                else response.selected_option_id
            ),
            from_override=response.has_override,
            updated_at=response.updated_at,
        )
        reconciled[question_id] = chosen

        for index, loser in candidates:
            if index == list_index or _effective_score(loser) is None:
                continue
            reason = "override" if chosen.from_override else "higher-priority answer"
            audit.append(
                ReconciliationEntry(
                    question_id=question_id,
                    chosen_round=chosen.source_round,
                    chosen_score=chosen.score_value,
                    chosen_from_override=chosen.from_override,
                    superseded_round=loser.source_round,
                    superseded_score=_effective_score(loser),
                    superseded_was_override=loser.has_override,
                    resolution=f"Chose {reason} from list {list_index} over list {index}",
                )
            )

    logger.debug(
        "Reconciled %d questions from %d lists (%d superseded)",
        len(reconciled),
        len(rounds),
        len(audit),
    )
    return reconciled, audit


def reconcile(
    response_lists: Sequence[Sequence[AssessmentResponse]],
) -> dict[str, ReconciledResponse]:
    """One authoritative answer per question; see ``reconcile_with_audit``."""
    reconciled, _ = reconcile_with_audit(response_lists)
    return reconciled
