from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CoreFactors:
    """A company's structural profile as captured during onboarding.

    Values are kept as raw strings so an unrecognised enum value can still
    reach scoring and fall back to a neutral score for that single factor.
    """

    revenue_size_category: Optional[str] = None
    revenue_model: Optional[str] = None
    gross_margin_proxy: Optional[str] = None
    labor_intensity: Optional[str] = None
    asset_intensity: Optional[str] = None
    owner_involvement: Optional[str] = None

    def get(self, factor_name: str) -> Optional[str]:
        """Retrieve a factor value by name, returning None if missing."""
        return getattr(self, factor_name, None)

    def available_factors(self) -> list[str]:
        """Return names of all factors that have a value."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


@dataclass(frozen=True)
class AssessmentResponse:
    """One answer to one assessment question, as supplied by the question store.

    ``override_option_id`` marks a later upgrade of the original selection
    (for example after a remediation task is completed). The store resolves
    the option to its score and passes it as ``override_score_value``.
    """

    question_id: str
    category: str
    weight: float  # max impact points of the question
    score_value: Optional[float] = None
    source_round: str = ""
    updated_at: Optional[datetime] = None
    selected_option_id: Optional[str] = None
    override_option_id: Optional[str] = None
    override_score_value: Optional[float] = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(
                f"weight cannot be negative for question {self.question_id}"
            )
        for name in ("score_value", "override_score_value"):
            value = getattr(self, name)
            if value is not None and not (0.0 <= value <= 1.0):
                raise ValueError(
                    f"{name} must be 0-1.0 for question {self.question_id}, got {value}"
                )

    @property
    def has_override(self) -> bool:
        return self.override_option_id is not None and self.override_score_value is not None

    @property
    def is_answered(self) -> bool:
        return self.score_value is not None


@dataclass(frozen=True)
class ReconciledResponse:
    """The single authoritative answer for a question after reconciliation."""

    question_id: str
    category: str
    weight: float
    score_value: float
    source_round: str
    list_index: int
    option_id: Optional[str] = None
    from_override: bool = False
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReconciliationEntry:
    """Records a response that lost to a higher-precedence answer."""

    question_id: str
    chosen_round: str
    chosen_score: float
    chosen_from_override: bool
    superseded_round: str
    superseded_score: Optional[float]
    superseded_was_override: bool
    resolution: str
