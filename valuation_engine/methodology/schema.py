"""Pydantic models for engine configuration validation."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, model_validator

from valuation_engine.models.enums import BriCategory

# Enabled category weights must sum to 1.0 within this tolerance.
WEIGHT_SUM_TOLERANCE = 0.01

DEFAULT_CATEGORY_WEIGHTS: dict[BriCategory, float] = {
    BriCategory.FINANCIAL: 0.25,
    BriCategory.TRANSFERABILITY: 0.20,
    BriCategory.OPERATIONAL: 0.20,
    BriCategory.MARKET: 0.15,
    BriCategory.LEGAL_TAX: 0.10,
    BriCategory.PERSONAL: 0.10,
}


class CategoryWeights(BaseModel):
    """Weight of each BRI category in the composite score.

    Categories left out of an override fall back to the system defaults
    before the sum is checked.
    """

    financial: float = Field(default=0.25, ge=0, le=1.0)
    transferability: float = Field(default=0.20, ge=0, le=1.0)
    operational: float = Field(default=0.20, ge=0, le=1.0)
    market: float = Field(default=0.15, ge=0, le=1.0)
    legal_tax: float = Field(default=0.10, ge=0, le=1.0)
    personal: float = Field(default=0.10, ge=0, le=1.0)

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> CategoryWeights:
        total = self.total()
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Category weights must sum to ~1.0, got {total:.3f}")
        return self

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> CategoryWeights:
        """Build weights from a ``{"FINANCIAL": 0.3, ...}`` style mapping."""
        values: dict[str, Any] = {}
        for key, weight in mapping.items():
            name = key.value if isinstance(key, BriCategory) else str(key)
            try:
                category = BriCategory(name.upper())
            except ValueError:
                raise ValueError(f"Unknown BRI category in weights: '{key}'") from None
            values[category.value.lower()] = weight
        return cls.model_validate(values)

    def get(self, category: BriCategory | str) -> float:
        name = category.value if isinstance(category, BriCategory) else str(category)
        return getattr(self, name.lower())

    def as_dict(self) -> dict[BriCategory, float]:
        return {category: self.get(category) for category in BriCategory}

    def total(self) -> float:
        return (
            self.financial
            + self.transferability
            + self.operational
            + self.market
            + self.legal_tax
            + self.personal
        )


class IndustryMultipleRange(BaseModel):
    """EBITDA multiple band for an industry classification."""

    low: float = Field(ge=0, description="Industry floor EV/EBITDA multiple")
    high: float = Field(ge=0, description="Industry ceiling EV/EBITDA multiple")
    median: Optional[float] = Field(default=None, ge=0)
    revenue_low: Optional[float] = Field(default=None, ge=0)
    revenue_high: Optional[float] = Field(default=None, ge=0)
    source: str = "default"

    @model_validator(mode="after")
    def low_le_median_le_high(self) -> IndustryMultipleRange:
        if self.low > self.high:
            raise ValueError(
                f"Industry multiple range must be ordered: low ({self.low}) "
                f"<= high ({self.high})"
            )
        if self.median is not None and not (self.low <= self.median <= self.high):
            raise ValueError(
                f"Industry median multiple ({self.median}) must lie within "
                f"[{self.low}, {self.high}]"
            )
        return self

    @property
    def median_multiple(self) -> float:
        if self.median is not None:
            return self.median
        return (self.low + self.high) / 2


class EngineConfig(BaseModel):
    """Snapshot of every tunable value the engine reads during a run."""

    id: str = "exit-valuation"
    version: str = "1"
    alpha: float = Field(
        default=1.4,
        ge=1.0,
        le=2.0,
        description="Exponent of the buyer skepticism curve",
    )
    category_weights: CategoryWeights = Field(default_factory=CategoryWeights)
    global_weights: Optional[CategoryWeights] = Field(
        default=None,
        description="Operator-wide custom weights; used when a company has no override",
    )
    unanswered_category_score: float = Field(
        default=0.0,
        ge=0,
        le=1.0,
        description="Score reported for a category whose answered questions carry no points",
    )
