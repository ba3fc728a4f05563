"""FastAPI application for the exit valuation engine."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from valuation_engine.config.settings import Settings
from valuation_engine.engine.calculator import ValuationEngine
from valuation_engine.methodology.loader import get_default_config
from valuation_engine.methodology.schema import EngineConfig, IndustryMultipleRange
from valuation_engine.models.assessment import AssessmentResponse, CoreFactors
from valuation_engine.models.company import (
    CompanyProfile,
    EbitdaAdjustment,
    EbitdaInputs,
    ValuationInputs,
)
from valuation_engine.models.enums import EbitdaAdjustmentType

settings = Settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Exit Valuation API", version="0.1.0")

engine = ValuationEngine()
default_config = get_default_config(settings)


class CoreFactorsBody(BaseModel):
    revenue_size_category: Optional[str] = None
    revenue_model: Optional[str] = None
    gross_margin_proxy: Optional[str] = None
    labor_intensity: Optional[str] = None
    asset_intensity: Optional[str] = None
    owner_involvement: Optional[str] = None


class ResponseBody(BaseModel):
    question_id: str
    category: str
    weight: float = Field(ge=0)
    score_value: Optional[float] = Field(default=None, ge=0, le=1.0)
    source_round: str = ""
    updated_at: Optional[datetime] = None
    selected_option_id: Optional[str] = None
    override_option_id: Optional[str] = None
    override_score_value: Optional[float] = Field(default=None, ge=0, le=1.0)


class EbitdaAdjustmentBody(BaseModel):
    description: str
    amount: float
    type: EbitdaAdjustmentType = EbitdaAdjustmentType.ADD_BACK


class EbitdaBody(BaseModel):
    annual_revenue: Optional[float] = None
    annual_ebitda: Optional[float] = None
    owner_compensation: Optional[float] = None
    adjustments: list[EbitdaAdjustmentBody] = Field(default_factory=list)
    adjusted_ebitda: Optional[float] = None


class CompanyProfileBody(BaseModel):
    revenue_growth_rate: Optional[float] = None
    top_customer_concentration: Optional[float] = Field(default=None, ge=0, le=1.0)
    top3_customer_concentration: Optional[float] = Field(default=None, ge=0, le=1.0)
    is_recurring_revenue: bool = False


class ValuationRequest(BaseModel):
    company_id: str = ""
    multiples: IndustryMultipleRange
    core_factors: Optional[CoreFactorsBody] = None
    response_lists: list[list[ResponseBody]] = Field(default_factory=list)
    ebitda: EbitdaBody = Field(default_factory=EbitdaBody)
    profile: CompanyProfileBody = Field(default_factory=CompanyProfileBody)
    company_weights: Optional[dict[str, float]] = None
    alpha: Optional[float] = None
    unanswered_category_score: Optional[float] = None
    snapshot_id: str = ""
    snapshot_reason: str = "Assessment completed"
    calculated_at: Optional[datetime] = None

    def to_inputs(self) -> ValuationInputs:
        return ValuationInputs(
            multiples=self.multiples,
            company_id=self.company_id,
            core_factors=(
                CoreFactors(**self.core_factors.model_dump()) if self.core_factors else None
            ),
            response_lists=[
                [AssessmentResponse(**r.model_dump()) for r in responses]
                for responses in self.response_lists
            ],
            ebitda=EbitdaInputs(
                annual_revenue=self.ebitda.annual_revenue,
                annual_ebitda=self.ebitda.annual_ebitda,
                owner_compensation=self.ebitda.owner_compensation,
                adjustments=tuple(
                    EbitdaAdjustment(**a.model_dump()) for a in self.ebitda.adjustments
                ),
                adjusted_ebitda=self.ebitda.adjusted_ebitda,
            ),
            profile=CompanyProfile(**self.profile.model_dump()),
            company_weights=self.company_weights,
            alpha=self.alpha,
            snapshot_id=self.snapshot_id,
            snapshot_reason=self.snapshot_reason,
            calculated_at=self.calculated_at,
        )

    def engine_config(self, base: EngineConfig) -> EngineConfig:
        if self.unanswered_category_score is None:
            return base
        return EngineConfig.model_validate(
            {**base.model_dump(), "unanswered_category_score": self.unanswered_category_score}
        )


@app.post("/api/valuations")
async def create_valuation(body: ValuationRequest):
    """Run the engine for one company and return the snapshot."""
    try:
        config = body.engine_config(default_config)
        snapshot = engine.calculate(body.to_inputs(), config)
    except ValueError as e:
        logger.warning("Rejected valuation request for company %s: %s", body.company_id, e)
        raise HTTPException(status_code=422, detail=str(e)) from e
    return dataclasses.asdict(snapshot)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000, log_level=settings.log_level.lower())
