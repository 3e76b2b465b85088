from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .models.common import ScenarioId
from .models.results import ScenarioComparisonRow, ScenarioResult
from .models.scenario import ScenarioInput
from .models.valuation import (
    DilutionResult,
    DilutionSettings,
    ReferenceMetrics,
    ValuationMethod,
    ValuationResult,
    ValuationSettings,
)


class ScenarioCreateRequest(BaseModel):
    scenario: ScenarioInput


class ScenarioCreateResponse(BaseModel):
    scenario_id: str


class ScenarioRunRequest(BaseModel):
    scenario_id: Optional[str] = None
    scenario: Optional[ScenarioInput] = None
    variant: Optional[ScenarioId] = Field(default=None, description="Scenario preset to apply; defaults to the active one")


class ScenarioListResponse(BaseModel):
    scenarios: List[str]


class ScenarioCompareResponse(BaseModel):
    scenario_ids: List[str]
    rows: List[ScenarioComparisonRow]


class ScenarioRunResponse(BaseModel):
    result: ScenarioResult


class ValuationRequest(BaseModel):
    metrics: ReferenceMetrics
    settings: ValuationSettings = Field(default_factory=ValuationSettings)
    cash_flows: List[float] = Field(default_factory=list)
    methods: Optional[List[ValuationMethod]] = None


class ValuationResponse(BaseModel):
    results: List[ValuationResult]
    average_valuation: float


class DilutionRequest(BaseModel):
    settings: DilutionSettings
    reference_ebitda: Optional[float] = None


class DilutionResponse(BaseModel):
    result: DilutionResult
