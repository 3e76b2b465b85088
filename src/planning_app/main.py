from __future__ import annotations

from typing import Dict

from fastapi import FastAPI, HTTPException

from .schemas import (
    DilutionRequest,
    DilutionResponse,
    ScenarioCompareResponse,
    ScenarioCreateRequest,
    ScenarioCreateResponse,
    ScenarioListResponse,
    ScenarioRunRequest,
    ScenarioRunResponse,
    ValuationRequest,
    ValuationResponse,
)
from .models.scenario import ScenarioInput
from .services import dilution, valuation
from .services.calculator import ScenarioCalculator


app = FastAPI(title="Hardware Startup Planning Engine", version="0.1.0")

SCENARIOS: Dict[str, ScenarioInput] = {}
calculator = ScenarioCalculator()


@app.post("/scenarios", response_model=ScenarioCreateResponse)
def create_scenario(payload: ScenarioCreateRequest) -> ScenarioCreateResponse:
    scenario = payload.scenario
    SCENARIOS[scenario.meta.id] = scenario
    return ScenarioCreateResponse(scenario_id=scenario.meta.id)


@app.get("/scenarios", response_model=ScenarioListResponse)
def list_scenarios() -> ScenarioListResponse:
    return ScenarioListResponse(scenarios=list(SCENARIOS.keys()))


@app.post("/run", response_model=ScenarioRunResponse)
def run_scenario(payload: ScenarioRunRequest) -> ScenarioRunResponse:
    scenario: ScenarioInput | None = None
    if payload.scenario is not None:
        scenario = payload.scenario
    elif payload.scenario_id:
        scenario = SCENARIOS.get(payload.scenario_id)
    if scenario is None:
        raise HTTPException(status_code=404, detail="Scenario not found")
    result = calculator.run(scenario, payload.variant)
    return ScenarioRunResponse(result=result)


@app.get("/scenarios/{scenario_id}", response_model=ScenarioRunResponse)
def get_scenario_projection(scenario_id: str) -> ScenarioRunResponse:
    scenario = SCENARIOS.get(scenario_id)
    if scenario is None:
        raise HTTPException(status_code=404, detail="Scenario not found")
    result = calculator.run(scenario)
    return ScenarioRunResponse(result=result)


@app.get("/scenarios/{scenario_id}/compare", response_model=ScenarioCompareResponse)
def compare_scenarios(scenario_id: str, ids: str = "") -> ScenarioCompareResponse:
    """Compare the variants of one scenario, or the active variants of several."""
    base_ids = [scenario_id] + [part for part in ids.split(",") if part]
    results = []
    for _id in base_ids:
        scenario = SCENARIOS.get(_id)
        if scenario is None:
            raise HTTPException(status_code=404, detail=f"Scenario {_id} not found")
        if len(base_ids) == 1:
            results.extend(calculator.run_all(scenario).values())
        else:
            results.append(calculator.run(scenario))
    return ScenarioCompareResponse(scenario_ids=base_ids, rows=calculator.compare(results))


@app.post("/valuation", response_model=ValuationResponse)
def value_company(payload: ValuationRequest) -> ValuationResponse:
    methods = payload.methods if payload.methods is not None else payload.settings.selected_methods
    results = valuation.evaluate(methods, payload.settings, payload.metrics, payload.cash_flows)
    return ValuationResponse(
        results=results,
        average_valuation=valuation.average_valuation(results, payload.settings.weighted_average),
    )


@app.post("/dilution", response_model=DilutionResponse)
def dilute_round(payload: DilutionRequest) -> DilutionResponse:
    return DilutionResponse(result=dilution.dilute(payload.settings, payload.reference_ebitda))


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
