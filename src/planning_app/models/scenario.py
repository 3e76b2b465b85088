from __future__ import annotations

from typing import Dict, List

from pydantic import Field, conint

from .common import PaymentTerm, ScenarioId, ScenarioMeta, SeasonalPattern, SnapshotModel, TimeframeSettings
from .costs import Expense, OneOffFlow, VariableCharge
from .funding import FundingRound, Loan
from .headcount import Role
from .income import IncomeStatementSettings
from .products import ComponentReference, Product
from .valuation import ValuationSettings


class ScenarioConfig(SnapshotModel):
    volume_adjustment: float = 0.0
    price_adjustment: float = 0.0
    opex_adjustment: float = 0.0
    hiring_delay_years: conint(ge=0) = 0


class TreasurySettings(SnapshotModel):
    revenue_seasonality: SeasonalPattern = Field(default_factory=SeasonalPattern.uniform)
    cogs_seasonality: SeasonalPattern = Field(default_factory=SeasonalPattern.uniform)
    cogs_payment_terms: List[PaymentTerm] = Field(default_factory=lambda: [PaymentTerm()])
    variable_charges: List[VariableCharge] = Field(default_factory=list)
    other_inflows: List[OneOffFlow] = Field(default_factory=list)
    other_outflows: List[OneOffFlow] = Field(default_factory=list)
    exclude_funding: bool = False


SCENARIO_PRESETS: Dict[ScenarioId, ScenarioConfig] = {
    ScenarioId.CONSERVATIVE: ScenarioConfig(volume_adjustment=-0.20),
    ScenarioId.BASE: ScenarioConfig(),
    ScenarioId.AMBITIOUS: ScenarioConfig(volume_adjustment=0.25),
}


def _default_scenario_configs() -> Dict[ScenarioId, ScenarioConfig]:
    return dict(SCENARIO_PRESETS)


class ScenarioInput(SnapshotModel):
    meta: ScenarioMeta
    timeframe: TimeframeSettings
    initial_cash: float = 0.0
    products: List[Product] = Field(default_factory=list)
    components: List[ComponentReference] = Field(default_factory=list)
    roles: List[Role] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)
    loans: List[Loan] = Field(default_factory=list)
    funding_rounds: List[FundingRound] = Field(default_factory=list)
    treasury: TreasurySettings = Field(default_factory=TreasurySettings)
    income: IncomeStatementSettings = Field(default_factory=IncomeStatementSettings)
    scenario_configs: Dict[ScenarioId, ScenarioConfig] = Field(default_factory=_default_scenario_configs)
    active_scenario: ScenarioId = ScenarioId.BASE
    valuation: ValuationSettings = Field(default_factory=ValuationSettings)

    def scenario_config(self, scenario_id: ScenarioId | None = None) -> ScenarioConfig:
        key = scenario_id or self.active_scenario
        return self.scenario_configs.get(key, ScenarioConfig())
