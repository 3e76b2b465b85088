from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field, confloat

from .common import SnapshotModel


class ValuationMethod(str, Enum):
    REVENUE_MULTIPLE = "revenue_multiple"
    EBITDA_MULTIPLE = "ebitda_multiple"
    DCF = "dcf"
    SCORECARD = "scorecard"
    BERKUS = "berkus"
    RISK_FACTOR = "risk_factor"


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ValuationBasis(str, Enum):
    HISTORICAL = "historical"
    PROJECTED = "projected"
    MIXED = "mixed"
    AVERAGE = "average"


class HistoricalYear(SnapshotModel):
    year: int
    revenue: float = 0.0
    gross_margin_rate: float = Field(0.0, description="Gross margin as a share of revenue")
    payroll: float = 0.0
    external_costs: float = 0.0
    depreciation: float = 0.0

    @property
    def ebitda(self) -> float:
        return self.revenue * self.gross_margin_rate - self.payroll - self.external_costs

    @property
    def ebit(self) -> float:
        return self.ebitda - self.depreciation


class ReferenceMetrics(SnapshotModel):
    revenue: float = 0.0
    ebitda: float = 0.0
    ebit: float = 0.0


class RevenueMultipleParams(SnapshotModel):
    reference_revenue: float
    multiple: float


class EbitdaMultipleParams(SnapshotModel):
    reference_ebitda: float
    multiple: float


class DcfParams(SnapshotModel):
    cash_flows: List[float] = Field(default_factory=list, description="Projected yearly free cash flows")
    discount_rate: float = 0.25
    terminal_growth_rate: float = 0.02


class ScorecardParams(SnapshotModel):
    base_valuation: float = 0.0
    team: float = 0.0
    market: float = 0.0
    product: float = 0.0
    competition: float = 0.0
    marketing: float = 0.0
    funding_need: float = 0.0


class BerkusParams(SnapshotModel):
    sound_idea: float = 0.0
    prototype: float = 0.0
    quality_management: float = 0.0
    strategic_relationships: float = 0.0
    product_rollout: float = 0.0
    cap: Optional[float] = Field(None, description="Per-component ceiling; engine default when unset")


class RiskFactorParams(SnapshotModel):
    base_valuation: float = 0.0
    management_risk: int = 0
    business_stage: int = 0
    legislation: int = 0
    manufacturing: int = 0
    sales_marketing: int = 0
    funding_capital: int = 0
    competition: int = 0
    technology: int = 0
    litigation: int = 0
    international: int = 0
    reputation: int = 0
    potential_exit: int = 0
    step_size: Optional[float] = None


class ExitScenario(SnapshotModel):
    name: str
    year: int
    exit_multiple: float
    probability: confloat(ge=0, le=1) = 1.0


class DilutionSettings(SnapshotModel):
    total_raise: float = 0.0
    ebitda_multiple: float = 6.0
    convertible_ratio: float = Field(0.0, description="Share of the raise made through convertible instruments")
    reference_ebitda: Optional[float] = Field(None, description="Defaults to the reference metrics EBITDA")
    pre_money_floor: Optional[float] = None
    exit_scenarios: List[ExitScenario] = Field(default_factory=list)


class ValuationSettings(SnapshotModel):
    basis: ValuationBasis = ValuationBasis.PROJECTED
    historical_year: Optional[int] = None
    projected_year: Optional[int] = None
    mix_weight: confloat(ge=0, le=1) = 0.5
    average_years: List[int] = Field(default_factory=list)
    historical: List[HistoricalYear] = Field(default_factory=list)
    selected_methods: List[ValuationMethod] = Field(default_factory=lambda: list(ValuationMethod))
    revenue_multiple: float = 3.0
    ebitda_multiple: float = 8.0
    discount_rate: float = 0.25
    terminal_growth_rate: float = 0.02
    scorecard: ScorecardParams = Field(default_factory=ScorecardParams)
    berkus: BerkusParams = Field(default_factory=BerkusParams)
    risk_factor: RiskFactorParams = Field(default_factory=RiskFactorParams)
    weighted_average: bool = False
    dilution: DilutionSettings = Field(default_factory=DilutionSettings)


class ValuationResult(SnapshotModel):
    method: ValuationMethod
    value: Optional[float]
    confidence: Confidence
    notes: str = ""

    @property
    def is_valid(self) -> bool:
        return self.value is not None


class DilutionResult(SnapshotModel):
    pre_money: float
    equity_amount: float
    convertible_amount: float
    post_money: float
    dilution: float


class ExitAnalysis(SnapshotModel):
    name: str
    year: int
    exit_multiple: float
    probability: float
    ebitda_at_exit: float
    exit_valuation: float
    investor_return: float
    holding_years: int
    irr: float
    moic: float


class ValuationReport(SnapshotModel):
    metrics: ReferenceMetrics
    results: List[ValuationResult]
    average_valuation: float
    dilution: DilutionResult
    exits: List[ExitAnalysis] = Field(default_factory=list)
    expected_investor_return: float = 0.0
