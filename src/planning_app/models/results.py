from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from pydantic import Field

from .capex import CapexLine
from .common import MonthRef, ScenarioId, SnapshotModel
from .funding import LoanInstallment
from .scenario import ScenarioConfig
from .valuation import ValuationReport


class AnnualDrivers(SnapshotModel):
    year: int
    revenue: float
    revenue_by_category: Dict[str, float] = Field(default_factory=dict)
    volumes: float
    cogs: float
    payroll: float
    payroll_by_department: Dict[str, float] = Field(default_factory=dict)
    headcount: int
    headcount_by_department: Dict[str, int] = Field(default_factory=dict)
    opex: float
    opex_by_category: Dict[str, float] = Field(default_factory=dict)
    capex: float
    depreciation: float


class MonthlyTreasuryRecord(SnapshotModel):
    year: int
    month: int
    period_start: date
    revenue: float
    funding_injection: float
    other_inflows: float
    total_inflows: float
    cogs: float
    cogs_accrued: float = Field(0.0, description="Purchases of the month before payment terms")
    payroll: float
    opex: float
    variable_charges: float
    loan_payments: float
    capex_payments: float
    other_outflows: float
    total_outflows: float
    treasury_start: float
    net_cash_flow: float
    treasury_end: float
    loan_details: List[LoanInstallment] = Field(default_factory=list)
    capex_details: List[CapexLine] = Field(default_factory=list)


class MonthlyTreasuryProjection(SnapshotModel):
    months: List[MonthlyTreasuryRecord]
    initial_cash: float
    min_treasury: float
    min_treasury_month: Optional[MonthRef] = None
    break_even_month: Optional[MonthRef] = None
    total_funding_raised: float = 0.0
    total_capex_payments: float = 0.0
    total_loan_payments: float = 0.0
    total_variable_charges: float = 0.0
    max_burn: float = 0.0
    funding_need: float = 0.0
    runway_months: Optional[float] = None


class YearlySummary(SnapshotModel):
    year: int
    revenue: float
    cogs: float
    cogs_accrued: float = 0.0
    gross_margin: float
    gross_margin_rate: float
    payroll: float
    opex: float
    variable_charges: float
    capex: float
    loan_payments: float
    funding_injection: float
    other_inflows: float
    other_outflows: float
    net_cash_flow: float
    treasury_start: float
    treasury_end: float
    ebitda: float
    ebitda_margin: float
    depreciation: float
    ebit: float
    free_cash_flow: float
    financial_result: float = 0.0
    result_before_tax: float = 0.0
    exceptional_result: float = 0.0
    participation: float = 0.0
    research_tax_credit: float = 0.0
    income_tax: float = 0.0
    net_result: float = 0.0
    net_margin: float = 0.0


class ReconciliationLine(SnapshotModel):
    year: int
    metric: str
    annual: float
    monthly: float
    tolerance: float
    within_tolerance: bool

    @property
    def difference(self) -> float:
        return self.monthly - self.annual


class ReconciliationReport(SnapshotModel):
    lines: List[ReconciliationLine] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(line.within_tolerance for line in self.lines)

    def failures(self) -> List[ReconciliationLine]:
        return [line for line in self.lines if not line.within_tolerance]


class ScenarioResult(SnapshotModel):
    scenario_id: ScenarioId
    config: ScenarioConfig
    drivers: List[AnnualDrivers]
    treasury: MonthlyTreasuryProjection
    yearly: List[YearlySummary]
    reconciliation: ReconciliationReport
    valuation: ValuationReport
    revenue_cagr: float = 0.0
    break_even_year: Optional[int] = None


class ScenarioComparisonRow(SnapshotModel):
    scenario_id: ScenarioId
    total_revenue: float
    final_ebitda: float
    min_treasury: float
    funding_need: float
    break_even_month: Optional[MonthRef] = None
    average_valuation: float
