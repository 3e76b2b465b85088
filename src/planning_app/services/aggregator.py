from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Mapping, Optional

from ..models.income import IncomeStatementSettings
from ..models.results import MonthlyTreasuryProjection, YearlySummary

_FLOWS = (
    "revenue",
    "cogs",
    "cogs_accrued",
    "payroll",
    "opex",
    "variable_charges",
    "capex_payments",
    "loan_payments",
    "funding_injection",
    "other_inflows",
    "other_outflows",
    "net_cash_flow",
)


def income_lines(year: int, ebit: float, revenue: float, settings: IncomeStatementSettings) -> Dict[str, float]:
    """Carry EBIT down to the net result.

    Profit-sharing applies above the threshold. The research tax credit only
    reduces the income tax and never turns it into a refund.
    """
    financial_result = settings.financial_income.get(year, 0.0) - settings.financial_expense.get(year, 0.0)
    result_before_tax = ebit + financial_result
    exceptional_result = settings.exceptional_income.get(year, 0.0) - settings.exceptional_expense.get(year, 0.0)
    participation = 0.0
    if result_before_tax > settings.participation_threshold:
        participation = result_before_tax * settings.participation_rate
    credit = settings.research_tax_credit.get(year, 0.0)
    taxable = result_before_tax + exceptional_result - participation
    income_tax = max(0.0, taxable * settings.income_tax_rate - credit) if taxable > 0 else 0.0
    net_result = result_before_tax + exceptional_result - participation - income_tax
    return {
        "financial_result": financial_result,
        "result_before_tax": result_before_tax,
        "exceptional_result": exceptional_result,
        "participation": participation,
        "research_tax_credit": credit,
        "income_tax": income_tax,
        "net_result": net_result,
        "net_margin": net_result / revenue if revenue else 0.0,
    }


def aggregate(
    projection: MonthlyTreasuryProjection,
    depreciation_by_year: Optional[Mapping[int, float]] = None,
    income: Optional[IncomeStatementSettings] = None,
) -> List[YearlySummary]:
    """Fold the monthly ledger into one row per calendar year.

    Margins and EBITDA use COGS as purchased; the cash columns use COGS as paid.
    """
    depreciation_by_year = depreciation_by_year or {}
    income = income or IncomeStatementSettings()
    sums: Dict[int, Dict[str, float]] = defaultdict(lambda: defaultdict(float))
    treasury_start: Dict[int, float] = {}
    treasury_end: Dict[int, float] = {}
    for record in projection.months:
        acc = sums[record.year]
        for name in _FLOWS:
            acc[name] += getattr(record, name)
        treasury_start.setdefault(record.year, record.treasury_start)
        treasury_end[record.year] = record.treasury_end

    summaries: List[YearlySummary] = []
    for year in sorted(sums.keys()):
        acc = sums[year]
        revenue = acc["revenue"]
        gross_margin = revenue - acc["cogs_accrued"]
        ebitda = gross_margin - acc["payroll"] - acc["opex"] - acc["variable_charges"]
        depreciation = depreciation_by_year.get(year, 0.0)
        ebit = ebitda - depreciation
        summaries.append(
            YearlySummary(
                year=year,
                revenue=revenue,
                cogs=acc["cogs"],
                cogs_accrued=acc["cogs_accrued"],
                gross_margin=gross_margin,
                gross_margin_rate=gross_margin / revenue if revenue else 0.0,
                payroll=acc["payroll"],
                opex=acc["opex"],
                variable_charges=acc["variable_charges"],
                capex=acc["capex_payments"],
                loan_payments=acc["loan_payments"],
                funding_injection=acc["funding_injection"],
                other_inflows=acc["other_inflows"],
                other_outflows=acc["other_outflows"],
                net_cash_flow=acc["net_cash_flow"],
                treasury_start=treasury_start[year],
                treasury_end=treasury_end[year],
                ebitda=ebitda,
                ebitda_margin=ebitda / revenue if revenue else 0.0,
                depreciation=depreciation,
                ebit=ebit,
                free_cash_flow=ebitda - acc["capex_payments"],
                **income_lines(year, ebit, revenue, income),
            )
        )
    return summaries
