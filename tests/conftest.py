from __future__ import annotations

import pytest

from planning_app.models.results import YearlySummary


def yearly_summary(year, revenue=0.0, ebitda=0.0, depreciation=0.0, free_cash_flow=None):
    return YearlySummary(
        year=year,
        revenue=revenue,
        cogs=0.0,
        gross_margin=revenue,
        gross_margin_rate=1.0 if revenue else 0.0,
        payroll=0.0,
        opex=0.0,
        variable_charges=0.0,
        capex=0.0,
        loan_payments=0.0,
        funding_injection=0.0,
        other_inflows=0.0,
        other_outflows=0.0,
        net_cash_flow=ebitda,
        treasury_start=0.0,
        treasury_end=0.0,
        ebitda=ebitda,
        ebitda_margin=ebitda / revenue if revenue else 0.0,
        depreciation=depreciation,
        ebit=ebitda - depreciation,
        free_cash_flow=ebitda if free_cash_flow is None else free_cash_flow,
    )


@pytest.fixture
def make_summary():
    return yearly_summary
