from __future__ import annotations

import pytest

from planning_app.models.funding import Loan, LoanFrequency, LoanInputMode
from planning_app.services.loans import parse_month_key, payments_by_month, periodic_payment, schedule, schedule_for


def test_annuity_payment():
    assert periodic_payment(60000, 0.005, 24) == pytest.approx(2659.24, abs=0.05)
    assert periodic_payment(12000, 0.0, 12) == pytest.approx(1000.0)


def test_monthly_schedule_closes_at_zero():
    installments = schedule(60000, 0.06, 24, 2025, 1)
    assert len(installments) == 24
    assert installments[0].interest == pytest.approx(300.0)
    assert installments[0].total_payment == pytest.approx(2659.24, abs=0.05)
    assert installments[-1].remaining_balance == 0.0
    assert sum(item.principal for item in installments) == pytest.approx(60000)
    assert (installments[-1].year, installments[-1].month) == (2026, 12)


def test_balance_decreases_monotonically():
    installments = schedule(25000, 0.08, 36, 2025, 6)
    balances = [item.remaining_balance for item in installments]
    assert balances == sorted(balances, reverse=True)


def test_quarterly_schedule():
    installments = schedule(12000, 0.04, 12, 2025, 1, frequency=LoanFrequency.QUARTERLY)
    assert [item.month for item in installments] == [1, 4, 7, 10]
    assert installments[0].interest == pytest.approx(120.0)
    assert installments[-1].remaining_balance == 0.0


def test_schedule_rolls_over_year_end():
    installments = schedule(3000, 0.0, 3, 2025, 11)
    assert [(item.year, item.month) for item in installments] == [(2025, 11), (2025, 12), (2026, 1)]


def test_empty_loans():
    assert schedule(0, 0.05, 12, 2025, 1) == []
    assert schedule(1000, 0.05, 0, 2025, 1) == []


def test_payments_by_month_groups_loans():
    loans = [
        Loan(id="a", name="A", principal=1200, term_months=12, start_year=2025),
        Loan(id="b", name="B", principal=600, term_months=6, start_year=2025),
    ]
    lookup = payments_by_month(loans)
    assert len(lookup[(2025, 1)]) == 2
    assert len(lookup[(2025, 12)]) == 1
    assert schedule_for(loans[0])[0].loan_id == "a"


def test_fixed_mode_pays_entered_amount():
    loan = Loan(
        id="f",
        name="Family loan",
        principal=5000,
        annual_rate=0.1,
        term_months=6,
        start_year=2025,
        start_month=10,
        input_mode=LoanInputMode.FIXED,
        fixed_payment=1000,
    )
    installments = schedule_for(loan)
    assert [item.total_payment for item in installments] == [1000] * 6
    assert all(item.interest == 0.0 for item in installments)
    assert (installments[-1].year, installments[-1].month) == (2026, 3)
    assert installments[-1].remaining_balance == 0.0
    assert installments[3].remaining_balance == 1000.0


def test_fixed_mode_quarterly_and_annual_periods():
    quarterly = Loan(
        id="q",
        name="Q",
        principal=0,
        term_months=7,
        start_year=2025,
        frequency=LoanFrequency.QUARTERLY,
        input_mode=LoanInputMode.FIXED,
        fixed_payment=500,
    )
    assert [item.month for item in schedule_for(quarterly)] == [1, 4, 7]
    annual = quarterly.model_copy(update={"frequency": LoanFrequency.ANNUAL, "term_months": 24, "start_month": 6})
    assert [(item.year, item.month) for item in schedule_for(annual)] == [(2025, 6), (2026, 6)]
    assert schedule_for(quarterly.model_copy(update={"fixed_payment": 0.0})) == []


def test_manual_payments_replace_schedule():
    loan = Loan(
        id="m",
        name="Renegotiated",
        principal=3000,
        annual_rate=0.05,
        term_months=24,
        start_year=2025,
        manual_payments={"2025-05": 1000, "2025-02": 500, "bad-key": 99, "2025-13": 10},
    )
    installments = schedule_for(loan)
    assert [(item.year, item.month, item.total_payment) for item in installments] == [(2025, 2, 500), (2025, 5, 1000)]
    assert all(item.is_manual for item in installments)
    assert installments[-1].remaining_balance == 1500
    assert payments_by_month([loan])[(2025, 5)][0].loan_id == "m"


def test_parse_month_key():
    assert parse_month_key("2026-01") == (2026, 1)
    assert parse_month_key("2026-1") is None
    assert parse_month_key("2026-00") is None
