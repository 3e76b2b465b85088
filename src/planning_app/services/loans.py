from __future__ import annotations

import logging
import re
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from dateutil.relativedelta import relativedelta

from ..models.funding import Loan, LoanFrequency, LoanInputMode, LoanInstallment

logger = logging.getLogger(__name__)

_MONTH_KEY = re.compile(r"^(\d{4})-(\d{2})$")


def periodic_payment(principal: float, period_rate: float, periods: int) -> float:
    if periods <= 0:
        return 0.0
    if period_rate == 0:
        return principal / periods
    return principal * period_rate / (1 - (1 + period_rate) ** -periods)


def schedule(
    principal: float,
    annual_rate: float,
    term_months: int,
    start_year: int,
    start_month: int,
    frequency: LoanFrequency = LoanFrequency.MONTHLY,
    loan_id: str = "",
) -> List[LoanInstallment]:
    """Constant-payment amortization table.

    The last installment repays whatever balance is left so the schedule
    always closes at exactly zero.
    """
    if principal <= 0 or term_months <= 0:
        return []
    period_months = frequency.period_months
    periods = term_months if period_months == 1 else max(1, round(term_months / period_months))
    period_rate = annual_rate * period_months / 12
    payment = periodic_payment(principal, period_rate, periods)

    first_period = date(start_year, start_month, 1)
    balance = principal
    installments: List[LoanInstallment] = []
    for index in range(periods):
        period_start = first_period + relativedelta(months=index * period_months)
        interest = balance * period_rate
        if index == periods - 1:
            principal_part = balance
        else:
            principal_part = min(max(0.0, payment - interest), balance)
        balance -= principal_part
        if index == periods - 1:
            balance = 0.0
        installments.append(
            LoanInstallment(
                loan_id=loan_id,
                year=period_start.year,
                month=period_start.month,
                interest=interest,
                principal=principal_part,
                total_payment=interest + principal_part,
                remaining_balance=balance,
            )
        )
    logger.debug("Loan %s: %d installments of %.2f", loan_id or "-", periods, payment)
    return installments


def fixed_schedule(
    principal: float,
    amount: float,
    term_months: int,
    start_year: int,
    start_month: int,
    frequency: LoanFrequency = LoanFrequency.MONTHLY,
    loan_id: str = "",
) -> List[LoanInstallment]:
    """Constant installments entered by hand, one per period over the term.

    Installments count entirely as principal; the balance is floored at zero.
    """
    if amount <= 0 or term_months <= 0:
        return []
    period_months = frequency.period_months
    if frequency == LoanFrequency.ANNUAL:
        periods = max(1, round(term_months / 12))
    else:
        periods = -(-term_months // period_months)

    first_period = date(start_year, start_month, 1)
    balance = max(0.0, principal)
    installments: List[LoanInstallment] = []
    for index in range(periods):
        period_start = first_period + relativedelta(months=index * period_months)
        balance = max(0.0, balance - amount)
        installments.append(
            LoanInstallment(
                loan_id=loan_id,
                year=period_start.year,
                month=period_start.month,
                interest=0.0,
                principal=amount,
                total_payment=amount,
                remaining_balance=balance,
            )
        )
    return installments


def parse_month_key(key: str) -> Optional[Tuple[int, int]]:
    match = _MONTH_KEY.match(key)
    if match is None:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return year, month


def manual_schedule(principal: float, payments: Mapping[str, float], loan_id: str = "") -> List[LoanInstallment]:
    """Installments overridden month by month; malformed keys are ignored."""
    dated: List[Tuple[int, int, float]] = []
    for key, amount in payments.items():
        parsed = parse_month_key(key)
        if parsed is None:
            logger.debug("Loan %s: ignoring manual payment key %r", loan_id or "-", key)
            continue
        dated.append((parsed[0], parsed[1], amount))

    balance = max(0.0, principal)
    installments: List[LoanInstallment] = []
    for year, month, amount in sorted(dated):
        balance = max(0.0, balance - amount)
        installments.append(
            LoanInstallment(
                loan_id=loan_id,
                year=year,
                month=month,
                interest=0.0,
                principal=amount,
                total_payment=amount,
                remaining_balance=balance,
                is_manual=True,
            )
        )
    return installments


def schedule_for(loan: Loan) -> List[LoanInstallment]:
    """Installments of a loan: manual overrides first, then fixed or computed amounts."""
    if loan.manual_payments:
        return manual_schedule(loan.principal, loan.manual_payments, loan_id=loan.id)
    if loan.input_mode == LoanInputMode.FIXED:
        return fixed_schedule(
            loan.principal,
            loan.fixed_payment,
            loan.term_months,
            loan.start_year,
            loan.start_month,
            frequency=loan.frequency,
            loan_id=loan.id,
        )
    return schedule(
        loan.principal,
        loan.annual_rate,
        loan.term_months,
        loan.start_year,
        loan.start_month,
        frequency=loan.frequency,
        loan_id=loan.id,
    )


def payments_by_month(loans: Iterable[Loan]) -> Dict[Tuple[int, int], List[LoanInstallment]]:
    lookup: Dict[Tuple[int, int], List[LoanInstallment]] = defaultdict(list)
    for loan in loans:
        for installment in schedule_for(loan):
            lookup[(installment.year, installment.month)].append(installment)
    return lookup
