from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from ..models.capex import CapexLine
from ..models.common import MonthRef, TimeframeSettings
from ..models.costs import OneOffFlow
from ..models.funding import FundingRound, Loan, LoanInstallment
from ..models.results import AnnualDrivers, MonthlyTreasuryProjection, MonthlyTreasuryRecord
from ..models.scenario import TreasurySettings
from . import payment_terms, seasonality
from .loans import payments_by_month

logger = logging.getLogger(__name__)

MonthKey = Tuple[int, int]


class MonthlyTreasuryEngine:
    """Month-by-month treasury simulation; the running balance is the only carried state."""

    def project(
        self,
        drivers: Sequence[AnnualDrivers],
        settings: TreasurySettings,
        funding_rounds: Iterable[FundingRound],
        loans: Iterable[Loan],
        capex: Iterable[CapexLine],
        initial_cash: float,
        timeframe: TimeframeSettings,
    ) -> MonthlyTreasuryProjection:
        by_year = {row.year: row for row in drivers}
        purchases, paid_cogs = self._cogs(by_year, settings, timeframe)
        loan_lookup = payments_by_month(loans)
        capex_lookup = self._group(capex)
        funding_lookup = self._funding(funding_rounds, settings.exclude_funding)
        inflow_lookup = self._one_off(settings.other_inflows)
        outflow_lookup = self._one_off(settings.other_outflows)
        variable_rate = sum(charge.rate_of_revenue for charge in settings.variable_charges)

        first_period = date(timeframe.start_year, 1, 1)
        months: List[MonthlyTreasuryRecord] = []
        treasury = initial_cash
        for year in timeframe.years:
            row = by_year.get(year)
            revenue_split = seasonality.distribute(row.revenue if row else 0.0, settings.revenue_seasonality)
            payroll_split = seasonality.distribute(row.payroll if row else 0.0)
            opex_split = seasonality.distribute(row.opex if row else 0.0)
            for month in range(1, 13):
                index = timeframe.month_index(year, month)
                key = (year, month)
                revenue = revenue_split[month - 1]
                funding = funding_lookup.get(key, 0.0)
                other_in = inflow_lookup.get(key, 0.0)
                cogs = paid_cogs[index]
                cogs_accrued = purchases[index]
                payroll = payroll_split[month - 1]
                opex = opex_split[month - 1]
                variable = revenue * variable_rate
                loan_details: List[LoanInstallment] = loan_lookup.get(key, [])
                loan_total = sum(installment.total_payment for installment in loan_details)
                capex_details = capex_lookup.get(key, [])
                capex_total = sum(line.amount for line in capex_details)
                other_out = outflow_lookup.get(key, 0.0)

                total_inflows = revenue + funding + other_in
                total_outflows = cogs + payroll + opex + variable + loan_total + capex_total + other_out
                net = total_inflows - total_outflows
                start = treasury
                treasury = start + net
                months.append(
                    MonthlyTreasuryRecord(
                        year=year,
                        month=month,
                        period_start=first_period + relativedelta(months=index),
                        revenue=revenue,
                        funding_injection=funding,
                        other_inflows=other_in,
                        total_inflows=total_inflows,
                        cogs=cogs,
                        cogs_accrued=cogs_accrued,
                        payroll=payroll,
                        opex=opex,
                        variable_charges=variable,
                        loan_payments=loan_total,
                        capex_payments=capex_total,
                        other_outflows=other_out,
                        total_outflows=total_outflows,
                        treasury_start=start,
                        net_cash_flow=net,
                        treasury_end=treasury,
                        loan_details=list(loan_details),
                        capex_details=list(capex_details),
                    )
                )
        projection = self._summarize(months, initial_cash)
        logger.info(
            "Treasury projected over %d months: min %.0f, break-even %s",
            len(months),
            projection.min_treasury,
            projection.break_even_month,
        )
        return projection

    def _cogs(
        self,
        by_year: Dict[int, AnnualDrivers],
        settings: TreasurySettings,
        timeframe: TimeframeSettings,
    ) -> Tuple[List[float], List[float]]:
        """Monthly purchases and the same purchases as paid under the payment terms."""
        purchases: List[float] = []
        for year in timeframe.years:
            row = by_year.get(year)
            purchases.extend(seasonality.distribute(row.cogs if row else 0.0, settings.cogs_seasonality))
        # Payments shifted beyond the horizon fall outside the ledger.
        return purchases, payment_terms.apply(purchases, settings.cogs_payment_terms)[: timeframe.months]

    def _group(self, lines: Iterable[CapexLine]) -> Dict[MonthKey, List[CapexLine]]:
        lookup: Dict[MonthKey, List[CapexLine]] = defaultdict(list)
        for line in lines:
            lookup[(line.year, line.month)].append(line)
        return lookup

    def _funding(self, rounds: Iterable[FundingRound], exclude: bool) -> Dict[MonthKey, float]:
        lookup: Dict[MonthKey, float] = defaultdict(float)
        if exclude:
            return lookup
        for funding_round in rounds:
            lookup[(funding_round.year, funding_round.injection_month)] += funding_round.amount
        return lookup

    def _one_off(self, flows: Iterable[OneOffFlow]) -> Dict[MonthKey, float]:
        lookup: Dict[MonthKey, float] = defaultdict(float)
        for flow in flows:
            lookup[(flow.year, flow.month)] += flow.amount
        return lookup

    def _summarize(self, months: List[MonthlyTreasuryRecord], initial_cash: float) -> MonthlyTreasuryProjection:
        min_treasury = months[0].treasury_end if months else initial_cash
        min_month: Optional[MonthRef] = MonthRef(year=months[0].year, month=months[0].month) if months else None
        break_even: Optional[MonthRef] = None
        cumulative_operating = 0.0
        max_burn = 0.0
        totals: Dict[str, float] = defaultdict(float)
        for record in months:
            if record.treasury_end < min_treasury:
                min_treasury = record.treasury_end
                min_month = MonthRef(year=record.year, month=record.month)
            cumulative_operating += record.net_cash_flow - record.funding_injection
            if break_even is None and cumulative_operating >= 0:
                break_even = MonthRef(year=record.year, month=record.month)
            if record.net_cash_flow < 0:
                max_burn = max(max_burn, -record.net_cash_flow)
            totals["funding"] += record.funding_injection
            totals["capex"] += record.capex_payments
            totals["loans"] += record.loan_payments
            totals["variable"] += record.variable_charges

        final_treasury = months[-1].treasury_end if months else initial_cash
        runway = final_treasury / max_burn if max_burn > 0 else None
        return MonthlyTreasuryProjection(
            months=months,
            initial_cash=initial_cash,
            min_treasury=min_treasury,
            min_treasury_month=min_month,
            break_even_month=break_even,
            total_funding_raised=totals["funding"],
            total_capex_payments=totals["capex"],
            total_loan_payments=totals["loans"],
            total_variable_charges=totals["variable"],
            max_burn=max_burn,
            funding_need=max(0.0, -min_treasury),
            runway_months=max(0.0, runway) if runway is not None else None,
        )
