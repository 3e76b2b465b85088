from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from ..models.capex import CapexLine
from ..models.products import Product
from ..models.results import AnnualDrivers
from ..models.scenario import ScenarioInput
from .cost_rollup import CostRollupEngine

logger = logging.getLogger(__name__)


def depreciation_for(products: Iterable[Product], year: int) -> float:
    total = 0.0
    for product in products:
        years = product.dev_amortization_years
        if product.launch_year <= year < product.launch_year + years:
            total += product.dev_cost / years
    return total


def capex_lines(products: Iterable[Product]) -> List[CapexLine]:
    """Development cost payments; unscheduled products pay everything in their launch month."""
    lines: List[CapexLine] = []
    for product in products:
        if product.dev_cost <= 0:
            continue
        if not product.capex_schedule:
            lines.append(
                CapexLine(
                    product_id=product.id,
                    product_name=product.name,
                    year=product.launch_year,
                    month=product.launch_month,
                    amount=product.dev_cost,
                )
            )
            continue
        for payment in product.capex_schedule:
            lines.append(
                CapexLine(
                    product_id=product.id,
                    product_name=product.name,
                    year=payment.year,
                    month=payment.month,
                    amount=product.dev_cost * payment.percentage_of_total / 100.0,
                )
            )
    return lines


def build_drivers(scenario: ScenarioInput) -> List[AnnualDrivers]:
    """Yearly revenue, COGS, payroll, OPEX and CAPEX drivers of an (already adjusted) snapshot."""
    rollup = CostRollupEngine(scenario.products, scenario.components)
    capex_by_year: Dict[int, float] = defaultdict(float)
    for line in capex_lines(scenario.products):
        capex_by_year[line.year] += line.amount

    drivers: List[AnnualDrivers] = []
    for year in scenario.timeframe.years:
        revenue_by_category: Dict[str, float] = defaultdict(float)
        volumes = 0.0
        cogs = 0.0
        for product in scenario.products:
            if not product.is_active(year):
                continue
            volume = product.volume_for(year)
            revenue_by_category[product.category.value] += product.revenue_for(year)
            volumes += volume
            cogs += volume * rollup.unit_cost(product, volume)
        revenue = sum(revenue_by_category.values())

        payroll_by_department: Dict[str, float] = defaultdict(float)
        headcount_by_department: Dict[str, int] = defaultdict(int)
        for role in scenario.roles:
            if role.is_active(year):
                payroll_by_department[role.department.value] += role.annual_cost_loaded
                headcount_by_department[role.department.value] += 1

        opex_by_category: Dict[str, float] = defaultdict(float)
        for expense in scenario.expenses:
            opex_by_category[expense.category.value] += expense.cost_for(year, revenue, volumes)

        drivers.append(
            AnnualDrivers(
                year=year,
                revenue=revenue,
                revenue_by_category=dict(revenue_by_category),
                volumes=volumes,
                cogs=cogs,
                payroll=sum(payroll_by_department.values()),
                payroll_by_department=dict(payroll_by_department),
                headcount=sum(headcount_by_department.values()),
                headcount_by_department=dict(headcount_by_department),
                opex=sum(opex_by_category.values()),
                opex_by_category=dict(opex_by_category),
                capex=capex_by_year.get(year, 0.0),
                depreciation=depreciation_for(scenario.products, year),
            )
        )
    logger.debug("Built drivers for %d years", len(drivers))
    return drivers
