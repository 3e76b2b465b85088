from __future__ import annotations

import logging
from typing import List, Sequence

from ..defaults import COGS_TOLERANCE, REVENUE_TOLERANCE
from ..models.results import AnnualDrivers, ReconciliationLine, ReconciliationReport, YearlySummary

logger = logging.getLogger(__name__)


def _within(annual: float, monthly: float, tolerance: float) -> bool:
    scale = max(abs(annual), 1.0)
    return abs(monthly - annual) <= tolerance * scale


def reconcile(
    yearly: Sequence[YearlySummary],
    drivers: Sequence[AnnualDrivers],
    revenue_tolerance: float = REVENUE_TOLERANCE,
    cogs_tolerance: float = COGS_TOLERANCE,
) -> ReconciliationReport:
    """Check the ledger-derived yearly figures against the annual drivers.

    Revenue, payroll and OPEX must match within floating error. COGS is
    compared as purchased, so payment terms do not move it across years;
    ``cogs_tolerance`` bounds the remaining drift.
    """
    ledger = {row.year: row for row in yearly}
    lines: List[ReconciliationLine] = []
    for driver in drivers:
        row = ledger.get(driver.year)
        if row is None:
            continue
        checks = (
            ("revenue", driver.revenue, row.revenue, revenue_tolerance),
            ("payroll", driver.payroll, row.payroll, revenue_tolerance),
            ("opex", driver.opex, row.opex, revenue_tolerance),
            ("cogs", driver.cogs, row.cogs_accrued, cogs_tolerance),
        )
        for metric, annual, monthly, tolerance in checks:
            ok = _within(annual, monthly, tolerance)
            if not ok:
                logger.warning(
                    "%s %d drifts: annual %.2f vs monthly %.2f", metric, driver.year, annual, monthly
                )
            lines.append(
                ReconciliationLine(
                    year=driver.year,
                    metric=metric,
                    annual=annual,
                    monthly=monthly,
                    tolerance=tolerance,
                    within_tolerance=ok,
                )
            )
    return ReconciliationReport(lines=lines)
