from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ..defaults import PRE_MONEY_FLOOR
from ..models.results import YearlySummary
from ..models.valuation import DilutionResult, DilutionSettings, ExitAnalysis

logger = logging.getLogger(__name__)


def dilute(settings: DilutionSettings, reference_ebitda: Optional[float] = None) -> DilutionResult:
    """Pre/post-money split of a raise valued on an EBITDA multiple."""
    ebitda = settings.reference_ebitda if settings.reference_ebitda is not None else (reference_ebitda or 0.0)
    floor = settings.pre_money_floor if settings.pre_money_floor is not None else PRE_MONEY_FLOOR
    pre_money = max(floor, ebitda * settings.ebitda_multiple)
    ratio = min(max(settings.convertible_ratio, 0.0), 1.0)
    equity = settings.total_raise * (1 - ratio)
    convertible = settings.total_raise * ratio
    post_money = pre_money + equity
    return DilutionResult(
        pre_money=pre_money,
        equity_amount=equity,
        convertible_amount=convertible,
        post_money=post_money,
        dilution=equity / post_money if post_money else 0.0,
    )


def irr(investment: float, exit_value: float, years: float) -> float:
    """Annualized return of a single buy-and-exit; 0 when any input is not positive."""
    if investment <= 0 or exit_value <= 0 or years <= 0:
        return 0.0
    return (exit_value / investment) ** (1 / years) - 1


def exit_analysis(
    settings: DilutionSettings,
    result: DilutionResult,
    yearly: Sequence[YearlySummary],
    start_year: int,
) -> Tuple[List[ExitAnalysis], float]:
    """Investor outcome per exit scenario plus the probability-weighted return."""
    ebitda_by_year = {row.year: row.ebitda for row in yearly}
    exits: List[ExitAnalysis] = []
    expected = 0.0
    for scenario in settings.exit_scenarios:
        ebitda = ebitda_by_year.get(scenario.year)
        if ebitda is None:
            logger.debug("Exit %s in %d falls outside the projection", scenario.name, scenario.year)
            ebitda = 0.0
        exit_valuation = max(0.0, ebitda * scenario.exit_multiple)
        investor_return = exit_valuation * result.dilution
        holding = scenario.year - start_year
        exits.append(
            ExitAnalysis(
                name=scenario.name,
                year=scenario.year,
                exit_multiple=scenario.exit_multiple,
                probability=scenario.probability,
                ebitda_at_exit=ebitda,
                exit_valuation=exit_valuation,
                investor_return=investor_return,
                holding_years=holding,
                irr=irr(result.equity_amount, investor_return, holding),
                moic=investor_return / result.equity_amount if result.equity_amount > 0 else 0.0,
            )
        )
        expected += investor_return * scenario.probability
    return exits, expected
