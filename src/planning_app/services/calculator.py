from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..models.common import ScenarioId
from ..models.results import ScenarioComparisonRow, ScenarioResult, YearlySummary
from ..models.scenario import ScenarioInput
from ..models.valuation import ValuationReport
from . import dilution, valuation
from .aggregator import aggregate
from .drivers import build_drivers, capex_lines
from .reconciliation import reconcile
from .scenario_adjuster import adjust
from .treasury import MonthlyTreasuryEngine

logger = logging.getLogger(__name__)


class ScenarioCalculator:
    def __init__(self, treasury_engine: Optional[MonthlyTreasuryEngine] = None) -> None:
        self.treasury_engine = treasury_engine or MonthlyTreasuryEngine()

    def run(self, scenario: ScenarioInput, scenario_id: Optional[ScenarioId] = None) -> ScenarioResult:
        scenario_id = scenario_id or scenario.active_scenario
        config = scenario.scenario_config(scenario_id)
        adjusted = adjust(scenario, config)

        drivers = build_drivers(adjusted)
        projection = self.treasury_engine.project(
            drivers,
            adjusted.treasury,
            adjusted.funding_rounds,
            adjusted.loans,
            capex_lines(adjusted.products),
            adjusted.initial_cash,
            adjusted.timeframe,
        )
        yearly = aggregate(projection, {row.year: row.depreciation for row in drivers}, adjusted.income)
        report = reconcile(yearly, drivers)
        valuation_report = self.value(adjusted, yearly)

        break_even_year = next((row.year for row in yearly if row.ebitda > 0), None)
        logger.info(
            "Scenario %s (%s): revenue %.0f, min treasury %.0f, valuation %.0f",
            scenario.meta.id,
            scenario_id.value,
            sum(row.revenue for row in yearly),
            projection.min_treasury,
            valuation_report.average_valuation,
        )
        return ScenarioResult(
            scenario_id=scenario_id,
            config=config,
            drivers=drivers,
            treasury=projection,
            yearly=yearly,
            reconciliation=report,
            valuation=valuation_report,
            revenue_cagr=self._cagr(yearly),
            break_even_year=break_even_year,
        )

    def run_all(self, scenario: ScenarioInput) -> Dict[ScenarioId, ScenarioResult]:
        return {scenario_id: self.run(scenario, scenario_id) for scenario_id in scenario.scenario_configs}

    def compare(self, results: Iterable[ScenarioResult]) -> List[ScenarioComparisonRow]:
        rows: List[ScenarioComparisonRow] = []
        for result in results:
            rows.append(
                ScenarioComparisonRow(
                    scenario_id=result.scenario_id,
                    total_revenue=sum(row.revenue for row in result.yearly),
                    final_ebitda=result.yearly[-1].ebitda if result.yearly else 0.0,
                    min_treasury=result.treasury.min_treasury,
                    funding_need=result.treasury.funding_need,
                    break_even_month=result.treasury.break_even_month,
                    average_valuation=result.valuation.average_valuation,
                )
            )
        return rows

    def value(self, scenario: ScenarioInput, yearly: List[YearlySummary]) -> ValuationReport:
        settings = scenario.valuation
        metrics = valuation.reference_metrics(settings, yearly)
        cash_flows = [row.free_cash_flow for row in yearly]
        results = valuation.evaluate(settings.selected_methods, settings, metrics, cash_flows)
        dilution_result = dilution.dilute(settings.dilution, metrics.ebitda)
        exits, expected = dilution.exit_analysis(
            settings.dilution, dilution_result, yearly, scenario.timeframe.start_year
        )
        return ValuationReport(
            metrics=metrics,
            results=results,
            average_valuation=valuation.average_valuation(results, settings.weighted_average),
            dilution=dilution_result,
            exits=exits,
            expected_investor_return=expected,
        )

    def _cagr(self, yearly: List[YearlySummary]) -> float:
        revenues = [row.revenue for row in yearly if row.revenue > 0]
        if len(revenues) < 2:
            return 0.0
        first, last = revenues[0], revenues[-1]
        return (last / first) ** (1 / (len(revenues) - 1)) - 1
