from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..defaults import (
    BERKUS_COMPONENT_CAP,
    CONFIDENCE_WEIGHTS,
    REVENUE_MULTIPLE_HIGH_CONFIDENCE,
    RISK_FACTOR_STEP,
    RISK_SCORE_BOUNDS,
    SCORECARD_WEIGHTS,
)
from ..models.results import YearlySummary
from ..models.valuation import (
    BerkusParams,
    Confidence,
    DcfParams,
    EbitdaMultipleParams,
    HistoricalYear,
    ReferenceMetrics,
    RevenueMultipleParams,
    RiskFactorParams,
    ScorecardParams,
    ValuationBasis,
    ValuationMethod,
    ValuationResult,
    ValuationSettings,
)

logger = logging.getLogger(__name__)

_BERKUS_COMPONENTS = ("sound_idea", "prototype", "quality_management", "strategic_relationships", "product_rollout")
_RISK_FACTORS = (
    "management_risk",
    "business_stage",
    "legislation",
    "manufacturing",
    "sales_marketing",
    "funding_capital",
    "competition",
    "technology",
    "litigation",
    "international",
    "reputation",
    "potential_exit",
)


def revenue_multiple(params: RevenueMultipleParams) -> float:
    return params.reference_revenue * params.multiple


def ebitda_multiple(params: EbitdaMultipleParams) -> float:
    return params.reference_ebitda * params.multiple


def dcf(params: DcfParams) -> Optional[float]:
    """Discounted free cash flows plus a Gordon-growth terminal value.

    Returns None when the discount rate does not exceed the terminal growth
    rate, where the terminal value is undefined.
    """
    rate = params.discount_rate
    growth = params.terminal_growth_rate
    if rate <= growth or rate <= -1:
        return None
    present_value = sum(cash_flow / (1 + rate) ** (index + 1) for index, cash_flow in enumerate(params.cash_flows))
    last_cash_flow = params.cash_flows[-1] if params.cash_flows else 0.0
    terminal_value = last_cash_flow * (1 + growth) / (rate - growth)
    return present_value + terminal_value / (1 + rate) ** len(params.cash_flows)


def scorecard(params: ScorecardParams) -> float:
    multiplier = 1 + sum(weight * getattr(params, factor) for factor, weight in SCORECARD_WEIGHTS.items())
    return params.base_valuation * multiplier


def berkus(params: BerkusParams) -> float:
    cap = params.cap if params.cap is not None else BERKUS_COMPONENT_CAP
    return sum(min(max(0.0, getattr(params, component)), cap) for component in _BERKUS_COMPONENTS)


def risk_factor(params: RiskFactorParams) -> float:
    step = params.step_size if params.step_size is not None else RISK_FACTOR_STEP
    low, high = RISK_SCORE_BOUNDS
    score = sum(min(max(getattr(params, factor), low), high) for factor in _RISK_FACTORS)
    return params.base_valuation + score * step


def calculate(method: ValuationMethod, params) -> ValuationResult:
    """Run one valuation method on its parameter record."""
    if method == ValuationMethod.REVENUE_MULTIPLE:
        confidence = Confidence.HIGH if params.reference_revenue > REVENUE_MULTIPLE_HIGH_CONFIDENCE else Confidence.MEDIUM
        return ValuationResult(
            method=method,
            value=revenue_multiple(params),
            confidence=confidence,
            notes=f"{params.multiple:g}x revenue of {params.reference_revenue:,.0f}",
        )
    if method == ValuationMethod.EBITDA_MULTIPLE:
        return ValuationResult(
            method=method,
            value=ebitda_multiple(params),
            confidence=Confidence.HIGH if params.reference_ebitda > 0 else Confidence.LOW,
            notes=f"{params.multiple:g}x EBITDA of {params.reference_ebitda:,.0f}",
        )
    if method == ValuationMethod.DCF:
        value = dcf(params)
        if value is None:
            logger.warning(
                "DCF undefined: discount rate %.3f must exceed terminal growth %.3f",
                params.discount_rate,
                params.terminal_growth_rate,
            )
            return ValuationResult(method=method, value=None, confidence=Confidence.MEDIUM, notes="N/A")
        return ValuationResult(
            method=method,
            value=value,
            confidence=Confidence.MEDIUM,
            notes=f"Discount rate {params.discount_rate:.0%}",
        )
    if method == ValuationMethod.SCORECARD:
        return ValuationResult(method=method, value=scorecard(params), confidence=Confidence.LOW, notes="Sector comparables")
    if method == ValuationMethod.BERKUS:
        return ValuationResult(method=method, value=berkus(params), confidence=Confidence.LOW, notes="Early-stage qualitative")
    if method == ValuationMethod.RISK_FACTOR:
        return ValuationResult(
            method=method,
            value=risk_factor(params),
            confidence=Confidence.LOW,
            notes="Twelve risk factor adjustments",
        )
    raise ValueError(f"Unknown valuation method {method}")


def _projected_metrics(yearly: Sequence[YearlySummary], year: Optional[int]) -> ReferenceMetrics:
    row = next((item for item in yearly if item.year == year), None)
    if row is None:
        return ReferenceMetrics()
    return ReferenceMetrics(revenue=row.revenue, ebitda=row.ebitda, ebit=row.ebit)


def _historical_metrics(historical: Sequence[HistoricalYear], year: Optional[int]) -> ReferenceMetrics:
    row = next((item for item in historical if item.year == year), None)
    if row is None:
        return ReferenceMetrics()
    return ReferenceMetrics(revenue=row.revenue, ebitda=row.ebitda, ebit=row.ebit)


def reference_metrics(
    settings: ValuationSettings,
    yearly: Sequence[YearlySummary],
    historical: Optional[Sequence[HistoricalYear]] = None,
) -> ReferenceMetrics:
    """Select the (revenue, EBITDA, EBIT) triple the valuation methods run on."""
    if historical is None:
        historical = settings.historical
    historical_year = settings.historical_year
    if historical_year is None and historical:
        historical_year = historical[-1].year
    projected_year = settings.projected_year
    if projected_year is None and yearly:
        projected_year = yearly[-1].year

    if settings.basis == ValuationBasis.HISTORICAL:
        return _historical_metrics(historical, historical_year)
    if settings.basis == ValuationBasis.PROJECTED:
        return _projected_metrics(yearly, projected_year)
    if settings.basis == ValuationBasis.MIXED:
        past = _historical_metrics(historical, historical_year)
        future = _projected_metrics(yearly, projected_year)
        weight = settings.mix_weight
        return ReferenceMetrics(
            revenue=past.revenue * (1 - weight) + future.revenue * weight,
            ebitda=past.ebitda * (1 - weight) + future.ebitda * weight,
            ebit=past.ebit * (1 - weight) + future.ebit * weight,
        )

    if not settings.average_years:
        return ReferenceMetrics()
    historical_years = {row.year for row in historical}
    picked: List[ReferenceMetrics] = []
    for year in settings.average_years:
        if year in historical_years:
            picked.append(_historical_metrics(historical, year))
        else:
            picked.append(_projected_metrics(yearly, year))
    count = len(picked)
    return ReferenceMetrics(
        revenue=sum(item.revenue for item in picked) / count,
        ebitda=sum(item.ebitda for item in picked) / count,
        ebit=sum(item.ebit for item in picked) / count,
    )


def method_params(
    method: ValuationMethod,
    settings: ValuationSettings,
    metrics: ReferenceMetrics,
    cash_flows: Sequence[float],
):
    if method == ValuationMethod.REVENUE_MULTIPLE:
        return RevenueMultipleParams(reference_revenue=metrics.revenue, multiple=settings.revenue_multiple)
    if method == ValuationMethod.EBITDA_MULTIPLE:
        return EbitdaMultipleParams(reference_ebitda=metrics.ebitda, multiple=settings.ebitda_multiple)
    if method == ValuationMethod.DCF:
        return DcfParams(
            cash_flows=list(cash_flows),
            discount_rate=settings.discount_rate,
            terminal_growth_rate=settings.terminal_growth_rate,
        )
    if method == ValuationMethod.SCORECARD:
        return settings.scorecard
    if method == ValuationMethod.BERKUS:
        return settings.berkus
    return settings.risk_factor


def evaluate(
    selected: Iterable[ValuationMethod],
    settings: ValuationSettings,
    metrics: ReferenceMetrics,
    cash_flows: Sequence[float] = (),
) -> List[ValuationResult]:
    results: List[ValuationResult] = []
    for method in selected:
        results.append(calculate(method, method_params(method, settings, metrics, cash_flows)))
    return results


def average_valuation(results: Iterable[ValuationResult], weighted: bool = False) -> float:
    """Mean of the valid results; confidence-weighted on request."""
    valid = [result for result in results if result.is_valid]
    if not valid:
        return 0.0
    if not weighted:
        return sum(result.value for result in valid) / len(valid)
    weights: Dict[str, int] = CONFIDENCE_WEIGHTS
    total_weight = sum(weights[result.confidence.value] for result in valid)
    return sum(result.value * weights[result.confidence.value] for result in valid) / total_weight
