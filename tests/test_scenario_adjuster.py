from __future__ import annotations

import pytest

from planning_app.models.common import ScenarioMeta, TimeframeSettings
from planning_app.models.costs import EvolutionType, Expense, ExpenseStep
from planning_app.models.headcount import Department, Role
from planning_app.models.products import Product, SalesChannel
from planning_app.models.scenario import ScenarioConfig, ScenarioInput
from planning_app.services.scenario_adjuster import adjust, round_units


def _scenario():
    return ScenarioInput(
        meta=ScenarioMeta(id="t", name="Test"),
        timeframe=TimeframeSettings(start_year=2025, duration_years=3),
        products=[
            Product(
                id="kit",
                name="Kit",
                launch_year=2025,
                unit_price=100.0,
                channel_prices={SalesChannel.OEM: 80.0},
                volumes_by_year={2025: 101, 2026: 1000, 2027: 10},
            )
        ],
        roles=[Role(id="eng", title="Engineer", department=Department.RND, start_year=2025, annual_cost_loaded=50000)],
        expenses=[
            Expense(
                id="rent",
                name="Rent",
                start_year=2025,
                base_annual_cost=1000,
                evolution=EvolutionType.STEP,
                steps=[ExpenseStep(year=2026, new_annual_cost=2000)],
            )
        ],
    )


def test_round_units_is_half_up():
    assert round_units(12.5) == 13
    assert round_units(80.8) == 81
    assert round_units(2.4) == 2


def test_volume_adjustment_rounds_before_pricing():
    scenario = _scenario()
    adjusted = adjust(scenario, ScenarioConfig(volume_adjustment=-0.2))
    assert adjusted.products[0].volumes_by_year == {2025: 81, 2026: 800, 2027: 8}

    ambitious = adjust(scenario, ScenarioConfig(volume_adjustment=0.25))
    assert ambitious.products[0].volumes_by_year[2027] == 13
    assert ambitious.products[0].revenue_for(2027) == pytest.approx(1300.0)


def test_price_and_opex_adjustments():
    adjusted = adjust(_scenario(), ScenarioConfig(price_adjustment=0.1, opex_adjustment=0.1))
    product = adjusted.products[0]
    assert product.unit_price == pytest.approx(110.0)
    assert product.channel_prices[SalesChannel.OEM] == pytest.approx(88.0)
    expense = adjusted.expenses[0]
    assert expense.base_annual_cost == pytest.approx(1100.0)
    assert expense.steps[0].new_annual_cost == pytest.approx(2200.0)


def test_hiring_delay_shifts_roles():
    adjusted = adjust(_scenario(), ScenarioConfig(hiring_delay_years=1))
    assert adjusted.roles[0].start_year == 2026


def test_input_snapshot_is_untouched():
    scenario = _scenario()
    adjust(scenario, ScenarioConfig(volume_adjustment=0.5, price_adjustment=0.5, opex_adjustment=0.5, hiring_delay_years=2))
    assert scenario.products[0].volumes_by_year == {2025: 101, 2026: 1000, 2027: 10}
    assert scenario.products[0].unit_price == 100.0
    assert scenario.expenses[0].base_annual_cost == 1000
    assert scenario.roles[0].start_year == 2025
