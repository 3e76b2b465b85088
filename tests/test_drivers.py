from __future__ import annotations

import pytest

from planning_app.models.capex import CapexPayment
from planning_app.models.common import ScenarioMeta, TimeframeSettings
from planning_app.models.costs import EvolutionType, Expense, ExpenseStep
from planning_app.models.headcount import Department, Role
from planning_app.models.products import ManualCost, Product
from planning_app.models.scenario import ScenarioInput
from planning_app.services.drivers import build_drivers, capex_lines, depreciation_for


def _product(**overrides):
    data = dict(
        id="kit",
        name="Kit",
        launch_year=2025,
        unit_price=100.0,
        volumes_by_year={2025: 1000, 2026: 2000},
        cost=ManualCost(unit_cost=40.0),
    )
    data.update(overrides)
    return Product(**data)


def _scenario(**overrides):
    data = dict(
        meta=ScenarioMeta(id="t", name="Test"),
        timeframe=TimeframeSettings(start_year=2025, duration_years=2),
        products=[_product()],
        roles=[Role(id="eng", title="Engineer", department=Department.RND, start_year=2025, annual_cost_loaded=50000)],
        expenses=[Expense(id="rent", name="Rent", start_year=2025, base_annual_cost=20000)],
    )
    data.update(overrides)
    return ScenarioInput(**data)


def test_annual_drivers():
    drivers = build_drivers(_scenario())
    first = drivers[0]
    assert first.revenue == pytest.approx(100000.0)
    assert first.cogs == pytest.approx(40000.0)
    assert first.payroll == 50000.0
    assert first.opex == 20000.0
    assert first.headcount_by_department == {"R&D": 1}
    assert drivers[1].revenue == pytest.approx(200000.0)


def test_products_contribute_from_launch_year():
    scenario = _scenario(products=[_product(launch_year=2026)])
    drivers = build_drivers(scenario)
    assert drivers[0].revenue == 0.0
    assert drivers[0].cogs == 0.0
    assert drivers[1].revenue == pytest.approx(200000.0)


def test_expense_evolution_rules():
    growth = Expense(id="g", name="Tools", start_year=2025, base_annual_cost=1000, evolution=EvolutionType.GROWTH_RATE, growth_rate=0.1)
    ratio = Expense(id="r", name="Ads", start_year=2025, evolution=EvolutionType.PERCENTAGE_OF_REVENUE, revenue_ratio=0.05)
    unit = Expense(id="u", name="Shipping", start_year=2025, evolution=EvolutionType.PER_UNIT, volume_ratio=2.0)
    step = Expense(
        id="s",
        name="Office",
        start_year=2025,
        base_annual_cost=500,
        evolution=EvolutionType.STEP,
        steps=[ExpenseStep(year=2027, new_annual_cost=900), ExpenseStep(year=2026, new_annual_cost=700)],
    )
    assert growth.cost_for(2024, 0, 0) == 0.0
    assert growth.cost_for(2027, 0, 0) == pytest.approx(1210.0)
    assert ratio.cost_for(2025, 200000, 0) == pytest.approx(10000.0)
    assert unit.cost_for(2025, 0, 300) == pytest.approx(600.0)
    assert step.cost_for(2025, 0, 0) == 500
    assert step.cost_for(2026, 0, 0) == 700
    assert step.cost_for(2030, 0, 0) == 900


def test_capex_lines_follow_schedule_or_launch_month():
    scheduled = _product(
        id="a",
        dev_cost=50000,
        capex_schedule=[CapexPayment(year=2025, month=1, percentage_of_total=40), CapexPayment(year=2025, month=7, percentage_of_total=60)],
    )
    unscheduled = _product(id="b", dev_cost=30000, launch_month=9)
    lines = capex_lines([scheduled, unscheduled, _product(id="c")])
    assert [(line.product_id, line.month, line.amount) for line in lines] == [
        ("a", 1, pytest.approx(20000.0)),
        ("a", 7, pytest.approx(30000.0)),
        ("b", 9, 30000),
    ]


def test_depreciation_is_straight_line_from_launch():
    product = _product(dev_cost=50000, dev_amortization_years=5)
    assert depreciation_for([product], 2024) == 0.0
    assert depreciation_for([product], 2025) == pytest.approx(10000.0)
    assert depreciation_for([product], 2029) == pytest.approx(10000.0)
    assert depreciation_for([product], 2030) == 0.0
