from __future__ import annotations

import pytest

from planning_app.models.products import BomCost, BomEntry, ComponentReference, ManualCost, Product
from planning_app.services.cost_rollup import CostRollupEngine, nearest_tier


def _components():
    return [
        ComponentReference(id="pcb", name="Board", prices={100: 10.0, 500: 8.0}),
        ComponentReference(id="case", name="Case", prices={100: 5.0, 500: 4.0}),
    ]


def _bom_product(**overrides):
    data = dict(
        id="kit",
        name="Kit",
        launch_year=2025,
        unit_price=100.0,
        cost=BomCost(entries=[BomEntry(component_id="pcb", quantity=2), BomEntry(component_id="case", quantity=1)]),
    )
    data.update(overrides)
    return Product(**data)


def test_nearest_tier_picks_closest_quote():
    assert nearest_tier(150) == 100
    assert nearest_tier(700) == 500
    assert nearest_tier(0) == 50
    assert nearest_tier(20000) == 10000


def test_nearest_tier_ties_go_to_lower_tier():
    assert nearest_tier(75) == 50
    assert nearest_tier(1500) == 1000


def test_empty_tier_set_costs_nothing():
    assert nearest_tier(150, ()) is None
    engine = CostRollupEngine([_bom_product()], _components(), tiers=())
    assert engine.cost("kit", 100) == 0.0
    assert engine.cost_table("kit") == {}
    manual = _bom_product(cost=ManualCost(unit_cost=12.5))
    assert CostRollupEngine([manual], _components(), tiers=()).cost("kit", 100) == pytest.approx(12.5)


def test_bom_cost_applies_coefficient():
    engine = CostRollupEngine([_bom_product()], _components())
    assert engine.cost("kit", 100) == pytest.approx((2 * 10.0 + 5.0) * 1.3)
    assert engine.cost("kit", 480) == pytest.approx((2 * 8.0 + 4.0) * 1.3)


def test_manual_cost_bypasses_bom():
    product = _bom_product(cost=ManualCost(unit_cost=42.0))
    engine = CostRollupEngine([product], _components())
    assert engine.cost("kit", 100) == 42.0
    assert engine.cost("kit", 5000) == 42.0


def test_unknown_product_costs_nothing():
    engine = CostRollupEngine([_bom_product()], _components())
    assert engine.cost("ghost", 100) == 0.0


def test_missing_component_is_skipped():
    product = _bom_product(
        cost=BomCost(entries=[BomEntry(component_id="pcb", quantity=1), BomEntry(component_id="lens", quantity=3)], coefficient=1.0)
    )
    engine = CostRollupEngine([product], _components())
    assert engine.cost("kit", 100) == pytest.approx(10.0)


def test_cost_table_lists_every_tier():
    engine = CostRollupEngine([_bom_product()], _components(), tiers=(100, 500))
    table = engine.cost_table("kit")
    assert list(table) == [100, 500]
    assert table[500] < table[100]
