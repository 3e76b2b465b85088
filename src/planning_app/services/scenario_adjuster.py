from __future__ import annotations

import math
from typing import Dict

from ..models.costs import Expense, ExpenseStep
from ..models.headcount import Role
from ..models.products import Product
from ..models.scenario import ScenarioConfig, ScenarioInput


def round_units(volume: float) -> int:
    """Half-up rounding to whole units."""
    return int(math.floor(volume + 0.5))


def _scale_series(series: Dict[int, float], factor: float) -> Dict[int, float]:
    return {year: round_units(volume * factor) for year, volume in series.items()}


def adjust_product(product: Product, config: ScenarioConfig) -> Product:
    volume_factor = 1 + config.volume_adjustment
    price_factor = 1 + config.price_adjustment
    update = {
        "unit_price": product.unit_price * price_factor,
        "channel_prices": {channel: price * price_factor for channel, price in product.channel_prices.items()},
        "volumes_by_year": _scale_series(product.volumes_by_year, volume_factor),
    }
    if product.volumes_by_channel:
        update["volumes_by_channel"] = {
            channel: _scale_series(series, volume_factor) for channel, series in product.volumes_by_channel.items()
        }
    return product.model_copy(update=update)


def adjust_expense(expense: Expense, config: ScenarioConfig) -> Expense:
    factor = 1 + config.opex_adjustment
    return expense.model_copy(
        update={
            "base_annual_cost": expense.base_annual_cost * factor,
            "revenue_ratio": expense.revenue_ratio * factor,
            "volume_ratio": expense.volume_ratio * factor,
            "steps": [
                ExpenseStep(year=step.year, new_annual_cost=step.new_annual_cost * factor) for step in expense.steps
            ],
        }
    )


def adjust_role(role: Role, config: ScenarioConfig) -> Role:
    if not config.hiring_delay_years:
        return role
    return role.model_copy(update={"start_year": role.start_year + config.hiring_delay_years})


def adjust(scenario: ScenarioInput, config: ScenarioConfig) -> ScenarioInput:
    """Return a new snapshot with volumes, prices and OPEX scaled by the scenario deltas.

    Volumes are rounded to whole units before the price applies.
    """
    return scenario.model_copy(
        update={
            "products": [adjust_product(product, config) for product in scenario.products],
            "expenses": [adjust_expense(expense, config) for expense in scenario.expenses],
            "roles": [adjust_role(role, config) for role in scenario.roles],
        }
    )
