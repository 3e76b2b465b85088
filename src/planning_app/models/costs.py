from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field, conint

from .common import SnapshotModel


class ExpenseCategory(str, Enum):
    RND = "R&D"
    PRODUCTION = "Production"
    SALES_MARKETING = "Sales & Marketing"
    GNA = "G&A"
    LOGISTICS = "Logistics"
    IT_TOOLS = "IT & Tools"


class EvolutionType(str, Enum):
    FIXED = "fixed"
    GROWTH_RATE = "growth_rate"
    PERCENTAGE_OF_REVENUE = "percentage_of_revenue"
    PER_UNIT = "per_unit"
    STEP = "step"


class ExpenseStep(SnapshotModel):
    year: int
    new_annual_cost: float


class Expense(SnapshotModel):
    id: str
    name: str
    category: ExpenseCategory = ExpenseCategory.GNA
    start_year: int
    base_annual_cost: float = 0.0
    evolution: EvolutionType = EvolutionType.FIXED
    growth_rate: float = 0.0
    revenue_ratio: float = 0.0
    volume_ratio: float = 0.0
    steps: List[ExpenseStep] = Field(default_factory=list)
    description: Optional[str] = None

    def cost_for(self, year: int, revenue: float, volumes: float) -> float:
        if year < self.start_year:
            return 0.0
        if self.evolution == EvolutionType.GROWTH_RATE:
            return self.base_annual_cost * (1 + self.growth_rate) ** (year - self.start_year)
        if self.evolution == EvolutionType.PERCENTAGE_OF_REVENUE:
            return revenue * self.revenue_ratio
        if self.evolution == EvolutionType.PER_UNIT:
            return volumes * self.volume_ratio
        if self.evolution == EvolutionType.STEP:
            reached = [step for step in self.steps if step.year <= year]
            if reached:
                return max(reached, key=lambda step: step.year).new_annual_cost
        return self.base_annual_cost


class VariableCharge(SnapshotModel):
    name: str
    rate_of_revenue: float = Field(..., description="Share of the month's revenue, e.g. 0.03 for 3%")


class OneOffFlow(SnapshotModel):
    year: int
    month: conint(ge=1, le=12)
    amount: float
    label: str = ""
