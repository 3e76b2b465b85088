from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field, conint

from .capex import CapexPayment
from .common import SnapshotModel


class ProductCategory(str, Enum):
    B2C = "B2C"
    B2B = "B2B"
    OEM = "OEM"


class SalesChannel(str, Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"
    OEM = "oem"


class BomEntry(SnapshotModel):
    component_id: str
    quantity: float = Field(..., ge=0, description="Units of the component per unit of product")


class ComponentReference(SnapshotModel):
    id: str
    name: str
    supplier: str = ""
    currency: str = "EUR"
    prices: Dict[int, float] = Field(default_factory=dict, description="Unit price keyed by volume tier")


class BomCost(SnapshotModel):
    mode: Literal["bom"] = "bom"
    entries: List[BomEntry] = Field(default_factory=list)
    coefficient: float = Field(1.3, description="Labor/assembly overhead applied to the component sum")


class ManualCost(SnapshotModel):
    mode: Literal["manual"] = "manual"
    unit_cost: float = 0.0


CostMode = Annotated[Union[BomCost, ManualCost], Field(discriminator="mode")]


class Product(SnapshotModel):
    id: str
    name: str
    category: ProductCategory = ProductCategory.B2C
    launch_year: int
    launch_month: conint(ge=1, le=12) = 1
    unit_price: float = Field(..., description="Unit price excluding taxes")
    channel_prices: Dict[SalesChannel, float] = Field(default_factory=dict)
    volumes_by_year: Dict[int, float] = Field(default_factory=dict)
    volumes_by_channel: Optional[Dict[SalesChannel, Dict[int, float]]] = None
    cost: CostMode = Field(default_factory=ManualCost)
    dev_cost: float = 0.0
    dev_amortization_years: conint(ge=1) = 5
    capex_schedule: List[CapexPayment] = Field(default_factory=list)

    def is_active(self, year: int) -> bool:
        return self.launch_year <= year

    def volume_for(self, year: int) -> float:
        if self.volumes_by_channel:
            return sum(series.get(year, 0.0) for series in self.volumes_by_channel.values())
        return self.volumes_by_year.get(year, 0.0)

    def price_for(self, channel: SalesChannel) -> float:
        return self.channel_prices.get(channel, self.unit_price)

    def revenue_for(self, year: int) -> float:
        if not self.is_active(year):
            return 0.0
        if self.volumes_by_channel:
            return sum(
                series.get(year, 0.0) * self.price_for(channel)
                for channel, series in self.volumes_by_channel.items()
            )
        return self.volumes_by_year.get(year, 0.0) * self.unit_price
