from __future__ import annotations

from pydantic import Field, conint

from .common import SnapshotModel


class CapexPayment(SnapshotModel):
    """Share of a product's development cost paid in a given month."""

    year: int
    month: conint(ge=1, le=12) = 1
    percentage_of_total: float = Field(..., ge=0, description="Percent of the product dev cost, e.g. 25 for 25%")


class CapexLine(SnapshotModel):
    product_id: str
    product_name: str
    year: int
    month: int
    amount: float
