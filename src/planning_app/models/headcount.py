from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from .common import SnapshotModel


class Department(str, Enum):
    RND = "R&D"
    PRODUCTION = "Production"
    SALES = "Sales"
    SUPPORT = "Support"
    ADMIN = "Admin"


class Role(SnapshotModel):
    id: str
    title: str
    department: Department
    start_year: int
    annual_cost_loaded: float = Field(..., ge=0, description="Fully loaded yearly cost of the position")
    linked_product_id: Optional[str] = None

    def is_active(self, year: int) -> bool:
        return self.start_year <= year
