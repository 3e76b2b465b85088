from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, conint, field_validator


class SnapshotModel(BaseModel):
    """Immutable record. Variants are derived with ``model_copy``."""

    model_config = ConfigDict(frozen=True)


class ScenarioId(str, Enum):
    CONSERVATIVE = "conservative"
    BASE = "base"
    AMBITIOUS = "ambitious"


class Quarter(str, Enum):
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"

    def first_month(self) -> int:
        return (int(self.value[1]) - 1) * 3 + 1


class TimeframeSettings(SnapshotModel):
    start_year: int
    duration_years: conint(ge=1) = 5

    @property
    def years(self) -> List[int]:
        return [self.start_year + offset for offset in range(self.duration_years)]

    @property
    def end_year(self) -> int:
        return self.start_year + self.duration_years - 1

    @property
    def months(self) -> int:
        return self.duration_years * 12

    def month_index(self, year: int, month: int) -> Optional[int]:
        """0-based ledger position of ``(year, month)``, or None outside the horizon."""
        index = (year - self.start_year) * 12 + (month - 1)
        if 0 <= index < self.months:
            return index
        return None


class MonthRef(SnapshotModel):
    year: int
    month: conint(ge=1, le=12)

    @property
    def period_start(self) -> date:
        return date(self.year, self.month, 1)


class SeasonalPattern(SnapshotModel):
    weights: List[float] = Field(..., description="Length-12 relative weights, normalized on use")

    @field_validator("weights")
    @classmethod
    def _twelve_non_negative(cls, value: List[float]) -> List[float]:
        if len(value) != 12:
            raise ValueError("seasonality needs exactly 12 weights")
        if any(weight < 0 for weight in value):
            raise ValueError("seasonality weights must be non-negative")
        return value

    @classmethod
    def uniform(cls) -> "SeasonalPattern":
        return cls(weights=[1 / 12] * 12)

    @classmethod
    def from_variations(cls, variations: List[float]) -> "SeasonalPattern":
        """Build weights from variations around the monthly average (0.2 = +20%)."""
        return cls(weights=[max(0.0, 1 + variation) for variation in variations])


class PaymentTerm(SnapshotModel):
    delay_months: conint(ge=0) = 0
    percentage: float = Field(100.0, ge=0, description="Share of the amount paid at this delay, in percent")


class ScenarioMeta(SnapshotModel):
    id: str
    name: str
    description: Optional[str] = None
    currency: str = "EUR"
