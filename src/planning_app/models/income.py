from __future__ import annotations

from typing import Dict

from pydantic import Field, confloat

from .common import SnapshotModel


class IncomeStatementSettings(SnapshotModel):
    """Below-EBIT items entered by hand, keyed by calendar year."""

    financial_income: Dict[int, float] = Field(default_factory=dict)
    financial_expense: Dict[int, float] = Field(default_factory=dict)
    exceptional_income: Dict[int, float] = Field(default_factory=dict)
    exceptional_expense: Dict[int, float] = Field(default_factory=dict)
    research_tax_credit: Dict[int, float] = Field(
        default_factory=dict, description="Research tax credit (CIR) offset against the year's income tax"
    )
    income_tax_rate: confloat(ge=0, le=1) = 0.25
    participation_threshold: float = Field(100_000.0, description="Pre-tax result above which profit-sharing applies")
    participation_rate: confloat(ge=0, le=1) = 0.05
