from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from pydantic import Field, conint

from .common import Quarter, SnapshotModel


class LoanFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"

    @property
    def period_months(self) -> int:
        return {"monthly": 1, "quarterly": 3, "annual": 12}[self.value]


class LoanInputMode(str, Enum):
    CALCULATED = "calculated"
    FIXED = "fixed"


class Loan(SnapshotModel):
    id: str
    name: str
    principal: float
    annual_rate: float = Field(0.0, description="Annual interest rate as decimal (0.05 for 5%)")
    term_months: conint(ge=0)
    start_year: int
    start_month: conint(ge=1, le=12) = 1
    frequency: LoanFrequency = LoanFrequency.MONTHLY
    input_mode: LoanInputMode = LoanInputMode.CALCULATED
    fixed_payment: float = Field(0.0, ge=0, description="Installment amount per period in fixed mode")
    manual_payments: Dict[str, float] = Field(
        default_factory=dict,
        description="Payments keyed \"YYYY-MM\"; when present they replace the computed schedule",
    )


class LoanInstallment(SnapshotModel):
    loan_id: str = ""
    year: int
    month: int
    interest: float
    principal: float
    total_payment: float
    remaining_balance: float
    is_manual: bool = False


class FundingRound(SnapshotModel):
    name: str
    year: int
    month: conint(ge=1, le=12) = 1
    quarter: Optional[Quarter] = None
    amount: float = Field(..., ge=0)
    pre_money_valuation: float = 0.0

    @property
    def injection_month(self) -> int:
        if self.quarter is not None:
            return self.quarter.first_month()
        return self.month

    @property
    def post_money_valuation(self) -> float:
        return self.pre_money_valuation + self.amount

    @property
    def dilution(self) -> float:
        post_money = self.post_money_valuation
        return self.amount / post_money if post_money > 0 else 0.0
