from __future__ import annotations

from typing import Dict, Tuple

from .models.common import PaymentTerm


# Discrete production quantities at which component prices are quoted.
VOLUME_TIERS: Tuple[int, ...] = (50, 100, 200, 500, 1000, 2000, 5000, 10000)

DEFAULT_PAYMENT_TERMS = (PaymentTerm(delay_months=0, percentage=100.0),)

SCORECARD_WEIGHTS: Dict[str, float] = {
    "team": 0.30,
    "market": 0.25,
    "product": 0.15,
    "competition": 0.10,
    "marketing": 0.10,
    "funding_need": 0.10,
}

BERKUS_COMPONENT_CAP = 500_000.0

RISK_FACTOR_STEP = 250_000.0
RISK_SCORE_BOUNDS = (-2, 2)

CONFIDENCE_WEIGHTS = {"high": 3, "medium": 2, "low": 1}

REVENUE_MULTIPLE_HIGH_CONFIDENCE = 500_000.0

PRE_MONEY_FLOOR = 200_000.0

REVENUE_TOLERANCE = 1e-6
COGS_TOLERANCE = 0.01
