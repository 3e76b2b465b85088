from __future__ import annotations

import math
from typing import List, Sequence

from ..defaults import DEFAULT_PAYMENT_TERMS
from ..models.common import PaymentTerm


def normalize_terms(terms: Sequence[PaymentTerm]) -> List[PaymentTerm]:
    """Rescale percentages so they total 100; no usable terms means cash payment."""
    total = math.fsum(term.percentage for term in terms)
    if not terms or total <= 0:
        return list(DEFAULT_PAYMENT_TERMS)
    return [
        PaymentTerm(delay_months=term.delay_months, percentage=term.percentage * 100.0 / total)
        for term in terms
    ]


def apply(amounts: Sequence[float], terms: Sequence[PaymentTerm]) -> List[float]:
    """Shift monthly amounts forward by payment delays.

    For each source month ``m`` and term ``(d, p)``, ``amount[m] * p / 100``
    lands in month ``m + d``. The output is longer than the input by the
    largest delay so no money is lost.
    """
    normalized = normalize_terms(terms)
    max_delay = max(term.delay_months for term in normalized)
    shifted = [0.0] * (len(amounts) + max_delay)
    for month_index, amount in enumerate(amounts):
        if not amount:
            continue
        for term in normalized:
            shifted[month_index + term.delay_months] += amount * term.percentage / 100.0
    return shifted
