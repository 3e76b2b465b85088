from __future__ import annotations

import math
from typing import List, Optional, Sequence

from ..models.common import SeasonalPattern


def normalized_weights(weights: Optional[Sequence[float]] = None) -> List[float]:
    if weights is None:
        return [1 / 12] * 12
    total = math.fsum(weights)
    if total <= 0:
        return [1 / 12] * 12
    return [weight / total for weight in weights]


def distribute(annual_total: float, weights: Optional[Sequence[float] | SeasonalPattern] = None) -> List[float]:
    """Spread an annual total over 12 months; the outputs always sum back to the total."""
    if isinstance(weights, SeasonalPattern):
        weights = weights.weights
    shares = normalized_weights(weights)
    amounts = [annual_total * share for share in shares[:-1]]
    amounts.append(annual_total - math.fsum(amounts))
    return amounts
