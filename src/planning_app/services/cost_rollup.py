from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Sequence

from ..defaults import VOLUME_TIERS
from ..models.products import BomCost, ComponentReference, ManualCost, Product

logger = logging.getLogger(__name__)


def nearest_tier(volume: float, tiers: Sequence[int] = VOLUME_TIERS) -> Optional[int]:
    """Snap a production volume to the closest quoted tier; ties go to the lower tier.

    Returns ``None`` when no tier is configured.
    """
    if not tiers:
        return None
    best = tiers[0]
    for tier in tiers[1:]:
        if abs(tier - volume) < abs(best - volume):
            best = tier
    return best


class CostRollupEngine:
    """Unit cost of products from their bill of materials or their manual cost."""

    def __init__(
        self,
        products: Iterable[Product],
        components: Iterable[ComponentReference],
        tiers: Sequence[int] = VOLUME_TIERS,
    ) -> None:
        self._products: Dict[str, Product] = {product.id: product for product in products}
        self._components: Dict[str, ComponentReference] = {component.id: component for component in components}
        self._tiers = tuple(sorted(tiers))

    def cost(self, product_id: str, volume: float) -> float:
        product = self._products.get(product_id)
        if product is None:
            logger.debug("Unknown product %s, unit cost defaults to 0", product_id)
            return 0.0
        return self.unit_cost(product, volume)

    def unit_cost(self, product: Product, volume: float) -> float:
        cost_mode = product.cost
        if isinstance(cost_mode, ManualCost):
            return cost_mode.unit_cost
        return self._bom_cost(cost_mode, volume)

    def cost_table(self, product_id: str) -> Dict[int, float]:
        return {tier: self.cost(product_id, tier) for tier in self._tiers}

    def _bom_cost(self, bom: BomCost, volume: float) -> float:
        tier = nearest_tier(volume, self._tiers)
        if tier is None:
            return 0.0
        total = 0.0
        for entry in bom.entries:
            component = self._components.get(entry.component_id)
            if component is None:
                continue
            total += entry.quantity * component.prices.get(tier, 0.0)
        return total * bom.coefficient
