"""
Kirana Inventory Engine - Cost Estimator
==========================================
Derives the implied acquisition cost of stock added to the shelf.

RULES:
- cost basis = selling price x cost_ratio (0.8 unless configured)
- only positive quantity deltas carry cost; subtraction never does
- per-line costs are summed unrounded, the aggregate is rounded
  half-up to a whole currency unit once per action
- a zero aggregate produces no expense
"""

from __future__ import annotations

from decimal import Decimal

from core.primitives.ledger import round_to_unit, to_amount

DEFAULT_COST_RATIO = Decimal("0.8")
QUICK_RESTOCK_UNITS = 10


def estimate_cost(
    price_used,
    quantity_delta: int,
    cost_ratio: Decimal = DEFAULT_COST_RATIO,
) -> Decimal:
    """Unrounded cost of `quantity_delta` units bought at cost basis."""
    if quantity_delta <= 0:
        return Decimal(0)
    return to_amount(price_used) * to_amount(cost_ratio) * quantity_delta


def quick_restock_cost(
    price_used,
    cost_ratio: Decimal = DEFAULT_COST_RATIO,
    units: int = QUICK_RESTOCK_UNITS,
) -> Decimal:
    """Cost of the dashboard shortcut, which always adds `units`."""
    return estimate_cost(price_used, units, cost_ratio)


def round_cost(total: Decimal) -> int:
    """Whole-unit expense amount for an aggregated cost."""
    return round_to_unit(total)
