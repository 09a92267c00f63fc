"""
Kirana State - Shop Snapshot
==============================
The single immutable value threaded through the action reducer.

RULES (NON-NEGOTIABLE):
- A snapshot is never mutated; every transition builds a new one
- No ambient globals and no singleton store: callers hold the snapshot
- Sales and expenses only ever grow (append-only)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from core.primitives.item import CartLine, InventoryItem
from core.primitives.ledger import ExpenseRecord, SaleRecord


class ActiveView(Enum):
    """Screen the presentation layer should show."""
    BILLING = "billing"     # catalog + cart
    INSIGHTS = "insights"   # dashboard
    CHAT = "chat"           # assistant conversation


@dataclass(frozen=True)
class PosState:
    """
    Snapshot of {inventory, cart, sales, expenses, active_view}.

    inventory is in catalog order: most recently added product first.
    """
    inventory: Tuple[InventoryItem, ...] = ()
    cart: Tuple[CartLine, ...] = ()
    sales: Tuple[SaleRecord, ...] = ()
    expenses: Tuple[ExpenseRecord, ...] = ()
    active_view: ActiveView = ActiveView.BILLING

    def __post_init__(self):
        for name in ("inventory", "cart", "sales", "expenses"):
            if not isinstance(getattr(self, name), tuple):
                raise TypeError(f"{name} must be a tuple.")
        if not isinstance(self.active_view, ActiveView):
            raise ValueError("active_view must be ActiveView enum.")

        ids = [item.item_id for item in self.inventory]
        if len(ids) != len(set(ids)):
            raise ValueError("inventory item ids must be unique.")
        keys = [line.key for line in self.cart]
        if len(keys) != len(set(keys)):
            raise ValueError("cart must hold at most one line per name.")

    def evolve(self, **changes) -> PosState:
        return dataclasses.replace(self, **changes)

    def find_item(self, item_id: str):
        for item in self.inventory:
            if item.item_id == item_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "inventory": [i.to_dict() for i in self.inventory],
            "cart": [l.to_dict() for l in self.cart],
            "sales": [s.to_dict() for s in self.sales],
            "expenses": [e.to_dict() for e in self.expenses],
            "active_view": self.active_view.value,
        }
