"""
Kirana Core Primitives - Reusable Shop Building Blocks
========================================================
Primitives are the shared, engine-agnostic records that all
Kirana engines consume. They are:

- Pure Python (no Django dependency)
- Immutable (frozen dataclasses)
- Deterministic (same input → same output)

Primitives:
    item    — Inventory item, cart line and change types
    ledger  — Sale / expense records and amount helpers
"""

from core.primitives.item import CartLine, ChangeType, InventoryItem
from core.primitives.ledger import (
    ExpenseRecord,
    SaleLine,
    SaleRecord,
    amount_to_str,
    round_to_unit,
    to_amount,
)

__all__ = [
    "ChangeType",
    "InventoryItem",
    "CartLine",
    "SaleLine",
    "SaleRecord",
    "ExpenseRecord",
    "to_amount",
    "round_to_unit",
    "amount_to_str",
]
