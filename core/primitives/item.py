"""
Kirana Item Primitive - Catalog Item and Cart Line
====================================================
Engine: Core Primitives
Authority: Kirana Doctrine - Deterministic, Snapshot-Threaded

The Item Primitive is the product abstraction used by the
Inventory, Retail and Actions engines.

RULES (NON-NEGOTIABLE):
- Items are immutable snapshots (a change produces a new item)
- Quantities are integers and never negative
- Prices are Decimal, never float
- item_id is assigned once and never reused or mutated
- name is a display key, not guaranteed unique

This file contains NO persistence logic.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from core.primitives.ledger import amount_to_str, to_amount


class ChangeType(Enum):
    """How a requested quantity combines with the current one."""
    ADD = "add"
    SUBTRACT = "subtract"
    SET = "set"


# ══════════════════════════════════════════════════════════════
# INVENTORY ITEM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InventoryItem:
    """
    A product on the shelf.

    Fields:
        item_id:     Opaque unique identifier
        name:        Display name (matched fuzzily by the resolver)
        quantity:    Units on hand (>= 0)
        unit:        Unit label ("packet", "kg", ...)
        price:       Selling price per unit (>= 0)
        expiry_date: Optional best-before date
        image:       Optional image reference
    """
    item_id: str
    name: str
    quantity: int
    unit: str = "unit"
    price: Decimal = Decimal(0)
    expiry_date: Optional[date] = None
    image: Optional[str] = None

    def __post_init__(self):
        if not self.item_id or not isinstance(self.item_id, str):
            raise ValueError("item_id must be non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be non-empty string.")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("quantity must be integer.")
        if self.quantity < 0:
            raise ValueError("quantity cannot be negative.")
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", to_amount(self.price))
        if self.price < 0:
            raise ValueError("price cannot be negative.")

    def with_quantity(self, quantity: int) -> InventoryItem:
        return dataclasses.replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "price": amount_to_str(self.price),
            "expiry_date": (
                self.expiry_date.isoformat() if self.expiry_date else None
            ),
            "image": self.image,
        }


# ══════════════════════════════════════════════════════════════
# CART LINE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CartLine:
    """
    A pending sale line in the running cart.

    A line with quantity <= 0 cannot exist; the cart drops it instead.
    price is the price seen when the line was first merged and may be
    None when nothing was known about the product.
    """
    name: str
    quantity: int
    price: Optional[Decimal] = None

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be non-empty string.")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("quantity must be integer.")
        if self.quantity <= 0:
            raise ValueError("quantity must be positive integer.")
        if self.price is not None and not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", to_amount(self.price))

    @property
    def key(self) -> str:
        """Merge key: one cart line per case-insensitive name."""
        return self.name.strip().casefold()

    def with_quantity(self, quantity: int) -> CartLine:
        return dataclasses.replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "price": amount_to_str(self.price),
        }
