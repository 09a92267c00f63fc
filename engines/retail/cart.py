"""
Kirana Retail Engine - Cart Aggregator
========================================
Session-scoped multiset of pending sale lines.

RULES (NON-NEGOTIABLE):
- at most one line per name (case-insensitive) in a cart
- a line whose quantity would reach 0 or less is removed, never kept
- incoming lines are priced against live inventory before merging
  (inventory price, else the line's own price, else 0) and renamed to
  the inventory item they resolved to
- merging into an existing line adds quantities and keeps the price
  the line was first merged with
- totals and bill previews always use the live inventory price, the
  same pricing the sale recorder applies at checkout
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from core.primitives.item import CartLine, ChangeType, InventoryItem
from core.primitives.ledger import SaleLine, amount_to_str
from engines.inventory.resolver import resolve_item

logger = logging.getLogger("kirana.retail")


class RequestedLine(Protocol):
    name: str
    quantity: int
    price: Optional[Decimal]


def _key(name: str) -> str:
    return name.strip().casefold()


def _find(cart: Sequence[CartLine], name: str) -> Optional[int]:
    wanted = _key(name)
    for index, line in enumerate(cart):
        if line.key == wanted:
            return index
    return None


def live_price(
    name: str,
    fallback: Optional[Decimal],
    inventory: Sequence[InventoryItem],
) -> Optional[Decimal]:
    """Resolved inventory price, else `fallback` (possibly None)."""
    item = resolve_item(name, inventory)
    if item is not None:
        return item.price
    return fallback


# ══════════════════════════════════════════════════════════════
# PRICING
# ══════════════════════════════════════════════════════════════

def price_lines(
    lines: Iterable[RequestedLine],
    inventory: Sequence[InventoryItem],
) -> Tuple[CartLine, ...]:
    """
    Turn requested lines into cart lines priced from inventory.

    Lines with a non-positive quantity are dropped here so that they
    never reach the cart.
    """
    priced: List[CartLine] = []
    for line in lines:
        if line.quantity <= 0:
            logger.debug(f"Dropped cart line '{line.name}' with quantity {line.quantity}")
            continue
        item = resolve_item(line.name, inventory)
        if item is not None:
            priced.append(CartLine(item.name, line.quantity, item.price))
        else:
            price = line.price if line.price is not None else Decimal(0)
            priced.append(CartLine(line.name.strip(), line.quantity, price))
    return tuple(priced)


# ══════════════════════════════════════════════════════════════
# MUTATIONS
# ══════════════════════════════════════════════════════════════

def merge(
    cart: Sequence[CartLine],
    incoming: Iterable[RequestedLine],
    inventory: Sequence[InventoryItem],
) -> Tuple[CartLine, ...]:
    lines: List[CartLine] = list(cart)
    for line in price_lines(incoming, inventory):
        index = _find(lines, line.name)
        if index is None:
            lines.append(line)
        else:
            existing = lines[index]
            lines[index] = existing.with_quantity(existing.quantity + line.quantity)
    return tuple(lines)


def adjust_line(
    cart: Sequence[CartLine],
    name: str,
    change_type: ChangeType,
    quantity: int,
) -> Tuple[CartLine, ...]:
    """
    The cart's +/- controls. Only existing lines are adjusted; a name
    not in the cart leaves it unchanged.
    """
    index = _find(cart, name)
    if index is None:
        return tuple(cart)

    line = cart[index]
    if change_type == ChangeType.SUBTRACT:
        new_quantity = line.quantity - quantity
    elif change_type == ChangeType.SET:
        new_quantity = quantity
    else:
        new_quantity = line.quantity + quantity

    lines = list(cart)
    if new_quantity <= 0:
        del lines[index]
    else:
        lines[index] = line.with_quantity(new_quantity)
    return tuple(lines)


def remove_line(cart: Sequence[CartLine], name: str) -> Tuple[CartLine, ...]:
    wanted = _key(name)
    return tuple(line for line in cart if line.key != wanted)


# ══════════════════════════════════════════════════════════════
# TOTALS
# ══════════════════════════════════════════════════════════════

def cart_total(
    cart: Iterable[CartLine],
    inventory: Sequence[InventoryItem],
) -> Decimal:
    total = Decimal(0)
    for line in cart:
        price = live_price(line.name, line.price, inventory)
        if price is not None:
            total += price * line.quantity
    return total


@dataclass(frozen=True)
class BillPreview:
    """Priced bill that has not been committed."""
    items: Tuple[SaleLine, ...]
    total_amount: Decimal

    @property
    def unit_count(self) -> int:
        return sum(l.quantity for l in self.items)

    def to_dict(self) -> dict:
        return {
            "items": [l.to_dict() for l in self.items],
            "total_amount": amount_to_str(self.total_amount),
            "unit_count": self.unit_count,
        }


def preview_bill(
    lines: Iterable[RequestedLine],
    inventory: Sequence[InventoryItem],
) -> BillPreview:
    """Price lines exactly as a sale would, without touching state."""
    items = []
    for line in lines:
        if line.quantity <= 0:
            continue
        item = resolve_item(line.name, inventory)
        if item is not None:
            items.append(SaleLine(item.name, line.quantity, item.price))
        else:
            items.append(SaleLine(line.name.strip(), line.quantity, line.price))
    total = sum((l.line_total for l in items), Decimal(0))
    return BillPreview(items=tuple(items), total_amount=total)
