"""
Kirana Inventory Engine - Inventory Ledger
============================================
The only place where shelf quantities change.

Change semantics (per requested line):
    add       new = qty + requested     delta = requested
    subtract  new = max(0, qty - req)   delta = 0
    set       new = requested           delta = max(0, requested - qty)

Unknown product:
    subtract      → no-op
    add / set     → new item, quantity = requested, delta = requested,
                    price = requested price or the placeholder price

`delta` is the stock that was "bought" and feeds the cost estimator.
Quantities never go negative; an existing item's selling price is
never rewritten by a restock line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

from core.config.settings import PosSettings
from core.primitives.item import ChangeType, InventoryItem
from core.time.temporal import shelf_life_expiry
from engines.inventory.costing import estimate_cost, quick_restock_cost
from engines.inventory.resolver import find_exact, resolve_index

logger = logging.getLogger("kirana.inventory")


# ══════════════════════════════════════════════════════════════
# REQUESTED LINE
# ══════════════════════════════════════════════════════════════

class InventoryLine(Protocol):
    """Shape of a requested line (satisfied by ActionLine)."""
    name: str
    quantity: int
    change_type: ChangeType
    price: Optional[Decimal]
    unit: Optional[str]
    expiry_date: Optional[date]
    image: Optional[str]


# ══════════════════════════════════════════════════════════════
# SINGLE CHANGE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InventoryChange:
    """Outcome of applying one requested line to one item."""
    new_quantity: int
    quantity_delta: int
    price_used: Decimal
    created: bool = False


def apply_change(
    item: Optional[InventoryItem],
    change_type: ChangeType,
    requested_qty: int,
    requested_price: Optional[Decimal] = None,
    *,
    placeholder_price: Decimal = Decimal("50"),
) -> Optional[InventoryChange]:
    """
    Compute the new quantity, the costed delta and the price used.

    Returns None when nothing should happen (subtract on a product
    that does not exist).
    """
    if requested_qty < 0:
        raise ValueError("requested quantity cannot be negative.")

    if item is None:
        if change_type == ChangeType.SUBTRACT:
            return None
        price = requested_price if requested_price is not None else placeholder_price
        return InventoryChange(
            new_quantity=requested_qty,
            quantity_delta=requested_qty,
            price_used=price,
            created=True,
        )

    current = item.quantity
    if change_type == ChangeType.SUBTRACT:
        return InventoryChange(
            new_quantity=max(0, current - requested_qty),
            quantity_delta=0,
            price_used=item.price,
        )
    if change_type == ChangeType.SET:
        return InventoryChange(
            new_quantity=requested_qty,
            quantity_delta=max(0, requested_qty - current),
            price_used=item.price,
        )
    return InventoryChange(
        new_quantity=current + requested_qty,
        quantity_delta=requested_qty,
        price_used=item.price,
    )


# ══════════════════════════════════════════════════════════════
# BATCH RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InventoryBatch:
    """
    Result of applying every line of one action.

    cost is the unrounded aggregate across all lines; the caller
    rounds it once and posts at most one expense.
    """
    inventory: Tuple[InventoryItem, ...]
    changes: Tuple[Tuple[str, InventoryChange], ...] = ()
    created: Tuple[InventoryItem, ...] = ()
    cost: Decimal = Decimal(0)

    @property
    def changed(self) -> bool:
        return bool(self.changes) or bool(self.created)


# ══════════════════════════════════════════════════════════════
# ACTION-LEVEL OPERATIONS
# ══════════════════════════════════════════════════════════════

def apply_inventory_lines(
    inventory: Sequence[InventoryItem],
    lines: Iterable[InventoryLine],
    *,
    settings: PosSettings,
    new_item_id: Callable[[], str],
    today: date,
) -> InventoryBatch:
    """
    Reconcile restock / stock-count lines against the catalog.

    Lines are applied in order against the evolving catalog, so a
    product created by an earlier line is found by a later one.
    """
    items: List[InventoryItem] = list(inventory)
    changes: List[Tuple[str, InventoryChange]] = []
    created: List[InventoryItem] = []
    cost = Decimal(0)

    for line in lines:
        index = resolve_index(line.name, items)
        item = items[index] if index is not None else None

        change = apply_change(
            item,
            line.change_type,
            line.quantity,
            line.price,
            placeholder_price=settings.placeholder_price,
        )
        if change is None:
            logger.info(
                f"Ignored subtract for unknown product '{line.name}'"
            )
            continue

        if item is None:
            new_item = InventoryItem(
                item_id=new_item_id(),
                name=line.name.strip(),
                quantity=change.new_quantity,
                unit=line.unit or settings.default_unit,
                price=change.price_used,
                expiry_date=line.expiry_date or shelf_life_expiry(
                    today, settings.default_shelf_life_days,
                ),
                image=line.image,
            )
            items.insert(0, new_item)
            created.append(new_item)
            changes.append((new_item.item_id, change))
            logger.info(
                f"Created product '{new_item.name}' ({new_item.item_id}) "
                f"with quantity {new_item.quantity}"
            )
        else:
            items[index] = item.with_quantity(change.new_quantity)
            changes.append((item.item_id, change))
            logger.debug(
                f"{line.change_type.value} {line.quantity} → '{item.name}': "
                f"{item.quantity} → {change.new_quantity}"
            )

        cost += estimate_cost(
            change.price_used, change.quantity_delta, settings.cost_ratio,
        )

    return InventoryBatch(
        inventory=tuple(items),
        changes=tuple(changes),
        created=tuple(created),
        cost=cost,
    )


def add_products(
    inventory: Sequence[InventoryItem],
    lines: Iterable[InventoryLine],
    *,
    settings: PosSettings,
    new_item_id: Callable[[], str],
) -> InventoryBatch:
    """
    Explicit "add new product" from the billing screen.

    Always creates a new item (names are not unique) and never posts
    a cost. A line without a price is skipped.
    """
    items: List[InventoryItem] = list(inventory)
    created: List[InventoryItem] = []

    for line in lines:
        if line.price is None:
            logger.warning(f"Skipped new product '{line.name}': price missing")
            continue
        new_item = InventoryItem(
            item_id=new_item_id(),
            name=line.name.strip(),
            quantity=line.quantity,
            unit=line.unit or settings.default_unit,
            price=line.price,
            expiry_date=line.expiry_date,
            image=line.image,
        )
        items.insert(0, new_item)
        created.append(new_item)
        logger.info(f"Added product '{new_item.name}' ({new_item.item_id})")

    return InventoryBatch(inventory=tuple(items), created=tuple(created))


def quick_restock(
    inventory: Sequence[InventoryItem],
    names: Iterable[str],
    *,
    settings: PosSettings,
) -> InventoryBatch:
    """
    Dashboard shortcut: add a fixed number of units to named products.

    Names must match a product exactly (ignoring case); the shortcut
    is driven from the product list, not from free text.
    """
    items: List[InventoryItem] = list(inventory)
    changes: List[Tuple[str, InventoryChange]] = []
    cost = Decimal(0)
    units = settings.quick_restock_units

    for name in names:
        index = find_exact(name, items)
        if index is None:
            logger.info(f"Quick restock ignored unknown product '{name}'")
            continue
        item = items[index]
        change = apply_change(item, ChangeType.ADD, units)
        items[index] = item.with_quantity(change.new_quantity)
        changes.append((item.item_id, change))
        cost += quick_restock_cost(item.price, settings.cost_ratio, units)

    return InventoryBatch(
        inventory=tuple(items), changes=tuple(changes), cost=cost,
    )
