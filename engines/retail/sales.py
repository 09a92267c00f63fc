"""
Kirana Retail Engine - Sale Recorder
======================================
Converts a finalized line list into one immutable SaleRecord and
decrements the shelf in the same step.

RULES (NON-NEGOTIABLE):
- exactly one SaleRecord per commit, none for an empty line list
- matched items are decremented by the sold quantity, floored at 0
- matched lines are priced at the LIVE inventory price, overriding
  whatever price the line carried, unless the caller keeps line
  prices (a sale reported with its own prices); then the live price
  only fills a missing one
- unmatched lines skip the decrement but still count toward the
  total with their own price
- total = sum of price x quantity when every price is known, else
  the caller-supplied fallback total, else the sum of known prices
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from core.primitives.item import InventoryItem
from core.primitives.ledger import SaleLine, SaleRecord, to_amount
from engines.inventory.resolver import resolve_index
from engines.retail.cart import RequestedLine

logger = logging.getLogger("kirana.retail")


@dataclass(frozen=True)
class SaleCommit:
    inventory: Tuple[InventoryItem, ...]
    sale: SaleRecord


def commit_sale(
    lines: Iterable[RequestedLine],
    inventory: Sequence[InventoryItem],
    *,
    sale_id: str,
    recorded_at: datetime,
    fallback_total: Optional[Decimal] = None,
    keep_line_prices: bool = False,
) -> Optional[SaleCommit]:
    """
    Record a sale over `lines` against `inventory`.

    Returns None when there is nothing to sell; the caller treats that
    as a no-op transition.
    """
    items: List[InventoryItem] = list(inventory)
    sold: List[SaleLine] = []

    for line in lines:
        if line.quantity <= 0:
            logger.debug(f"Skipped sale line '{line.name}' with quantity {line.quantity}")
            continue
        index = resolve_index(line.name, items)
        if index is None:
            logger.info(f"Sold '{line.name}' without a matching product")
            sold.append(SaleLine(line.name.strip(), line.quantity, line.price))
            continue
        item = items[index]
        items[index] = item.with_quantity(max(0, item.quantity - line.quantity))
        price = item.price
        if keep_line_prices and line.price is not None:
            price = line.price
        sold.append(SaleLine(item.name, line.quantity, price))

    if not sold:
        return None

    known_total = sum((l.line_total for l in sold), Decimal(0))
    if all(l.price is not None for l in sold):
        total = known_total
    elif fallback_total is not None:
        total = to_amount(fallback_total)
    else:
        total = known_total

    sale = SaleRecord(
        sale_id=sale_id,
        recorded_at=recorded_at,
        items=tuple(sold),
        total_amount=total,
    )
    logger.info(
        f"Recorded sale {sale_id}: {sale.unit_count} units, total {total}"
    )
    return SaleCommit(inventory=tuple(items), sale=sale)
