"""
Kirana Accounting Engine - Expense Recorder
=============================================
Append-only posting of expenses derived from stock increases.

One action posts at most one expense: the action's aggregated cost
is rounded half-up to a whole currency unit and a zero amount posts
nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

from core.primitives.ledger import ExpenseRecord
from engines.inventory.costing import round_cost

logger = logging.getLogger("kirana.accounting")


def restock_description(line_count: int) -> str:
    return f"Restock: {line_count} items"


def quick_restock_description(names: Sequence[str]) -> str:
    if len(names) == 1:
        return f"Quick Restock: {names[0]}"
    return f"Quick Restock: {len(names)} items"


def record_expense(
    cost: Decimal,
    *,
    description: str,
    recorded_at: datetime,
    new_expense_id: Callable[[], str],
) -> Optional[ExpenseRecord]:
    """
    ExpenseRecord for the rounded `cost`, or None when it rounds to 0.

    An id is only drawn when an expense is actually posted.
    """
    amount = round_cost(cost)
    if amount <= 0:
        logger.debug(f"No expense posted for '{description}' (cost {cost})")
        return None
    expense_id = new_expense_id()
    expense = ExpenseRecord(
        expense_id=expense_id,
        description=description,
        amount=Decimal(amount),
        recorded_at=recorded_at,
    )
    logger.info(f"Posted expense {expense_id}: {description} = {amount}")
    return expense
