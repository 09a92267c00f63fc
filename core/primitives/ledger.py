"""
Kirana Ledger Primitive - Sales and Expense Records
=====================================================
Engine: Core Primitives
Authority: Kirana Doctrine - Deterministic, Snapshot-Threaded

The Ledger Primitive provides the append-only financial records
used by: Retail Engine (sales), Accounting Engine (expenses),
Insights projection (income / expense figures).

RULES (NON-NEGOTIABLE):
- Sale and expense records are immutable once created
- Amounts are Decimal (no floats); expense amounts are whole units
- A sale total is reconstructible from its lines whenever every
  line price is known
- Records are never mutated or deleted, only appended

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Tuple


# ══════════════════════════════════════════════════════════════
# AMOUNT HELPERS
# ══════════════════════════════════════════════════════════════

# Accepted input amounts stay below 10**10 and above 10**-10, so that
# price x quantity x cost ratio fits the default 28-digit context.
MAX_AMOUNT_EXPONENT = 9


def to_amount(value) -> Decimal:
    """
    Coerce a price / amount into a finite, bounded Decimal.

    Floats go through str() so 0.1 stays 0.1.
    """
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, bool) or value is None:
        raise ValueError(f"Amount must be numeric, got {value!r}.")
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValueError(f"Amount must be numeric, got {value!r}.") from exc
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}.")
    if amount and abs(amount.adjusted()) > MAX_AMOUNT_EXPONENT:
        raise ValueError(f"Amount out of range, got {value!r}.")
    return amount


def round_to_unit(value: Decimal) -> int:
    """Round half-up to a whole currency unit."""
    amount = value if isinstance(value, Decimal) else to_amount(value)
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def amount_to_str(value: Optional[Decimal]) -> Optional[str]:
    """Render an amount without exponent or trailing zeros."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


# ══════════════════════════════════════════════════════════════
# SALE LINE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SaleLine:
    """One sold product. price is None when it could not be determined."""
    name: str
    quantity: int
    price: Optional[Decimal] = None

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be non-empty string.")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("quantity must be integer.")
        if self.quantity < 0:
            raise ValueError("quantity cannot be negative.")
        if self.price is not None and not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", to_amount(self.price))

    @property
    def line_total(self) -> Decimal:
        if self.price is None:
            return Decimal(0)
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "price": amount_to_str(self.price),
        }


# ══════════════════════════════════════════════════════════════
# SALE RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SaleRecord:
    """
    Immutable record of one completed sale.

    INVARIANT: when every line price is known, total_amount equals
    the sum of price x quantity over the lines. Otherwise it is the
    caller-supplied fallback total.
    """
    sale_id: str
    recorded_at: datetime
    items: Tuple[SaleLine, ...]
    total_amount: Decimal

    def __post_init__(self):
        if not self.sale_id or not isinstance(self.sale_id, str):
            raise ValueError("sale_id must be non-empty string.")
        if not isinstance(self.recorded_at, datetime):
            raise ValueError("recorded_at must be datetime.")
        if not isinstance(self.items, tuple):
            raise TypeError("items must be a tuple of SaleLine.")
        if not isinstance(self.total_amount, Decimal):
            object.__setattr__(self, "total_amount", to_amount(self.total_amount))
        if self.total_amount < 0:
            raise ValueError("total_amount cannot be negative.")

        if self.all_prices_known:
            computed = sum((l.line_total for l in self.items), Decimal(0))
            if computed != self.total_amount:
                raise ValueError(
                    f"SALE INVARIANT VIOLATION: total_amount "
                    f"({self.total_amount}) != sum of lines ({computed})."
                )

    @property
    def all_prices_known(self) -> bool:
        return all(l.price is not None for l in self.items)

    @property
    def unit_count(self) -> int:
        return sum(l.quantity for l in self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.sale_id,
            "date": self.recorded_at.isoformat(),
            "items": [l.to_dict() for l in self.items],
            "total_amount": amount_to_str(self.total_amount),
        }


# ══════════════════════════════════════════════════════════════
# EXPENSE RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ExpenseRecord:
    """Immutable record of money spent (restock cost, bills)."""
    expense_id: str
    description: str
    amount: Decimal
    recorded_at: datetime

    def __post_init__(self):
        if not self.expense_id or not isinstance(self.expense_id, str):
            raise ValueError("expense_id must be non-empty string.")
        if not self.description or not isinstance(self.description, str):
            raise ValueError("description must be non-empty string.")
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", to_amount(self.amount))
        if self.amount < 0:
            raise ValueError("amount cannot be negative.")
        if not isinstance(self.recorded_at, datetime):
            raise ValueError("recorded_at must be datetime.")

    def to_dict(self) -> dict:
        return {
            "id": self.expense_id,
            "description": self.description,
            "amount": amount_to_str(self.amount),
            "date": self.recorded_at.isoformat(),
        }
