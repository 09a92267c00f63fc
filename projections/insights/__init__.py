"""
Kirana Projections - Shop Insights Read Model
===============================================
Dashboard figures derived from a PosState snapshot.

Built from:
- sales ledger     → income figures, daily / monthly series, top sellers
- expense ledger   → expense figures, cash-flow ratio
- inventory        → restock and expiry lists, product rates

Read-only: nothing here changes state. Figures are recomputed from
the full ledgers on every call, so totals always equal the ledger sums.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

from core.config.settings import PosSettings
from core.primitives.item import InventoryItem
from core.primitives.ledger import amount_to_str
from core.state.snapshot import PosState
from core.time.temporal import (
    days_until,
    is_same_day,
    is_same_month,
    trailing_days,
    utc_date,
)

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class ProductRate:
    item: InventoryItem
    total_sold: int
    revenue: Decimal

    def to_dict(self) -> Dict[str, Any]:
        data = self.item.to_dict()
        data["total_sold"] = self.total_sold
        data["revenue"] = amount_to_str(self.revenue)
        return data


@dataclass(frozen=True)
class StockStatus:
    """Inventory summary the assistant greets the shopkeeper with."""
    product_count: int
    low_stock: Tuple[InventoryItem, ...]
    expiring: Tuple[InventoryItem, ...]

    @property
    def all_clear(self) -> bool:
        return not self.low_stock and not self.expiring

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_count": self.product_count,
            "low_stock": [
                {"name": i.name, "quantity": i.quantity} for i in self.low_stock
            ],
            "expiring": [i.name for i in self.expiring],
            "all_clear": self.all_clear,
        }


@dataclass(frozen=True)
class ShopInsights:
    today_income: Decimal
    today_expense: Decimal
    monthly_income: Decimal
    monthly_expense: Decimal
    cash_flow_ratio: Optional[Decimal]
    daily_income: Tuple[Tuple[date, Decimal], ...]
    monthly_income_series: Tuple[Tuple[str, Decimal], ...]
    restock_needed: Tuple[InventoryItem, ...]
    expiring_soon: Tuple[InventoryItem, ...]
    top_selling: Tuple[Tuple[str, int], ...]
    product_rates: Tuple[ProductRate, ...]
    stock_status: StockStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "today_income": amount_to_str(self.today_income),
            "today_expense": amount_to_str(self.today_expense),
            "monthly_income": amount_to_str(self.monthly_income),
            "monthly_expense": amount_to_str(self.monthly_expense),
            "cash_flow_ratio": amount_to_str(self.cash_flow_ratio),
            "daily_income": [
                {"date": d.isoformat(), "day": d.day, "amount": amount_to_str(a)}
                for d, a in self.daily_income
            ],
            "monthly_income_series": [
                {"name": name, "income": amount_to_str(a)}
                for name, a in self.monthly_income_series
            ],
            "restock_needed": [i.to_dict() for i in self.restock_needed],
            "expiring_soon": [i.to_dict() for i in self.expiring_soon],
            "top_selling": [
                {"name": name, "qty": qty} for name, qty in self.top_selling
            ],
            "product_rates": [r.to_dict() for r in self.product_rates],
            "stock_status": self.stock_status.to_dict(),
        }


# ══════════════════════════════════════════════════════════════
# FIGURES
# ══════════════════════════════════════════════════════════════

def cash_flow_ratio(income: Decimal, expense: Decimal) -> Optional[Decimal]:
    """
    income / expense to one decimal place.

    None means unbounded (income with no expense); 0 when both are 0.
    """
    if expense > 0:
        return (income / expense).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if income > 0:
        return None
    return Decimal(0)


def units_sold_by_name(state: PosState) -> Dict[str, Tuple[str, int]]:
    """casefolded name → (display name, units sold), first-seen order."""
    sold: Dict[str, Tuple[str, int]] = {}
    for sale in state.sales:
        for line in sale.items:
            key = line.name.strip().casefold()
            name, qty = sold.get(key, (line.name, 0))
            sold[key] = (name, qty + line.quantity)
    return sold


def _expires_within(item: InventoryItem, today: date, days: int) -> bool:
    if item.expiry_date is None:
        return False
    return 0 <= days_until(item.expiry_date, today) <= days


def stock_status(
    state: PosState, *, now: datetime, settings: Optional[PosSettings] = None,
) -> StockStatus:
    settings = settings or PosSettings()
    today = utc_date(now)
    return StockStatus(
        product_count=len(state.inventory),
        low_stock=tuple(
            i for i in state.inventory if i.quantity < settings.low_stock_threshold
        ),
        # Already expired products are flagged here too.
        expiring=tuple(
            i for i in state.inventory
            if i.expiry_date is not None
            and days_until(i.expiry_date, today) <= settings.expiry_warning_days
        ),
    )


def build_insights(
    state: PosState, *, now: datetime, settings: Optional[PosSettings] = None,
) -> ShopInsights:
    settings = settings or PosSettings()
    today = utc_date(now)

    def income_on(day: date) -> Decimal:
        return sum(
            (s.total_amount for s in state.sales if utc_date(s.recorded_at) == day),
            Decimal(0),
        )

    today_income = sum(
        (s.total_amount for s in state.sales if is_same_day(s.recorded_at, today)),
        Decimal(0),
    )
    today_expense = sum(
        (e.amount for e in state.expenses if is_same_day(e.recorded_at, today)),
        Decimal(0),
    )
    monthly_income = sum(
        (s.total_amount for s in state.sales if is_same_month(s.recorded_at, today)),
        Decimal(0),
    )
    monthly_expense = sum(
        (e.amount for e in state.expenses if is_same_month(e.recorded_at, today)),
        Decimal(0),
    )

    by_month: List[Decimal] = [Decimal(0)] * 12
    for sale in state.sales:
        sold_on = utc_date(sale.recorded_at)
        if sold_on.year == today.year:
            by_month[sold_on.month - 1] += sale.total_amount

    sold = units_sold_by_name(state)
    ranked = sorted(sold.values(), key=lambda entry: entry[1], reverse=True)

    rates = []
    for item in state.inventory:
        _, total_sold = sold.get(item.name.strip().casefold(), (item.name, 0))
        rates.append(ProductRate(item, total_sold, item.price * total_sold))
    rates.sort(key=lambda rate: rate.revenue, reverse=True)

    return ShopInsights(
        today_income=today_income,
        today_expense=today_expense,
        monthly_income=monthly_income,
        monthly_expense=monthly_expense,
        cash_flow_ratio=cash_flow_ratio(monthly_income, monthly_expense),
        daily_income=tuple(
            (day, income_on(day))
            for day in trailing_days(today, settings.income_window_days)
        ),
        monthly_income_series=tuple(zip(MONTH_NAMES, by_month)),
        restock_needed=tuple(
            i for i in state.inventory if i.quantity < settings.low_stock_threshold
        ),
        expiring_soon=tuple(
            i for i in state.inventory
            if _expires_within(i, today, settings.expiry_warning_days)
        ),
        top_selling=tuple(ranked[: settings.top_selling_limit]),
        product_rates=tuple(rates),
        stock_status=stock_status(state, now=now, settings=settings),
    )


__all__ = [
    "ShopInsights",
    "ProductRate",
    "StockStatus",
    "build_insights",
    "stock_status",
    "cash_flow_ratio",
    "units_sold_by_name",
]
