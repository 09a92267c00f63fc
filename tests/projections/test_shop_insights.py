"""
Kirana — Shop Insights Read Model Tests
=========================================
Income/expense figures, series, stock lists and rankings.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.config.settings import PosSettings
from core.primitives.item import InventoryItem
from core.primitives.ledger import ExpenseRecord, SaleLine, SaleRecord
from core.state.snapshot import PosState
from projections.insights import build_insights, cash_flow_ratio, stock_status

NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def _sale(sale_id, when, *lines):
    items = tuple(SaleLine(name, qty, Decimal(price)) for name, qty, price in lines)
    total = sum((l.line_total for l in items), Decimal(0))
    return SaleRecord(sale_id, when, items, total)


def _expense(expense_id, when, amount):
    return ExpenseRecord(expense_id, "Restock: 1 items", Decimal(amount), when)


def _state():
    inventory = (
        InventoryItem("2", "Maggi Noodles", 8, "packet", Decimal("14"),
                      expiry_date=TODAY + timedelta(days=120)),
        InventoryItem("3", "Tata Salt", 20, "kg", Decimal("25"),
                      expiry_date=TODAY + timedelta(days=365)),
        InventoryItem("6", "Amul Milk", 5, "packet", Decimal("28"),
                      expiry_date=TODAY + timedelta(days=1)),
        InventoryItem("7", "Bread", 15, "loaf", Decimal("40"),
                      expiry_date=TODAY - timedelta(days=1)),
    )
    sales = (
        _sale("s1", NOW, ("Amul Milk", 2, "28"), ("Bread", 1, "40")),      # 96 today
        _sale("s2", NOW - timedelta(days=3), ("Maggi Noodles", 5, "14")),  # 70 this month
        _sale("s3", datetime(2026, 1, 10, tzinfo=timezone.utc), ("Tata Salt", 1, "25")),
        _sale("s4", datetime(2025, 3, 10, tzinfo=timezone.utc), ("Bread", 9, "40")),
    )
    expenses = (
        _expense("e1", NOW, "50"),
        _expense("e2", NOW - timedelta(days=10), "30"),
        _expense("e3", datetime(2026, 2, 1, tzinfo=timezone.utc), "999"),
    )
    return PosState(inventory=inventory, sales=sales, expenses=expenses)


class TestFinancialFigures:
    def test_today_and_month(self):
        insights = build_insights(_state(), now=NOW)
        assert insights.today_income == Decimal("96")
        assert insights.today_expense == Decimal("50")
        assert insights.monthly_income == Decimal("166")
        assert insights.monthly_expense == Decimal("80")

    def test_cash_flow_ratio(self):
        insights = build_insights(_state(), now=NOW)
        assert insights.cash_flow_ratio == Decimal("2.1")   # 166 / 80 = 2.075

    @pytest.mark.parametrize("income,expense,expected", [
        (Decimal("0"), Decimal("0"), Decimal("0")),
        (Decimal("100"), Decimal("0"), None),
        (Decimal("0"), Decimal("40"), Decimal("0.0")),
        (Decimal("150"), Decimal("100"), Decimal("1.5")),
    ])
    def test_ratio_edges(self, income, expense, expected):
        assert cash_flow_ratio(income, expense) == expected

    def test_empty_shop(self):
        insights = build_insights(PosState(), now=NOW)
        assert insights.today_income == 0
        assert insights.cash_flow_ratio == 0
        assert insights.top_selling == ()


class TestSeries:
    def test_daily_income_window(self):
        insights = build_insights(_state(), now=NOW)
        assert len(insights.daily_income) == 14
        assert insights.daily_income[-1] == (TODAY, Decimal("96"))
        assert insights.daily_income[-4] == (TODAY - timedelta(days=3), Decimal("70"))
        assert insights.daily_income[0][0] == TODAY - timedelta(days=13)

    def test_monthly_series_current_year_only(self):
        series = dict(build_insights(_state(), now=NOW).monthly_income_series)
        assert len(series) == 12
        assert series["Jan"] == Decimal("25")
        assert series["Mar"] == Decimal("166")   # 2025 sale excluded

    def test_series_sum_matches_ledger(self):
        state = _state()
        series = build_insights(state, now=NOW).monthly_income_series
        this_year = sum(
            (s.total_amount for s in state.sales if s.recorded_at.year == 2026),
            Decimal(0),
        )
        assert sum((a for _, a in series), Decimal(0)) == this_year


class TestStockLists:
    def test_restock_needed_below_threshold(self):
        insights = build_insights(_state(), now=NOW)
        assert [i.name for i in insights.restock_needed] == ["Maggi Noodles", "Amul Milk"]

    def test_expiring_soon_excludes_expired(self):
        insights = build_insights(_state(), now=NOW)
        assert [i.name for i in insights.expiring_soon] == ["Amul Milk"]

    def test_stock_status_flags_expired_too(self):
        status = stock_status(_state(), now=NOW)
        assert status.product_count == 4
        assert [i.name for i in status.expiring] == ["Amul Milk", "Bread"]
        assert not status.all_clear

    def test_all_clear(self):
        state = PosState(inventory=(InventoryItem("3", "Tata Salt", 20),))
        assert stock_status(state, now=NOW).all_clear


class TestRankings:
    def test_top_selling_by_units(self):
        insights = build_insights(_state(), now=NOW)
        assert insights.top_selling[0] == ("Bread", 10)
        assert insights.top_selling[1] == ("Maggi Noodles", 5)

    def test_top_selling_limit(self):
        insights = build_insights(_state(), now=NOW, settings=PosSettings(top_selling_limit=2))
        assert len(insights.top_selling) == 2

    def test_product_rates_by_revenue(self):
        insights = build_insights(_state(), now=NOW)
        rates = [(r.item.name, r.total_sold, r.revenue) for r in insights.product_rates]
        assert rates[0] == ("Bread", 10, Decimal("400"))
        assert rates[1] == ("Maggi Noodles", 5, Decimal("70"))

    def test_to_dict_serialises_amounts(self):
        data = build_insights(_state(), now=NOW).to_dict()
        assert data["today_income"] == "96"
        assert data["cash_flow_ratio"] == "2.1"
        assert data["daily_income"][-1]["date"] == TODAY.isoformat()
        assert data["top_selling"][0] == {"name": "Bread", "qty": 10}
