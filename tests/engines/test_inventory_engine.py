"""
Kirana — Inventory Engine Tests
=================================
Item resolver, inventory ledger change semantics and cost estimation.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from core.config.settings import PosSettings
from core.ids import SequentialIdProvider
from core.primitives.item import ChangeType, InventoryItem
from engines.inventory.costing import estimate_cost, quick_restock_cost, round_cost
from engines.inventory.ledger import (
    add_products,
    apply_change,
    apply_inventory_lines,
    quick_restock,
)
from engines.inventory.resolver import (
    find_exact,
    names_match,
    resolve_index,
    resolve_item,
)

TODAY = date(2026, 3, 1)
SETTINGS = PosSettings()


@dataclass(frozen=True)
class Line:
    name: str
    quantity: int
    change_type: ChangeType = ChangeType.ADD
    price: Optional[Decimal] = None
    unit: Optional[str] = None
    expiry_date: Optional[date] = None
    image: Optional[str] = None


def _catalog():
    return (
        InventoryItem("1", "Marie Gold Biscuits", 45, "packet", Decimal("10")),
        InventoryItem("2", "Maggi Noodles", 8, "packet", Decimal("14")),
        InventoryItem("3", "Tata Salt", 20, "kg", Decimal("25")),
        InventoryItem("6", "Amul Milk", 5, "packet", Decimal("28")),
    )


def _apply(inventory, *lines, ids=None):
    return apply_inventory_lines(
        inventory,
        lines,
        settings=SETTINGS,
        new_item_id=(ids or SequentialIdProvider()).new_item_id,
        today=TODAY,
    )


# ══════════════════════════════════════════════════════════════
# RESOLVER
# ══════════════════════════════════════════════════════════════

class TestResolver:
    def test_query_inside_name(self):
        assert resolve_item("milk", _catalog()).name == "Amul Milk"
        assert resolve_item("noodles", _catalog()).name == "Maggi Noodles"

    def test_name_inside_query(self):
        item = resolve_item("maggi noodles masala", _catalog())
        assert item.name == "Maggi Noodles"

    def test_case_insensitive(self):
        assert resolve_item("TATA SALT", _catalog()).item_id == "3"

    def test_first_match_wins(self):
        catalog = (
            InventoryItem("9", "Amul Gold Milk", 3),
            InventoryItem("6", "Amul Milk", 5),
        )
        assert resolve_item("milk", catalog).item_id == "9"
        assert resolve_index("milk", catalog) == 0

    def test_exact_name_beats_earlier_substring_match(self):
        catalog = (
            InventoryItem("9", "Milk", 10),
            InventoryItem("6", "Amul Milk", 5),
        )
        assert resolve_item("amul milk", catalog).item_id == "6"
        assert resolve_index("AMUL MILK ", catalog) == 1
        assert resolve_item("amul", catalog).item_id == "6"
        assert resolve_item("fresh milk", catalog).item_id == "9"

    def test_not_found(self):
        assert resolve_item("sugar", _catalog()) is None
        assert resolve_index("sugar", _catalog()) is None

    def test_blank_query_matches_nothing(self):
        assert resolve_item("   ", _catalog()) is None
        assert not names_match("", "Bread")

    def test_find_exact(self):
        assert find_exact("tata salt", _catalog()) == 2
        assert find_exact("salt", _catalog()) is None


# ══════════════════════════════════════════════════════════════
# SINGLE CHANGE
# ══════════════════════════════════════════════════════════════

class TestApplyChange:
    def test_add(self):
        item = InventoryItem("3", "Tata Salt", 20, price=Decimal("25"))
        change = apply_change(item, ChangeType.ADD, 5)
        assert change.new_quantity == 25
        assert change.quantity_delta == 5
        assert change.price_used == Decimal("25")

    def test_subtract_floors_at_zero(self):
        item = InventoryItem("3", "Tata Salt", 3, price=Decimal("25"))
        change = apply_change(item, ChangeType.SUBTRACT, 10)
        assert change.new_quantity == 0
        assert change.quantity_delta == 0

    def test_set_upward_costs_difference(self):
        item = InventoryItem("3", "Tata Salt", 20, price=Decimal("25"))
        change = apply_change(item, ChangeType.SET, 30)
        assert change.new_quantity == 30
        assert change.quantity_delta == 10

    def test_set_downward_costs_nothing(self):
        item = InventoryItem("3", "Tata Salt", 20, price=Decimal("25"))
        change = apply_change(item, ChangeType.SET, 12)
        assert change.new_quantity == 12
        assert change.quantity_delta == 0

    def test_set_is_idempotent(self):
        item = InventoryItem("3", "Tata Salt", 20, price=Decimal("25"))
        first = apply_change(item, ChangeType.SET, 30)
        second = apply_change(item.with_quantity(first.new_quantity), ChangeType.SET, 30)
        assert second.new_quantity == 30
        assert second.quantity_delta == 0

    def test_requested_price_never_rewrites_existing(self):
        item = InventoryItem("3", "Tata Salt", 20, price=Decimal("25"))
        change = apply_change(item, ChangeType.ADD, 5, Decimal("30"))
        assert change.price_used == Decimal("25")

    def test_missing_item_created_with_requested_price(self):
        change = apply_change(None, ChangeType.ADD, 6, Decimal("45"))
        assert change.created
        assert change.new_quantity == 6
        assert change.quantity_delta == 6
        assert change.price_used == Decimal("45")

    def test_missing_item_placeholder_price(self):
        change = apply_change(None, ChangeType.SET, 4)
        assert change.price_used == Decimal("50")

    def test_missing_item_subtract_is_noop(self):
        assert apply_change(None, ChangeType.SUBTRACT, 3) is None

    def test_negative_request_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            apply_change(None, ChangeType.ADD, -1)


# ══════════════════════════════════════════════════════════════
# ACTION-LEVEL
# ══════════════════════════════════════════════════════════════

class TestApplyInventoryLines:
    def test_aggregates_cost_across_lines(self):
        batch = _apply(
            _catalog(),
            Line("milk", 10),                       # 28 × 0.8 × 10 = 224
            Line("salt", 25, ChangeType.SET),       # 25 × 0.8 × 5  = 100
            Line("biscuits", 5, ChangeType.SUBTRACT),
        )
        assert batch.cost == Decimal("324.0")
        by_id = {i.item_id: i for i in batch.inventory}
        assert by_id["6"].quantity == 15
        assert by_id["3"].quantity == 25
        assert by_id["1"].quantity == 40

    def test_unknown_product_created_first_in_catalog(self):
        batch = _apply(_catalog(), Line("Sugar", 5, price=Decimal("45")))
        created = batch.created[0]
        assert batch.inventory[0] is created
        assert created.item_id == "item-1"
        assert created.name == "Sugar"
        assert created.unit == "unit"
        assert created.expiry_date == date(2026, 8, 28)
        assert batch.cost == Decimal("180.0")   # 45 × 0.8 × 5

    def test_created_product_found_by_later_line(self):
        batch = _apply((), Line("Sugar", 5), Line("sugar", 3))
        assert len(batch.created) == 1
        assert batch.inventory[0].quantity == 8

    def test_subtract_unknown_leaves_inventory(self):
        batch = _apply(_catalog(), Line("Sugar", 5, ChangeType.SUBTRACT))
        assert batch.inventory == _catalog()
        assert not batch.changed
        assert batch.cost == 0

    def test_input_catalog_untouched(self):
        catalog = _catalog()
        _apply(catalog, Line("milk", 10))
        assert catalog[3].quantity == 5


class TestAddProducts:
    def test_always_creates(self):
        batch = add_products(
            _catalog(),
            [Line("Amul Milk", 12, price=Decimal("30"), unit="packet")],
            settings=SETTINGS,
            new_item_id=SequentialIdProvider().new_item_id,
        )
        assert len(batch.inventory) == 5
        assert batch.inventory[0].price == Decimal("30")
        assert batch.cost == 0

    def test_missing_price_skipped(self):
        batch = add_products(
            _catalog(),
            [Line("Sugar", 12)],
            settings=SETTINGS,
            new_item_id=SequentialIdProvider().new_item_id,
        )
        assert batch.created == ()


class TestQuickRestock:
    def test_adds_fixed_units(self):
        batch = quick_restock(_catalog(), ["Tata Salt"], settings=SETTINGS)
        assert batch.inventory[2].quantity == 30
        assert batch.cost == Decimal("200.0")

    def test_requires_exact_name(self):
        batch = quick_restock(_catalog(), ["salt"], settings=SETTINGS)
        assert batch.changes == ()
        assert batch.cost == 0


# ══════════════════════════════════════════════════════════════
# COSTING
# ══════════════════════════════════════════════════════════════

class TestCosting:
    def test_cost_basis(self):
        assert estimate_cost(Decimal("28"), 10) == Decimal("224.0")

    def test_no_cost_without_increase(self):
        assert estimate_cost(Decimal("28"), 0) == 0
        assert estimate_cost(Decimal("28"), -4) == 0

    def test_quick_restock_cost(self):
        assert round_cost(quick_restock_cost(Decimal("25"))) == 200

    def test_rounding_half_up(self):
        assert round_cost(estimate_cost(Decimal("14"), 2)) == 22   # 22.4
        assert round_cost(Decimal("22.5")) == 23
