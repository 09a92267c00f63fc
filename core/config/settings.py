"""
Kirana Core Config - Shop Settings
====================================
Doctrine: No magic numbers in engine logic.
The cost basis ratio, restock shortcut size, placeholder price and
dashboard thresholds come from PosSettings, never from source code.

PosSettings.from_mapping() reads the KIRANA_* values that
config/settings.py exposes (they in turn come from the environment).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Mapping

from core.primitives.ledger import to_amount
from core.state.snapshot import ActiveView


# ══════════════════════════════════════════════════════════════
# SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PosSettings:
    """
    Tunables for the reconciliation engine and the insights read model.

    cost_ratio:              Cost basis as a share of selling price.
    quick_restock_units:     Units added by the dashboard restock shortcut.
    placeholder_price:       Price given to products created without one.
    default_unit:            Unit label for implicitly created products.
    default_shelf_life_days: Expiry offset for implicitly created products.
    low_stock_threshold:     Quantity below which restock is suggested.
    expiry_warning_days:     Window for "expiring soon".
    top_selling_limit:       Size of the top-selling list.
    income_window_days:      Length of the daily income series.
    default_view:            Active view of a fresh state.
    """

    cost_ratio: Decimal = Decimal("0.8")
    quick_restock_units: int = 10
    placeholder_price: Decimal = Decimal("50")
    default_unit: str = "unit"
    default_shelf_life_days: int = 180
    low_stock_threshold: int = 10
    expiry_warning_days: int = 7
    top_selling_limit: int = 5
    income_window_days: int = 14
    default_view: ActiveView = ActiveView.BILLING

    def __post_init__(self) -> None:
        for name in ("cost_ratio", "placeholder_price"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, to_amount(value))
        if not 0 <= self.cost_ratio <= 1:
            raise ValueError(
                f"cost_ratio must be between 0 and 1, got {self.cost_ratio}."
            )
        if self.placeholder_price < 0:
            raise ValueError("placeholder_price cannot be negative.")
        if self.quick_restock_units <= 0:
            raise ValueError("quick_restock_units must be positive integer.")
        if not self.default_unit:
            raise ValueError("default_unit must be non-empty string.")
        for name in (
            "default_shelf_life_days",
            "low_stock_threshold",
            "expiry_warning_days",
            "top_selling_limit",
            "income_window_days",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative.")
        if not isinstance(self.default_view, ActiveView):
            object.__setattr__(self, "default_view", ActiveView(self.default_view))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> PosSettings:
        """
        Build settings from KIRANA_<FIELD> keys.

        Missing or empty keys fall back to the defaults above.
        Integer fields accept numeric strings.
        """
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            raw = values.get(f"KIRANA_{f.name.upper()}")
            if raw is None or raw == "":
                continue
            if f.name in ("cost_ratio", "placeholder_price"):
                kwargs[f.name] = to_amount(raw)
            elif f.name in ("default_unit",):
                kwargs[f.name] = str(raw)
            elif f.name == "default_view":
                kwargs[f.name] = ActiveView(str(raw).strip().lower())
            else:
                kwargs[f.name] = int(raw)
        return cls(**kwargs)
