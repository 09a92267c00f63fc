"""
Kirana Actions Engine - Action Records
========================================
Typed action records and the parser that builds them from loosely
structured payloads (the assistant's JSON or a direct UI request).

Accepted shapes:
    {"kind": "RESTOCK", "items": [...], "totalAmount": 96}
    {"action": "RESTOCK", "data": {"items": [...], "totalAmount": 96}}

Line fields may be camelCase or snake_case:
    name, quantity, changeType | change_type, price,
    unit, expiryDate | expiry_date, image

RULES (NON-NEGOTIABLE):
- a record that is not a mapping raises MalformedActionError
- a bad line raises MalformedLineError; the record parser skips it
  and keeps the rest
- an unrecognised kind is not an error: the record parses with
  kind=None and the reducer treats it as a no-op
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from core.primitives.item import ChangeType
from core.primitives.ledger import to_amount
from core.state.snapshot import ActiveView

logger = logging.getLogger("kirana.actions")


# ══════════════════════════════════════════════════════════════
# ERRORS
# ══════════════════════════════════════════════════════════════

class ActionParseError(ValueError):
    """Base class for payloads that cannot become action records."""


class MalformedActionError(ActionParseError):
    """The record as a whole is unusable."""


class MalformedLineError(ActionParseError):
    """A single requested line is unusable."""


# ══════════════════════════════════════════════════════════════
# ACTION KINDS
# ══════════════════════════════════════════════════════════════

class ActionKind(Enum):
    # Assistant intents
    UPDATE_INVENTORY = "UPDATE_INVENTORY"
    RESTOCK = "RESTOCK"
    RECORD_SALE = "RECORD_SALE"
    ADD_TO_CART = "ADD_TO_CART"
    UPDATE_CART = "UPDATE_CART"
    VIEW_BILL = "VIEW_BILL"
    NAVIGATE_BILL = "NAVIGATE_BILL"
    COMPLETE_SALE = "COMPLETE_SALE"

    # Direct user actions
    ADD_PRODUCT = "ADD_PRODUCT"
    QUICK_RESTOCK = "QUICK_RESTOCK"
    ADJUST_CART = "ADJUST_CART"
    REMOVE_FROM_CART = "REMOVE_FROM_CART"
    CHECKOUT = "CHECKOUT"
    SET_VIEW = "SET_VIEW"


INVENTORY_KINDS = frozenset({ActionKind.UPDATE_INVENTORY, ActionKind.RESTOCK})
CART_KINDS = frozenset({ActionKind.ADD_TO_CART, ActionKind.UPDATE_CART})
BILL_KINDS = frozenset({ActionKind.VIEW_BILL, ActionKind.NAVIGATE_BILL})

# Kinds whose lines only carry a name.
NAME_ONLY_KINDS = frozenset({ActionKind.QUICK_RESTOCK, ActionKind.REMOVE_FROM_CART})


def resolve_action_kind(raw_kind: Any) -> Optional[ActionKind]:
    if not isinstance(raw_kind, str):
        return None
    try:
        return ActionKind(raw_kind.strip().upper())
    except ValueError:
        return None


# ══════════════════════════════════════════════════════════════
# RECORDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ActionLine:
    """One requested line of an action."""
    name: str
    quantity: int = 0
    change_type: ChangeType = ChangeType.ADD
    price: Optional[Decimal] = None
    unit: Optional[str] = None
    expiry_date: Optional[date] = None
    image: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("name must be non-empty string.")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("quantity must be integer.")
        if self.quantity < 0:
            raise ValueError("quantity cannot be negative.")
        if not isinstance(self.change_type, ChangeType):
            raise ValueError("change_type must be ChangeType enum.")
        if self.price is not None:
            if not isinstance(self.price, Decimal):
                object.__setattr__(self, "price", to_amount(self.price))
            if self.price < 0:
                raise ValueError("price cannot be negative.")


@dataclass(frozen=True)
class ActionRecord:
    """
    A parsed action.

    kind is None when the payload named a kind this engine does not
    handle; raw_kind keeps what was sent for logging.
    """
    kind: Optional[ActionKind]
    lines: Tuple[ActionLine, ...] = ()
    total_amount: Optional[Decimal] = None
    view: Optional[ActiveView] = None
    raw_kind: str = ""
    skipped_lines: int = 0

    def __post_init__(self):
        if self.kind is not None and not isinstance(self.kind, ActionKind):
            raise ValueError("kind must be ActionKind enum or None.")
        if not isinstance(self.lines, tuple):
            raise TypeError("lines must be a tuple of ActionLine.")
        if self.total_amount is not None:
            if not isinstance(self.total_amount, Decimal):
                object.__setattr__(self, "total_amount", to_amount(self.total_amount))
            if self.total_amount < 0:
                raise ValueError("total_amount cannot be negative.")
        if not self.raw_kind and self.kind is not None:
            object.__setattr__(self, "raw_kind", self.kind.value)

    @property
    def names(self) -> List[str]:
        return [line.name for line in self.lines]


# ══════════════════════════════════════════════════════════════
# FIELD PARSERS
# ══════════════════════════════════════════════════════════════

def _field(raw: Mapping, *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def parse_quantity(value: Any) -> int:
    """
    Whole, non-negative quantity. Numeric strings and integral floats
    are accepted; fractions, booleans and negatives are not.
    """
    if isinstance(value, bool):
        raise MalformedLineError(f"quantity must be numeric, got {value!r}.")
    try:
        amount = to_amount(value)
    except ValueError as exc:
        raise MalformedLineError(str(exc)) from exc
    if amount != amount.to_integral_value():
        raise MalformedLineError(f"quantity must be a whole number, got {value!r}.")
    if amount < 0:
        raise MalformedLineError(f"quantity cannot be negative, got {value!r}.")
    return int(amount)


def parse_change_type(value: Any) -> ChangeType:
    if value is None or value == "":
        return ChangeType.ADD
    if isinstance(value, str):
        try:
            return ChangeType(value.strip().lower())
        except ValueError:
            pass
    raise MalformedLineError(f"unknown changeType {value!r}.")


def _parse_price(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return to_amount(value)
    except ValueError as exc:
        raise MalformedLineError(str(exc)) from exc


def _parse_expiry(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # Accept full timestamps too; only the calendar date matters.
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise MalformedLineError(f"expiry date must be ISO date, got {value!r}.")


def parse_line(raw: Any, *, quantity_required: bool = True) -> ActionLine:
    if isinstance(raw, str) and not quantity_required:
        raw = {"name": raw}
    if not isinstance(raw, Mapping):
        raise MalformedLineError(f"line must be an object, got {type(raw).__name__}.")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise MalformedLineError("line name must be non-empty string.")

    raw_quantity = raw.get("quantity")
    if raw_quantity is None:
        if quantity_required:
            raise MalformedLineError(f"line '{name}' has no quantity.")
        quantity = 0
    else:
        quantity = parse_quantity(raw_quantity)

    try:
        return ActionLine(
            name=name.strip(),
            quantity=quantity,
            change_type=parse_change_type(_field(raw, "changeType", "change_type")),
            price=_parse_price(raw.get("price")),
            unit=_field(raw, "unit") or None,
            expiry_date=_parse_expiry(_field(raw, "expiryDate", "expiry_date")),
            image=_field(raw, "image") or None,
        )
    except MalformedLineError:
        raise
    except ValueError as exc:
        raise MalformedLineError(str(exc)) from exc


# ══════════════════════════════════════════════════════════════
# RECORD PARSER
# ══════════════════════════════════════════════════════════════

def parse_action_record(raw: Any) -> ActionRecord:
    """
    Build an ActionRecord from a flat or enveloped payload.

    Raises MalformedActionError only for a record that is unusable as a
    whole. Bad lines are logged and skipped.
    """
    if not isinstance(raw, Mapping):
        raise MalformedActionError(
            f"action record must be an object, got {type(raw).__name__}."
        )

    raw_kind = _field(raw, "kind", "action", "type")
    kind = resolve_action_kind(raw_kind)

    data = raw.get("data")
    if data is None:
        data = raw
    elif not isinstance(data, Mapping):
        raise MalformedActionError("action data must be an object.")

    raw_lines = _field(data, "items", "names")
    if raw_lines is None:
        raw_lines = []
    elif not isinstance(raw_lines, (list, tuple)):
        raise MalformedActionError("action items must be a list.")

    quantity_required = kind not in NAME_ONLY_KINDS
    lines: List[ActionLine] = []
    skipped = 0
    for position, raw_line in enumerate(raw_lines):
        try:
            lines.append(parse_line(raw_line, quantity_required=quantity_required))
        except MalformedLineError as exc:
            skipped += 1
            logger.warning(
                f"Skipped line {position} of {raw_kind!r} action: {exc}"
            )

    total_amount = None
    raw_total = _field(data, "totalAmount", "total_amount")
    if raw_total is not None:
        try:
            total_amount = to_amount(raw_total)
        except ValueError:
            logger.warning(f"Ignored unusable totalAmount {raw_total!r}")
        else:
            if total_amount < 0:
                logger.warning(f"Ignored negative totalAmount {raw_total!r}")
                total_amount = None

    view = None
    raw_view = _field(data, "view", "activeView", "active_view")
    if raw_view is None and data is not raw:
        raw_view = _field(raw, "view", "activeView", "active_view")
    if raw_view is not None:
        try:
            view = ActiveView(str(raw_view).strip().lower())
        except ValueError:
            logger.warning(f"Ignored unknown view {raw_view!r}")

    return ActionRecord(
        kind=kind,
        lines=tuple(lines),
        total_amount=total_amount,
        view=view,
        raw_kind=str(raw_kind) if raw_kind is not None else "",
        skipped_lines=skipped,
    )


__all__ = [
    "ActionKind",
    "ActionLine",
    "ActionRecord",
    "ActionParseError",
    "MalformedActionError",
    "MalformedLineError",
    "INVENTORY_KINDS",
    "CART_KINDS",
    "BILL_KINDS",
    "NAME_ONLY_KINDS",
    "parse_action_record",
    "parse_line",
    "parse_quantity",
    "parse_change_type",
    "resolve_action_kind",
]
