"""
Kirana Actions Engine - Action Dispatcher
===========================================
(state, action) → new state. The single place where an action record
meets shop state.

Routing:
    UPDATE_INVENTORY / RESTOCK  → inventory ledger, one restock expense
    RECORD_SALE                 → sale recorder over the action's lines
                                  (their own prices kept, live price
                                  only where one is missing)
    ADD_TO_CART / UPDATE_CART   → cart merge, view unchanged
    VIEW_BILL / NAVIGATE_BILL   → cart merge, view → billing
    COMPLETE_SALE               → cart pricing, then sale recorder
                                  (the cart itself is not read or cleared)
    ADD_PRODUCT                 → explicit product creation
    QUICK_RESTOCK               → fixed restock, one expense
    ADJUST_CART                 → cart +/- controls
    REMOVE_FROM_CART            → cart line removal
    CHECKOUT                    → cart committed as a sale, cart cleared
    SET_VIEW                    → active view switch

The reducer is pure with respect to its inputs: time and identifiers
come from the ReducerContext, and a rejected or empty action returns
the SAME state object with applied=False. It never raises for bad
input; malformed payloads degrade to a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from core.config.settings import PosSettings
from core.ids import IdProvider, UuidIdProvider
from core.primitives.item import InventoryItem
from core.primitives.ledger import ExpenseRecord, SaleRecord
from core.state.snapshot import ActiveView, PosState
from core.time.clock import Clock, SystemClock
from core.time.temporal import utc_date
from engines.accounting.expenses import (
    quick_restock_description,
    record_expense,
    restock_description,
)
from engines.actions.commands import (
    BILL_KINDS,
    CART_KINDS,
    INVENTORY_KINDS,
    ActionKind,
    ActionRecord,
    MalformedActionError,
    parse_action_record,
)
from engines.inventory.ledger import (
    add_products,
    apply_inventory_lines,
    quick_restock,
)
from engines.retail.cart import adjust_line, merge, price_lines, remove_line
from engines.retail.sales import commit_sale

logger = logging.getLogger("kirana.actions")


# ══════════════════════════════════════════════════════════════
# NO-OP REASONS
# ══════════════════════════════════════════════════════════════

class NoOpReason:
    """Why an action left state unchanged. SCREAMING_SNAKE_CASE."""

    MALFORMED_ACTION = "MALFORMED_ACTION"
    UNKNOWN_KIND = "UNKNOWN_KIND"
    NO_LINES = "NO_LINES"
    NOTHING_MATCHED = "NOTHING_MATCHED"
    EMPTY_CART = "EMPTY_CART"
    MISSING_VIEW = "MISSING_VIEW"


# ══════════════════════════════════════════════════════════════
# CONTEXT AND RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ReducerContext:
    """Everything the reducer needs besides state and action."""
    settings: PosSettings = field(default_factory=PosSettings)
    clock: Clock = field(default_factory=SystemClock)
    ids: IdProvider = field(default_factory=UuidIdProvider)


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of one dispatch.

    applied is False exactly when state is the input state unchanged;
    reason then carries a NoOpReason code.
    """
    state: PosState
    kind: Optional[ActionKind]
    applied: bool
    reason: Optional[str] = None
    sale: Optional[SaleRecord] = None
    expense: Optional[ExpenseRecord] = None
    created_items: Tuple[InventoryItem, ...] = ()
    skipped_lines: int = 0

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value if self.kind else None,
            "applied": self.applied,
            "reason": self.reason,
            "sale": self.sale.to_dict() if self.sale else None,
            "expense": self.expense.to_dict() if self.expense else None,
            "created_items": [i.to_dict() for i in self.created_items],
            "skipped_lines": self.skipped_lines,
        }


def _noop(
    state: PosState, action: ActionRecord, reason: str,
) -> DispatchResult:
    return DispatchResult(
        state=state,
        kind=action.kind,
        applied=False,
        reason=reason,
        skipped_lines=action.skipped_lines,
    )


def _applied(
    state: PosState, action: ActionRecord, **outcome: Any,
) -> DispatchResult:
    return DispatchResult(
        state=state,
        kind=action.kind,
        applied=True,
        skipped_lines=action.skipped_lines,
        **outcome,
    )


# ══════════════════════════════════════════════════════════════
# HANDLERS
# ══════════════════════════════════════════════════════════════

def _update_inventory(
    state: PosState, action: ActionRecord, ctx: ReducerContext, now: datetime,
) -> DispatchResult:
    if not action.lines:
        return _noop(state, action, NoOpReason.NO_LINES)

    batch = apply_inventory_lines(
        state.inventory,
        action.lines,
        settings=ctx.settings,
        new_item_id=ctx.ids.new_item_id,
        today=utc_date(now),
    )
    if not batch.changed:
        return _noop(state, action, NoOpReason.NOTHING_MATCHED)

    expense = record_expense(
        batch.cost,
        description=restock_description(len(action.lines)),
        recorded_at=now,
        new_expense_id=ctx.ids.new_expense_id,
    )
    expenses = state.expenses + (expense,) if expense else state.expenses
    return _applied(
        state.evolve(inventory=batch.inventory, expenses=expenses),
        action,
        expense=expense,
        created_items=batch.created,
    )


def _sell(
    state: PosState,
    action: ActionRecord,
    ctx: ReducerContext,
    now: datetime,
    lines,
    *,
    clear_cart: bool = False,
    keep_line_prices: bool = False,
) -> DispatchResult:
    if not any(line.quantity > 0 for line in lines):
        return _noop(state, action, NoOpReason.NO_LINES)

    commit = commit_sale(
        lines,
        state.inventory,
        sale_id=ctx.ids.new_sale_id(),
        recorded_at=now,
        fallback_total=action.total_amount,
        keep_line_prices=keep_line_prices,
    )
    changes = {
        "inventory": commit.inventory,
        "sales": state.sales + (commit.sale,),
    }
    if clear_cart:
        changes["cart"] = ()
    return _applied(state.evolve(**changes), action, sale=commit.sale)


def _record_sale(state, action, ctx, now):
    return _sell(state, action, ctx, now, action.lines, keep_line_prices=True)


def _complete_sale(state, action, ctx, now):
    priced = price_lines(action.lines, state.inventory)
    return _sell(state, action, ctx, now, priced)


def _checkout(state, action, ctx, now):
    if not state.cart:
        return _noop(state, action, NoOpReason.EMPTY_CART)
    return _sell(state, action, ctx, now, state.cart, clear_cart=True)


def _merge_cart(state, action, ctx, now):
    if not action.lines:
        return _noop(state, action, NoOpReason.NO_LINES)
    cart = merge(state.cart, action.lines, state.inventory)
    if cart == state.cart:
        return _noop(state, action, NoOpReason.NOTHING_MATCHED)
    return _applied(state.evolve(cart=cart), action)


def _view_bill(state, action, ctx, now):
    cart = merge(state.cart, action.lines, state.inventory)
    if cart == state.cart and state.active_view == ActiveView.BILLING:
        return _noop(state, action, NoOpReason.NO_LINES)
    return _applied(
        state.evolve(cart=cart, active_view=ActiveView.BILLING), action,
    )


def _adjust_cart(state, action, ctx, now):
    cart = state.cart
    for line in action.lines:
        cart = adjust_line(cart, line.name, line.change_type, line.quantity)
    if cart == state.cart:
        return _noop(state, action, NoOpReason.NOTHING_MATCHED)
    return _applied(state.evolve(cart=cart), action)


def _remove_from_cart(state, action, ctx, now):
    cart = state.cart
    for name in action.names:
        cart = remove_line(cart, name)
    if cart == state.cart:
        return _noop(state, action, NoOpReason.NOTHING_MATCHED)
    return _applied(state.evolve(cart=cart), action)


def _add_product(state, action, ctx, now):
    batch = add_products(
        state.inventory,
        action.lines,
        settings=ctx.settings,
        new_item_id=ctx.ids.new_item_id,
    )
    if not batch.created:
        return _noop(state, action, NoOpReason.NO_LINES)
    return _applied(
        state.evolve(inventory=batch.inventory),
        action,
        created_items=batch.created,
    )


def _quick_restock(state, action, ctx, now):
    batch = quick_restock(state.inventory, action.names, settings=ctx.settings)
    if not batch.changes:
        return _noop(state, action, NoOpReason.NOTHING_MATCHED)

    by_id = {item.item_id: item.name for item in batch.inventory}
    restocked = [by_id[item_id] for item_id, _ in batch.changes]
    expense = record_expense(
        batch.cost,
        description=quick_restock_description(restocked),
        recorded_at=now,
        new_expense_id=ctx.ids.new_expense_id,
    )
    expenses = state.expenses + (expense,) if expense else state.expenses
    return _applied(
        state.evolve(inventory=batch.inventory, expenses=expenses),
        action,
        expense=expense,
    )


def _set_view(state, action, ctx, now):
    if action.view is None:
        return _noop(state, action, NoOpReason.MISSING_VIEW)
    return _applied(state.evolve(active_view=action.view), action)


Handler = Callable[
    [PosState, ActionRecord, ReducerContext, datetime], DispatchResult,
]

_HANDLERS: Dict[ActionKind, Handler] = {
    ActionKind.RECORD_SALE: _record_sale,
    ActionKind.COMPLETE_SALE: _complete_sale,
    ActionKind.ADD_PRODUCT: _add_product,
    ActionKind.QUICK_RESTOCK: _quick_restock,
    ActionKind.ADJUST_CART: _adjust_cart,
    ActionKind.REMOVE_FROM_CART: _remove_from_cart,
    ActionKind.CHECKOUT: _checkout,
    ActionKind.SET_VIEW: _set_view,
}
_HANDLERS.update({kind: _update_inventory for kind in INVENTORY_KINDS})
_HANDLERS.update({kind: _merge_cart for kind in CART_KINDS})
_HANDLERS.update({kind: _view_bill for kind in BILL_KINDS})


# ══════════════════════════════════════════════════════════════
# DISPATCH
# ══════════════════════════════════════════════════════════════

def dispatch(
    state: PosState,
    action: Any,
    context: Optional[ReducerContext] = None,
) -> DispatchResult:
    """
    Reconcile one action against `state`.

    `action` is an ActionRecord or a raw payload (parsed here). The
    input state is never modified.
    """
    ctx = context or ReducerContext()

    if not isinstance(action, ActionRecord):
        try:
            action = parse_action_record(action)
        except MalformedActionError as exc:
            logger.warning(f"Malformed action ignored: {exc}")
            return DispatchResult(
                state=state,
                kind=None,
                applied=False,
                reason=NoOpReason.MALFORMED_ACTION,
            )

    handler = _HANDLERS.get(action.kind) if action.kind else None
    if handler is None:
        logger.info(f"No-op for unhandled action kind {action.raw_kind!r}")
        return _noop(state, action, NoOpReason.UNKNOWN_KIND)

    result = handler(state, action, ctx, ctx.clock.now_utc())
    if result.applied:
        logger.info(
            f"Applied {action.kind.value} "
            f"({len(action.lines)} lines, {action.skipped_lines} skipped)"
        )
    else:
        logger.info(f"No-op {action.kind.value}: {result.reason}")
    return result


def apply_action(
    state: PosState,
    action: Any,
    context: Optional[ReducerContext] = None,
) -> PosState:
    """Next state only, for callers that do not need the outcome."""
    return dispatch(state, action, context).state
