"""
Kirana Actions Engine - Application Service
=============================================
Single writer over the shop snapshot.

PosService holds the current PosState and serialises every submission
through one lock: parse → reduce → swap happens atomically, so two
concurrent submissions can never both read the same starting state.
Readers get the last committed snapshot without taking part in writes.
"""

from __future__ import annotations

import logging
import threading
from decimal import DecimalException
from typing import Any, Optional

from core.state.snapshot import PosState
from engines.actions.commands import ActionParseError, parse_action_record
from engines.actions.reducer import (
    DispatchResult,
    NoOpReason,
    ReducerContext,
    dispatch,
)
from engines.retail.cart import BillPreview, preview_bill

logger = logging.getLogger("kirana.actions")


class PosService:
    """
    Usage:
        service = PosService(context=ReducerContext(clock=FixedClock(...)))
        result = service.submit({"action": "RESTOCK", "data": {...}})
        service.snapshot().inventory
    """

    def __init__(
        self,
        *,
        context: Optional[ReducerContext] = None,
        initial_state: Optional[PosState] = None,
    ):
        self._context = context or ReducerContext()
        if initial_state is None:
            initial_state = PosState(
                active_view=self._context.settings.default_view,
            )
        self._state = initial_state
        self._lock = threading.Lock()

    @property
    def context(self) -> ReducerContext:
        return self._context

    def snapshot(self) -> PosState:
        return self._state

    def submit(self, raw_action: Any) -> DispatchResult:
        """
        Apply one action and return its outcome.

        Never raises for bad input: malformed payloads and record
        validation failures come back as a no-op result.
        """
        with self._lock:
            current = self._state
            try:
                result = dispatch(current, raw_action, self._context)
            except (ValueError, TypeError, DecimalException) as exc:
                logger.warning(f"Action rejected during reconciliation: {exc}")
                return DispatchResult(
                    state=current,
                    kind=None,
                    applied=False,
                    reason=NoOpReason.MALFORMED_ACTION,
                )
            self._state = result.state
            return result

    def preview(self, raw_action: Any) -> BillPreview:
        """Price the payload's lines against the current shelf. No mutation."""
        try:
            action = parse_action_record(raw_action)
        except ActionParseError as exc:
            logger.warning(f"Bill preview of malformed payload: {exc}")
            return preview_bill((), self._state.inventory)
        return preview_bill(action.lines, self._state.inventory)

    def reset(self, state: Optional[PosState] = None) -> None:
        with self._lock:
            self._state = state or PosState(
                active_view=self._context.settings.default_view,
            )
