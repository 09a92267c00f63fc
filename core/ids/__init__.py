"""
Kirana Core IDs - Identifier Providers
========================================
Injected providers for record identifiers.
Engine logic never calls uuid directly; ids arrive through the
reducer context so tests can replay with deterministic ids.
"""

from __future__ import annotations

import itertools
import threading
import uuid
from typing import Protocol


class IdProvider(Protocol):
    def new_item_id(self) -> str:
        ...

    def new_sale_id(self) -> str:
        ...

    def new_expense_id(self) -> str:
        ...


class UuidIdProvider:
    def new_item_id(self) -> str:
        return uuid.uuid4().hex

    def new_sale_id(self) -> str:
        return uuid.uuid4().hex

    def new_expense_id(self) -> str:
        return uuid.uuid4().hex


class SequentialIdProvider:
    """
    Deterministic ids: item-1, item-2, sale-1, expense-1, ...

    Counters are per record kind and never reset.
    """

    def __init__(self) -> None:
        self._counters = {
            "item": itertools.count(1),
            "sale": itertools.count(1),
            "expense": itertools.count(1),
        }
        self._lock = threading.Lock()

    def _next(self, prefix: str) -> str:
        with self._lock:
            return f"{prefix}-{next(self._counters[prefix])}"

    def new_item_id(self) -> str:
        return self._next("item")

    def new_sale_id(self) -> str:
        return self._next("sale")

    def new_expense_id(self) -> str:
        return self._next("expense")


__all__ = [
    "IdProvider",
    "UuidIdProvider",
    "SequentialIdProvider",
]
