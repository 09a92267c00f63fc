"""
Kirana Django Adapter Wiring
============================
Constructs HttpApiDependencies for local/staging live runs.

This module is adapter-only glue:
- no engine or reducer changes
- one in-memory PosService per process (state is not persisted)
- settings come from the KIRANA_* values in config/settings.py
"""

from __future__ import annotations

import threading
from datetime import date, timedelta
from decimal import Decimal

from django.conf import settings as django_settings

from core.config.settings import PosSettings
from core.http_api.dependencies import HttpApiDependencies
from core.ids import UuidIdProvider
from core.primitives.item import InventoryItem
from core.state.snapshot import PosState
from core.time.clock import SystemClock
from core.time.temporal import utc_date
from engines.actions.reducer import ReducerContext
from engines.actions.services import PosService


# name, quantity, unit, price, days until expiry
_DEMO_CATALOG = (
    ("Marie Gold Biscuits", 45, "packet", "10", 90),
    ("Maggi Noodles", 8, "packet", "14", 120),
    ("Tata Salt", 20, "kg", "25", 365),
    ("Red Label Tea", 4, "box", "120", 500),
    ("Surf Excel", 30, "sachet", "5", 730),
    ("Amul Milk", 5, "packet", "28", 1),
    ("Bread", 5, "loaf", "40", 2),
)

_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def demo_inventory(today: date) -> tuple[InventoryItem, ...]:
    """Starter shelf for a fresh demo shop."""
    return tuple(
        InventoryItem(
            item_id=str(position),
            name=name,
            quantity=quantity,
            unit=unit,
            price=Decimal(price),
            expiry_date=today + timedelta(days=days),
        )
        for position, (name, quantity, unit, price, days) in enumerate(
            _DEMO_CATALOG, start=1,
        )
    )


def load_settings() -> PosSettings:
    values = {
        key: getattr(django_settings, key)
        for key in dir(django_settings)
        if key.startswith("KIRANA_")
    }
    return PosSettings.from_mapping(values)


def _create_dependencies() -> HttpApiDependencies:
    pos_settings = load_settings()
    clock = SystemClock()
    initial_state = PosState(active_view=pos_settings.default_view)
    if getattr(django_settings, "KIRANA_SEED_DEMO", False):
        initial_state = initial_state.evolve(
            inventory=demo_inventory(utc_date(clock.now_utc())),
        )

    service = PosService(
        context=ReducerContext(
            settings=pos_settings,
            clock=clock,
            ids=UuidIdProvider(),
        ),
        initial_state=initial_state,
    )
    return HttpApiDependencies(
        service=service,
        clock=clock,
        settings=pos_settings,
    )


def build_dependencies() -> HttpApiDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def reset_dependencies(dependencies: HttpApiDependencies | None = None) -> None:
    """Replace (or drop) the process-wide wiring. Used by tests."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = dependencies
