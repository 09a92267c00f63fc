"""
Kirana Core Time - Public API
===============================
Explicit clock protocol and calendar helpers.
Doctrine: NO datetime.now() in engine logic.
"""

from core.time.clock import Clock, FixedClock, SystemClock
from core.time.temporal import (
    days_until,
    is_same_day,
    is_same_month,
    shelf_life_expiry,
    trailing_days,
    utc_date,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "utc_date",
    "days_until",
    "shelf_life_expiry",
    "is_same_day",
    "is_same_month",
    "trailing_days",
]
