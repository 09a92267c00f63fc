"""
Kirana Core Time - Explicit Clock Protocol
============================================
Doctrine: NO datetime.now() inside engine logic.
The reducer receives its clock through the reducer context;
only SystemClock touches wall-clock time.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Wall-clock UTC. Used by the Django wiring."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Clock pinned to one instant until moved with advance().

    Sales and expenses recorded under it share a timestamp, so
    day and month boundaries in the insights are fully controlled:
        clock = FixedClock(datetime(2026, 3, 31, 23, 0, tzinfo=timezone.utc))
        clock.advance(hours=2)      # now in April
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: float = 0, *, hours: float = 0, days: int = 0) -> None:
        if seconds < 0 or hours < 0 or days < 0:
            raise ValueError("FixedClock only moves forward.")
        self._fixed_dt += timedelta(days=days, hours=hours, seconds=seconds)
