"""
Kirana Core Time - Calendar Helpers
=====================================
Pure functions for shelf-life and reporting periods.
All functions take explicit date/datetime arguments - no hidden clock access.
Datetimes are compared on their UTC calendar date.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def utc_date(dt: datetime) -> date:
    """Calendar date of an aware datetime in UTC."""
    if dt.tzinfo is None:
        raise ValueError("utc_date requires timezone-aware datetime.")
    return dt.astimezone(timezone.utc).date()


def days_until(target: date, today: date) -> int:
    """Whole days from today to target. Negative once target has passed."""
    return (target - today).days


def shelf_life_expiry(today: date, shelf_life_days: int) -> date:
    """Default best-before date for a product first seen today."""
    if shelf_life_days < 0:
        raise ValueError("shelf_life_days cannot be negative.")
    return today + timedelta(days=shelf_life_days)


def is_same_day(dt: datetime, today: date) -> bool:
    return utc_date(dt) == today


def is_same_month(dt: datetime, today: date) -> bool:
    d = utc_date(dt)
    return d.year == today.year and d.month == today.month


def trailing_days(today: date, count: int) -> list[date]:
    """The last `count` calendar days ending today, oldest first."""
    if count <= 0:
        return []
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]
