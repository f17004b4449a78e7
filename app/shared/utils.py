"""Shared utility functions."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Return current calendar date in UTC."""
    return utc_now().date()


def earliest_bookable_date(min_advance_days: int, today: date | None = None) -> date:
    """First date a public request may target."""
    return (today or utc_today()) + timedelta(days=min_advance_days)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return first and last day of the month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def format_long_date(value: date) -> str:
    """Render a date as e.g. 'Saturday, March 1, 2025'."""
    return f"{value.strftime('%A')}, {value.strftime('%B')} {value.day}, {value.year}"
