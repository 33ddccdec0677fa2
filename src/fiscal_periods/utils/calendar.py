# fiscal_periods/utils/calendar.py
from __future__ import annotations

import calendar as _calendar
from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime]


def as_date(value: DateLike) -> date:
    """Start-of-day view of a date or datetime (time and tzinfo are dropped)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    return _calendar.monthrange(year, month)[1]


def is_last_day_of_month(d: date) -> bool:
    return d.day == days_in_month(d.year, d.month)


# --- Month/year arithmetic -----------------------------------------------------

def add_months(d: date, months: int) -> date:
    """
    Shift by whole calendar months, clamping the day to the target month length:
      2024-01-31 + 1  -> 2024-02-29
      2023-01-31 + 1  -> 2023-02-28
      2024-01-31 - 2  -> 2023-11-30
    """
    idx = d.year * 12 + (d.month - 1) + months
    y, m0 = divmod(idx, 12)
    m = m0 + 1
    return date(y, m, min(d.day, days_in_month(y, m)))


def add_years(d: date, years: int) -> date:
    # Feb 29 + 1 year -> Feb 28
    return add_months(d, years * 12)


def months_between(later: date, earlier: date) -> int:
    """
    Whole months elapsed from `earlier` to `later`, truncated toward zero.

    A month is complete once the day-of-month of `earlier` is reached, or when
    `later` is the last day of a month too short to reach it
    (2024-01-31 -> 2024-02-29 is one month).
    """
    if later < earlier:
        return -months_between(earlier, later)
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    if later.day < earlier.day and not is_last_day_of_month(later):
        months -= 1
    return months


# --- Labels ----------------------------------------------------------------------

def short_year(year: int) -> str:
    """Two-digit year: 2024 -> '24', 2005 -> '05'."""
    return f"{year % 100:02d}"


def day_month(d: date) -> str:
    """'Apr 6'"""
    return f"{d:%b} {d.day}"


def day_month_year(d: date) -> str:
    """'Apr 5, 2025'"""
    return f"{d:%b} {d.day}, {d.year}"
