from __future__ import annotations

import calendar
import datetime as dt
from typing import Optional, Tuple

import pandas as pd

WEEK_DAYS = 7


def days_between(start: dt.date, end: dt.date) -> int:
    return (end - start).days


def is_payday(date: dt.date, reference: dt.date, weekday: Optional[int] = None) -> bool:
    """
    Biweekly cadence anchored to a known payday.
    Whole weeks are floored, so dates before the reference resolve the same way
    as dates after it.
    """
    if weekday is None:
        weekday = reference.weekday()
    weeks = days_between(reference, date) // WEEK_DAYS
    return date.weekday() == weekday and weeks % 2 == 0


def is_monthly_due(date: dt.date, day_of_month: int) -> bool:
    # 29-31 never fire in months that lack that day
    return date.day == day_of_month


def is_weekly_due(date: dt.date, last_fired: dt.date) -> bool:
    return days_between(last_fired, date) >= WEEK_DAYS


def next_payday(start: dt.date, reference: dt.date, weekday: Optional[int] = None) -> dt.date:
    current = start
    for _ in range(2 * WEEK_DAYS):
        if is_payday(current, reference, weekday):
            return current
        current += dt.timedelta(days=1)
    return current


def month_end(date: dt.date) -> dt.date:
    return dt.date(date.year, date.month, calendar.monthrange(date.year, date.month)[1])


def add_months(date: dt.date, months: int) -> dt.date:
    return (pd.Timestamp(date) + pd.DateOffset(months=months)).date()


def projection_window(start: dt.date, horizon_months: int, explicit_start: bool) -> Tuple[dt.date, dt.date]:
    """
    Inclusive (start, end) window for a fixed-payment projection.
    A single month with an explicit start runs to the end of that calendar month;
    a single month from today runs 31 days.
    """
    if horizon_months == 1:
        if explicit_start:
            return start, month_end(start)
        return start, start + dt.timedelta(days=30)
    return start, add_months(start, horizon_months)
