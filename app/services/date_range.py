"""Resolve named report periods into concrete local-time intervals."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Optional

from app.schemas.report import DateFilter, DateRange

# Trailing window for the weekly period, today included.
WEEKLY_WINDOW_DAYS = 7

_DAY_END = time(23, 59, 59, 999000)


def day_bounds(start: date, end: date) -> DateRange:
    """Stretch two calendar dates to 00:00:00.000 and 23:59:59.999."""

    return DateRange(
        start=datetime.combine(start, time.min),
        end=datetime.combine(end, _DAY_END),
    )


def weekly_range(today: date) -> DateRange:
    return day_bounds(today - timedelta(days=WEEKLY_WINDOW_DAYS - 1), today)


def monthly_range(today: date) -> DateRange:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return day_bounds(today.replace(day=1), today.replace(day=last_day))


def yearly_range(today: date) -> DateRange:
    return day_bounds(date(today.year, 1, 1), date(today.year, 12, 31))


def resolve_date_range(
    period: DateFilter,
    *,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Optional[DateRange]:
    """Return the interval for ``period``.

    ``None`` means there is nothing to fetch by date: either the period is
    ``all`` (no date bound) or a custom range is missing one of its bounds or
    ends before it starts. Custom bounds are otherwise used as given.
    Callers distinguish the two through :func:`is_unresolved`.
    """

    today = today or date.today()
    if period is DateFilter.TODAY:
        return day_bounds(today, today)
    if period is DateFilter.WEEKLY:
        return weekly_range(today)
    if period is DateFilter.MONTHLY:
        return monthly_range(today)
    if period is DateFilter.YEARLY:
        return yearly_range(today)
    if period is DateFilter.CUSTOM:
        if start is None or end is None or start > end:
            return None
        return day_bounds(start, end)
    return None


def is_unresolved(period: DateFilter, date_range: Optional[DateRange]) -> bool:
    """True when a custom range is incomplete or reversed and no fetch should happen."""

    return period is DateFilter.CUSTOM and date_range is None


def format_date(value: date | datetime) -> str:
    return value.strftime("%d/%m/%Y")


def date_range_label(period: DateFilter, date_range: Optional[DateRange]) -> str:
    if period is DateFilter.ALL:
        return "All Time"
    if date_range is None:
        return "Select dates"
    if period is DateFilter.TODAY:
        return format_date(date_range.start)
    return f"{format_date(date_range.start)} - {format_date(date_range.end)}"
