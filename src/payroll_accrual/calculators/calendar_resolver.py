"""Working-day calendar for a payroll month."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

_MONTH_KEY = re.compile(r"^(\d{4})-(\d{2})$")

# date.weekday(): Saturday=5, Sunday=6
_WEEKEND = (5, 6)


class InvalidMonthError(ValueError):
    """Raised when a month key is not a valid YYYY-MM string."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Month must be in YYYY-MM format, got {value!r}")


def parse_month(key: str) -> tuple[int, int]:
    """Parse a YYYY-MM month key into (year, month)."""
    match = _MONTH_KEY.match(key) if isinstance(key, str) else None
    if match is None:
        raise InvalidMonthError(key)
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidMonthError(key)
    return year, month


def format_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def previous_month(key: str) -> str:
    """Month key immediately before the given one."""
    year, month = parse_month(key)
    if month == 1:
        return format_month(year - 1, 12)
    return format_month(year, month - 1)


def next_month(key: str) -> str:
    """Month key immediately after the given one."""
    year, month = parse_month(key)
    if month == 12:
        return format_month(year + 1, 1)
    return format_month(year, month + 1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    days = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, days)


def is_weekend(day: date) -> bool:
    return day.weekday() in _WEEKEND


@dataclass(frozen=True)
class CalendarMonth:
    """Resolved day counts for one month.

    ``holidays`` only holds holidays that fall on weekdays inside the month,
    so a weekend holiday never removes a working day twice.
    """

    year: int
    month: int
    total_days: int
    weekend_days: int
    holiday_days: int
    working_days: int
    holidays: frozenset[date] = frozenset()

    @property
    def key(self) -> str:
        return format_month(self.year, self.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.total_days)

    def contains(self, day: date) -> bool:
        return self.first_day <= day <= self.last_day

    def is_working_day(self, day: date) -> bool:
        """A day inside the month that is neither a weekend nor a holiday."""
        return self.contains(day) and not is_weekend(day) and day not in self.holidays

    def count_working_days(self, start: date, end: date) -> int:
        """Count working days in the inclusive range, clipped to the month."""
        start = max(start, self.first_day)
        end = min(end, self.last_day)
        count = 0
        day = start
        while day <= end:
            if not is_weekend(day) and day not in self.holidays:
                count += 1
            day += timedelta(days=1)
        return count


class CalendarResolver:
    """Derives working-day counts from weekends and configured holidays."""

    @staticmethod
    def resolve(year: int, month: int, holidays: Iterable[date] = ()) -> CalendarMonth:
        """Resolve the calendar for a month.

        Args:
            year: Calendar year
            month: Calendar month (1-12)
            holidays: Configured holiday dates; dates outside the month are
                ignored and duplicates count once

        Returns:
            CalendarMonth with total, weekend, holiday and working day counts
        """
        first_day, last_day = month_bounds(year, month)
        total_days = last_day.day

        weekend_days = sum(
            1 for d in range(1, total_days + 1) if is_weekend(date(year, month, d))
        )
        weekday_holidays = frozenset(
            h for h in holidays if first_day <= h <= last_day and not is_weekend(h)
        )
        holiday_days = len(weekday_holidays)

        return CalendarMonth(
            year=year,
            month=month,
            total_days=total_days,
            weekend_days=weekend_days,
            holiday_days=holiday_days,
            working_days=total_days - weekend_days - holiday_days,
            holidays=weekday_holidays,
        )

    @classmethod
    def resolve_key(cls, key: str, holidays: Iterable[date] = ()) -> CalendarMonth:
        """Resolve the calendar for a YYYY-MM month key."""
        year, month = parse_month(key)
        return cls.resolve(year, month, holidays)
