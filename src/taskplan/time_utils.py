#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""A light wrapper around the `datetime` library, containing the calendar-only
arithmetic used by the recurrence engine and helpers for parsing and formatting
the `YYYYMMDD` dates tasks are stored with."""

import calendar
import datetime
import re

from dateutil.relativedelta import relativedelta

from taskplan.aliases import DateStr, SearchDateStr
from taskplan.constants import DATE_FORMAT, SEARCH_DATE_FORMAT
from taskplan.exceptions import InvalidDateError

_DATE_PATTERN = re.compile(r"[0-9]{8}")
_SEARCH_DATE_PATTERN = re.compile(r"[0-9]{2}\.[0-9]{2}\.[0-9]{4}")


def parse_date(date_str: DateStr) -> datetime.date:
    """Parse an 8 digit `YYYYMMDD` string into a calendar date.

    Raises
    ------
    InvalidDateError
        If the string is not exactly 8 ASCII digits or does not name a real
        calendar day (eg month 13, 30th of February). Invalid dates are never
        normalised.
    """
    if not isinstance(date_str, str) or _DATE_PATTERN.fullmatch(date_str) is None:
        raise InvalidDateError(
            f"invalid date {date_str!r}, expected the YYYYMMDD format"
        )
    try:
        return datetime.date(
            year=int(date_str[:4]), month=int(date_str[4:6]), day=int(date_str[6:])
        )
    except ValueError as e:
        raise InvalidDateError(f"invalid date {date_str!r}: {e}") from e


def format_date(date: datetime.date) -> DateStr:
    """Format a date as `YYYYMMDD`."""
    return date.strftime(DATE_FORMAT)


def as_date(date: datetime.date | DateStr) -> datetime.date:
    """Accept either a date or its `YYYYMMDD` representation."""
    if isinstance(date, datetime.datetime):
        return date.date()
    if isinstance(date, datetime.date):
        return date
    return parse_date(date)


def parse_search_date(expr: str) -> datetime.date | None:
    """Resolve a `DD.MM.YYYY` search expression to a date. Returns `None` when
    `expr` is not a date so the caller can fall back to a text search."""
    if _SEARCH_DATE_PATTERN.fullmatch(expr) is None:
        return None
    try:
        return datetime.datetime.strptime(expr, SEARCH_DATE_FORMAT).date()
    except ValueError:
        return None


def format_search_date(date: datetime.date) -> SearchDateStr:
    return date.strftime(SEARCH_DATE_FORMAT)


def iso_weekday(date: datetime.date) -> int:
    """Day of the week, Monday is 1 and Sunday is 7."""
    return date.isoweekday()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def last_day_of_month(date: datetime.date) -> int:
    """The day number of the last day in the month `date` falls in."""
    return days_in_month(date.year, date.month)


def add_days(date: datetime.date, days: int) -> datetime.date:
    try:
        return date + datetime.timedelta(days=days)
    except OverflowError as e:
        raise InvalidDateError(f"date out of range after {format_date(date)}") from e


def add_years(date: datetime.date, years: int = 1) -> datetime.date:
    """Offset `date` by a number of years. The 29th of February is clamped
    to the 28th in non-leap years."""
    try:
        return date + relativedelta(years=years)
    except (OverflowError, ValueError) as e:
        raise InvalidDateError(f"date out of range after {format_date(date)}") from e


def first_day_of_next_month(date: datetime.date) -> datetime.date:
    try:
        return date.replace(day=1) + relativedelta(months=1)
    except (OverflowError, ValueError) as e:
        raise InvalidDateError(f"date out of range after {format_date(date)}") from e
