#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Recurrence rules for repeating tasks and the search for the next date on
which a repeating task is due.

Rules are written in a compact form, with space separated tokens:

    d <days>                      every <days> days, 0 to 400
    y                             every year
    w <weekdays>                  on the listed weekdays, 1 (Monday) to 7 (Sunday)
    m <days of month> [<months>]  on the listed days of the listed months;
                                  -1 is the last day of a month and -2 the
                                  second-to-last day

For example, "m 15,-1 1,6" is due on the 15th and on the last day of January
and June.
"""

import datetime
from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from taskplan.aliases import DateStr, RuleStr
from taskplan.constants import (
    DAYS_IN_WEEK,
    LAST_DAY_MARK,
    MAX_DAILY_INTERVAL,
    MAX_DAY_MARK,
    MONTHS_IN_YEAR,
    SECOND_TO_LAST_DAY_MARK,
)
from taskplan.exceptions import InvalidRuleError
from taskplan.time_utils import (
    add_days,
    add_years,
    as_date,
    days_in_month,
    first_day_of_next_month,
    format_date,
    iso_weekday,
    last_day_of_month,
    parse_date,
)

WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
# longest a month can be in any year, used to detect rules that never occur
_MAX_MONTH_LENGTH = {
    month: days_in_month(2000, month) for month in range(1, MONTHS_IN_YEAR + 1)
}


class RecurrenceKind(StrEnum):
    """The leading token of a rule."""

    DAILY = "d"
    YEARLY = "y"
    WEEKLY = "w"
    MONTHLY = "m"


@dataclass(frozen=True)
class DailyRule:
    """Repeat every `interval_days` days, counted from the task date."""

    interval_days: int
    kind: ClassVar[RecurrenceKind] = RecurrenceKind.DAILY

    def __post_init__(self):
        if not 0 <= self.interval_days <= MAX_DAILY_INTERVAL:
            raise InvalidRuleError(
                f"invalid number of days: {self.interval_days}, "
                f"expected a value between 0 and {MAX_DAILY_INTERVAL}"
            )

    def __str__(self) -> str:
        if self.interval_days == 1:
            return "every day"
        return f"every {self.interval_days} days"


@dataclass(frozen=True)
class YearlyRule:
    """Repeat on the same day every year. A task set on the 29th of February
    moves to the 28th in non-leap years and stays there."""

    kind: ClassVar[RecurrenceKind] = RecurrenceKind.YEARLY

    def __str__(self) -> str:
        return "every year"


@dataclass(frozen=True)
class WeeklyRule:
    """Repeat on given weekdays (1 is Monday, 7 is Sunday).

    Notes
    -----
    The next date of a weekly task is the first matching weekday after the
    reference date. Unlike the other rules, it does not depend on the
    task date.
    """

    weekdays: frozenset[int]
    kind: ClassVar[RecurrenceKind] = RecurrenceKind.WEEKLY

    def __post_init__(self):
        if not self.weekdays:
            raise InvalidRuleError("weekly rule needs at least one weekday")
        for day in self.weekdays:
            if not 1 <= day <= DAYS_IN_WEEK:
                raise InvalidRuleError(f"invalid weekday: {day}")

    def __str__(self) -> str:
        days = ", ".join(WEEKDAY_NAMES[day - 1] for day in sorted(self.weekdays))
        return f"weekly on {days}"


@dataclass(frozen=True)
class MonthlyRule:
    """Repeat on given days of the month.

    Parameters
    ----------
    day_marks
        Days of the month on which the task is due. Positive values select
        that day, -1 selects the last day of the month and -2 the day before it.
    months
        Months of the year (1 for January, 12 for December) the rule is
        restricted to. Empty means every month.
    """

    day_marks: frozenset[int]
    months: frozenset[int] = field(default_factory=frozenset)
    kind: ClassVar[RecurrenceKind] = RecurrenceKind.MONTHLY

    def __post_init__(self):
        if not self.day_marks:
            raise InvalidRuleError("monthly rule needs at least one day")
        for mark in self.day_marks:
            if mark == 0 or not SECOND_TO_LAST_DAY_MARK <= mark <= MAX_DAY_MARK:
                raise InvalidRuleError(f"invalid day: {mark}")
        for month in self.months:
            if not 1 <= month <= MONTHS_IN_YEAR:
                raise InvalidRuleError(f"invalid month: {month}")

    def matches(self, date: datetime.date) -> bool:
        """Check if `date` falls on one of the rule's days of the month. The
        month filter is not taken into account."""
        last_day = last_day_of_month(date)
        for mark in self.day_marks:
            if mark > 0 and mark == date.day:
                return True
            if mark == LAST_DAY_MARK and date.day == last_day:
                return True
            if mark == SECOND_TO_LAST_DAY_MARK and date.day == last_day - 1:
                return True
        return False

    def is_reachable(self) -> bool:
        """False for rules such as "m 31 2,4" whose days never occur in the
        selected months."""
        if any(mark < 0 for mark in self.day_marks):
            return True
        months = self.months or _MAX_MONTH_LENGTH.keys()
        longest = max(_MAX_MONTH_LENGTH[month] for month in months)
        return min(self.day_marks) <= longest

    def __str__(self) -> str:
        names = {
            LAST_DAY_MARK: "last day",
            SECOND_TO_LAST_DAY_MARK: "second-to-last day",
        }
        marks = sorted(self.day_marks, key=lambda mark: (mark < 0, abs(mark)))
        days = [names.get(mark, str(mark)) for mark in marks]
        description = f"monthly on {', '.join(days)}"
        if self.months:
            months = ", ".join(MONTH_NAMES[month - 1] for month in sorted(self.months))
            description += f" of {months}"
        return description


RecurrenceRule = DailyRule | YearlyRule | WeeklyRule | MonthlyRule


def _parse_int(token: str, what: str) -> int:
    # int() would also accept whitespace, underscores and non-ASCII digits
    stripped = token[1:] if token[:1] in ("+", "-") else token
    if not stripped or not stripped.isascii() or not stripped.isdigit():
        raise InvalidRuleError(f"invalid {what}: {token!r}")
    return int(token)


def _parse_int_list(token: str, what: str) -> frozenset[int]:
    return frozenset(_parse_int(part, what) for part in token.split(","))


def _parse_daily(tokens: list[str]) -> DailyRule:
    if len(tokens) != 2:
        raise InvalidRuleError("invalid repeat format for d, expected 'd <days>'")
    return DailyRule(interval_days=_parse_int(tokens[1], "number of days"))


def _parse_weekly(tokens: list[str]) -> WeeklyRule:
    if len(tokens) != 2:
        raise InvalidRuleError("invalid repeat format for w, expected 'w <weekdays>'")
    return WeeklyRule(weekdays=_parse_int_list(tokens[1], "weekday"))


def _parse_monthly(tokens: list[str]) -> MonthlyRule:
    if len(tokens) not in (2, 3):
        raise InvalidRuleError(
            "invalid repeat format for m, expected 'm <days> [<months>]'"
        )
    day_marks = _parse_int_list(tokens[1], "day")
    months = _parse_int_list(tokens[2], "month") if len(tokens) == 3 else frozenset()
    return MonthlyRule(day_marks=day_marks, months=months)


_PARSERS = {
    RecurrenceKind.DAILY: _parse_daily,
    RecurrenceKind.WEEKLY: _parse_weekly,
    RecurrenceKind.MONTHLY: _parse_monthly,
}


def parse_rule(repeat: RuleStr) -> RecurrenceRule:
    """Parse and validate the textual form of a recurrence rule.

    Raises
    ------
    InvalidRuleError
        If the rule is empty, has an unsupported kind, the wrong number of
        tokens or values out of range.
    """
    if not repeat:
        raise InvalidRuleError("repeat rule is empty")
    if repeat.startswith(RecurrenceKind.YEARLY):
        if repeat != RecurrenceKind.YEARLY:
            raise InvalidRuleError("yearly rule takes no parameters")
        return YearlyRule()
    tokens = repeat.split(" ")
    try:
        parser = _PARSERS[RecurrenceKind(tokens[0])]
    except ValueError:
        raise InvalidRuleError(f"unsupported repeat rule: {repeat!r}") from None
    if len(tokens) < 2:
        raise InvalidRuleError(f"missing parameters in repeat rule: {repeat!r}")
    return parser(tokens)


def _next_daily(
    rule: DailyRule, now: datetime.date, anchor: datetime.date
) -> datetime.date:
    if rule.interval_days == 0:
        raise InvalidRuleError("a task repeating every 0 days never moves forward")
    # the anchor always advances at least once
    if anchor > now:
        steps = 1
    else:
        steps = (now - anchor).days // rule.interval_days + 1
    return add_days(anchor, steps * rule.interval_days)


def _next_yearly(now: datetime.date, anchor: datetime.date) -> datetime.date:
    # step one year at a time so that a clamped 29th of February stays clamped
    current = add_years(anchor)
    while current <= now:
        current = add_years(current)
    return current


def _next_weekly(rule: WeeklyRule, now: datetime.date) -> datetime.date:
    current = add_days(now, 1)
    while iso_weekday(current) not in rule.weekdays:
        current = add_days(current, 1)
    return current


def _next_monthly(
    rule: MonthlyRule, now: datetime.date, anchor: datetime.date
) -> datetime.date:
    if not rule.is_reachable():
        raise InvalidRuleError(f"the days of the rule '{rule}' never occur")
    current = anchor
    while True:
        if rule.months and current.month not in rule.months:
            current = first_day_of_next_month(current)
            continue
        if current > now and rule.matches(current):
            return current
        current = add_days(current, 1)


def next_occurrence(
    rule: RecurrenceRule, now: datetime.date, anchor: datetime.date
) -> datetime.date:
    """Return the earliest date strictly after `now` on which a task scheduled
    on `anchor` is due according to `rule`.

    Daily, yearly and monthly rules advance from `anchor`; weekly rules
    advance from `now`.
    """
    match rule:
        case DailyRule():
            return _next_daily(rule, now, anchor)
        case YearlyRule():
            return _next_yearly(now, anchor)
        case WeeklyRule():
            return _next_weekly(rule, now)
        case MonthlyRule():
            return _next_monthly(rule, now, anchor)
        case _:
            raise InvalidRuleError(f"unsupported rule: {rule!r}")


def next_date(now: datetime.date | DateStr, date: DateStr, repeat: RuleStr) -> DateStr:
    """Compute the next date a repeating task is due.

    Parameters
    ----------
    now
        The reference date; the returned date is always strictly after it.
    date
        The date the task is currently scheduled on, as `YYYYMMDD`.
    repeat
        The recurrence rule, eg "d 7" or "m 1,-1".

    Returns
    -------
    The next date, formatted as `YYYYMMDD`.

    Raises
    ------
    InvalidRuleError
        The rule is empty, malformed or can never occur.
    InvalidDateError
        `now` or `date` is not a valid `YYYYMMDD` date.
    """
    if not repeat:
        raise InvalidRuleError("repeat rule is empty")
    anchor = parse_date(date)
    reference = as_date(now)
    rule = parse_rule(repeat)
    return format_date(next_occurrence(rule, reference, anchor))
