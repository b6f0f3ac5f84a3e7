"""Day cells and the section builder.

A section is one page of the calendar: a week (7 in-section days) or a month
grid padded with days of the neighbouring months so that the first column is
always the configured start of week.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date

from calendar_logic import (
    CalendarRules,
    SectionIdentifier,
    add_days,
    days_from_week_start,
    days_in_month,
)

FIXED_GRID_DAYS = 42  # 6 rows of 7


class DayKind(enum.Enum):
    PRE_MONTH = "pre_month"
    IN_SECTION = "in_section"
    POST_MONTH = "post_month"


@dataclass(frozen=True)
class Day:
    kind: DayKind
    date: date

    @classmethod
    def pre_month(cls, d: date) -> "Day":
        return cls(DayKind.PRE_MONTH, d)

    @classmethod
    def in_section(cls, d: date) -> "Day":
        return cls(DayKind.IN_SECTION, d)

    @classmethod
    def post_month(cls, d: date) -> "Day":
        return cls(DayKind.POST_MONTH, d)

    @property
    def is_in_section(self) -> bool:
        return self.kind is DayKind.IN_SECTION


@dataclass(frozen=True)
class Section:
    id: SectionIdentifier
    days: tuple[Day, ...]

    @property
    def title(self) -> str:
        return self.id.title()

    @property
    def rows(self) -> int:
        return -(-len(self.days) // 7)

    def in_section_dates(self) -> list[date]:
        return [day.date for day in self.days if day.is_in_section]


def build_section(identifier: SectionIdentifier, rules: CalendarRules) -> Section:
    """Return the day grid for ``identifier``.

    Pure: the same identifier and rules always give an equal section, so
    callers may memoize the result keyed by identifier.
    """
    first = identifier.first_date(rules)
    if identifier.style.is_week:
        days = [Day.in_section(add_days(first, i)) for i in range(7)]
        return Section(identifier, tuple(days))

    days = []
    # Walk back to the start of week; wraps when the 1st precedes it in the cycle
    lead = days_from_week_start(first, rules)
    for offset in range(lead, 0, -1):
        days.append(Day.pre_month(add_days(first, -offset)))

    month_length = days_in_month(first.year, first.month)
    for offset in range(month_length):
        days.append(Day.in_section(add_days(first, offset)))

    last = add_days(first, month_length - 1)
    if identifier.style.dynamic_rows:
        trailing = 6 - days_from_week_start(last, rules)
    else:
        trailing = FIXED_GRID_DAYS - len(days)
    for offset in range(1, trailing + 1):
        days.append(Day.post_month(add_days(last, offset)))

    return Section(identifier, tuple(days))
