"""Pure calendar arithmetic for section paging. No UI dependencies."""

from __future__ import annotations

import calendar
import enum
import functools
from dataclasses import dataclass
from datetime import date, datetime, timedelta

DAY_ABBR = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class ConfigurationError(ValueError):
    """The consuming application supplied an invalid calendar configuration."""


class CalendarComputationError(ArithmeticError):
    """Date arithmetic produced no representable result."""


class SectionStyleMismatch(TypeError):
    """Identifiers of different section styles were compared."""


class Weekday(enum.IntEnum):
    """Day of the week, numbered 1 (Sunday) to 7 (Saturday)."""

    SUN = 1
    MON = 2
    TUE = 3
    WED = 4
    THU = 5
    FRI = 6
    SAT = 7

    @property
    def previous(self) -> "Weekday":
        return Weekday((self.value - 2) % 7 + 1)

    @property
    def next(self) -> "Weekday":
        return Weekday(self.value % 7 + 1)

    @property
    def label(self) -> str:
        return DAY_ABBR[self.value - 1]

    @classmethod
    def of(cls, d: date) -> "Weekday":
        # isoweekday: Monday=1 .. Sunday=7
        return cls(d.isoweekday() % 7 + 1)

    @classmethod
    def parse(cls, value: "str | int | Weekday") -> "Weekday":
        """Accept a Weekday, its number (1-7) or a name such as "mon"/"Monday"."""
        if isinstance(value, Weekday):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ConfigurationError(f"weekday number out of range: {value}") from None
        if isinstance(value, str):
            key = value.strip()[:3].upper()
            if key in cls.__members__:
                return cls[key]
        raise ConfigurationError(f"unknown weekday: {value!r}")


class Axis(enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def extent_of(self, width: float, height: float) -> float:
        """Pick the size component along this axis."""
        return width if self is Axis.HORIZONTAL else height

    def offset_of(self, x: float, y: float) -> float:
        return x if self is Axis.HORIZONTAL else y


class SectionKind(enum.Enum):
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class SectionStyle:
    """Week pages, or month pages with fixed (6-row) or dynamic row count."""

    kind: SectionKind
    dynamic_rows: bool = False

    def __post_init__(self) -> None:
        if self.kind is SectionKind.WEEK and self.dynamic_rows:
            raise ValueError("dynamic_rows only applies to month sections")

    @classmethod
    def week(cls) -> "SectionStyle":
        return cls(SectionKind.WEEK)

    @classmethod
    def month(cls, dynamic_rows: bool = False) -> "SectionStyle":
        return cls(SectionKind.MONTH, dynamic_rows)

    @property
    def is_week(self) -> bool:
        return self.kind is SectionKind.WEEK

    @property
    def description(self) -> str:
        return "Week" if self.is_week else "Month"


@dataclass(frozen=True)
class CalendarRules:
    """Immutable calendar settings passed into every arithmetic call.

    ``first_weekday`` is the start of week; ``minimum_days_in_first_week``
    decides which week counts as week 1 of a year (1 = the week holding
    January 1st, 4 = ISO-style numbering when combined with Monday).
    """

    first_weekday: Weekday = Weekday.SUN
    minimum_days_in_first_week: int = 1

    def __post_init__(self) -> None:
        if not 1 <= self.minimum_days_in_first_week <= 7:
            raise ConfigurationError(
                f"minimum_days_in_first_week must be 1..7, got {self.minimum_days_in_first_week}"
            )
        object.__setattr__(self, "first_weekday", Weekday.parse(self.first_weekday))

    @property
    def last_weekday(self) -> Weekday:
        return self.first_weekday.previous


@dataclass(frozen=True)
class WeekdayModel:
    """One column header of the day grid."""

    weekday: Weekday
    label: str


def as_date(value: date) -> date:
    """Drop the time part of a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_days(d: date, days: int) -> date:
    try:
        return d + timedelta(days=days)
    except OverflowError:
        raise CalendarComputationError(
            f"adding {days} days to {d.isoformat()} leaves the supported date range"
        ) from None


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday_of(d: date) -> Weekday:
    return Weekday.of(d)


def days_from_week_start(d: date, rules: CalendarRules) -> int:
    """Return 0..6: how many days ``d`` lies after the start of its week."""
    return (Weekday.of(d) - rules.first_weekday) % 7


def week_start(d: date, rules: CalendarRules) -> date:
    """Return the first day of the week containing ``d``."""
    return add_days(d, -days_from_week_start(d, rules))


def first_week_start(year: int, rules: CalendarRules) -> date:
    """Return the first day of week 1 of ``year``."""
    try:
        jan1 = date(year, 1, 1)
    except ValueError:
        raise CalendarComputationError(f"year {year} is outside the supported range") from None
    start = week_start(jan1, rules)
    days_in_year = 7 - (jan1 - start).days
    if days_in_year >= rules.minimum_days_in_first_week:
        return start
    return add_days(start, 7)


def week_of_year(d: date, rules: CalendarRules) -> tuple[int, int]:
    """Return ``(week_year, week_number)`` for ``d``."""
    d = as_date(d)
    start = week_start(d, rules)
    year = d.year
    if year < date.max.year and start >= first_week_start(year + 1, rules):
        year += 1
    else:
        year_start = first_week_start(year, rules)
        if start < year_start:
            year -= 1
    return year, (start - first_week_start(year, rules)).days // 7 + 1


def weekday_models(first_weekday: Weekday) -> list[WeekdayModel]:
    """Return the seven column headers starting at ``first_weekday``."""
    day = Weekday.parse(first_weekday)
    models: list[WeekdayModel] = []
    for _ in range(7):
        models.append(WeekdayModel(day, day.label))
        day = day.next
    return models


@functools.total_ordering
@dataclass(frozen=True, eq=True)
class SectionIdentifier:
    """Names one page: a week-of-year or month-of-year within a year."""

    style: SectionStyle
    year: int
    section: int

    def __post_init__(self) -> None:
        upper = 53 if self.style.is_week else 12
        if not 1 <= self.section <= upper:
            raise ValueError(
                f"{self.style.description.lower()} section must be 1..{upper}, got {self.section}"
            )

    def _check_style(self, other: object) -> "SectionIdentifier":
        if not isinstance(other, SectionIdentifier):
            return NotImplemented
        if other.style != self.style:
            raise SectionStyleMismatch(
                f"cannot compare {self.style} identifier with {other.style} identifier"
            )
        return other

    def __lt__(self, other: object) -> bool:
        checked = self._check_style(other)
        if checked is NotImplemented:
            return NotImplemented
        return (self.year, self.section) < (checked.year, checked.section)

    def first_date(self, rules: CalendarRules) -> date:
        if self.style.is_week:
            return add_days(first_week_start(self.year, rules), 7 * (self.section - 1))
        try:
            return date(self.year, self.section, 1)
        except ValueError:
            raise CalendarComputationError(
                f"year {self.year} is outside the supported range"
            ) from None

    def advanced(self, by: int, rules: CalendarRules) -> "SectionIdentifier":
        """Move ``by`` weeks or months, normalizing across year boundaries."""
        if self.style.is_week:
            return section_id_for(add_days(self.first_date(rules), 7 * by), self.style, rules)
        year, month0 = divmod(self.year * 12 + (self.section - 1) + by, 12)
        if not date.min.year <= year <= date.max.year:
            raise CalendarComputationError(
                f"advancing {self} by {by} months leaves the supported date range"
            )
        return SectionIdentifier(self.style, year, month0 + 1)

    def previous(self, rules: CalendarRules) -> "SectionIdentifier":
        return self.advanced(-1, rules)

    def next(self, rules: CalendarRules) -> "SectionIdentifier":
        return self.advanced(1, rules)

    def normalized(self, rules: CalendarRules) -> "SectionIdentifier":
        """Canonical form; week 53 of a 52-week year is week 1 of the next."""
        if not self.style.is_week:
            return self
        return section_id_for(self.first_date(rules), self.style, rules)

    def title(self) -> str:
        if self.style.is_week:
            return f"Week {self.section}, {self.year}"
        return f"{calendar.month_name[self.section]} {self.year}"


def section_id_for(d: date, style: SectionStyle, rules: CalendarRules) -> SectionIdentifier:
    """Return the identifier of the week or month that contains ``d``."""
    d = as_date(d)
    if style.is_week:
        year, week = week_of_year(d, rules)
        return SectionIdentifier(style, year, week)
    return SectionIdentifier(style, d.year, d.month)


def first_date(identifier: SectionIdentifier, rules: CalendarRules) -> date:
    return identifier.first_date(rules)
