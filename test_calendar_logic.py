"""Calendar arithmetic: identifiers, week numbering, normalization."""

import unittest
from datetime import date, timedelta

from calendar_logic import (
    CalendarComputationError,
    CalendarRules,
    ConfigurationError,
    SectionIdentifier,
    SectionStyle,
    SectionStyleMismatch,
    Weekday,
    first_date,
    section_id_for,
    week_of_year,
    week_start,
    weekday_of,
    weekday_models,
)

WEEK = SectionStyle.week()
MONTH = SectionStyle.month()
SUNDAY = CalendarRules(Weekday.SUN)
MONDAY = CalendarRules(Weekday.MON)
ISO = CalendarRules(Weekday.MON, minimum_days_in_first_week=4)


def _days(start: date, end: date):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


class WeekdayTests(unittest.TestCase):
    def test_of_date(self) -> None:
        self.assertEqual(Weekday.of(date(2024, 2, 1)), Weekday.THU)
        self.assertEqual(Weekday.of(date(2024, 3, 3)), Weekday.SUN)

    def test_wraps_around(self) -> None:
        self.assertEqual(Weekday.SUN.previous, Weekday.SAT)
        self.assertEqual(Weekday.SAT.next, Weekday.SUN)
        self.assertEqual(Weekday.MON.previous, Weekday.SUN)

    def test_parse(self) -> None:
        self.assertEqual(Weekday.parse("Monday"), Weekday.MON)
        self.assertEqual(Weekday.parse("sat"), Weekday.SAT)
        self.assertEqual(Weekday.parse(1), Weekday.SUN)
        with self.assertRaises(ConfigurationError):
            Weekday.parse("someday")
        with self.assertRaises(ConfigurationError):
            Weekday.parse(8)

    def test_weekday_models_start_at_first_weekday(self) -> None:
        labels = [m.label for m in weekday_models(Weekday.MON)]
        self.assertEqual(labels, ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"])
        self.assertEqual(weekday_models(Weekday.SUN)[0].weekday, Weekday.SUN)


class WeekNumberingTests(unittest.TestCase):
    def test_iso_rules_match_isocalendar(self) -> None:
        for d in _days(date(2015, 1, 1), date(2030, 12, 31)):
            iso = d.isocalendar()
            self.assertEqual(week_of_year(d, ISO), (iso[0], iso[1]), d)

    def test_new_years_eve_belongs_to_next_year(self) -> None:
        # Sunday 31 Dec 2023 starts the week holding 1 Jan 2024
        self.assertEqual(week_of_year(date(2023, 12, 31), SUNDAY), (2024, 1))
        self.assertEqual(
            section_id_for(date(2023, 12, 31), WEEK, SUNDAY),
            SectionIdentifier(WEEK, 2024, 1),
        )

    def test_week_start_uses_first_weekday(self) -> None:
        d = date(2024, 3, 15)  # Friday
        self.assertEqual(week_start(d, SUNDAY), date(2024, 3, 10))
        self.assertEqual(week_start(d, MONDAY), date(2024, 3, 11))

    def test_first_date_of_week_is_start_of_week(self) -> None:
        for rules in (SUNDAY, MONDAY, ISO, CalendarRules(Weekday.WED, 3)):
            for d in _days(date(2023, 12, 1), date(2025, 1, 31)):
                first = section_id_for(d, WEEK, rules).first_date(rules)
                self.assertEqual(Weekday.of(first), rules.first_weekday)
                self.assertTrue(first <= d < first + timedelta(days=7))

    def test_invalid_minimum_days(self) -> None:
        with self.assertRaises(ConfigurationError):
            CalendarRules(Weekday.SUN, minimum_days_in_first_week=0)


class SectionIdentifierTests(unittest.TestCase):
    def test_ordering_follows_dates(self) -> None:
        for style in (WEEK, MONTH):
            for rules in (SUNDAY, ISO):
                prev = None
                for d in _days(date(2022, 11, 1), date(2025, 2, 28)):
                    current = section_id_for(d, style, rules)
                    if prev is not None:
                        prev_date, prev_id = prev
                        self.assertLessEqual(prev_id, current)
                        if style.is_week:
                            same = week_start(prev_date, rules) == week_start(d, rules)
                        else:
                            same = (prev_date.year, prev_date.month) == (d.year, d.month)
                        self.assertEqual(prev_id == current, same, d)
                    prev = (d, current)

    def test_advance_round_trip(self) -> None:
        for style in (WEEK, MONTH):
            for d in (date(2024, 1, 1), date(2023, 12, 31), date(2026, 6, 15)):
                sid = section_id_for(d, style, SUNDAY)
                for n in range(-70, 71, 7):
                    self.assertEqual(sid.advanced(n, SUNDAY).advanced(-n, SUNDAY), sid)

    def test_month_normalization(self) -> None:
        dec = SectionIdentifier(MONTH, 2024, 12)
        self.assertEqual(dec.next(SUNDAY), SectionIdentifier(MONTH, 2025, 1))
        jan = SectionIdentifier(MONTH, 2024, 1)
        self.assertEqual(jan.previous(SUNDAY), SectionIdentifier(MONTH, 2023, 12))
        self.assertEqual(jan.advanced(-13, SUNDAY), SectionIdentifier(MONTH, 2022, 12))

    def test_week_advance_crosses_year(self) -> None:
        last = section_id_for(date(2024, 12, 25), WEEK, SUNDAY)
        self.assertEqual(last.next(SUNDAY), SectionIdentifier(WEEK, 2025, 1))

    def test_comparing_styles_raises(self) -> None:
        with self.assertRaises(SectionStyleMismatch):
            _ = SectionIdentifier(WEEK, 2024, 1) < SectionIdentifier(MONTH, 2024, 1)
        with self.assertRaises(SectionStyleMismatch):
            _ = SectionIdentifier(MONTH, 2024, 1) <= SectionIdentifier(
                SectionStyle.month(dynamic_rows=True), 2024, 2
            )

    def test_invalid_section_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SectionIdentifier(MONTH, 2024, 0)
        with self.assertRaises(ValueError):
            SectionIdentifier(MONTH, 2024, 13)
        with self.assertRaises(ValueError):
            SectionIdentifier(WEEK, 2024, 54)

    def test_week_53_of_short_year_normalizes_to_next_year(self) -> None:
        overflow = SectionIdentifier(WEEK, 2023, 53)
        self.assertEqual(overflow.normalized(SUNDAY), SectionIdentifier(WEEK, 2024, 1))
        real = section_id_for(date(2020, 12, 31), WEEK, ISO)
        self.assertEqual(real, SectionIdentifier(WEEK, 2020, 53))
        self.assertEqual(real.normalized(ISO), real)
        month = SectionIdentifier(MONTH, 2024, 3)
        self.assertIs(month.normalized(SUNDAY), month)

    def test_leaving_date_range_raises(self) -> None:
        with self.assertRaises(CalendarComputationError):
            SectionIdentifier(MONTH, 9999, 12).next(SUNDAY)

    def test_first_date_of_month(self) -> None:
        first = first_date(SectionIdentifier(MONTH, 2024, 2), SUNDAY)
        self.assertEqual(first, date(2024, 2, 1))
        self.assertEqual(weekday_of(first), Weekday.THU)

    def test_titles(self) -> None:
        self.assertEqual(SectionIdentifier(MONTH, 2024, 3).title(), "March 2024")
        self.assertEqual(SectionIdentifier(WEEK, 2024, 12).title(), "Week 12, 2024")

    def test_datetime_is_truncated(self) -> None:
        from datetime import datetime

        self.assertEqual(
            section_id_for(datetime(2024, 3, 31, 23, 59), MONTH, SUNDAY),
            SectionIdentifier(MONTH, 2024, 3),
        )


if __name__ == "__main__":
    unittest.main()
