"""Settings file loading and configuration conversion."""

import json
import os
import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import patch

from calendar_logic import Axis, ConfigurationError, SectionStyle, Weekday
from settings import (
    CalendarConfiguration,
    configuration_from_settings,
    load_settings,
)


class LoadSettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "settings.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, payload) -> str:
        self.path.write_text(json.dumps(payload), encoding="utf-8")
        return str(self.path)

    def test_missing_file_gives_defaults(self) -> None:
        settings = load_settings(str(self.path))
        self.assertEqual(settings["style"], "month")
        self.assertEqual(settings["edge_distance"], 6)
        self.assertIsNone(settings["range_start"])

    def test_malformed_file_gives_defaults(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(load_settings(str(self.path))["axis"], "horizontal")
        self._write([1, 2, 3])
        self.assertEqual(load_settings(str(self.path))["axis"], "horizontal")

    def test_wrongly_typed_values_are_dropped(self) -> None:
        settings = load_settings(self._write({
            "style": "decade",
            "dynamic_rows": "yes",
            "edge_distance": 3,
            "expansion_margin": True,
            "range_start": "2024-01-01",
            "range_end": "nope",
            "row_spacing": 4,
            "max_bounded_sections": None,
        }))
        self.assertEqual(settings["style"], "month")
        self.assertFalse(settings["dynamic_rows"])
        self.assertEqual(settings["edge_distance"], 3)
        self.assertEqual(settings["expansion_margin"], 2)
        self.assertEqual(settings["range_start"], "2024-01-01")
        self.assertIsNone(settings["range_end"])
        self.assertEqual(settings["row_spacing"], 4.0)
        self.assertIsNone(settings["max_bounded_sections"])

    def test_environment_variable_selects_file(self) -> None:
        path = self._write({"style": "week"})
        with patch.dict(os.environ, {"MINI_CALENDAR_PAGER_SETTINGS": path}):
            self.assertEqual(load_settings()["style"], "week")


class ConfigurationTests(unittest.TestCase):
    def test_defaults(self) -> None:
        configuration = configuration_from_settings({})
        self.assertTrue(configuration.date_range.is_infinite)
        self.assertEqual(configuration.section_style, SectionStyle.month())
        self.assertEqual(configuration.scroll_axis, Axis.HORIZONTAL)
        self.assertEqual(configuration.start_of_week, Weekday.SUN)

    def test_week_vertical_monday(self) -> None:
        configuration = configuration_from_settings(
            {"style": "week", "axis": "vertical", "start_of_week": "mon"}
        )
        self.assertTrue(configuration.section_style.is_week)
        self.assertEqual(configuration.scroll_axis, Axis.VERTICAL)
        self.assertEqual(configuration.rules.first_weekday, Weekday.MON)

    def test_bounded_range(self) -> None:
        configuration = configuration_from_settings(
            {"style": "month", "dynamic_rows": True,
             "range_start": "2024-01-01", "range_end": "2024-12-31"}
        )
        self.assertEqual(configuration.date_range.start, date(2024, 1, 1))
        self.assertEqual(configuration.date_range.end, date(2024, 12, 31))
        self.assertTrue(configuration.section_style.dynamic_rows)

    def test_invalid_values_raise(self) -> None:
        for bad in (
            {"range_start": "2024-01-01"},
            {"style": "decade"},
            {"axis": "diagonal"},
            {"start_of_week": "someday"},
            {"minimum_days_in_first_week": 9},
            {"expansion_margin": -1},
            {"edge_distance": -2},
            {"max_bounded_sections": 0},
        ):
            with self.subTest(bad=bad), self.assertRaises(ConfigurationError):
                configuration_from_settings(bad)

    def test_configuration_accepts_weekday_names(self) -> None:
        self.assertEqual(CalendarConfiguration(start_of_week="sat").start_of_week, Weekday.SAT)


if __name__ == "__main__":
    unittest.main()
