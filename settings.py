"""Calendar configuration and its JSON settings file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import date

from calendar_logic import (
    Axis,
    CalendarRules,
    ConfigurationError,
    SectionStyle,
    Weekday,
)
from section_window import DEFAULT_EDGE_DISTANCE, DEFAULT_MAX_BOUNDED_SECTIONS, DateRange

_SETTINGS_ENV = "MINI_CALENDAR_PAGER_SETTINGS"
_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-calendar-pager.json")

_DEFAULTS = {
    "style": "month",
    "dynamic_rows": False,
    "axis": "horizontal",
    "start_of_week": "sun",
    "minimum_days_in_first_week": 1,
    "range_start": None,
    "range_end": None,
    "row_spacing": 0.0,
    "column_spacing": 0.0,
    "section_padding": 0.0,
    "edge_distance": DEFAULT_EDGE_DISTANCE,
    "expansion_margin": 2,
    "max_bounded_sections": DEFAULT_MAX_BOUNDED_SECTIONS,
}


@dataclass(frozen=True)
class CalendarConfiguration:
    """Read-only settings of one calendar component.

    Spacing values only matter to the host's layout; the windowing engine
    reads the range, style, start of week and the window tuning knobs.
    """

    date_range: DateRange = field(default_factory=DateRange.infinite)
    scroll_axis: Axis = Axis.HORIZONTAL
    section_style: SectionStyle = field(default_factory=SectionStyle.month)
    start_of_week: Weekday = Weekday.SUN
    minimum_days_in_first_week: int = 1
    row_spacing: float = 0.0
    column_spacing: float = 0.0
    section_padding: float = 0.0
    edge_distance: int = DEFAULT_EDGE_DISTANCE
    expansion_margin: int = 2
    max_bounded_sections: int | None = DEFAULT_MAX_BOUNDED_SECTIONS

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_of_week", Weekday.parse(self.start_of_week))
        CalendarRules(self.start_of_week, self.minimum_days_in_first_week)
        if self.edge_distance < 0:
            raise ConfigurationError(f"edge_distance must be >= 0, got {self.edge_distance}")
        if self.expansion_margin < 0:
            raise ConfigurationError(
                f"expansion_margin must be >= 0, got {self.expansion_margin}"
            )
        if self.max_bounded_sections is not None and self.max_bounded_sections < 1:
            raise ConfigurationError(
                f"max_bounded_sections must be positive, got {self.max_bounded_sections}"
            )

    @property
    def rules(self) -> CalendarRules:
        return CalendarRules(self.start_of_week, self.minimum_days_in_first_week)


def settings_path() -> str:
    return os.environ.get(_SETTINGS_ENV) or _SETTINGS_PATH


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_iso_date(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing or malformed keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(path or settings_path(), "r", encoding="utf-8") as f:
            stored = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return settings
    if not isinstance(stored, dict):
        return settings

    if stored.get("style") in ("week", "month"):
        settings["style"] = stored["style"]
    if stored.get("axis") in ("horizontal", "vertical"):
        settings["axis"] = stored["axis"]
    if isinstance(stored.get("dynamic_rows"), bool):
        settings["dynamic_rows"] = stored["dynamic_rows"]
    if isinstance(stored.get("start_of_week"), (str, int)) and not isinstance(stored.get("start_of_week"), bool):
        settings["start_of_week"] = stored["start_of_week"]
    for key in ("minimum_days_in_first_week", "edge_distance", "expansion_margin"):
        if _is_int(stored.get(key)):
            settings[key] = stored[key]
    if "max_bounded_sections" in stored and (
        stored["max_bounded_sections"] is None or _is_int(stored["max_bounded_sections"])
    ):
        settings["max_bounded_sections"] = stored["max_bounded_sections"]
    for key in ("row_spacing", "column_spacing", "section_padding"):
        if _is_number(stored.get(key)):
            settings[key] = float(stored[key])
    for key in ("range_start", "range_end"):
        if _is_iso_date(stored.get(key)):
            settings[key] = stored[key]
    return settings


def configuration_from_settings(settings: dict) -> CalendarConfiguration:
    """Build a configuration from a settings dict; invalid values raise ConfigurationError."""
    merged = dict(_DEFAULTS)
    merged.update(settings)

    start, end = merged["range_start"], merged["range_end"]
    if (start is None) != (end is None):
        raise ConfigurationError("range_start and range_end must be given together")
    if start is None:
        date_range = DateRange.infinite()
    else:
        try:
            date_range = DateRange.bounded(date.fromisoformat(start), date.fromisoformat(end))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid date range: {e}") from e

    if merged["style"] == "week":
        style = SectionStyle.week()
    elif merged["style"] == "month":
        style = SectionStyle.month(bool(merged["dynamic_rows"]))
    else:
        raise ConfigurationError(f"unknown section style: {merged['style']!r}")

    try:
        axis = Axis(merged["axis"])
    except ValueError:
        raise ConfigurationError(f"unknown scroll axis: {merged['axis']!r}") from None

    return CalendarConfiguration(
        date_range=date_range,
        scroll_axis=axis,
        section_style=style,
        start_of_week=Weekday.parse(merged["start_of_week"]),
        minimum_days_in_first_week=merged["minimum_days_in_first_week"],
        row_spacing=merged["row_spacing"],
        column_spacing=merged["column_spacing"],
        section_padding=merged["section_padding"],
        edge_distance=merged["edge_distance"],
        expansion_margin=merged["expansion_margin"],
        max_bounded_sections=merged["max_bounded_sections"],
    )
