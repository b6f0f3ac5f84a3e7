"""Viewport geometry to section identity, and the scroll notifications.

The host reports one page extent, a linear offset along the scroll axis and
gesture phases; the translator keeps the section window in step and calls
back with the days of the section that is about to show or has settled.
All calls are expected on the host's event loop.
"""

from __future__ import annotations

import enum
import logging
import math
from datetime import date
from typing import Callable, Sequence

from calendar_logic import (
    Weekday,
    WeekdayModel,
    as_date,
    section_id_for,
    weekday_models,
)
from section_window import Direction, SectionWindow
from sections import Day, Section
from settings import CalendarConfiguration

logger = logging.getLogger(__name__)

# Offsets reported by hosts drift by float noise around page boundaries
_EPSILON = 1e-6

DaysCallback = Callable[[Sequence[Day]], None]


class GesturePhase(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DECELERATING = "decelerating"
    PROGRAMMATIC = "programmatic"


class ScrollTranslator:
    """Paging calendar engine driven by viewport events."""

    def __init__(
        self,
        configuration: CalendarConfiguration,
        on_window_changed: Callable[[list[Section]], None] | None = None,
        on_will_scroll: DaysCallback | None = None,
        on_did_scroll: DaysCallback | None = None,
        set_offset: Callable[[float, bool], None] | None = None,
        on_selection_changed: Callable[[date | None], None] | None = None,
        initial_date: date | None = None,
        today: date | None = None,
    ) -> None:
        self.configuration = configuration
        self.on_window_changed = on_window_changed
        self.on_will_scroll = on_will_scroll
        self.on_did_scroll = on_did_scroll
        self.set_offset = set_offset
        self.on_selection_changed = on_selection_changed

        self._today = as_date(today) if today is not None else None
        base = as_date(initial_date) if initial_date is not None else self.today
        self.window = SectionWindow(
            configuration.section_style,
            configuration.rules,
            configuration.date_range,
            edge_distance=configuration.edge_distance,
            max_bounded_sections=configuration.max_bounded_sections,
            initial_date=base,
        )

        self.extent: float | None = None
        self.offset: float = 0.0
        self.phase = GesturePhase.IDLE
        self.selected_date: date | None = None

        focal = self.window.clamp(
            section_id_for(base, configuration.section_style, configuration.rules)
        )
        self._current = self.window.section(focal)
        self._last_will_id = focal
        self._queued: tuple[date, bool] | None = None
        self._pending: Section | None = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def today(self) -> date:
        return self._today if self._today is not None else date.today()

    @property
    def sections(self) -> list[Section]:
        return self.window.sections

    @property
    def current_section(self) -> Section:
        return self._current

    @property
    def target_section(self) -> Section:
        """The section a programmatic scroll is heading to, else the current one."""
        if self._pending is not None and self.phase is GesturePhase.PROGRAMMATIC:
            return self._pending
        return self._current

    @property
    def weekday_headers(self) -> list[WeekdayModel]:
        return weekday_models(self.configuration.start_of_week)

    def is_today(self, day: Day) -> bool:
        return day.date == self.today

    def is_selected(self, day: Day) -> bool:
        return self.selected_date is not None and day.date == self.selected_date

    def is_current_weekday(self, weekday: Weekday) -> bool:
        return Weekday.of(self.today) == weekday

    def index_for_offset(self, offset: float) -> int:
        """Map a scroll offset to a window index, clamped to the window."""
        if not self.extent:
            return 0
        index = math.floor(offset / self.extent + _EPSILON)
        return max(0, min(index, len(self.window) - 1))

    def offset_for_index(self, index: int) -> float:
        return index * (self.extent or 0.0)

    # ------------------------------------------------------------------
    # Inbound: host viewport events
    # ------------------------------------------------------------------
    def report_viewport_extent(self, size: float) -> None:
        if size <= 0:
            logger.debug("ignoring non-positive viewport extent %r", size)
            return
        first_measurement = self.extent is None
        if not first_measurement and size != self.extent:
            # Keep the same page in view after a resize
            index = self.index_for_offset(self.offset)
            self.extent = float(size)
            self.offset = self.offset_for_index(index)
            self._send_offset(self.offset, False)
            return
        self.extent = float(size)
        if not first_measurement:
            return

        if self._queued is not None:
            queued_date, animated = self._queued
            self._queued = None
            logger.debug("replaying queued scroll to %s", queued_date)
            self.scroll_to(queued_date, animated)
            return
        index = self.window.index_of(self._current.id)
        self.offset = self.offset_for_index(index or 0)
        self._send_offset(self.offset, False)

    def report_offset(self, offset: float) -> None:
        self.offset = float(offset)
        if self.extent is None:
            return
        if self.phase not in (GesturePhase.DRAGGING, GesturePhase.DECELERATING):
            return
        index = self.index_for_offset(self.offset)
        self._announce(self.window[index])
        self._expand_near_edge(index)

    def report_gesture_phase(self, phase: GesturePhase, target_offset: float | None = None) -> None:
        """Feed a gesture transition; ``target_offset`` is the projected rest offset."""
        phase = GesturePhase(phase)
        if phase is GesturePhase.PROGRAMMATIC:
            raise ValueError("the programmatic phase is entered through scroll_to()")
        previous, self.phase = self.phase, phase
        if self.extent is None:
            return

        if phase is GesturePhase.DECELERATING and target_offset is not None:
            self._announce(self.window[self.index_for_offset(target_offset)])
        elif phase is GesturePhase.IDLE and previous is not GesturePhase.IDLE:
            self._settle()

    def scroll_to(self, d: date, animated: bool = True) -> None:
        """Bring the section holding ``d`` into view."""
        d = as_date(d)
        if self.extent is None:
            # Superseded by any later request
            self._queued = (d, animated)
            logger.debug("viewport not measured yet; queued scroll to %s", d)
            return

        target_id = self.window.clamp(
            section_id_for(d, self.configuration.section_style, self.configuration.rules)
        )
        regenerated = self.window.jump_to(d)
        if regenerated:
            self._notify_window()
            animated = False
        index = self.window.index_of(target_id)
        target = self.window[index]

        self.phase = GesturePhase.PROGRAMMATIC
        self._pending = target
        self._announce(target, force=True)
        self.offset = self.offset_for_index(index)
        self._send_offset(self.offset, animated)
        if not animated:
            self.phase = GesturePhase.IDLE
            self._settle()

    def select_date(self, d: date | None) -> None:
        d = as_date(d) if d is not None else None
        if d == self.selected_date:
            return
        self.selected_date = d
        if self.on_selection_changed is not None:
            self.on_selection_changed(d)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _announce(self, section: Section, force: bool = False) -> None:
        if not force and section.id == self._last_will_id:
            return
        self._last_will_id = section.id
        if self.on_will_scroll is not None:
            self.on_will_scroll(section.days)

    def _settle(self) -> None:
        index = self.index_for_offset(self.offset)
        section = self.window[index]
        self._current = section
        self._pending = None
        self._last_will_id = section.id
        if self.on_did_scroll is not None:
            self.on_did_scroll(section.days)
        self._expand_near_edge(index)

    def _expand_near_edge(self, index: int) -> None:
        margin = self.configuration.expansion_margin
        if index <= margin:
            if self.window.expand(Direction.BACKWARD) is not None:
                self.offset += self.extent
                self._send_offset(self.offset, False)
                self._notify_window()
        elif index >= len(self.window) - 1 - margin:
            if self.window.expand(Direction.FORWARD) is not None:
                self._notify_window()

    def _notify_window(self) -> None:
        if self.on_window_changed is not None:
            self.on_window_changed(self.window.sections)

    def _send_offset(self, offset: float, animated: bool) -> None:
        if self.set_offset is not None:
            self.set_offset(offset, animated)
