"""Section cache and the sliding window of materialized sections."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import date

from calendar_logic import (
    CalendarRules,
    ConfigurationError,
    SectionIdentifier,
    SectionStyle,
    as_date,
    section_id_for,
)
from sections import Section, build_section

logger = logging.getLogger(__name__)

DEFAULT_EDGE_DISTANCE = 6
DEFAULT_MAX_BOUNDED_SECTIONS = 1200


class Direction(enum.Enum):
    BACKWARD = "backward"
    FORWARD = "forward"


@dataclass(frozen=True)
class DateRange:
    """``DateRange()`` is infinite; ``DateRange(start, end)`` is bounded."""

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if (self.start is None) != (self.end is None):
            raise ConfigurationError("a bounded date range needs both start and end")
        if self.start is not None:
            object.__setattr__(self, "start", as_date(self.start))
            object.__setattr__(self, "end", as_date(self.end))

    @classmethod
    def infinite(cls) -> "DateRange":
        return cls()

    @classmethod
    def bounded(cls, start: date, end: date) -> "DateRange":
        return cls(start, end)

    @property
    def is_infinite(self) -> bool:
        return self.start is None


class SectionWindow:
    """Owns the section cache and the contiguous run of displayed sections.

    Infinite ranges keep ``edge_distance`` sections on each side of the focal
    section and grow on demand. Bounded ranges always hold the full run from
    the start section to the end section; ``max_bounded_sections`` refuses
    runs longer than that (pass ``None`` to accept any length).
    """

    def __init__(
        self,
        style: SectionStyle,
        rules: CalendarRules,
        date_range: DateRange | None = None,
        edge_distance: int = DEFAULT_EDGE_DISTANCE,
        max_bounded_sections: int | None = DEFAULT_MAX_BOUNDED_SECTIONS,
        initial_date: date | None = None,
    ) -> None:
        if edge_distance < 0:
            raise ConfigurationError(f"edge_distance must be >= 0, got {edge_distance}")
        self.style = style
        self.rules = rules
        self.date_range = date_range or DateRange.infinite()
        self.edge_distance = edge_distance
        self.max_bounded_sections = max_bounded_sections

        self._cache: dict[SectionIdentifier, Section] = {}
        self._sections: list[Section] = []

        self._bounds: tuple[SectionIdentifier, SectionIdentifier] | None = None
        if not self.date_range.is_infinite:
            start_id = section_id_for(self.date_range.start, style, rules)
            end_id = section_id_for(self.date_range.end, style, rules)
            if start_id > end_id:
                raise ConfigurationError(
                    f"range start {self.date_range.start} falls after range end "
                    f"{self.date_range.end}; check the calendar configuration"
                )
            self._bounds = (start_id, end_id)

        base = initial_date if initial_date is not None else date.today()
        self.generate(self.clamp(section_id_for(base, style, rules)))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def sections(self) -> list[Section]:
        return list(self._sections)

    @property
    def first(self) -> Section:
        return self._sections[0]

    @property
    def last(self) -> Section:
        return self._sections[-1]

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def __len__(self) -> int:
        return len(self._sections)

    def __getitem__(self, index: int) -> Section:
        return self._sections[index]

    def contains(self, identifier: SectionIdentifier) -> bool:
        identifier = identifier.normalized(self.rules)
        return self.first.id <= identifier <= self.last.id

    def index_of(self, identifier: SectionIdentifier) -> int | None:
        identifier = identifier.normalized(self.rules)
        if not self.contains(identifier):
            return None
        for i, section in enumerate(self._sections):
            if section.id == identifier:
                return i
        return None

    def clamp(self, identifier: SectionIdentifier) -> SectionIdentifier:
        """Pull ``identifier`` inside a bounded range; infinite ranges pass through."""
        identifier = identifier.normalized(self.rules)
        if self._bounds is None:
            return identifier
        start_id, end_id = self._bounds
        if identifier < start_id:
            return start_id
        if identifier > end_id:
            return end_id
        return identifier

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def section(self, identifier: SectionIdentifier) -> Section:
        """Fetch ``identifier`` from the cache, building it on first use."""
        identifier = identifier.normalized(self.rules)
        cached = self._cache.get(identifier)
        if cached is None:
            cached = build_section(identifier, self.rules)
            self._cache[identifier] = cached
        return cached

    def generate(self, base_id: SectionIdentifier) -> None:
        """Replace the window around ``base_id``; the cache is kept."""
        base_id = base_id.normalized(self.rules)
        if self._bounds is None:
            start_id = base_id.advanced(-self.edge_distance, self.rules)
            end_id = base_id.advanced(self.edge_distance, self.rules)
        else:
            start_id, end_id = self._bounds
        self._generate_run(start_id, end_id)

    def _generate_run(self, start_id: SectionIdentifier, end_id: SectionIdentifier) -> None:
        if start_id > end_id:
            raise ConfigurationError(
                f"starting section {start_id} must not be after ending section {end_id}"
            )
        run: list[Section] = []
        current = start_id
        while current <= end_id:
            run.append(self.section(current))
            if (
                self._bounds is not None
                and self.max_bounded_sections is not None
                and len(run) > self.max_bounded_sections
            ):
                raise ConfigurationError(
                    f"bounded range spans more than {self.max_bounded_sections} sections; "
                    "narrow the range or raise max_bounded_sections"
                )
            current = current.next(self.rules)
        self._sections = run
        logger.debug("generated window %s .. %s (%d sections)", start_id, end_id, len(run))

    def expand(self, direction: Direction) -> Section | None:
        """Add one section at an edge; returns None at a bounded edge."""
        if direction is Direction.BACKWARD:
            edge_id = self.first.id
            if self._bounds is not None and edge_id <= self._bounds[0]:
                return None
            new_id = edge_id.previous(self.rules)
        else:
            edge_id = self.last.id
            if self._bounds is not None and edge_id >= self._bounds[1]:
                return None
            new_id = edge_id.next(self.rules)

        section = self.section(new_id)
        if direction is Direction.BACKWARD:
            self._sections.insert(0, section)
        else:
            self._sections.append(section)
        logger.debug("expanded window %s with %s", direction.value, new_id)
        return section

    def jump_to(self, d: date) -> bool:
        """Make sure the section holding ``d`` is in the window.

        Returns True when the window had to be regenerated.
        """
        target = self.clamp(section_id_for(d, self.style, self.rules))
        if self.contains(target):
            return False
        logger.info("regenerating window around %s", target)
        self.generate(target)
        return True
