"""Paging calendar window (tkinter) that hosts the scroll translator."""

import logging
import math
from datetime import date
from tkinter import font as tkfont
import tkinter as tk

from PIL import ImageTk

from calendar_logic import Axis, Weekday
from icon_gen import create_icon_image
from scroll_translator import GesturePhase, ScrollTranslator
from sections import Day, Section
from settings import CalendarConfiguration

logger = logging.getLogger(__name__)

# Colours
ACCENT = "#0078D4"
SEL_BG = "#B3D7F2"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
OUT_FG = "#AAAAAA"
WEEKEND_FG = "#CC0000"

CELL_W = 44
CELL_H = 36
# Share of a page the pointer must travel before release pages onward
PAGE_FLIP_RATIO = 0.2
DRAG_THRESHOLD = 4
ANIMATION_STEP_MS = 15


class CalendarWindow:
    """A single-page viewport over the engine's section window."""

    def __init__(self, configuration: CalendarConfiguration,
                 initial_date: date | None = None) -> None:
        self.configuration = configuration
        self.axis = configuration.scroll_axis

        self.root = tk.Tk()
        self.root.title("Mini Calendar")
        self.root.configure(bg=GRID_BG)
        self._setup_fonts()
        self._icon = ImageTk.PhotoImage(create_icon_image(), master=self.root)
        self.root.iconphoto(True, self._icon)

        # Viewport state mirrored from the engine
        self._offset = 0.0
        self._extent = 0.0
        self._press_pos: float | None = None
        self._drag_anchor = 0.0
        self._dragging = False
        self._anim_target: float | None = None
        self._anim_after_id: str | None = None
        self._preview_title: str | None = None

        self.engine = ScrollTranslator(
            configuration,
            on_window_changed=self._on_window_changed,
            on_will_scroll=self._on_will_scroll,
            on_did_scroll=self._on_did_scroll,
            set_offset=self._set_offset,
            on_selection_changed=self._on_selection_changed,
            initial_date=initial_date,
        )

        self._build_shell()
        self.root.bind("<Escape>", self._on_escape)

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self.font_footer = tkfont.Font(family=base, size=9)

    # ------------------------------------------------------------------
    # Build shell (once): nav bar + weekday headers + viewport + footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        self._outer = tk.Frame(self.root, bg=GRID_BG)
        self._outer.pack(padx=6, pady=4, fill="both", expand=True)

        # Navigation row: ◀  Today  ▶
        nav = tk.Frame(self._outer, bg=GRID_BG)
        nav.pack(fill="x", pady=(0, 2))

        btn_prev = tk.Label(
            nav, text="◀", font=self.font_nav, bg=GRID_BG, cursor="hand2"
        )
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._navigate(-1))

        btn_next = tk.Label(
            nav, text="▶", font=self.font_nav, bg=GRID_BG, cursor="hand2"
        )
        btn_next.pack(side="right", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._navigate(1))

        self._title_label = tk.Label(
            nav, text=self._title_for(self.engine.current_section.days), font=self.font_header,
            bg=HEADER_BG, fg="#333333",
        )
        self._title_label.pack(side="left", expand=True, fill="x", padx=6)

        btn_today = tk.Label(
            nav, text="Today", font=self.font_bold, bg=GRID_BG, fg=ACCENT,
            cursor="hand2",
        )
        btn_today.pack(side="right", padx=6)
        btn_today.bind("<Button-1>", lambda _e: self._go_today())

        headers = tk.Frame(self._outer, bg=GRID_BG)
        headers.pack(fill="x")
        for col, model in enumerate(self.engine.weekday_headers):
            if self.engine.is_current_weekday(model.weekday):
                fg = ACCENT
            elif model.weekday in (Weekday.SAT, Weekday.SUN):
                fg = WEEKEND_FG
            else:
                fg = "#333333"
            tk.Label(
                headers, text=model.label, font=self.font_bold, bg=GRID_BG, fg=fg,
            ).grid(row=0, column=col, sticky="we")
            headers.grid_columnconfigure(col, weight=1, uniform="day")

        rows = 1 if self.configuration.section_style.is_week else 6
        pad = int(self.configuration.section_padding)
        self.canvas = tk.Canvas(
            self._outer, width=7 * CELL_W + 2 * pad, height=rows * CELL_H + 2 * pad,
            bg=GRID_BG, highlightthickness=0, borderwidth=0,
        )
        self.canvas.pack(fill="both", expand=True)
        self.canvas.bind("<Configure>", self._on_configure)
        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_motion)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<MouseWheel>", self._on_wheel)
        self.canvas.bind("<Button-4>", lambda _e: self._navigate(-1))
        self.canvas.bind("<Button-5>", lambda _e: self._navigate(1))

        self._footer_label = tk.Label(
            self._outer, text=self._footer_text(), font=self.font_footer,
            bg=GRID_BG, fg="#555555",
        )
        self._footer_label.pack(pady=(4, 0))

    # ------------------------------------------------------------------
    # Engine callbacks
    # ------------------------------------------------------------------
    def _on_window_changed(self, _sections: list[Section]) -> None:
        self._redraw()

    def _on_will_scroll(self, days) -> None:
        self._preview_title = self._title_for(days)
        self._refresh_labels()

    def _on_did_scroll(self, days) -> None:
        self._preview_title = None
        logger.debug("settled on %s", self._title_for(days))
        self._refresh_labels()

    def _on_selection_changed(self, _selected: date | None) -> None:
        self._redraw()
        self._refresh_labels()

    def _set_offset(self, offset: float, animated: bool) -> None:
        if animated:
            self._animate_to(offset)
            return
        delta = offset - self._offset
        self._offset = offset
        # Window prepends shift content; keep gestures in progress aligned
        if self._dragging:
            self._drag_anchor += delta
        if self._anim_target is not None:
            self._anim_target += delta
        self._redraw()

    # ------------------------------------------------------------------
    # Viewport geometry
    # ------------------------------------------------------------------
    def _on_configure(self, event: tk.Event) -> None:
        extent = self.axis.extent_of(event.width, event.height)
        if extent <= 1:
            return
        self._extent = float(extent)
        self.engine.report_viewport_extent(extent)
        self._redraw()

    def _cross_extent(self) -> float:
        width = self.canvas.winfo_width()
        height = self.canvas.winfo_height()
        # Not mapped yet: fall back to the requested size
        if width <= 1:
            width = int(float(self.canvas["width"]))
        if height <= 1:
            height = int(float(self.canvas["height"]))
        return self.axis.extent_of(height, width)

    def _max_offset(self) -> float:
        return max(0.0, (len(self.engine.window) - 1) * self._extent)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def _redraw(self) -> None:
        self.canvas.delete("all")
        if self._extent <= 0:
            return
        sections = self.engine.sections
        first = int(math.floor(self._offset / self._extent))
        for index in (first, first + 1):
            if 0 <= index < len(sections):
                origin = index * self._extent - self._offset
                self._draw_section(sections[index], origin)

    def _page_geometry(self, section: Section) -> tuple[float, float, float]:
        """Return (padding, cell width, cell height) for a page."""
        pad = self.configuration.section_padding
        if self.axis is Axis.HORIZONTAL:
            width, height = self._extent, self._cross_extent()
        else:
            width, height = self._cross_extent(), self._extent
        cell_w = (width - 2 * pad) / 7
        cell_h = (height - 2 * pad) / max(1, section.rows)
        return pad, cell_w, cell_h

    def _draw_section(self, section: Section, origin: float) -> None:
        pad, cell_w, cell_h = self._page_geometry(section)
        col_gap = self.configuration.column_spacing / 2
        row_gap = self.configuration.row_spacing / 2
        ox, oy = (origin, 0.0) if self.axis is Axis.HORIZONTAL else (0.0, origin)
        for i, day in enumerate(section.days):
            row, col = divmod(i, 7)
            x1 = ox + pad + col * cell_w + col_gap
            y1 = oy + pad + row * cell_h + row_gap
            x2 = ox + pad + (col + 1) * cell_w - col_gap
            y2 = oy + pad + (row + 1) * cell_h - row_gap
            bg, fg = self._day_colors(day)
            self.canvas.create_rectangle(x1, y1, x2, y2, fill=bg, outline="")
            font = self.font_bold if self.engine.is_today(day) else self.font_normal
            self.canvas.create_text(
                (x1 + x2) / 2, (y1 + y2) / 2, text=str(day.date.day), fill=fg, font=font,
            )

    def _day_colors(self, day: Day) -> tuple[str, str]:
        if self.engine.is_today(day):
            return ACCENT, "white"
        if self.engine.is_selected(day):
            return SEL_BG, "black"
        if not day.is_in_section:
            return GRID_BG, OUT_FG
        if Weekday.of(day.date) in (Weekday.SAT, Weekday.SUN):
            return GRID_BG, WEEKEND_FG
        return GRID_BG, "black"

    def _day_at(self, x: float, y: float) -> Day | None:
        if self._extent <= 0:
            return None
        along = self.axis.offset_of(x, y) + self._offset
        index = int(along // self._extent)
        sections = self.engine.sections
        if not 0 <= index < len(sections):
            return None
        section = sections[index]
        pad, cell_w, cell_h = self._page_geometry(section)
        local = along - index * self._extent
        px, py = (local, y) if self.axis is Axis.HORIZONTAL else (x, local)
        col = int((px - pad) // cell_w)
        row = int((py - pad) // cell_h)
        if not (0 <= col < 7 and row >= 0):
            return None
        i = row * 7 + col
        return section.days[i] if i < len(section.days) else None

    # ------------------------------------------------------------------
    # Drag to scroll, click to select
    # ------------------------------------------------------------------
    def _on_press(self, event: tk.Event) -> None:
        self._cancel_animation()
        self._press_pos = self.axis.offset_of(event.x, event.y)
        self._drag_anchor = self._offset
        self._dragging = False

    def _on_motion(self, event: tk.Event) -> None:
        if self._press_pos is None:
            return
        moved = self._press_pos - self.axis.offset_of(event.x, event.y)
        if not self._dragging:
            if abs(moved) < DRAG_THRESHOLD:
                return
            self._dragging = True
            self.engine.report_gesture_phase(GesturePhase.DRAGGING)
        self._offset = max(0.0, min(self._drag_anchor + moved, self._max_offset()))
        self._redraw()
        self.engine.report_offset(self._offset)

    def _on_release(self, event: tk.Event) -> None:
        if self._press_pos is None:
            return
        self._press_pos = None
        if not self._dragging:
            day = self._day_at(event.x, event.y)
            if day is not None:
                self.engine.select_date(day.date)
            if self.engine.phase is not GesturePhase.IDLE:
                # The press interrupted a snap; finish it on the nearest page
                self._animate_to(round(self._offset / self._extent) * self._extent)
            return
        self._dragging = False

        start_index = round(self._drag_anchor / self._extent)
        travelled = self._offset - self._drag_anchor
        if travelled > self._extent * PAGE_FLIP_RATIO:
            start_index += 1
        elif travelled < -self._extent * PAGE_FLIP_RATIO:
            start_index -= 1
        start_index = max(0, min(start_index, len(self.engine.window) - 1))
        target = start_index * self._extent
        self.engine.report_gesture_phase(GesturePhase.DECELERATING, target_offset=target)
        self._animate_to(target)

    def _on_wheel(self, event: tk.Event) -> None:
        self._navigate(-1 if event.delta > 0 else 1)

    # ------------------------------------------------------------------
    # Snap animation
    # ------------------------------------------------------------------
    def _animate_to(self, target: float) -> None:
        self._cancel_animation()
        self._anim_target = target
        self._anim_after_id = self.root.after(ANIMATION_STEP_MS, self._animation_step)

    def _animation_step(self) -> None:
        self._anim_after_id = None
        if self._anim_target is None:
            return
        remaining = self._anim_target - self._offset
        if abs(remaining) < 0.5:
            self._offset = self._anim_target
            self._anim_target = None
            self._redraw()
            self.engine.report_offset(self._offset)
            self.engine.report_gesture_phase(GesturePhase.IDLE)
            return
        self._offset += remaining * 0.3
        self._redraw()
        self.engine.report_offset(self._offset)
        self._anim_after_id = self.root.after(ANIMATION_STEP_MS, self._animation_step)

    def _cancel_animation(self) -> None:
        if self._anim_after_id is not None:
            self.root.after_cancel(self._anim_after_id)
            self._anim_after_id = None
        self._anim_target = None

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def _navigate(self, direction: int) -> None:
        self._cancel_animation()
        rules = self.configuration.rules
        target = self.engine.target_section.id.advanced(direction, rules)
        self.engine.scroll_to(target.first_date(rules), animated=True)

    def _go_today(self) -> None:
        self._cancel_animation()
        self.engine.select_date(None)
        self.engine.scroll_to(date.today(), animated=True)

    def _on_escape(self, _event: tk.Event) -> None:
        if self.engine.selected_date is not None:
            self.engine.select_date(None)
        else:
            self.root.destroy()

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------
    @staticmethod
    def _title_for(days) -> str:
        in_section = [d.date for d in days if d.is_in_section]
        if len(in_section) == 7 and in_section[0].month != in_section[-1].month:
            return f"{in_section[0].strftime('%d %b')} → {in_section[-1].strftime('%d %b %Y')}"
        if len(in_section) == 7:
            return f"{in_section[0].day}–{in_section[-1].strftime('%d %b %Y')}"
        return in_section[0].strftime("%B %Y")

    def _footer_text(self) -> str:
        today_str = f"Today: {date.today().strftime('%d.%m.%Y')}"
        selected = self.engine.selected_date
        if selected is None:
            return today_str
        return f"Selected: {selected.strftime('%d.%m.%Y')}     {today_str}"

    def _refresh_labels(self) -> None:
        title = self._preview_title or self._title_for(self.engine.current_section.days)
        self._title_label.configure(text=title)
        self._footer_label.configure(text=self._footer_text())

    def run(self) -> None:
        self.root.mainloop()
