"""Curses-based UI display for monitor command."""

from __future__ import annotations

import curses
import logging
from curses import error as curses_error

from .dashboard import JOB_TABLES, LOG_FOCUS, TABLE_ORDER, Dashboard
from .formatting import (
    Rect,
    clip_cell,
    compute_column_widths,
    compute_layout,
    fit_widths,
    header_label,
    render_row_cells,
)
from .help_popup import draw_help_popup
from .table import SortedTable

logger = logging.getLogger(__name__)

COL_SEP = " "

# Unicode box drawing
TOP_LEFT, TOP_RIGHT, BOTTOM_LEFT, BOTTOM_RIGHT = "┌", "┐", "└", "┘"
HORIZONTAL, VERTICAL = "─", "│"


def table_scroll_offset(
    offset: int, *, selected: int | None, visible_rows: int, row_count: int
) -> int:
    """Clamp a table's scroll offset so the selected row stays visible."""
    max_offset = max(row_count - visible_rows, 0)
    if selected is not None and visible_rows > 0:
        if selected < offset:
            offset = selected
        elif selected >= offset + visible_rows:
            offset = selected - visible_rows + 1
    return max(0, min(offset, max_offset))


class MonitorDisplay:
    """Curses monitor display; draws a Dashboard and turns input into its operations."""

    def __init__(
        self,
        stdscr,
        *,
        dashboard: Dashboard,
        host_count: int,
        alternate_mouse: bool = False,
    ) -> None:
        self.stdscr = stdscr
        self.dashboard = dashboard
        self.host_count = host_count
        self.alternate_mouse = alternate_mouse
        self.curses_mod = curses
        self.show_help = False
        self.layout: dict[str, Rect] = {}
        self.offsets: dict[str, int] = {name: 0 for name in TABLE_ORDER}
        # screen row -> row key, per table, from the last draw (mouse hits)
        self.row_hits: dict[str, dict[int, str]] = {name: {} for name in TABLE_ORDER}
        self._init_curses()

    def _init_curses(self) -> None:
        try:
            curses.curs_set(0)
        except curses_error:
            pass
        self.configure_mouse()

    def configure_mouse(self) -> int:
        """Enable mouse reporting.

        Some terminals (PuTTY among them) cannot report all mouse events, so
        ``alternate_mouse`` restricts the mask to button presses and clicks.
        """
        if self.alternate_mouse:
            mask = curses.BUTTON1_PRESSED | curses.BUTTON1_CLICKED
        else:
            mask = curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION
        try:
            available, _old = curses.mousemask(mask)
        except curses_error:
            logger.debug("Mouse support unavailable")
            return 0
        return available

    def safe_addstr(self, row: int, col: int, text: str, attr: int = 0) -> None:
        try:
            if attr:
                self.stdscr.addstr(row, col, text, attr)
            else:
                self.stdscr.addstr(row, col, text)
        except curses_error:
            return

    # Input

    def _page_size(self) -> int:
        rect = self.layout.get(self.dashboard.focus)
        if rect is None:
            return 1
        return max(rect.height - 3, 1)

    def handle_key(self, key: int, *, draw: bool = True) -> bool:
        """Handle a keypress. Returns True if we should exit.

        Args:
            key: The key code from getch()
            draw: Whether to redraw immediately (default True)
        """
        if key == -1:
            return False
        if self.show_help:
            if key != ord("?"):
                self.show_help = False
                if draw:
                    self.draw_screen()
            return False

        dashboard = self.dashboard
        if key in (ord("q"), ord("Q")):
            return True
        if key == ord("?"):
            self.show_help = True
        elif key == ord("\t"):
            dashboard.cycle_focus(1)
        elif key == curses.KEY_BTAB:
            dashboard.cycle_focus(-1)
        elif key in (curses.KEY_UP, ord("k")):
            dashboard.move_selection(-1)
        elif key in (curses.KEY_DOWN, ord("j")):
            dashboard.move_selection(1)
        elif key == curses.KEY_PPAGE:
            dashboard.move_selection(-self._page_size())
        elif key == curses.KEY_NPAGE:
            dashboard.move_selection(self._page_size())
        elif key in (curses.KEY_HOME, ord("g")):
            self._jump(first=True)
        elif key in (curses.KEY_END, ord("G")):
            self._jump(first=False)
        elif key == ord("s"):
            dashboard.cycle_sort()
        elif key == ord("r"):
            dashboard.reverse_sort()
        elif key == curses.KEY_MOUSE:
            self.handle_mouse()
        if draw:
            self.draw_screen()
        return False

    def _jump(self, *, first: bool) -> None:
        dashboard = self.dashboard
        table = dashboard.focused_table
        if table is None:
            panel = dashboard.log_panel
            panel.scroll = len(panel.lines) if first else 0
            panel.scroll_by(0, page=self._page_size())
            return
        dashboard.select_index(0 if first else len(table) - 1)

    def handle_mouse(self) -> None:
        try:
            _id, col, row, _z, _bstate = curses.getmouse()
        except curses_error:
            return
        self.click(row, col)

    def click(self, row: int, col: int) -> bool:
        """Select the table row under (row, col), focusing its pane."""
        for name, rect in self.layout.items():
            if not rect.contains(row, col):
                continue
            if name == LOG_FOCUS:
                self.dashboard.set_focus(LOG_FOCUS)
                return True
            key = self.row_hits[name].get(row)
            if key is None:
                self.dashboard.set_focus(name)
                return False
            self.dashboard.select_row(name, key)
            return True
        return False

    # Drawing

    def _draw_box(self, rect: Rect, title: str, *, focused: bool) -> None:
        if rect.height < 2 or rect.width < 2:
            return
        inner = rect.width - 2
        label = clip_cell(f" {title} ", max(inner - 1, 0))
        top = TOP_LEFT + HORIZONTAL + label.rstrip()
        top = top + HORIZONTAL * (rect.width - 1 - len(top)) + TOP_RIGHT
        bottom = BOTTOM_LEFT + HORIZONTAL * inner + BOTTOM_RIGHT
        attr = curses.A_BOLD if focused else 0
        self.safe_addstr(rect.top, rect.left, top, attr)
        for r in range(rect.top + 1, rect.top + rect.height - 1):
            self.safe_addstr(r, rect.left, VERTICAL, attr)
            self.safe_addstr(r, rect.left + rect.width - 1, VERTICAL, attr)
        self.safe_addstr(rect.top + rect.height - 1, rect.left, bottom, attr)

    def _selected_attr(self, table: SortedTable) -> int:
        dashboard = self.dashboard
        if table.name in JOB_TABLES:
            emphasized = dashboard.tracker.source_table == table.name
        else:
            emphasized = dashboard.focus == table.name
        return curses.A_REVERSE | (curses.A_BOLD if emphasized else curses.A_DIM)

    def _draw_table(self, table: SortedTable, rect: Rect) -> None:
        focused = self.dashboard.focus == table.name
        self._draw_box(rect, table.title, focused=focused)
        hits: dict[int, str] = {}
        self.row_hits[table.name] = hits
        inner_width = rect.width - 2
        visible_rows = rect.height - 3
        if inner_width <= 0 or rect.height < 3:
            return

        describer = table.describer
        headers = [header_label(table, i, h) for i, h in enumerate(describer.headers())]
        widths = [max(w, len(h)) for w, h in zip(compute_column_widths(table), headers, strict=True)]
        widths = fit_widths(widths, max_width=inner_width, sep_len=len(COL_SEP))
        right = describer.right_aligned()

        header = COL_SEP.join(render_row_cells(headers, widths=widths, right_aligned=right))
        self.safe_addstr(rect.top + 1, rect.left + 1, clip_cell(header, inner_width), curses.A_BOLD)

        order = table.sorted_rows()
        selected = table.selected_index()
        offset = table_scroll_offset(
            self.offsets[table.name],
            selected=selected,
            visible_rows=visible_rows,
            row_count=len(order),
        )
        self.offsets[table.name] = offset
        for idx, (key, row) in enumerate(order[offset : offset + max(visible_rows, 0)]):
            screen_row = rect.top + 2 + idx
            cells = render_row_cells(describer.cells(row), widths=widths, right_aligned=right)
            text = clip_cell(COL_SEP.join(cells), inner_width)
            attr = self._selected_attr(table) if key == table.selected_key else 0
            self.safe_addstr(screen_row, rect.left + 1, text, attr)
            hits[screen_row] = key

    def _draw_log(self, rect: Rect) -> None:
        panel = self.dashboard.log_panel
        self._draw_box(rect, panel.title, focused=self.dashboard.focus == LOG_FOCUS)
        inner_width = rect.width - 2
        for idx, line in enumerate(panel.visible_lines(rect.height - 2)):
            self.safe_addstr(rect.top + 1 + idx, rect.left + 1, clip_cell(line, inner_width))

    def draw_screen(self) -> None:
        self.stdscr.erase()
        height, width = self.stdscr.getmaxyx()
        self.layout = compute_layout(height, width, host_count=self.host_count)
        for name in TABLE_ORDER:
            self._draw_table(self.dashboard.tables[name], self.layout[name])
        self._draw_log(self.layout[LOG_FOCUS])

        # Refresh main screen first, then draw help popup on top
        if self.show_help:
            self.stdscr.noutrefresh()
            draw_help_popup(self.stdscr, self.curses_mod)
            self.curses_mod.doupdate()
        else:
            self.stdscr.refresh()
