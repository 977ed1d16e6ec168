"""Help popup rendering for the monitor display."""

from __future__ import annotations

from curses import error as curses_error
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

from .types import KEY_GUIDE_TEXT


def help_lines() -> list[str]:
    """Version banner followed by the key guide."""
    try:
        ver = get_version("plotwatch")
    except PackageNotFoundError:
        ver = "?"
    return [f"plotwatch v{ver}", ""] + KEY_GUIDE_TEXT.strip().split("\n")


def draw_help_popup(stdscr, curses_mod) -> None:
    """Draw a centered help popup with the key guide.

    Args:
        stdscr: The curses screen object
        curses_mod: The curses module (for creating new windows)
    """
    if not curses_mod:
        return

    height, width = stdscr.getmaxyx()
    all_lines = help_lines()

    # Add padding: 2 chars horizontal, 1 line vertical
    h_pad = 2
    v_pad = 1

    content_width = max(len(line) for line in all_lines)
    popup_width = content_width + (h_pad * 2)
    popup_height = len(all_lines) + (v_pad * 2)

    start_y = max((height - popup_height) // 2, 0)
    start_x = max((width - popup_width) // 2, 0)

    # Clip to screen (leave room for border)
    if start_y + popup_height + 2 > height:
        popup_height = max(height - start_y - 2, 1)
    if start_x + popup_width + 2 > width:
        popup_width = max(width - start_x - 2, 10)

    try:
        popup_win = curses_mod.newwin(popup_height + 2, popup_width + 2, start_y, start_x)
    except curses_error:
        return

    popup_attr = curses_mod.A_REVERSE
    popup_win.bkgd(" ", popup_attr)
    popup_win.border()

    current_row = v_pad + 1  # Start after border and top padding
    max_content_rows = popup_height - (v_pad * 2)

    for i, line in enumerate(all_lines[:max_content_rows]):
        if current_row >= popup_height + 1:
            break
        padded = (" " * h_pad + line.ljust(content_width) + " " * h_pad)[:popup_width]
        attr = popup_attr | curses_mod.A_BOLD if i == 0 else popup_attr
        try:
            popup_win.addstr(current_row, 1, padded, attr)
        except curses_error:
            pass
        current_row += 1

    popup_win.noutrefresh()
