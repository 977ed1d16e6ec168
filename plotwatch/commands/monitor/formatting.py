"""Text rendering and layout for monitor command (no curses dependencies)."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants import MAX_HOST_ROWS
from .table import SortedTable


def clip_cell(value: str, width: int, *, align_right: bool = False) -> str:
    """Clip and pad a cell to width using ASCII ellipsis."""
    if width <= 0:
        return ""
    if len(value) <= width:
        return value.rjust(width) if align_right else value.ljust(width)
    if width <= 3:
        return value[:width]
    return f"{value[: width - 3]}..."


def render_row_cells(
    values: list[str],
    *,
    widths: list[int],
    right_aligned: list[bool],
) -> list[str]:
    """Render padded cell strings for a row."""
    return [
        clip_cell(value, width, align_right=right)
        for value, width, right in zip(values, widths, right_aligned, strict=True)
    ]


def compute_column_widths(table: SortedTable) -> list[int]:
    """Widest cell (header included) per column."""
    widths = [len(h) for h in table.describer.headers()]
    for _key, row in table.sorted_rows():
        for idx, cell in enumerate(table.describer.cells(row)):
            widths[idx] = max(widths[idx], len(cell))
    return widths


def fit_widths(widths: list[int], *, max_width: int, sep_len: int) -> list[int]:
    """Shrink the widest columns until the row fits in max_width.

    max_width <= 0 means unlimited.
    """
    widths = list(widths)
    if max_width <= 0:
        return widths
    total = sum(widths) + sep_len * max(len(widths) - 1, 0)
    while total > max_width:
        widest = max(range(len(widths)), key=lambda i: widths[i])
        if widths[widest] <= 4:
            break
        widths[widest] -= 1
        total -= 1
    return widths


def header_label(table: SortedTable, index: int, header: str) -> str:
    """Header text with a sort marker on the sorted column."""
    if index != table.sort_column:
        return header
    return f"{header} {'v' if table.sort_reverse else '^'}"


def render_table_lines(
    table: SortedTable,
    *,
    max_width: int = 0,
    col_sep: str = "  ",
    sort_marker: bool = False,
) -> tuple[str, list[str]]:
    """Render a table as a header line and one line per row, in display order."""
    describer = table.describer
    headers = describer.headers()
    if sort_marker:
        headers = [header_label(table, i, h) for i, h in enumerate(headers)]
    widths = compute_column_widths(table)
    widths = [max(w, len(h)) for w, h in zip(widths, headers, strict=True)]
    widths = fit_widths(widths, max_width=max_width, sep_len=len(col_sep))
    right = describer.right_aligned()

    header = col_sep.join(render_row_cells(headers, widths=widths, right_aligned=right))
    lines = [
        col_sep.join(render_row_cells(describer.cells(row), widths=widths, right_aligned=right))
        for _key, row in table.sorted_rows()
    ]
    return header.rstrip(), [line.rstrip() for line in lines]


@dataclass(frozen=True)
class Rect:
    """Screen region in character cells."""

    top: int
    left: int
    height: int
    width: int

    def contains(self, row: int, col: int) -> bool:
        return self.top <= row < self.top + self.height and self.left <= col < self.left + self.width


def compute_layout(height: int, width: int, *, host_count: int) -> dict[str, Rect]:
    """Place the panes: active, source|dest, archived, hosts, log (top to bottom).

    The hosts pane gets one row per host (at most MAX_HOST_ROWS) plus border
    and header; the four flexible bands share the remaining rows.
    """
    hosts_height = min(max(host_count, 1), MAX_HOST_ROWS) + 3
    hosts_height = min(hosts_height, max(height, 0))
    flexible = max(height - hosts_height, 0)
    band, extra = divmod(flexible, 4)
    bands = [band + (1 if i < extra else 0) for i in range(4)]

    layout: dict[str, Rect] = {}
    top = 0
    layout["active"] = Rect(top, 0, bands[0], width)
    top += bands[0]
    half = width // 2
    layout["source"] = Rect(top, 0, bands[1], half)
    layout["dest"] = Rect(top, half, bands[1], width - half)
    top += bands[1]
    layout["archived"] = Rect(top, 0, bands[2], width)
    top += bands[2]
    layout["hosts"] = Rect(top, 0, hosts_height, width)
    top += hosts_height
    layout["log"] = Rect(top, 0, bands[3], width)
    return layout
