"""Keyed, sortable row store and the reconciler that keeps it current.

Tables never track rows by position. Every row has a stable key (job id,
host address, or host+directory), so a resort or a refresh cannot move the
selection onto a different logical row.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ...utils import natural_sort_key


@dataclass(frozen=True)
class Column:
    """One table column.

    Attributes:
        header: Header label
        attr: Row attribute holding the raw (sortable) value
        fmt: Converts the raw value to display text
        align_right: Right-align cells (numbers, sizes, durations)
    """

    header: str
    attr: str
    fmt: Callable[[Any], str] = str
    align_right: bool = False


class RowDescriber:
    """Headers, alignment and cell text for one row type."""

    def __init__(self, columns: Sequence[Column]) -> None:
        if not columns:
            raise ValueError("a table needs at least one column")
        self.columns = tuple(columns)

    def headers(self) -> list[str]:
        return [c.header for c in self.columns]

    def right_aligned(self) -> list[bool]:
        return [c.align_right for c in self.columns]

    def cells(self, row: Any) -> list[str]:
        return [c.fmt(getattr(row, c.attr)) for c in self.columns]

    def sort_value(self, row: Any, index: int) -> Any:
        return getattr(row, self.columns[index].attr)


@dataclass
class ReconcileResult:
    """Keys touched by one reconciliation pass."""

    inserted: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.inserted or self.updated or self.removed)


class SortedTable:
    """Rows keyed by string, displayed in the order of a chosen column."""

    def __init__(
        self,
        name: str,
        title: str,
        describer: RowDescriber,
        *,
        sort_column: int = 0,
        sort_reverse: bool = False,
    ) -> None:
        self.name = name
        self.title = title
        self.describer = describer
        self.sort_column = sort_column
        self.sort_reverse = sort_reverse
        self.selected_key: str | None = None
        self._rows: dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def keys(self) -> list[str]:
        return list(self._rows)

    def get_row(self, key: str) -> Any | None:
        return self._rows.get(key)

    def set_row(self, key: str, row: Any) -> bool:
        """Insert or overwrite a row. Returns True if anything changed."""
        if self._rows.get(key, _MISSING) == row:
            return False
        self._rows[key] = row
        return True

    def clear_row(self, key: str) -> bool:
        """Remove a row. Returns True if it existed.

        If the removed row was selected, the selection moves to the row that
        now occupies the same position (or the new last row).
        """
        if key not in self._rows:
            return False
        fallback_index = None
        if key == self.selected_key:
            fallback_index = self.sorted_keys().index(key)
        del self._rows[key]
        if fallback_index is not None:
            order = self.sorted_keys()
            self.selected_key = order[min(fallback_index, len(order) - 1)] if order else None
        return True

    def _sort_key(self, key: str) -> tuple:
        value = self.describer.sort_value(self._rows[key], self.sort_column)
        if isinstance(value, str):
            value = natural_sort_key(value)
        # Unknown values (None) sort after known ones
        return (value is None, 0 if value is None else value, natural_sort_key(key))

    def sorted_keys(self) -> list[str]:
        return sorted(self._rows, key=self._sort_key, reverse=self.sort_reverse)

    def sorted_rows(self) -> list[tuple[str, Any]]:
        return [(key, self._rows[key]) for key in self.sorted_keys()]

    def cycle_sort(self) -> None:
        """Sort by the next column, wrapping around."""
        self.sort_column = (self.sort_column + 1) % len(self.describer.columns)

    def reverse_sort(self) -> None:
        self.sort_reverse = not self.sort_reverse

    def selected_index(self) -> int | None:
        if self.selected_key is None or self.selected_key not in self._rows:
            return None
        return self.sorted_keys().index(self.selected_key)

    def select(self, key: str | None) -> bool:
        """Select a row by key. Returns True if the selection changed."""
        if key is not None and key not in self._rows:
            return False
        changed = key != self.selected_key
        self.selected_key = key
        return changed

    def select_index(self, index: int) -> bool:
        order = self.sorted_keys()
        if not order:
            return self.select(None)
        return self.select(order[max(0, min(index, len(order) - 1))])

    def move_selection(self, delta: int) -> bool:
        """Move the selection by ``delta`` rows in display order."""
        current = self.selected_index()
        if current is None:
            return self.select_index(0 if delta >= 0 else len(self._rows) - 1)
        return self.select_index(current + delta)


_MISSING = object()


def reconcile(table: SortedTable, rows_by_key: Mapping[str, Any]) -> ReconcileResult:
    """Make ``table`` hold exactly ``rows_by_key``.

    New keys are inserted, existing keys are overwritten only when their row
    changed, and keys absent from ``rows_by_key`` are removed. Rows whose key
    survives keep their identity, so sort order and selection stay stable.
    """
    result = ReconcileResult()
    to_remove = set(table.keys())
    for key, row in rows_by_key.items():
        existed = key in to_remove
        to_remove.discard(key)
        if table.set_row(key, row):
            (result.updated if existed else result.inserted).append(key)
    for key in sorted(to_remove, key=natural_sort_key):
        table.clear_row(key)
        result.removed.append(key)
    return result
