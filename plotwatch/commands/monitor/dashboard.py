"""Render-thread state for the monitor: store, tables, focus and selection.

Every method here must run on the render thread. The poller reaches this
object only through ``RenderDispatcher.submit(lambda: dashboard.apply_result(...))``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ...exceptions import FetchError
from .data import aggregate_directories, count_archived
from .poller import PollOutcome
from .rows import (
    ACTIVE_JOB_DESCRIBER,
    ARCHIVED_JOB_DESCRIBER,
    DEST_DIR_DESCRIBER,
    HOST_DESCRIBER,
    SOURCE_DIR_DESCRIBER,
    build_active_rows,
    build_archived_rows,
    build_dest_dir_rows,
    build_host_rows,
    build_source_dir_rows,
)
from .selection import SelectionTracker
from .store import SnapshotStore
from .table import ReconcileResult, SortedTable, reconcile

logger = logging.getLogger(__name__)

TABLE_ORDER = ("active", "source", "dest", "archived", "hosts")
LOG_FOCUS = "log"
FOCUS_ORDER = (*TABLE_ORDER, LOG_FOCUS)
JOB_TABLES = ("active", "archived")


def _make_tables() -> dict[str, SortedTable]:
    return {
        "active": SortedTable("active", "Active Jobs", ACTIVE_JOB_DESCRIBER, sort_column=5),
        "source": SortedTable("source", "Source Dirs", SOURCE_DIR_DESCRIBER),
        "dest": SortedTable("dest", "Dest Dirs", DEST_DIR_DESCRIBER),
        "archived": SortedTable(
            "archived", "Archived Jobs", ARCHIVED_JOB_DESCRIBER, sort_column=5, sort_reverse=True
        ),
        "hosts": SortedTable("hosts", "Hosts", HOST_DESCRIBER),
    }


class Dashboard:
    """All state the render surface reads, plus the operations that mutate it."""

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self.clock = clock
        self.store = SnapshotStore()
        self.tracker = SelectionTracker()
        self.tables = _make_tables()
        self.focus = "active"
        self._set_titles()

    @property
    def log_panel(self):
        return self.tracker.panel

    # Poll results

    def apply_result(self, host: str, outcome: PollOutcome) -> dict[str, ReconcileResult]:
        """Merge one host's poll outcome and refresh the affected tables.

        A failed poll only changes the host's status, so only the hosts
        table is reconciled; job and directory rows stay as they were.
        """
        self.store.apply(host, outcome)
        if isinstance(outcome, FetchError):
            return {"hosts": self.redraw_hosts()}
        results = self.redraw_all()
        self.tracker.refresh()
        self._release_log_owner()
        return results

    def redraw_all(self) -> dict[str, ReconcileResult]:
        aggregate = aggregate_directories(self.store)
        results = {
            "active": self.redraw_active(),
            "source": reconcile(self.tables["source"], build_source_dir_rows(aggregate)),
            "dest": reconcile(self.tables["dest"], build_dest_dir_rows(aggregate)),
            "archived": self.redraw_archived(),
            "hosts": self.redraw_hosts(),
        }
        self._set_titles()
        return results

    def redraw_active(self) -> ReconcileResult:
        rows, logs = build_active_rows(self.store, now=self.clock())
        self.tracker.update_logs(active=logs)
        result = reconcile(self.tables["active"], rows)
        self._set_titles()
        return result

    def redraw_archived(self) -> ReconcileResult:
        rows, logs = build_archived_rows(self.store)
        self.tracker.update_logs(archived=logs)
        result = reconcile(self.tables["archived"], rows)
        self._set_titles()
        return result

    def redraw_hosts(self) -> ReconcileResult:
        result = reconcile(self.tables["hosts"], build_host_rows(self.store))
        self._set_titles()
        return result

    def _release_log_owner(self) -> None:
        """Stop emphasizing a table whose selection no longer marks the logged job.

        A selected job that leaves the active table moves that table's
        highlight to another row while the log keeps following the job.
        """
        owner = self.tracker.source_table
        if owner is not None and self.tables[owner].selected_key != self.tracker.active_key:
            self.tracker.source_table = None

    def _set_titles(self) -> None:
        tables = self.tables
        tables["active"].title = f"Active Jobs [{len(tables['active'])}]"
        tables["source"].title = f"Source Dirs [{len(tables['source'])}]"
        tables["dest"].title = f"Dest Dirs [{len(tables['dest'])}]"
        finished, failed = count_archived(self.store)
        if failed:
            tables["archived"].title = f"Archived Jobs [{finished} ({failed} failed)]"
        else:
            tables["archived"].title = f"Archived Jobs [{finished}]"
        tables["hosts"].title = f"Hosts [{len(self.store)}]"

    # Focus and selection (user input)

    @property
    def focused_table(self) -> SortedTable | None:
        return self.tables.get(self.focus)

    def cycle_focus(self, delta: int = 1) -> str:
        idx = FOCUS_ORDER.index(self.focus)
        self.focus = FOCUS_ORDER[(idx + delta) % len(FOCUS_ORDER)]
        return self.focus

    def set_focus(self, name: str) -> None:
        if name not in FOCUS_ORDER:
            raise KeyError(name)
        self.focus = name

    def move_selection(self, delta: int) -> bool:
        """Move the focused table's selection; scrolls the log when it has focus."""
        table = self.focused_table
        if table is None:
            self.log_panel.scroll_by(-delta)
            return True
        if not table.move_selection(delta):
            return False
        self._selection_changed(table)
        return True

    def select_index(self, index: int) -> bool:
        table = self.focused_table
        if table is None:
            return False
        if not table.select_index(index):
            return False
        self._selection_changed(table)
        return True

    def select_row(self, table_name: str, key: str) -> bool:
        """Focus ``table_name`` and select ``key`` (mouse click)."""
        self.set_focus(table_name)
        table = self.tables[table_name]
        if not table.select(key):
            return False
        self._selection_changed(table)
        return True

    def _selection_changed(self, table: SortedTable) -> None:
        if table.name in JOB_TABLES:
            logger.debug("Selected %s in %s", table.selected_key, table.name)
            self.tracker.select(table.selected_key, source_table=table.name)

    def cycle_sort(self) -> None:
        table = self.focused_table
        if table is not None:
            table.cycle_sort()

    def reverse_sort(self) -> None:
        table = self.focused_table
        if table is not None:
            table.reverse_sort()
