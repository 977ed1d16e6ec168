"""Plotwatch monitor command implementation.

This package provides the monitor command with clear separation of concerns:

- store.py: Per-host snapshot store (stale-on-error merge)
- data.py: Directory aggregation and value formatting (pure functions, easily testable)
- table.py: Keyed sortable row store and the reconciler
- rows.py: Row types, table describers and row builders
- selection.py: Log panel and selection tracking
- poller.py: Background poll scheduler and render-thread dispatcher
- dashboard.py: Render-thread state tying the above together
- formatting.py: Text rendering and layout (no curses dependencies)
- display.py: Curses-based interactive UI
- entry.py: Command entry point and orchestration
"""

from __future__ import annotations

from .dashboard import Dashboard
from .data import (
    DirectoryAggregate,
    DirectoryStats,
    aggregate_directories,
    dir_key,
    format_timestamp,
    humanize_bytes,
    humanize_duration,
    shorten_job_id,
)
from .display import MonitorDisplay
from .entry import cmd_monitor, run_once
from .formatting import clip_cell, compute_layout, render_table_lines
from .poller import PollScheduler, RenderDispatcher
from .selection import LogPanel, SelectionTracker
from .store import SnapshotStore
from .table import Column, ReconcileResult, RowDescriber, SortedTable, reconcile

__all__ = [
    "Column",
    "Dashboard",
    "DirectoryAggregate",
    "DirectoryStats",
    "LogPanel",
    "MonitorDisplay",
    "PollScheduler",
    "ReconcileResult",
    "RenderDispatcher",
    "RowDescriber",
    "SelectionTracker",
    "SnapshotStore",
    "SortedTable",
    "aggregate_directories",
    "clip_cell",
    "cmd_monitor",
    "compute_layout",
    "dir_key",
    "format_timestamp",
    "humanize_bytes",
    "humanize_duration",
    "reconcile",
    "render_table_lines",
    "run_once",
    "shorten_job_id",
]
