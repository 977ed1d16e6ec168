"""Log panel state and the selection tracker that feeds it."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .data import shorten_job_id

DEFAULT_LOG_TITLE = "Log"


@dataclass
class LogPanel:
    """Bordered detail panel showing one job's log tail.

    ``scroll`` counts lines up from the end; 0 follows the tail.
    """

    title: str = DEFAULT_LOG_TITLE
    lines: list[str] = field(default_factory=list)
    scroll: int = 0

    def set_text(self, tail: tuple[str, ...] | list[str]) -> None:
        self.lines = "".join(tail).splitlines()
        self.scroll = 0

    def clear(self) -> None:
        self.lines = []
        self.scroll = 0

    def scroll_by(self, delta: int, *, page: int = 1) -> None:
        """Scroll up (positive) or down (negative), clamped to the content."""
        max_scroll = max(len(self.lines) - page, 0)
        self.scroll = max(0, min(self.scroll + delta, max_scroll))

    def visible_lines(self, height: int) -> list[str]:
        if height <= 0:
            return []
        end = len(self.lines) - self.scroll
        return self.lines[max(end - height, 0) : end]


class SelectionTracker:
    """Remember which job's log is shown, by key rather than row position."""

    def __init__(self, panel: LogPanel | None = None) -> None:
        self.panel = panel or LogPanel()
        self.active_key: str | None = None
        self.source_table: str | None = None
        self.active_logs: dict[str, tuple[str, ...]] = {}
        self.archived_logs: dict[str, tuple[str, ...]] = {}

    def update_logs(
        self,
        *,
        active: Mapping[str, tuple[str, ...]] | None = None,
        archived: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        if active is not None:
            self.active_logs = dict(active)
        if archived is not None:
            self.archived_logs = dict(archived)

    def lookup(self, key: str) -> tuple[str, ...] | None:
        """Log tail for ``key``: active jobs first, then archived jobs."""
        tail = self.active_logs.get(key)
        if tail is None:
            tail = self.archived_logs.get(key)
        return tail

    def select(self, key: str | None, *, source_table: str | None = None) -> bool:
        """Record a user selection and show its log.

        Returns True if a log was found. A key without a log clears the panel.
        """
        self.active_key = key
        if source_table is not None:
            self.source_table = source_table
        return self._show()

    def refresh(self) -> bool:
        """Re-resolve the current selection after new data arrived."""
        if self.active_key is None:
            return False
        return self._show()

    def _show(self) -> bool:
        key = self.active_key
        if key is None:
            self.panel.title = DEFAULT_LOG_TITLE
            self.panel.clear()
            return False
        self.panel.title = f"{DEFAULT_LOG_TITLE} ({shorten_job_id(key)})"
        tail = self.lookup(key)
        if tail is None:
            self.panel.clear()
            return False
        self.panel.set_text(tail)
        return True
