"""Shared constants for the monitor module."""

from __future__ import annotations

KEY_GUIDE_TEXT = """\
Key Guide (press any key to close)

Keybindings:
  Tab/S-Tab   Move focus between panes
  ↑/↓ or j/k  Move selection (scroll when the log has focus)
  PgUp/PgDn   Move selection by a page
  Home/End    First / last row
  s           Sort focused table by next column
  r           Reverse sort order of focused table
  q           Quit monitor
  Mouse       Click a row to select it

Panes:
ACTIVE    Jobs currently running on each host
SOURCE    Plotting directories: free space, average phase
          times and finished/failed counts
DEST      Destination directories: free space, average job
          time and finished/failed counts
ARCHIVED  Recently finished, errored or killed jobs
HOSTS     Poll status per host; empty = last poll succeeded,
          otherwise the error (job data shown is from the
          last successful poll)
LOG       Log tail of the selected job

Free space "-" means the host no longer reports the directory.
"""
