"""Plotwatch command implementations."""

from __future__ import annotations

from .monitor import cmd_monitor
from .show_host import cmd_show_host

__all__ = [
    "cmd_monitor",
    "cmd_show_host",
]
