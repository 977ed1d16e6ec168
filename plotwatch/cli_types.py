"""Type definitions for CLI command arguments."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MonitorArgs:
    """Arguments for monitor command."""

    hosts: str
    interval: float
    timeout: float
    once: bool
    json: bool
    alternate_mouse: bool


@dataclass
class ShowHostArgs:
    """Arguments for show-host command."""

    host: str
    timeout: float
