"""
Plotwatch - fleet status dashboard for plotting hosts.

Design goals:
- Read-only: polls each host's status endpoint, never sends commands.
- A slow or failing host only ever affects its own rows.
- Last known job data stays visible while a host is unreachable.
"""

from __future__ import annotations

from .cli import main
from .constants import DEFAULT_PORT
from .exceptions import DecodeError, FetchError, NetworkError, PlotwatchError, UserError

__all__ = [
    "DEFAULT_PORT",
    "DecodeError",
    "FetchError",
    "NetworkError",
    "PlotwatchError",
    "UserError",
    "main",
]
