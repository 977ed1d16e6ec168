"""Plotwatch utility functions."""

from __future__ import annotations

import re

from .constants import DEFAULT_PORT
from .exceptions import UserError


def natural_sort_key(text: str) -> list[int | str]:
    """Return a key for natural (alphanumeric) sorting.

    Splits strings into text and numeric parts for natural ordering.
    Example: ['host1', 'host2', 'host10'] sorts as 1, 2, 10 (not 1, 10, 2).

    Args:
        text: String to generate sort key for

    Returns:
        List of alternating strings and integers for sorting
    """

    def convert(part: str) -> int | str:
        return int(part) if part.isdigit() else part.lower()

    return [convert(c) for c in re.split(r"(\d+)", text)]


def normalize_host(host: str, *, default_port: int = DEFAULT_PORT) -> str:
    """Strip whitespace and append the default port when none is given."""
    host = host.strip()
    if host and ":" not in host:
        host = f"{host}:{default_port}"
    return host


def parse_host_list(value: str, *, default_port: int = DEFAULT_PORT) -> list[str]:
    """Parse a comma-separated host list.

    Blank entries are skipped and duplicates dropped, keeping the order of
    first appearance.

    Args:
        value: Comma-separated host addresses, e.g. "plotter1, plotter2:9000"
        default_port: Port appended to entries without one

    Returns:
        List of host addresses in "host:port" form

    Raises:
        UserError: If no hosts remain after parsing
    """
    hosts: list[str] = []
    for entry in value.split(","):
        host = normalize_host(entry, default_port=default_port)
        if host and host not in hosts:
            hosts.append(host)
    if not hosts:
        raise UserError("No hosts given. Pass a comma-separated list like 'plotter1,plotter2'.")
    return hosts
