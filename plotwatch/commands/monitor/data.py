"""Data aggregation and value formatting for the monitor command.

Everything here is pure: functions take the snapshot store (or plain values)
and return new objects, so they are easy to test without curses.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field

from ...constants import (
    DIR_KEY_SEP,
    PHASE_COUNT,
    SHORT_ID_MIN_LEN,
    SHORT_ID_PART_LEN,
    TIME_FORMAT,
    UNADVERTISED_BYTES,
)
from ...snapshot import Job, JobState
from .store import SnapshotStore


def dir_key(host: str, path: str) -> str:
    """Row key for a (host, directory) pair."""
    return f"{host}{DIR_KEY_SEP}{path}"


@dataclass
class DirectoryStats:
    """Capacity and historical throughput of one directory on one host.

    Attributes:
        host: Host address
        path: Directory path on that host
        available_bytes: Free space, or UNADVERTISED_BYTES if the host no longer reports it
        avg_phase_durations: Mean seconds spent in each of the 4 phases (finished jobs only)
        avg_total_duration: Mean seconds from start to completion (finished jobs only)
        succeeded: Number of finished jobs
        failed: Number of errored or killed jobs
    """

    host: str
    path: str
    available_bytes: int = UNADVERTISED_BYTES
    avg_phase_durations: list[float] = field(default_factory=lambda: [0.0] * PHASE_COUNT)
    avg_total_duration: float = 0.0
    succeeded: int = 0
    failed: int = 0


@dataclass
class DirectoryAggregate:
    """Directory statistics keyed by row key."""

    source: dict[str, DirectoryStats]
    dest: dict[str, DirectoryStats]


def _locate(stats: dict[str, DirectoryStats], host: str, path: str) -> DirectoryStats:
    key = dir_key(host, path)
    entry = stats.get(key)
    if entry is None:
        # Directory only known from job history
        entry = DirectoryStats(host=host, path=path)
        stats[key] = entry
    return entry


def _accumulate(entry: DirectoryStats, job: Job) -> None:
    if job.state == JobState.FINISHED:
        for n in range(1, PHASE_COUNT + 1):
            entry.avg_phase_durations[n - 1] += job.phase_time(n) - job.phase_time(n - 1)
        entry.avg_total_duration += job.end_time - job.start_time
        entry.succeeded += 1
    elif job.state.failed:
        entry.failed += 1


def _average(stats: dict[str, DirectoryStats]) -> None:
    for entry in stats.values():
        if entry.succeeded > 0:
            entry.avg_phase_durations = [d / entry.succeeded for d in entry.avg_phase_durations]
            entry.avg_total_duration /= entry.succeeded


def aggregate_directories(store: SnapshotStore) -> DirectoryAggregate:
    """Derive source and destination directory statistics from all hosts.

    Recomputed from scratch on every call. Sums are only divided when a
    directory has at least one finished job; otherwise averages stay 0.
    """
    source: dict[str, DirectoryStats] = {}
    dest: dict[str, DirectoryStats] = {}

    for host, snapshot in store.items():
        for path, available in snapshot.source_dirs.items():
            source[dir_key(host, path)] = DirectoryStats(
                host=host, path=path, available_bytes=available
            )
        for path, available in snapshot.dest_dirs.items():
            dest[dir_key(host, path)] = DirectoryStats(
                host=host, path=path, available_bytes=available
            )

        for job in snapshot.archived_jobs:
            _accumulate(_locate(source, host, job.source_dir), job)
            _accumulate(_locate(dest, host, job.dest_dir), job)

    _average(source)
    _average(dest)
    return DirectoryAggregate(source=source, dest=dest)


def count_archived(store: SnapshotStore) -> tuple[int, int]:
    """Return (finished, failed) counts across all hosts' archived jobs."""
    finished = failed = 0
    for _host, snapshot in store.items():
        for job in snapshot.archived_jobs:
            if job.state == JobState.FINISHED:
                finished += 1
            elif job.state.failed:
                failed += 1
    return finished, failed


def humanize_duration(seconds_value: float | None, *, min_unit: str = "s") -> str:
    """Return a humanized duration from seconds.

    Args:
        seconds_value: Duration in seconds
        min_unit: Minimum unit to display ("s" for seconds, "m" for minutes).
                  If "m" and value < 60s, shows "<1m" instead of seconds.
    """
    if seconds_value is None:
        return "-"
    seconds_value = max(int(seconds_value), 0)
    if seconds_value < 60:
        if min_unit == "m":
            return "<1m"
        return f"{seconds_value}s"
    minutes, seconds = divmod(seconds_value, 60)
    if minutes < 60:
        return f"{minutes}m"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes:02d}m"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours:02d}h"


def humanize_bytes(value: int | None) -> str:
    """Return a human-readable capacity using binary units.

    The unadvertised-directory sentinel renders as "-".
    """
    if value is None or value == UNADVERTISED_BYTES:
        return "-"
    size = float(max(value, 0))
    if size < 1024:
        return f"{int(size)} B"
    for unit in ("KiB", "MiB", "GiB", "TiB"):
        size /= 1024
        if size < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} PiB"


def shorten_job_id(job_id: str) -> str:
    """Shorten a job id to "first10...last10"; ids too short to shorten show empty."""
    if len(job_id) < SHORT_ID_MIN_LEN:
        return ""
    return f"{job_id[:SHORT_ID_PART_LEN]}...{job_id[-SHORT_ID_PART_LEN:]}"


def format_timestamp(epoch: float) -> str:
    """Format an epoch timestamp in local time; 0 means not reached."""
    if not epoch:
        return "-"
    return dt.datetime.fromtimestamp(epoch).strftime(TIME_FORMAT)


def elapsed_between(start: float, end: float) -> float | None:
    """Seconds from start to end, or None when either is unknown."""
    if not start or not end:
        return None
    return max(end - start, 0.0)
