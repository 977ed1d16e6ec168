"""Row types, their table describers, and row builders for each table."""

from __future__ import annotations

from dataclasses import dataclass

from ...snapshot import JobState
from .data import (
    DirectoryAggregate,
    DirectoryStats,
    elapsed_between,
    format_timestamp,
    humanize_bytes,
    humanize_duration,
    shorten_job_id,
)
from .store import SnapshotStore
from .table import Column, RowDescriber


def _state_label(state: JobState) -> str:
    return state.label


def _phase_label(phase: int) -> str:
    return f"{phase}/4"


def _percent(progress: int) -> str:
    return f"{progress}%"


@dataclass(frozen=True)
class ActiveJobRow:
    host: str
    job_id: str
    state: JobState
    phase: int
    progress: int
    start_time: float
    duration: float | None
    source_dir: str
    dest_dir: str


@dataclass(frozen=True)
class ArchivedJobRow:
    host: str
    job_id: str
    state: JobState
    phase: int
    start_time: float
    end_time: float
    duration: float | None
    source_dir: str
    dest_dir: str


@dataclass(frozen=True)
class SourceDirRow:
    host: str
    path: str
    available_bytes: int
    avg_phase1: float
    avg_phase2: float
    avg_phase3: float
    avg_phase4: float
    succeeded: int
    failed: int


@dataclass(frozen=True)
class DestDirRow:
    host: str
    path: str
    available_bytes: int
    avg_total: float
    succeeded: int
    failed: int


@dataclass(frozen=True)
class HostRow:
    host: str
    status: str


ACTIVE_JOB_DESCRIBER = RowDescriber(
    [
        Column("Host", "host"),
        Column("Job ID", "job_id", shorten_job_id),
        Column("Status", "state", _state_label),
        Column("Phase", "phase", _phase_label, align_right=True),
        Column("Progress", "progress", _percent, align_right=True),
        Column("Start Time", "start_time", format_timestamp),
        Column("Duration", "duration", humanize_duration, align_right=True),
        Column("Source Dir", "source_dir"),
        Column("Dest Dir", "dest_dir"),
    ]
)

ARCHIVED_JOB_DESCRIBER = RowDescriber(
    [
        Column("Host", "host"),
        Column("Job ID", "job_id", shorten_job_id),
        Column("Status", "state", _state_label),
        Column("Phase", "phase", _phase_label, align_right=True),
        Column("Start Time", "start_time", format_timestamp),
        Column("End Time", "end_time", format_timestamp),
        Column("Duration", "duration", humanize_duration, align_right=True),
        Column("Source Dir", "source_dir"),
        Column("Dest Dir", "dest_dir"),
    ]
)

SOURCE_DIR_DESCRIBER = RowDescriber(
    [
        Column("Host", "host"),
        Column("Directory", "path"),
        Column("Available", "available_bytes", humanize_bytes, align_right=True),
        Column("Avg Phase 1", "avg_phase1", humanize_duration, align_right=True),
        Column("Avg Phase 2", "avg_phase2", humanize_duration, align_right=True),
        Column("Avg Phase 3", "avg_phase3", humanize_duration, align_right=True),
        Column("Avg Phase 4", "avg_phase4", humanize_duration, align_right=True),
        Column("Count", "succeeded", str, align_right=True),
        Column("Failed", "failed", str, align_right=True),
    ]
)

DEST_DIR_DESCRIBER = RowDescriber(
    [
        Column("Host", "host"),
        Column("Directory", "path"),
        Column("Available", "available_bytes", humanize_bytes, align_right=True),
        Column("Avg Job Time", "avg_total", humanize_duration, align_right=True),
        Column("Count", "succeeded", str, align_right=True),
        Column("Failed", "failed", str, align_right=True),
    ]
)

HOST_DESCRIBER = RowDescriber(
    [
        Column("Host", "host"),
        Column("Status", "status"),
    ]
)


def build_active_rows(
    store: SnapshotStore, *, now: float
) -> tuple[dict[str, ActiveJobRow], dict[str, tuple[str, ...]]]:
    """Return active job rows and log tails, both keyed by job id."""
    rows: dict[str, ActiveJobRow] = {}
    logs: dict[str, tuple[str, ...]] = {}
    for host, snapshot in store.items():
        for job in snapshot.active_jobs:
            logs[job.id] = job.tail
            rows[job.id] = ActiveJobRow(
                host=host,
                job_id=job.id,
                state=job.state,
                phase=job.phase,
                progress=job.progress,
                start_time=job.start_time,
                duration=elapsed_between(job.start_time, now),
                source_dir=job.source_dir,
                dest_dir=job.dest_dir,
            )
    return rows, logs


def build_archived_rows(
    store: SnapshotStore,
) -> tuple[dict[str, ArchivedJobRow], dict[str, tuple[str, ...]]]:
    """Return archived job rows and log tails, both keyed by job id."""
    rows: dict[str, ArchivedJobRow] = {}
    logs: dict[str, tuple[str, ...]] = {}
    for host, snapshot in store.items():
        for job in snapshot.archived_jobs:
            logs[job.id] = job.tail
            rows[job.id] = ArchivedJobRow(
                host=host,
                job_id=job.id,
                state=job.state,
                phase=job.phase,
                start_time=job.start_time,
                end_time=job.end_time,
                duration=elapsed_between(job.start_time, job.end_time),
                source_dir=job.source_dir,
                dest_dir=job.dest_dir,
            )
    return rows, logs


def _source_row(stats: DirectoryStats) -> SourceDirRow:
    p1, p2, p3, p4 = stats.avg_phase_durations
    return SourceDirRow(
        host=stats.host,
        path=stats.path,
        available_bytes=stats.available_bytes,
        avg_phase1=p1,
        avg_phase2=p2,
        avg_phase3=p3,
        avg_phase4=p4,
        succeeded=stats.succeeded,
        failed=stats.failed,
    )


def build_source_dir_rows(aggregate: DirectoryAggregate) -> dict[str, SourceDirRow]:
    return {key: _source_row(stats) for key, stats in aggregate.source.items()}


def build_dest_dir_rows(aggregate: DirectoryAggregate) -> dict[str, DestDirRow]:
    return {
        key: DestDirRow(
            host=stats.host,
            path=stats.path,
            available_bytes=stats.available_bytes,
            avg_total=stats.avg_total_duration,
            succeeded=stats.succeeded,
            failed=stats.failed,
        )
        for key, stats in aggregate.dest.items()
    }


def build_host_rows(store: SnapshotStore) -> dict[str, HostRow]:
    return {host: HostRow(host=host, status=snapshot.status) for host, snapshot in store.items()}
