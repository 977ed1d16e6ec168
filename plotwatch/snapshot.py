"""Host snapshot model and MessagePack wire decoding.

A plotting host answers ``GET /`` with a MessagePack map describing its
running jobs, recently archived jobs, and the free space of the directories
it plots into. This module turns that payload into plain dataclasses.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

import msgpack

from .constants import MAX_PHASE_TIMESTAMP, PHASE_TIMESTAMP_COUNT


class JobState(IntEnum):
    """Lifecycle state of a job as reported by its host."""

    RUNNING = 0
    ERRORED = 1
    FINISHED = 2
    KILLED = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def failed(self) -> bool:
        return self in (JobState.ERRORED, JobState.KILLED)


@dataclass(frozen=True)
class Job:
    """One multi-phase plot job.

    Attributes:
        id: Globally unique job id, stable for the job's lifetime
        state: Current lifecycle state
        phase: Current phase, 0..4
        progress: Progress percentage, 0..100
        phase_times: Five epoch timestamps (start, end of phases 1-4); 0 = not reached
        source_dir: Directory the job works in
        dest_dir: Directory the finished plot is written to
        tail: Most recent log lines
    """

    id: str
    state: JobState
    phase: int = 0
    progress: int = 0
    phase_times: tuple[float, ...] = (0.0,) * PHASE_TIMESTAMP_COUNT
    source_dir: str = ""
    dest_dir: str = ""
    tail: tuple[str, ...] = ()

    def phase_time(self, index: int) -> float:
        """Return the timestamp at which phase ``index`` was reached, or 0."""
        if 0 <= index < len(self.phase_times):
            return self.phase_times[index]
        return 0.0

    @property
    def start_time(self) -> float:
        return self.phase_time(0)

    @property
    def end_time(self) -> float:
        return self.phase_time(PHASE_TIMESTAMP_COUNT - 1)


@dataclass
class Snapshot:
    """A host's self-reported state.

    ``status`` is empty after a successful poll and holds the error text after
    a failed one; all other fields then still describe the last good poll.
    """

    status: str = ""
    active_jobs: list[Job] = field(default_factory=list)
    archived_jobs: list[Job] = field(default_factory=list)
    source_dirs: dict[str, int] = field(default_factory=dict)
    dest_dirs: dict[str, int] = field(default_factory=dict)


def _require(value: Any, kind: type | tuple[type, ...], what: str) -> Any:
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and kind is not bool or not isinstance(value, kind):
        raise ValueError(f"{what}: expected {_kind_name(kind)}, got {type(value).__name__}")
    return value


def _kind_name(kind: type | tuple[type, ...]) -> str:
    if isinstance(kind, tuple):
        return "/".join(k.__name__ for k in kind)
    return kind.__name__


def _decode_timestamp(value: Any, what: str) -> float:
    if isinstance(value, msgpack.Timestamp):
        seconds = value.to_unix()
    else:
        seconds = float(_require(value, (int, float), what))
    if not math.isfinite(seconds) or not 0 <= seconds <= MAX_PHASE_TIMESTAMP:
        raise ValueError(f"{what}: timestamp {seconds!r} out of range")
    return seconds


def _decode_job(data: Any) -> Job:
    _require(data, dict, "job")
    job_id = _require(data.get("id"), str, "job.id")
    try:
        state = JobState(_require(data.get("state"), int, f"job {job_id} state"))
    except ValueError as e:
        raise ValueError(f"job {job_id}: unknown state {data.get('state')!r}") from e

    raw_times = data.get("phase_times") or [0] * PHASE_TIMESTAMP_COUNT
    _require(raw_times, list, f"job {job_id} phase_times")
    if len(raw_times) != PHASE_TIMESTAMP_COUNT:
        raise ValueError(
            f"job {job_id}: expected {PHASE_TIMESTAMP_COUNT} phase timestamps, got {len(raw_times)}"
        )
    phase_times = tuple(_decode_timestamp(t, f"job {job_id} phase_times") for t in raw_times)

    tail = _require(data.get("tail", []), list, f"job {job_id} tail")
    return Job(
        id=job_id,
        state=state,
        phase=_require(data.get("phase", 0), int, f"job {job_id} phase"),
        progress=_require(data.get("progress", 0), int, f"job {job_id} progress"),
        phase_times=phase_times,
        source_dir=_require(data.get("source_dir", ""), str, f"job {job_id} source_dir"),
        dest_dir=_require(data.get("dest_dir", ""), str, f"job {job_id} dest_dir"),
        tail=tuple(_require(line, str, f"job {job_id} tail line") for line in tail),
    )


def _decode_dirs(data: Any, what: str) -> dict[str, int]:
    _require(data, dict, what)
    return {
        _require(path, str, f"{what} path"): _require(space, int, f"{what}[{path}]")
        for path, space in data.items()
    }


def snapshot_from_wire(data: Any) -> Snapshot:
    """Build a Snapshot from an already-unpacked wire map.

    Raises:
        ValueError: If the structure does not match the snapshot schema
    """
    _require(data, dict, "snapshot")
    return Snapshot(
        status=_require(data.get("status", ""), str, "status"),
        active_jobs=[_decode_job(j) for j in _require(data.get("active", []), list, "active")],
        archived_jobs=[
            _decode_job(j) for j in _require(data.get("archived", []), list, "archived")
        ],
        source_dirs=_decode_dirs(data.get("source_dirs", {}), "source_dirs"),
        dest_dirs=_decode_dirs(data.get("dest_dirs", {}), "dest_dirs"),
    )


def decode_snapshot(payload: bytes) -> Snapshot:
    """Decode a MessagePack snapshot payload.

    Raises:
        ValueError: On truncated, trailing or malformed data
    """
    try:
        data = msgpack.unpackb(payload, raw=False)
    except msgpack.UnpackException as e:
        raise ValueError(str(e) or type(e).__name__) from e
    return snapshot_from_wire(data)


def _job_to_wire(job: Job) -> dict[str, Any]:
    return {
        "id": job.id,
        "state": int(job.state),
        "phase": job.phase,
        "progress": job.progress,
        "phase_times": list(job.phase_times),
        "source_dir": job.source_dir,
        "dest_dir": job.dest_dir,
        "tail": list(job.tail),
    }


def snapshot_to_wire(snapshot: Snapshot) -> dict[str, Any]:
    """Return the wire map for a snapshot (also used for JSON output)."""
    return {
        "status": snapshot.status,
        "active": [_job_to_wire(j) for j in snapshot.active_jobs],
        "archived": [_job_to_wire(j) for j in snapshot.archived_jobs],
        "source_dirs": dict(snapshot.source_dirs),
        "dest_dirs": dict(snapshot.dest_dirs),
    }


def encode_snapshot(snapshot: Snapshot) -> bytes:
    """Encode a snapshot the way a plotting host does."""
    return msgpack.packb(snapshot_to_wire(snapshot), use_bin_type=True)
