"""Shared pytest fixtures for Plotwatch tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from plotwatch.snapshot import Job, JobState, Snapshot

T0 = 1_700_000_000.0


@pytest.fixture
def make_job() -> Callable[..., Job]:
    """Factory for jobs with sensible defaults."""

    def factory(
        job_id: str,
        *,
        state: JobState = JobState.RUNNING,
        phase: int = 1,
        progress: int = 0,
        phase_times: tuple[float, ...] | None = None,
        source_dir: str = "/mnt/tmp1",
        dest_dir: str = "/mnt/dst1",
        tail: tuple[str, ...] = (),
    ) -> Job:
        if phase_times is None:
            phase_times = (T0, 0.0, 0.0, 0.0, 0.0)
        return Job(
            id=job_id,
            state=state,
            phase=phase,
            progress=progress,
            phase_times=phase_times,
            source_dir=source_dir,
            dest_dir=dest_dir,
            tail=tail,
        )

    return factory


@pytest.fixture
def finished_times() -> tuple[float, ...]:
    """Phase timestamps of a finished job: phases take 1h, 2h, 30m, 10m."""
    return (T0, T0 + 3600, T0 + 3 * 3600, T0 + 3 * 3600 + 1800, T0 + 3 * 3600 + 2400)


@pytest.fixture
def running_job(make_job) -> Job:
    return make_job(
        "running-job-0123456789abcdef",
        phase=2,
        progress=40,
        tail=("Starting phase 1/4\n", "Starting phase 2/4\n"),
    )


@pytest.fixture
def finished_job(make_job, finished_times) -> Job:
    return make_job(
        "finished-job-0123456789abcdef",
        state=JobState.FINISHED,
        phase=4,
        progress=100,
        phase_times=finished_times,
        tail=("Renamed final file\n",),
    )


@pytest.fixture
def host1_snapshot(running_job, finished_job) -> Snapshot:
    return Snapshot(
        active_jobs=[running_job],
        archived_jobs=[finished_job],
        source_dirs={"/mnt/tmp1": 500 * 1024**3},
        dest_dirs={"/mnt/dst1": 8 * 1024**4},
    )


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = T0 + 5 * 3600) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
