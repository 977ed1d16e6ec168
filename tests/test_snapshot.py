"""Tests for plotwatch/snapshot.py - wire decoding."""

from __future__ import annotations

import msgpack
import pytest
from plotwatch.snapshot import (
    JobState,
    Snapshot,
    decode_snapshot,
    encode_snapshot,
    snapshot_from_wire,
)


def _job_wire(**overrides):
    job = {
        "id": "job-0123456789abcdefghij",
        "state": 0,
        "phase": 2,
        "progress": 40,
        "phase_times": [100, 200, 0, 0, 0],
        "source_dir": "/mnt/tmp1",
        "dest_dir": "/mnt/dst1",
        "tail": ["line 1\n", "line 2\n"],
    }
    job.update(overrides)
    return job


def _payload(**overrides) -> bytes:
    data = {
        "status": "",
        "active": [_job_wire()],
        "archived": [],
        "source_dirs": {"/mnt/tmp1": 1024},
        "dest_dirs": {"/mnt/dst1": 2048},
    }
    data.update(overrides)
    return msgpack.packb(data, use_bin_type=True)


class TestDecodeSnapshot:
    """Tests for decode_snapshot function."""

    def test_valid_payload(self):
        snapshot = decode_snapshot(_payload())
        assert snapshot.status == ""
        assert len(snapshot.active_jobs) == 1
        job = snapshot.active_jobs[0]
        assert job.id == "job-0123456789abcdefghij"
        assert job.state is JobState.RUNNING
        assert job.phase == 2
        assert job.progress == 40
        assert job.phase_times == (100.0, 200.0, 0.0, 0.0, 0.0)
        assert job.tail == ("line 1\n", "line 2\n")
        assert snapshot.source_dirs == {"/mnt/tmp1": 1024}
        assert snapshot.dest_dirs == {"/mnt/dst1": 2048}

    def test_missing_collections_default_empty(self):
        snapshot = decode_snapshot(msgpack.packb({}))
        assert snapshot == Snapshot()

    def test_msgpack_timestamps_accepted(self):
        ts = msgpack.Timestamp.from_unix(1_700_000_000)
        payload = _payload(active=[_job_wire(phase_times=[ts, 0, 0, 0, 0])])
        job = decode_snapshot(payload).active_jobs[0]
        assert job.start_time == 1_700_000_000.0

    def test_truncated_payload(self):
        with pytest.raises(ValueError):
            decode_snapshot(_payload()[:-5])

    def test_garbage_payload(self):
        with pytest.raises(ValueError):
            decode_snapshot(b"\xc1\xc1\xc1")

    def test_trailing_bytes(self):
        with pytest.raises(ValueError):
            decode_snapshot(_payload() + b"\x00")

    def test_root_not_a_map(self):
        with pytest.raises(ValueError, match="snapshot"):
            decode_snapshot(msgpack.packb([1, 2, 3]))

    def test_unknown_state(self):
        with pytest.raises(ValueError, match="unknown state"):
            decode_snapshot(_payload(active=[_job_wire(state=9)]))

    def test_wrong_phase_time_count(self):
        with pytest.raises(ValueError, match="phase timestamps"):
            decode_snapshot(_payload(active=[_job_wire(phase_times=[1, 2, 3])]))

    @pytest.mark.parametrize("bad", [1e20, float("nan"), float("inf"), -1])
    def test_unrepresentable_timestamp(self, bad):
        times = [1_700_000_000, 0, 0, 0, bad]
        with pytest.raises(ValueError, match="out of range"):
            decode_snapshot(_payload(archived=[_job_wire(state=2, phase_times=times)]))

    def test_far_future_msgpack_timestamp(self):
        ts = msgpack.Timestamp.from_unix(10**12)
        with pytest.raises(ValueError, match="out of range"):
            decode_snapshot(_payload(active=[_job_wire(phase_times=[ts, 0, 0, 0, 0])]))

    def test_missing_job_id(self):
        job = _job_wire()
        del job["id"]
        with pytest.raises(ValueError, match="job.id"):
            decode_snapshot(_payload(active=[job]))

    def test_bool_is_not_a_number(self):
        with pytest.raises(ValueError):
            decode_snapshot(_payload(active=[_job_wire(progress=True)]))

    def test_bad_directory_space(self):
        with pytest.raises(ValueError, match="source_dirs"):
            decode_snapshot(_payload(source_dirs={"/mnt/tmp1": "lots"}))


def test_encode_decode_preserves_snapshot(host1_snapshot):
    """A host-encoded snapshot decodes back to the same model."""
    assert decode_snapshot(encode_snapshot(host1_snapshot)) == host1_snapshot


def test_snapshot_from_wire_rejects_non_list_jobs():
    with pytest.raises(ValueError, match="archived"):
        snapshot_from_wire({"archived": {"id": "x"}})


def test_job_state_labels():
    assert JobState.RUNNING.label == "Running"
    assert JobState.KILLED.label == "Killed"
    assert JobState.ERRORED.failed
    assert JobState.KILLED.failed
    assert not JobState.FINISHED.failed
