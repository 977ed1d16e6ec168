"""Tests for the snapshot store's stale-on-error merge."""

from __future__ import annotations

from plotwatch.commands.monitor import SnapshotStore
from plotwatch.exceptions import DecodeError, NetworkError
from plotwatch.snapshot import Snapshot


def test_success_replaces_record(host1_snapshot, make_job):
    store = SnapshotStore()
    store.apply("plotter1:8484", host1_snapshot)

    newer = Snapshot(active_jobs=[make_job("other-job-0123456789abcdef")])
    store.apply("plotter1:8484", newer)

    assert store.get("plotter1:8484") == newer
    assert store.get("plotter1:8484").source_dirs == {}


def test_success_clears_status(host1_snapshot):
    store = SnapshotStore()
    store.apply("plotter1:8484", NetworkError("plotter1:8484", "connection refused"))
    store.apply("plotter1:8484", host1_snapshot)

    assert store.get("plotter1:8484").status == ""


def test_reported_status_is_cleared_on_success():
    """A status field sent by the host is not an error; success means empty."""
    store = SnapshotStore()
    store.apply("plotter1:8484", Snapshot(status="leftover"))
    assert store.get("plotter1:8484").status == ""


def test_failure_keeps_last_good_data(host1_snapshot):
    store = SnapshotStore()
    store.apply("plotter1:8484", host1_snapshot)
    store.apply("plotter1:8484", NetworkError("plotter1:8484", "timed out"))

    record = store.get("plotter1:8484")
    assert record.status == "timed out"
    assert record.active_jobs == host1_snapshot.active_jobs
    assert record.archived_jobs == host1_snapshot.archived_jobs
    assert record.source_dirs == host1_snapshot.source_dirs
    assert record.dest_dirs == host1_snapshot.dest_dirs


def test_failure_without_prior_record_creates_empty():
    store = SnapshotStore()
    store.apply("plotter2:8484", DecodeError("plotter2:8484", "Failed to decode message: x"))

    record = store.get("plotter2:8484")
    assert record == Snapshot(status="Failed to decode message: x")
    assert "plotter2:8484" in store
    assert len(store) == 1


def test_hosts_are_isolated(host1_snapshot):
    store = SnapshotStore()
    store.apply("plotter1:8484", host1_snapshot)
    store.apply("plotter2:8484", NetworkError("plotter2:8484", "timed out"))

    assert store.get("plotter1:8484").status == ""
    assert store.get("plotter1:8484").active_jobs == host1_snapshot.active_jobs
    assert [host for host, _ in store.items()] == ["plotter1:8484", "plotter2:8484"]


def test_unknown_host():
    store = SnapshotStore()
    assert store.get("nope:8484") is None
    assert list(store.items()) == []
