"""Tests for plotwatch/fetch.py - snapshot fetching."""

from __future__ import annotations

import socket
import threading
import time
from unittest.mock import MagicMock

import msgpack
import pytest
import requests
from plotwatch.exceptions import DecodeError, FetchError, NetworkError
from plotwatch.fetch import SnapshotFetcher, snapshot_url
from plotwatch.snapshot import encode_snapshot


def _response(chunks: list[bytes]) -> MagicMock:
    response = MagicMock()
    response.iter_content.return_value = iter(chunks)
    return response


def _fetcher(session: MagicMock, **kwargs) -> SnapshotFetcher:
    return SnapshotFetcher(session=session, **kwargs)


def test_snapshot_url():
    assert snapshot_url("plotter1:8484") == "http://plotter1:8484/"


class TestSnapshotFetcher:
    """Tests for SnapshotFetcher.fetch."""

    def test_success(self, host1_snapshot):
        session = MagicMock()
        payload = encode_snapshot(host1_snapshot)
        session.get.return_value = _response([payload[:10], payload[10:]])

        snapshot = _fetcher(session).fetch("plotter1:8484")

        assert snapshot == host1_snapshot
        session.get.assert_called_once_with(
            "http://plotter1:8484/", timeout=(10, 10), stream=True
        )
        session.get.return_value.close.assert_called_once()

    def test_connect_timeout(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectTimeout("slow")

        with pytest.raises(NetworkError, match="timed out after 10s") as exc_info:
            _fetcher(session).fetch("plotter2:8484")
        assert exc_info.value.host == "plotter2:8484"

    def test_connection_refused(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("Connection refused")

        with pytest.raises(NetworkError, match="Connection refused"):
            _fetcher(session).fetch("plotter2:8484")

    def test_http_error_status(self):
        session = MagicMock()
        response = _response([])
        response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        session.get.return_value = response

        with pytest.raises(NetworkError, match="500 Server Error"):
            _fetcher(session).fetch("plotter1:8484")
        response.close.assert_called_once()

    def test_malformed_payload(self):
        session = MagicMock()
        session.get.return_value = _response([b"\xc1not msgpack"])

        with pytest.raises(DecodeError, match="Failed to decode message"):
            _fetcher(session).fetch("plotter1:8484")

    def test_schema_mismatch_is_decode_error(self):
        session = MagicMock()
        session.get.return_value = _response([msgpack.packb({"active": "nope"})])

        with pytest.raises(DecodeError):
            _fetcher(session).fetch("plotter1:8484")

    def test_out_of_range_timestamp_is_decode_error(self):
        job = {"id": "x" * 24, "state": 2, "phase_times": [1e20, 0, 0, 0, 1e20]}
        session = MagicMock()
        session.get.return_value = _response([msgpack.packb({"archived": [job]})])

        with pytest.raises(DecodeError, match="out of range"):
            _fetcher(session).fetch("plotter1:8484")

    def test_deadline_exceeded_while_reading(self, host1_snapshot):
        session = MagicMock()
        payload = encode_snapshot(host1_snapshot)
        release = threading.Event()

        def stalled_chunks(chunk_size):
            yield payload[:10]
            release.wait(5)
            yield payload[10:]

        response = MagicMock()
        response.iter_content.side_effect = stalled_chunks
        session.get.return_value = response

        started = time.monotonic()
        try:
            with pytest.raises(NetworkError, match="timed out after 0.2s"):
                _fetcher(session, timeout=0.2).fetch("plotter1:8484")
        finally:
            release.set()
        assert time.monotonic() - started < 2
        response.close.assert_called()

    def test_fetch_errors_share_base_class(self):
        session = MagicMock()
        session.get.side_effect = requests.ReadTimeout("slow")

        with pytest.raises(FetchError):
            _fetcher(session, timeout=2.5).fetch("plotter1:8484")

    def test_custom_timeout_passed_to_requests(self, host1_snapshot):
        session = MagicMock()
        session.get.return_value = _response([encode_snapshot(host1_snapshot)])

        _fetcher(session, timeout=3).fetch("plotter1:8484")

        assert session.get.call_args.kwargs["timeout"] == (3, 3)


def _trickle(conn: socket.socket, data: bytes, stop: threading.Event, delay: float) -> None:
    for i in range(len(data)):
        if stop.wait(delay):
            return
        conn.sendall(data[i : i + 1])


@pytest.fixture
def slow_server():
    """Local HTTP server that sends either its headers or its body one byte at a time."""
    listener = socket.create_server(("127.0.0.1", 0))
    stop = threading.Event()
    mode: dict[str, str] = {}

    def serve() -> None:
        try:
            conn, _addr = listener.accept()
        except OSError:
            return
        with conn:
            try:
                conn.recv(4096)
                headers = b"HTTP/1.1 200 OK\r\nContent-Length: 12\r\n\r\n"
                if mode["slow"] == "headers":
                    _trickle(conn, headers, stop, 0.3)
                else:
                    conn.sendall(headers)
                    _trickle(conn, b"\x80" * 12, stop, 0.3)
            except OSError:
                return

    def start(slow: str) -> str:
        mode["slow"] = slow
        threading.Thread(target=serve, daemon=True).start()
        return f"127.0.0.1:{listener.getsockname()[1]}"

    yield start
    stop.set()
    listener.close()


@pytest.mark.parametrize("slow", ["headers", "body"])
def test_slow_host_bounded_by_timeout(slow_server, slow):
    """A host trickling bytes cannot hold a fetch past its deadline."""
    host = slow_server(slow)
    session = requests.Session()
    session.trust_env = False
    fetcher = SnapshotFetcher(timeout=1.0, session=session)
    started = time.monotonic()
    try:
        with pytest.raises(NetworkError, match="timed out after 1s"):
            fetcher.fetch(host)
    finally:
        fetcher.close()
    assert time.monotonic() - started < 2.0
