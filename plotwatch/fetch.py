"""HTTP snapshot fetching from plotting hosts."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

import requests

from .constants import FETCH_CHUNK_SIZE, REQUEST_TIMEOUT_S
from .exceptions import DecodeError, NetworkError
from .snapshot import Snapshot, decode_snapshot

logger = logging.getLogger(__name__)


def snapshot_url(host: str) -> str:
    """Return the status endpoint for a host address."""
    return f"http://{host}/"


class SnapshotFetcher:
    """Fetch and decode one host snapshot per call.

    The timeout is an end-to-end deadline covering connect, transfer and
    decode. There is no retry; the poll cadence provides it.
    """

    def __init__(
        self,
        *,
        timeout: float = REQUEST_TIMEOUT_S,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout
        self.clock = clock
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", "plotwatch")

    def fetch(self, host: str) -> Snapshot:
        """Fetch the current snapshot of ``host``.

        Args:
            host: Host address in "host:port" form

        Returns:
            Decoded snapshot

        Raises:
            NetworkError: Connection failure, HTTP error status or deadline exceeded
            DecodeError: Payload is not a valid snapshot
        """
        url = snapshot_url(host)
        started = self.clock()
        deadline = started + self.timeout
        logger.debug("Fetching %s (timeout %gs)", url, self.timeout)

        try:
            payload = self._read_body(url, deadline)
        except requests.Timeout as e:
            raise NetworkError(host, f"GET {url}: timed out after {self.timeout:g}s") from e
        except requests.RequestException as e:
            raise NetworkError(host, f"GET {url}: {e}") from e

        try:
            snapshot = decode_snapshot(payload)
        except ValueError as e:
            raise DecodeError(host, f"Failed to decode message: {e}") from e
        if self.clock() > deadline:
            raise NetworkError(host, f"GET {url}: timed out after {self.timeout:g}s")

        logger.debug(
            "Fetched %s in %.2fs (%d bytes, %d active, %d archived)",
            host,
            self.clock() - started,
            len(payload),
            len(snapshot.active_jobs),
            len(snapshot.archived_jobs),
        )
        return snapshot

    def _read_body(self, url: str, deadline: float) -> bytes:
        """Download the body on a worker thread, waiting no longer than the deadline.

        A socket timeout only bounds each recv, so a host trickling its
        headers or body would otherwise hold the sweep indefinitely. On
        expiry the response is closed if it exists and the daemon worker is
        abandoned.
        """
        state: dict[str, Any] = {}
        done = threading.Event()

        def download() -> None:
            try:
                state["body"] = self._download(url, deadline, state)
            except Exception as e:
                state["error"] = e
            finally:
                done.set()

        worker = threading.Thread(target=download, name="plotwatch-fetch", daemon=True)
        worker.start()
        if not done.wait(max(deadline - self.clock(), 0.0)):
            response = state.get("response")
            if response is not None:
                response.close()
            raise requests.Timeout(f"read of {url} exceeded deadline")
        if "error" in state:
            raise state["error"]
        return state["body"]

    def _download(self, url: str, deadline: float, state: dict[str, Any]) -> bytes:
        response = self.session.get(url, timeout=(self.timeout, self.timeout), stream=True)
        state["response"] = response
        try:
            response.raise_for_status()
            chunks = []
            for chunk in response.iter_content(chunk_size=FETCH_CHUNK_SIZE):
                if self.clock() > deadline:
                    raise requests.Timeout(f"read of {url} exceeded deadline")
                chunks.append(chunk)
            return b"".join(chunks)
        finally:
            response.close()

    def close(self) -> None:
        self.session.close()
