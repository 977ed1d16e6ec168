"""Background polling and render-thread dispatch.

Two threads cooperate: the poll thread performs blocking network I/O, one
host at a time, and the render thread owns every table, the snapshot store
and the selection. The only thing that crosses between them is a callable
submitted to the RenderDispatcher queue.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Sequence

from ...constants import POLL_INTERVAL_S
from ...exceptions import FetchError, NetworkError
from ...snapshot import Snapshot

logger = logging.getLogger(__name__)

PollOutcome = Snapshot | FetchError


class RenderDispatcher:
    """Single-consumer work queue drained by the render thread."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()

    def submit(self, mutation: Callable[[], None]) -> None:
        """Schedule ``mutation`` to run on the render thread. Safe from any thread."""
        self._queue.put(mutation)

    def run_pending(self, max_items: int | None = None) -> int:
        """Run queued mutations in FIFO order, each to completion.

        Only the render thread may call this.

        Args:
            max_items: Stop after this many (None drains the queue)

        Returns:
            Number of mutations run
        """
        ran = 0
        while max_items is None or ran < max_items:
            try:
                mutation = self._queue.get_nowait()
            except queue.Empty:
                break
            mutation()
            ran += 1
        return ran


class PollScheduler:
    """Poll every host once immediately, then once per interval, sequentially."""

    def __init__(
        self,
        hosts: Sequence[str],
        *,
        fetch: Callable[[str], Snapshot],
        on_result: Callable[[str, PollOutcome], None],
        interval: float = POLL_INTERVAL_S,
    ) -> None:
        self.hosts = list(hosts)
        self.fetch = fetch
        self.on_result = on_result
        self.interval = interval
        self.sweeps = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def poll_host(self, host: str) -> PollOutcome:
        """Fetch one host, turning any failure into a FetchError value."""
        try:
            return self.fetch(host)
        except FetchError as e:
            logger.debug("Poll of %s failed: %s", host, e)
            return e
        except Exception as e:
            logger.exception("Unexpected error polling %s", host)
            return NetworkError(host, f"unexpected error: {e}")

    def sweep(self) -> None:
        """Poll all hosts in order; stops early if the scheduler is stopped."""
        for host in self.hosts:
            if self._stop.is_set():
                return
            self.on_result(host, self.poll_host(host))
        self.sweeps += 1
        logger.debug("Sweep %d complete (%d hosts)", self.sweeps, len(self.hosts))

    def run(self) -> None:
        """Sweep now, then every ``interval`` seconds until stop() is called."""
        self.sweep()
        while not self._stop.wait(self.interval):
            self.sweep()

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(target=self.run, name="plotwatch-poller", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, *, join_timeout: float | None = None) -> None:
        """Stop after the in-flight fetch; in-flight requests are not cancelled."""
        self._stop.set()
        if self._thread is not None and join_timeout is not None:
            self._thread.join(join_timeout)
