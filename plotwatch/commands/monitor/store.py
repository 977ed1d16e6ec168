"""Per-host snapshot store with stale-on-error merging."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace

from ...exceptions import FetchError
from ...snapshot import Snapshot


class SnapshotStore:
    """Most recent known-good snapshot per host.

    Owned by the render thread; the poller never touches it directly.
    """

    def __init__(self) -> None:
        self._snapshots: dict[str, Snapshot] = {}

    def apply(self, host: str, outcome: Snapshot | FetchError) -> None:
        """Merge a poll outcome for ``host``.

        A successful snapshot replaces the host's record wholesale with its
        status cleared. A failure only overwrites the status text, so the jobs
        and directories of the last good poll stay visible; a host that never
        succeeded gets an empty record carrying the error.
        """
        if isinstance(outcome, FetchError):
            current = self.get(host) or Snapshot()
            self._snapshots[host] = replace(current, status=str(outcome))
            return
        self._snapshots[host] = replace(outcome, status="")

    def get(self, host: str) -> Snapshot | None:
        return self._snapshots.get(host)

    def items(self) -> Iterator[tuple[str, Snapshot]]:
        return iter(list(self._snapshots.items()))

    def __contains__(self, host: object) -> bool:
        return host in self._snapshots

    def __len__(self) -> int:
        return len(self._snapshots)
