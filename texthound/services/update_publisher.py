"""Single-writer sink for emitted snapshots.

The monitoring service is the only writer. Observers either register one
callback at construction (push) or read ``latest`` whenever they attach
(pull), so a late observer does not have to wait for the next change.
"""

import threading
from typing import Callable

from loguru import logger

from texthound.core.types.file_snapshot import FileSnapshot

SnapshotCallback = Callable[[FileSnapshot], None]


class UpdatePublisher:
    """Stores the latest snapshot and forwards each one to a callback."""

    def __init__(self, on_update: SnapshotCallback | None = None) -> None:
        self._on_update = on_update
        self._lock = threading.Lock()
        self._latest: FileSnapshot | None = None
        self._publish_count = 0
        self._failure_count = 0

    @property
    def latest(self) -> FileSnapshot | None:
        """The most recently published snapshot, if any."""
        with self._lock:
            return self._latest

    @property
    def publish_count(self) -> int:
        with self._lock:
            return self._publish_count

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failure_count

    def publish(self, snapshot: FileSnapshot) -> None:
        """Expose ``snapshot`` and notify the callback.

        A failing callback is logged and counted; it never propagates to the
        caller, which is holding the monitor's cycle gate.
        """
        with self._lock:
            self._latest = snapshot
            self._publish_count += 1

        if self._on_update is None:
            return

        try:
            self._on_update(snapshot)
        except Exception as e:
            with self._lock:
                self._failure_count += 1
            logger.warning(f"Update callback failed for {snapshot.path}: {e}")
