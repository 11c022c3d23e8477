"""Staleness gate between the reader and the publisher.

Polling and OS notifications often observe the same write. The detector
keeps the modification time of the last emitted snapshot and only lets a
snapshot through when it is strictly newer, or when the file's existence
(or failure reason) changed since the last emission.

Known limitation: if the filesystem clock moves backwards, nothing is emitted
until a modification time strictly exceeds the last recorded one.
"""

from datetime import datetime

from texthound.core.types.file_snapshot import FileSnapshot, SnapshotStatus


def is_newer(previous_last_modified: datetime | None, snapshot: FileSnapshot) -> bool:
    """Strict monotonic comparison; equal timestamps are duplicates."""
    if snapshot.last_modified is None:
        return False
    if previous_last_modified is None:
        return True
    return snapshot.last_modified > previous_last_modified


class ChangeDetector:
    """Decides whether a fresh snapshot is worth emitting.

    Must only be driven from inside the scheduler's cycle gate;
    ``should_emit`` followed by ``record`` is the read-modify-write of the
    monitor state.
    """

    def __init__(self) -> None:
        self.last_emitted_mod_time: datetime | None = None
        # None until the first emission after start/reset
        self._last_existed: bool | None = None
        self._last_failure: tuple[SnapshotStatus, str] | None = None

    @property
    def has_emitted(self) -> bool:
        return self._last_existed is not None

    def reset(self) -> None:
        """Forget all history so the next snapshot always emits."""
        self.last_emitted_mod_time = None
        self._last_existed = None
        self._last_failure = None

    def should_emit(self, snapshot: FileSnapshot) -> bool:
        if self._last_existed is None:
            return True

        if not snapshot.exists:
            if self._last_existed:
                return True
            return (snapshot.status, snapshot.error_message) != self._last_failure

        if not self._last_existed:
            # File came back after a missing/error emission
            return True

        return is_newer(self.last_emitted_mod_time, snapshot)

    def record(self, snapshot: FileSnapshot) -> None:
        """Record an emitted snapshot as the new baseline."""
        self._last_existed = snapshot.exists
        if snapshot.exists:
            self._last_failure = None
            if snapshot.last_modified is not None:
                self.last_emitted_mod_time = snapshot.last_modified
        else:
            self._last_failure = (snapshot.status, snapshot.error_message)

    def accept(self, snapshot: FileSnapshot) -> bool:
        """Check and record in one step; returns whether to emit."""
        if not self.should_emit(snapshot):
            return False
        self.record(snapshot)
        return True
