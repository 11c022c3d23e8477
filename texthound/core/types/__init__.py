"""Value types shared across TextHound services."""

from .file_snapshot import FileSnapshot, SnapshotStatus

__all__ = ["FileSnapshot", "SnapshotStatus"]
