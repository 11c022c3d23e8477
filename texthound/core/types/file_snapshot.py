"""Immutable point-in-time read of the monitored text file.

A FileSnapshot is produced fresh by every read cycle and never mutated
afterwards. The scheduler hands it to the publisher, and from there it is
shared freely with sensor readers on any thread.

Invariants:
- ``exists=False`` implies ``status`` is NOT_FOUND or ERROR and ``content=""``
- ``status=ERROR`` implies a non-empty ``error_message``
- ``size_bytes`` and ``last_modified`` only carry meaning when ``exists=True``
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from texthound.core.utils.format_utils import format_file_size, format_time_of_day


class SnapshotStatus(str, Enum):
    """Outcome of a single read cycle."""

    COMPLETE = "Complete"
    TRUNCATED = "Truncated"
    NOT_FOUND = "File Not Found"
    ERROR = "Error"


@dataclass(frozen=True)
class FileSnapshot:
    """Existence, metadata and a content prefix of one file at one instant."""

    path: str
    exists: bool
    status: SnapshotStatus
    last_modified: datetime | None = None
    size_bytes: int = 0
    content: str = ""
    truncated: bool = False
    error_message: str = ""
    captured_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.exists:
            if self.status not in (SnapshotStatus.NOT_FOUND, SnapshotStatus.ERROR):
                raise ValueError(
                    f"missing file snapshot cannot have status {self.status.value}"
                )
            if self.content:
                raise ValueError("missing file snapshot cannot carry content")
        if self.status is SnapshotStatus.ERROR and not self.error_message:
            raise ValueError("error snapshot requires an error message")
        if self.size_bytes < 0:
            raise ValueError("size_bytes must be >= 0")

    @classmethod
    def not_found(cls, path: str) -> "FileSnapshot":
        """Snapshot for a path that does not exist."""
        return cls(
            path=path,
            exists=False,
            status=SnapshotStatus.NOT_FOUND,
            error_message=f"file does not exist: {path}",
        )

    @classmethod
    def error(cls, path: str, message: str) -> "FileSnapshot":
        """Snapshot for a failed read; never carries partial content."""
        return cls(
            path=path,
            exists=False,
            status=SnapshotStatus.ERROR,
            error_message=message or "Unknown error",
        )

    @property
    def is_valid(self) -> bool:
        """True when the file was read without error."""
        return self.exists and not self.error_message

    @property
    def line_count(self) -> int:
        """Number of newline-separated segments in the content.

        Content ending in a newline counts the trailing empty segment as a
        line, so ``"a\\n"`` has two lines. Displays depend on this count.
        """
        if not self.content:
            return 0
        return len(self.content.split("\n"))

    @property
    def character_count(self) -> int:
        return len(self.content)

    def truncated_content(self, max_length: int = 100) -> str:
        """Content cut to ``max_length`` characters with an ellipsis marker.

        Returns an empty string for empty content so callers can choose
        their own placeholder.
        """
        if not self.content:
            return ""
        if len(self.content) <= max_length:
            return self.content
        return self.content[:max_length] + "..."

    def formatted_file_size(self) -> str:
        return format_file_size(self.size_bytes)

    def formatted_status(self) -> str:
        """Status with modification time, or the error text when invalid."""
        if not self.is_valid:
            return self.error_message
        return f"{self.status.value} - {format_time_of_day(self.last_modified)}"

    def has_significant_change(self, other: "FileSnapshot | None") -> bool:
        """Check whether this snapshot differs meaningfully from ``other``."""
        if other is None:
            return True
        if self.exists != other.exists:
            return True
        if not self.exists:
            return (self.status, self.error_message) != (
                other.status,
                other.error_message,
            )
        return (
            self.content != other.content
            or self.last_modified != other.last_modified
            or self.size_bytes != other.size_bytes
            or self.status != other.status
        )

    def __str__(self) -> str:
        if not self.is_valid:
            return f"FileSnapshot[Error: {self.error_message}]"
        return (
            f"FileSnapshot[Path: {self.path}, Size: {self.formatted_file_size()}, "
            f"Lines: {self.line_count}, "
            f"Modified: {format_time_of_day(self.last_modified)}]"
        )
