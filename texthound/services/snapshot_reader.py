"""Safe, bounded reads of the monitored text file.

The reader never raises: missing files, permission problems and other I/O
failures come back as NOT_FOUND or ERROR snapshots. Content is capped by
character count (the file is decoded as UTF-8 with any byte-order mark
stripped and undecodable bytes replaced), while ``size_bytes`` and
``last_modified`` come from filesystem metadata.
"""

import os
from datetime import datetime
from pathlib import Path

from loguru import logger

from texthound.core.types.file_snapshot import FileSnapshot, SnapshotStatus

# utf-8-sig drops a leading byte-order mark so it never reaches the preview
DEFAULT_ENCODING = "utf-8-sig"


class FileSnapshotReader:
    """Produces one FileSnapshot per call."""

    def __init__(self, encoding: str = DEFAULT_ENCODING) -> None:
        self._encoding = encoding

    def read(self, path: str | Path, max_chars: int) -> FileSnapshot:
        """Read metadata and at most ``max_chars`` characters of ``path``.

        Args:
            path: File to read
            max_chars: Character cap for the content prefix

        Returns:
            A COMPLETE, TRUNCATED, NOT_FOUND or ERROR snapshot
        """
        path_str = str(path)
        if max_chars < 1:
            return FileSnapshot.error(path_str, f"Error: invalid max_chars {max_chars}")

        try:
            return self._read(path_str, max_chars)
        except FileNotFoundError:
            # Deleted between the existence check and the open
            return FileSnapshot.not_found(path_str)
        except PermissionError as e:
            logger.debug(f"Access denied reading {path_str}: {e}")
            return FileSnapshot.error(path_str, f"Access denied: {e}")
        except OSError as e:
            logger.debug(f"IO error reading {path_str}: {e}")
            return FileSnapshot.error(path_str, f"Cannot read file: {e}")
        except Exception as e:
            logger.debug(f"Error reading {path_str}: {e}")
            return FileSnapshot.error(path_str, f"Error: {e}")

    def _read(self, path: str, max_chars: int) -> FileSnapshot:
        if not os.path.exists(path):
            return FileSnapshot.not_found(path)

        stat = os.stat(path)
        if not os.path.isfile(path):
            return FileSnapshot.error(path, f"Cannot read file: not a regular file: {path}")

        # Plain open() takes no exclusive lock, so concurrent writers holding
        # the file open do not block this read.
        with open(
            path, "r", encoding=self._encoding, errors="replace", newline=""
        ) as handle:
            content = handle.read(max_chars)

        truncated = len(content) >= max_chars
        logger.debug(
            f"File read: {len(content)} characters from {path}"
            f"{' (truncated)' if truncated else ''}"
        )
        return FileSnapshot(
            path=path,
            exists=True,
            status=SnapshotStatus.TRUNCATED if truncated else SnapshotStatus.COMPLETE,
            last_modified=datetime.fromtimestamp(stat.st_mtime),
            size_bytes=stat.st_size,
            content=content,
            truncated=truncated,
        )
