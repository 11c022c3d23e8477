"""Derives the four display sensor values from published snapshots."""

import threading
from dataclasses import dataclass

from loguru import logger

from texthound.core.config.display_config import DisplayConfig
from texthound.core.types.file_snapshot import FileSnapshot
from texthound.core.utils.format_utils import format_time_of_day

EMPTY_FILE_TEXT = "[Empty File]"
FILE_ERROR_TEXT = "[File Error]"
UPDATE_ERROR_TEXT = "[Error]"
INITIAL_CONTENT_TEXT = "No content loaded"
INITIAL_STATUS_TEXT = "Initializing..."


@dataclass(frozen=True)
class SensorValues:
    """Values shown by the display host."""

    file_size: int = 0
    line_count: int = 0
    content: str = INITIAL_CONTENT_TEXT
    status: str = INITIAL_STATUS_TEXT


def build_sensor_values(snapshot: FileSnapshot, display: DisplayConfig) -> SensorValues:
    """Map a snapshot onto sensor values.

    Size and line count drop to 0 for an invalid snapshot; the content sensor
    shows a placeholder and the status sensor the raw error message.
    """
    if not snapshot.is_valid:
        return SensorValues(
            file_size=0,
            line_count=0,
            content=FILE_ERROR_TEXT,
            status=snapshot.error_message,
        )

    preview = snapshot.truncated_content(display.truncate_length)
    status = snapshot.status.value
    if display.show_timestamp and snapshot.last_modified is not None:
        status += f" - {format_time_of_day(snapshot.last_modified)}"
    if display.show_file_info:
        status += f" ({snapshot.formatted_file_size()})"

    return SensorValues(
        file_size=snapshot.size_bytes,
        line_count=snapshot.line_count,
        content=preview or EMPTY_FILE_TEXT,
        status=status,
    )


class SensorManagementService:
    """Thread-safe holder of the current sensor values."""

    def __init__(self, display: DisplayConfig | None = None) -> None:
        self._display = display or DisplayConfig()
        self._lock = threading.Lock()
        self._values = SensorValues()

    @property
    def values(self) -> SensorValues:
        with self._lock:
            return self._values

    def update(self, snapshot: FileSnapshot) -> SensorValues:
        """Recompute sensor values from ``snapshot``.

        Usable directly as the publisher callback.
        """
        with self._lock:
            try:
                values = build_sensor_values(snapshot, self._display)
                logger.debug(
                    f"Sensors updated - Size: {values.file_size}, "
                    f"Lines: {values.line_count}, Status: {snapshot.status.value}"
                )
            except Exception as e:
                logger.warning(f"Error updating sensors: {e}")
                values = SensorValues(
                    file_size=self._values.file_size,
                    line_count=self._values.line_count,
                    content=UPDATE_ERROR_TEXT,
                    status=f"Error: {e}",
                )
            self._values = values
            return values

    def reset(self) -> SensorValues:
        """Return all sensors to their initial values."""
        with self._lock:
            self._values = SensorValues()
            logger.debug("Sensors reset to initial state")
            return self._values
