import unittest
from datetime import datetime
from unittest import mock

from texthound.core.config.display_config import DisplayConfig
from texthound.core.types.file_snapshot import FileSnapshot, SnapshotStatus
from texthound.services.sensor_service import (
    EMPTY_FILE_TEXT,
    FILE_ERROR_TEXT,
    INITIAL_CONTENT_TEXT,
    INITIAL_STATUS_TEXT,
    SensorManagementService,
    build_sensor_values,
)


def _snapshot(content: str, status: SnapshotStatus = SnapshotStatus.COMPLETE) -> FileSnapshot:
    return FileSnapshot(
        path="/tmp/status.txt",
        exists=True,
        status=status,
        last_modified=datetime(2024, 3, 9, 8, 5, 1),
        size_bytes=len(content.encode()),
        content=content,
        truncated=status is SnapshotStatus.TRUNCATED,
    )


class BuildSensorValuesTests(unittest.TestCase):
    def test_valid_snapshot(self) -> None:
        values = build_sensor_values(_snapshot("line1\nline2\nline3"), DisplayConfig())

        self.assertEqual(values.file_size, 17)
        self.assertEqual(values.line_count, 3)
        self.assertEqual(values.content, "line1\nline2\nline3")
        self.assertEqual(values.status, "Complete - 08:05:01 (17 B)")

    def test_status_suffixes_are_optional(self) -> None:
        display = DisplayConfig(show_timestamp=False, show_file_info=False)
        values = build_sensor_values(_snapshot("abc", SnapshotStatus.TRUNCATED), display)

        self.assertEqual(values.status, "Truncated")

    def test_empty_content_uses_placeholder(self) -> None:
        values = build_sensor_values(_snapshot(""), DisplayConfig(truncate_length=100))

        self.assertEqual(values.content, EMPTY_FILE_TEXT)
        self.assertEqual(values.line_count, 0)

    def test_preview_is_truncated(self) -> None:
        values = build_sensor_values(_snapshot("y" * 50), DisplayConfig(truncate_length=10))

        self.assertEqual(values.content, "y" * 10 + "...")

    def test_invalid_snapshot_resets_numeric_sensors(self) -> None:
        values = build_sensor_values(
            FileSnapshot.not_found("/tmp/status.txt"), DisplayConfig()
        )

        self.assertEqual(values.file_size, 0)
        self.assertEqual(values.line_count, 0)
        self.assertEqual(values.content, FILE_ERROR_TEXT)
        self.assertEqual(values.status, "file does not exist: /tmp/status.txt")


class SensorManagementServiceTests(unittest.TestCase):
    def test_initial_and_reset_values(self) -> None:
        service = SensorManagementService()
        self.assertEqual(service.values.content, INITIAL_CONTENT_TEXT)
        self.assertEqual(service.values.status, INITIAL_STATUS_TEXT)

        service.update(_snapshot("abc"))
        reset = service.reset()

        self.assertEqual(reset.file_size, 0)
        self.assertEqual(reset.status, INITIAL_STATUS_TEXT)

    def test_update_failure_sets_error_state(self) -> None:
        service = SensorManagementService()
        with mock.patch(
            "texthound.services.sensor_service.build_sensor_values",
            side_effect=RuntimeError("bad format"),
        ):
            values = service.update(_snapshot("abc"))

        self.assertEqual(values.content, "[Error]")
        self.assertEqual(values.status, "Error: bad format")


if __name__ == "__main__":
    unittest.main()
