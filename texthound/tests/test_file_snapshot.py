import unittest
from datetime import datetime

from texthound.core.types.file_snapshot import FileSnapshot, SnapshotStatus
from texthound.core.utils.format_utils import format_file_size


def _snapshot(content: str, **kwargs) -> FileSnapshot:
    values = {
        "path": "/tmp/example.txt",
        "exists": True,
        "status": SnapshotStatus.COMPLETE,
        "last_modified": datetime(2024, 5, 1, 13, 45, 7),
        "size_bytes": len(content.encode()),
        "content": content,
    }
    values.update(kwargs)
    return FileSnapshot(**values)


class FileSnapshotInvariantTests(unittest.TestCase):
    def test_missing_file_cannot_carry_content(self) -> None:
        with self.assertRaises(ValueError):
            FileSnapshot(
                path="x",
                exists=False,
                status=SnapshotStatus.NOT_FOUND,
                content="leftover",
                error_message="file does not exist: x",
            )

    def test_missing_file_cannot_be_complete(self) -> None:
        with self.assertRaises(ValueError):
            FileSnapshot(path="x", exists=False, status=SnapshotStatus.COMPLETE)

    def test_error_requires_message(self) -> None:
        with self.assertRaises(ValueError):
            FileSnapshot(path="x", exists=False, status=SnapshotStatus.ERROR)

    def test_factories_satisfy_invariants(self) -> None:
        missing = FileSnapshot.not_found("/nope.txt")
        failed = FileSnapshot.error("/nope.txt", "Access denied: nope")

        for snap in (missing, failed):
            self.assertFalse(snap.exists)
            self.assertEqual(snap.content, "")
            self.assertFalse(snap.is_valid)
        self.assertEqual(missing.status, SnapshotStatus.NOT_FOUND)
        self.assertEqual(missing.error_message, "file does not exist: /nope.txt")
        self.assertEqual(failed.status, SnapshotStatus.ERROR)
        self.assertEqual(failed.error_message, "Access denied: nope")

    def test_error_factory_never_leaves_message_empty(self) -> None:
        self.assertNotEqual(FileSnapshot.error("x", "").error_message, "")


class FileSnapshotDerivedValueTests(unittest.TestCase):
    def test_line_count_counts_trailing_newline_as_line(self) -> None:
        self.assertEqual(_snapshot("line1\nline2\nline3").line_count, 3)
        self.assertEqual(_snapshot("line1\nline2\n").line_count, 3)
        self.assertEqual(_snapshot("single").line_count, 1)
        self.assertEqual(_snapshot("").line_count, 0)

    def test_truncated_content(self) -> None:
        snap = _snapshot("abcdefghij")
        self.assertEqual(snap.truncated_content(20), "abcdefghij")
        self.assertEqual(snap.truncated_content(4), "abcd...")
        self.assertEqual(_snapshot("").truncated_content(4), "")

    def test_formatted_status(self) -> None:
        self.assertEqual(_snapshot("x").formatted_status(), "Complete - 13:45:07")
        self.assertEqual(
            FileSnapshot.not_found("a").formatted_status(), "file does not exist: a"
        )

    def test_significant_change(self) -> None:
        base = _snapshot("a")
        self.assertTrue(base.has_significant_change(None))
        self.assertFalse(base.has_significant_change(_snapshot("a")))
        self.assertTrue(base.has_significant_change(_snapshot("b")))
        self.assertTrue(base.has_significant_change(FileSnapshot.not_found("a")))
        self.assertTrue(
            FileSnapshot.not_found("a").has_significant_change(
                FileSnapshot.error("a", "boom")
            )
        )

    def test_str_representation(self) -> None:
        self.assertIn("Lines: 2", str(_snapshot("a\nb")))
        self.assertIn("Error", str(FileSnapshot.error("a", "boom")))


class FormatFileSizeTests(unittest.TestCase):
    def test_units(self) -> None:
        self.assertEqual(format_file_size(0), "0 B")
        self.assertEqual(format_file_size(17), "17 B")
        self.assertEqual(format_file_size(1536), "1.5 KB")
        self.assertEqual(format_file_size(2 * 1024 * 1024), "2 MB")
        self.assertEqual(format_file_size(5 * 1024**4), "5120 GB")


if __name__ == "__main__":
    unittest.main()
