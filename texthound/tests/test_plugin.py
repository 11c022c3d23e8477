import asyncio
import tempfile
import time
import unittest
from pathlib import Path

from texthound.core.config.config import Config
from texthound.core.config.display_config import DisplayConfig
from texthound.core.config.monitor_config import MonitorConfig
from texthound.plugin import SensorContainer, TextFilePlugin
from texthound.services.monitoring_service import MonitorLifecycle
from texthound.services.sensor_service import EMPTY_FILE_TEXT, INITIAL_STATUS_TEXT

from .utils import FlakyObserverFactory, set_mtime


async def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.01)
    return predicate()


class TextFilePluginTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.path = self.root / "status.txt"
        self.path.write_text("line1\nline2\nline3")
        set_mtime(self.path, 1_700_000_000.0)
        self.received = []
        self.plugins: list[TextFilePlugin] = []

    async def asyncTearDown(self) -> None:
        for plugin in self.plugins:
            await plugin.close()
        self.temp_dir.cleanup()

    def make_plugin(self, path: Path | None = None, **display) -> TextFilePlugin:
        config = Config(
            monitor=MonitorConfig(
                text_file_path=str(path or self.path),
                poll_interval_seconds=60,
                enable_continuous_monitoring=True,
            ),
            display=DisplayConfig(**display),
        )
        plugin = TextFilePlugin(
            config=config,
            on_values=self.received.append,
            observer_factory=FlakyObserverFactory(),
            debounce_delay=0.05,
        )
        self.plugins.append(plugin)
        return plugin

    async def test_start_publishes_file_values(self) -> None:
        plugin = self.make_plugin()
        plugin.initialize()
        await plugin.start()

        self.assertEqual(plugin.file_size_sensor.value, 17)
        self.assertEqual(plugin.line_count_sensor.value, 3)
        self.assertEqual(plugin.content_sensor.value, "line1\nline2\nline3")
        self.assertTrue(plugin.status_sensor.value.startswith("Complete"))
        self.assertEqual(len(self.received), 1)
        self.assertEqual(plugin.current_values(), self.received[0])

    async def test_empty_file_shows_placeholder(self) -> None:
        self.path.write_text("")
        plugin = self.make_plugin()
        await plugin.start()

        self.assertEqual(plugin.file_size_sensor.value, 0)
        self.assertEqual(plugin.line_count_sensor.value, 0)
        self.assertEqual(plugin.content_sensor.value, EMPTY_FILE_TEXT)

    async def test_missing_file_reports_status(self) -> None:
        missing = self.root / "missing.txt"
        plugin = self.make_plugin(missing)
        await plugin.start()

        self.assertEqual(plugin.file_size_sensor.value, 0)
        self.assertEqual(plugin.status_sensor.value, f"file does not exist: {missing}")
        self.assertFalse(plugin.monitor.is_watching)

    async def test_load_registers_sensors(self) -> None:
        plugin = self.make_plugin()
        containers: list[SensorContainer] = []

        container = plugin.load(containers)

        self.assertEqual(containers, [container])
        ids = [entry.id for entry in container.entries]
        self.assertEqual(ids, ["file-size", "line-count", "content", "status"])
        self.assertEqual(plugin.status_sensor.value, INITIAL_STATUS_TEXT)

    async def test_start_runs_until_cancelled(self) -> None:
        plugin = self.make_plugin()
        cancel = asyncio.Event()

        runner = asyncio.create_task(plugin.start(cancel))
        self.assertTrue(await _wait_for(lambda: len(self.received) == 1))
        self.assertFalse(runner.done())

        cancel.set()
        await asyncio.wait_for(runner, timeout=2.0)

        self.assertEqual(plugin.monitor.lifecycle, MonitorLifecycle.STOPPED)

    async def test_reconfigure_switches_file(self) -> None:
        plugin = self.make_plugin()
        await plugin.start()

        other = self.root / "other.txt"
        other.write_text("solo")
        new_config = plugin.config.model_copy(
            update={
                "monitor": MonitorConfig(
                    text_file_path=str(other),
                    poll_interval_seconds=60,
                    enable_continuous_monitoring=False,
                )
            }
        )

        await plugin.reconfigure(new_config)

        self.assertEqual(plugin.content_sensor.value, "solo")
        self.assertEqual(plugin.line_count_sensor.value, 1)
        self.assertTrue(plugin.monitor.is_running)

    async def test_reconfigure_applies_display_settings(self) -> None:
        plugin = self.make_plugin()
        await plugin.start()
        self.assertIn("(17 B)", plugin.status_sensor.value)

        new_config = plugin.config.model_copy(
            update={"display": DisplayConfig(show_file_info=False, show_timestamp=False)}
        )
        await plugin.reconfigure(new_config)

        self.assertEqual(plugin.status_sensor.value, "Complete")

    async def test_missing_path_reports_configuration_error(self) -> None:
        plugin = self.make_plugin()
        plugin.config.monitor.text_file_path = ""
        await plugin.start()

        self.assertIn("No text file path configured", plugin.status_sensor.value)
        self.assertFalse(plugin.monitor.is_running)


if __name__ == "__main__":
    unittest.main()
