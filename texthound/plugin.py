"""Host adapter exposing TextHound as a display plugin.

The host calls ``initialize`` once, ``load`` to collect sensor containers,
runs ``start`` until its cancellation event is set, and calls ``close`` on
shutdown. Everything else is delegated to the monitoring service.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from loguru import logger

from texthound.core.config.config import Config
from texthound.core.types.file_snapshot import FileSnapshot
from texthound.services.monitoring_service import FileMonitorService
from texthound.services.sensor_service import (
    INITIAL_CONTENT_TEXT,
    INITIAL_STATUS_TEXT,
    SensorManagementService,
    SensorValues,
)
from texthound.services.update_publisher import UpdatePublisher

PLUGIN_ID = "texthound.textfile"
PLUGIN_NAME = "TextHound Text File Monitor"


@dataclass
class Sensor:
    """Numeric value displayed by the host."""

    id: str
    name: str
    value: float
    unit: str = ""


@dataclass
class TextSensor:
    """Text value displayed by the host."""

    id: str
    name: str
    value: str


@dataclass
class SensorContainer:
    id: str
    name: str
    entries: list[Sensor | TextSensor] = field(default_factory=list)


class TextFilePlugin:
    """Wires configuration, monitoring and sensors together for a host."""

    def __init__(
        self,
        config: Config | None = None,
        config_file: Path | None = None,
        on_values: Callable[[SensorValues], None] | None = None,
        **monitor_options: Any,
    ) -> None:
        self._config = config
        self._config_file = config_file
        self._on_values = on_values
        self._monitor_options = monitor_options

        self.file_size_sensor = Sensor("file-size", "File Size", 0, "bytes")
        self.line_count_sensor = Sensor("line-count", "Line Count", 0, "lines")
        self.content_sensor = TextSensor("content", "File Content", INITIAL_CONTENT_TEXT)
        self.status_sensor = TextSensor("status", "File Status", INITIAL_STATUS_TEXT)

        self.sensor_service: SensorManagementService | None = None
        self.publisher: UpdatePublisher | None = None
        self.monitor: FileMonitorService | None = None

    @property
    def config(self) -> Config | None:
        return self._config

    def initialize(self) -> None:
        """Load configuration and build the service graph."""
        if self._config is None:
            self._config = Config.load(config_file=self._config_file)

        self.sensor_service = SensorManagementService(self._config.display)
        self.publisher = UpdatePublisher(on_update=self._on_snapshot)
        self.monitor = FileMonitorService.from_config(
            self._config.monitor, self.publisher, **self._monitor_options
        )
        logger.debug(f"Plugin initialized with {self._config!r}")

    def load(self, containers: list[SensorContainer]) -> SensorContainer:
        """Register this plugin's sensors with the host."""
        container = SensorContainer("textfile", "Text File Monitor")
        container.entries.extend(
            [
                self.file_size_sensor,
                self.line_count_sensor,
                self.content_sensor,
                self.status_sensor,
            ]
        )
        containers.append(container)
        return container

    async def start(self, cancel: asyncio.Event | None = None) -> None:
        """Monitor the configured file until ``cancel`` is set.

        Without a cancellation event the call returns once monitoring is up.
        """
        if self.monitor is None or self._config is None:
            self.initialize()
        assert self.monitor is not None and self._config is not None

        await self._start_monitor()
        if cancel is None:
            return

        try:
            await cancel.wait()
        finally:
            await self.monitor.stop()

    async def close(self) -> None:
        if self.monitor is not None:
            await self.monitor.stop()
        logger.debug("Plugin closed")

    async def reconfigure(self, config: Config) -> None:
        """Apply a new configuration and restart monitoring with it."""
        await self.close()

        self._config = config
        self.initialize()
        assert self.sensor_service is not None
        self._apply(self.sensor_service.reset())
        await self._start_monitor()

    def current_values(self) -> SensorValues:
        """Pull the latest sensor values without waiting for a change."""
        if self.sensor_service is None:
            return SensorValues()
        return self.sensor_service.values

    async def _start_monitor(self) -> None:
        assert self.monitor is not None and self._config is not None
        monitor_cfg = self._config.monitor
        await self.monitor.start(
            monitor_cfg.text_file_path,
            monitor_cfg.poll_interval_seconds,
            monitor_cfg.enable_continuous_monitoring,
        )

    def _on_snapshot(self, snapshot: FileSnapshot) -> None:
        assert self.sensor_service is not None
        values = self.sensor_service.update(snapshot)
        self._apply(values)
        if self._on_values is not None:
            self._on_values(values)

    def _apply(self, values: SensorValues) -> None:
        self.file_size_sensor.value = values.file_size
        self.line_count_sensor.value = values.line_count
        self.content_sensor.value = values.content
        self.status_sensor.value = values.status
